from pricegame import db
from datetime import datetime, timezone
import uuid

DIRECTIONS = ('lower', 'higher')


def utcnow() -> datetime:
    """Naive UTC now; all stored timestamps are naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_guess_id() -> str:
    return str(uuid.uuid4())


class PriceSample(db.Model):
    __tablename__ = 'price_sample'
    timestamp = db.Column(db.DateTime, primary_key=True, default=utcnow)
    price = db.Column(db.Numeric(20, 8, asdecimal=True), nullable=False)

    @classmethod
    def ordered(cls):
        return cls.query.order_by(cls.timestamp.asc())

    @classmethod
    def latest(cls):
        return cls.query.order_by(cls.timestamp.desc()).first()

    def to_dict(self):
        return {
            'price': format(self.price, 'f'),
            'timestamp': self.timestamp.isoformat(),
        }


class Guess(db.Model):
    __tablename__ = 'guess'
    guess_id = db.Column(db.String(36), primary_key=True, default=generate_guess_id)
    player_uid = db.Column(db.Text, nullable=False, index=True)
    direction = db.Column(db.Enum(*DIRECTIONS, name='guess_type'), nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)

    @classmethod
    def for_player(cls, player_uid):
        return cls.query.filter_by(player_uid=player_uid)

    @classmethod
    def latest_for_player(cls, player_uid):
        return cls.for_player(player_uid).order_by(cls.timestamp.desc()).first()

    def to_dict(self):
        return {
            'guessId': self.guess_id,
            'player_uid': self.player_uid,
            'guess': self.direction,
            'timestamp': self.timestamp.isoformat(),
        }
