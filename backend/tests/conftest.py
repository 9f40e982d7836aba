import os
import sys
from decimal import Decimal

import pytest

# Ensure the backend root (containing the `pricegame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from pricegame import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    PRICE_FEED_BASE_URL = 'https://feed.test/api/v3'
    PRICE_SYMBOL = 'BTCUSDT'
    PRICE_FETCH_TIMEOUT_SEC = 1
    PRICE_FETCH_INTERVAL_SEC = 60
    PRICE_INGESTION_ENABLED = False
    GUESS_COOLDOWN_SEC = 60
    CORS_ORIGINS = ['http://localhost:3000']
    LOG_LEVEL = 'WARNING'
    STAGE = 'test'
    CI_COMMIT_SHA = 'abc123'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import pricegame.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def add_prices(flask_app):
    """Insert (timestamp, price) pairs directly into the price series."""
    from pricegame.models import PriceSample

    def _add(*rows):
        for ts, price in rows:
            db.session.add(PriceSample(timestamp=ts, price=Decimal(str(price))))
        db.session.commit()
    return _add


@pytest.fixture()
def add_guesses(flask_app):
    """Insert (player_uid, direction, timestamp) rows bypassing the cooldown."""
    from pricegame.models import Guess

    def _add(*rows):
        for player_uid, direction, ts in rows:
            db.session.add(Guess(player_uid=player_uid, direction=direction, timestamp=ts))
        db.session.commit()
    return _add
