import threading
import weakref
from datetime import datetime, timedelta
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from pricegame import db
from pricegame.errors import CooldownActive, StorageFailure, ValidationError
from pricegame.models import DIRECTIONS, Guess, generate_guess_id, utcnow

DEFAULT_COOLDOWN_SEC = 60

# Serializes the cooldown check and the insert per player within this process;
# an entry lives only while some request holds its lock
_player_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
_player_locks_guard = threading.Lock()


def _lock_for(player_uid: str) -> threading.Lock:
    with _player_locks_guard:
        lock = _player_locks.get(player_uid)
        if lock is None:
            lock = _player_locks[player_uid] = threading.Lock()
        return lock


def _cooldown() -> timedelta:
    return timedelta(seconds=int(current_app.config.get('GUESS_COOLDOWN_SEC', DEFAULT_COOLDOWN_SEC)))


def validate_submission(player_uid, direction) -> None:
    if not isinstance(player_uid, str) or not player_uid.strip():
        raise ValidationError('Player id is required')
    if direction not in DIRECTIONS:
        raise ValidationError("Guess must be one of 'higher' or 'lower'")


def cooldown_remaining(player_uid: str, now: Optional[datetime] = None) -> float:
    """Seconds until the player may guess again; 0 when a guess is allowed."""
    now = now or utcnow()
    last = Guess.latest_for_player(player_uid)
    if last is None:
        return 0.0
    remaining = (last.timestamp + _cooldown() - now).total_seconds()
    return max(0.0, remaining)


def try_accept(player_uid: str, direction: str, now: Optional[datetime] = None) -> Guess:
    """Accept a guess unless the player guessed within the cooldown window.

    The window slides with the player's own last accepted guess: a guess at
    second 17 blocks the next one until second 17 of the following minute.
    Raises ValidationError for bad input (storage is not touched),
    CooldownActive when a recent guess exists and StorageFailure if the
    insert fails.
    """
    validate_submission(player_uid, direction)
    now = now or utcnow()

    with _lock_for(player_uid):
        recent = (
            Guess.for_player(player_uid)
            .filter(Guess.timestamp > now - _cooldown())
            .order_by(Guess.timestamp.desc())
            .first()
        )
        if recent is not None:
            retry_after = (recent.timestamp + _cooldown() - now).total_seconds()
            current_app.logger.info(f"[guess-cooldown] player={player_uid} retry_after={retry_after:.1f}s")
            raise CooldownActive(retry_after)

        guess = Guess(
            guess_id=generate_guess_id(),
            player_uid=player_uid,
            direction=direction,
            timestamp=now,
        )
        try:
            db.session.add(guess)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageFailure(str(exc)) from exc

    current_app.logger.info(f"[guess-accepted] player={player_uid} guess_id={guess.guess_id} guess={direction}")
    return guess
