import threading
import time
from datetime import datetime
from decimal import Decimal
from typing import Optional

from flask import has_app_context
from sqlalchemy.exc import SQLAlchemyError

from pricegame import db, socketio
from pricegame.errors import StorageFailure, UpstreamFetchFailure
from pricegame.models import PriceSample, utcnow


def append_sample(timestamp: datetime, price: Decimal) -> PriceSample:
    """Append one sample in a single commit; nothing is left behind on failure."""
    sample = PriceSample(timestamp=timestamp, price=price)
    try:
        db.session.add(sample)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageFailure(str(exc)) from exc
    return sample


class PriceIngestor:
    """Periodically fetches the upstream price and appends it to the series.

    One instance is owned by the Flask app (``app.extensions['price_ingestor']``).
    ``start()`` launches the repeating loop as a Socket.IO background task and
    ``stop()`` cancels it; the loop only checks for cancellation between
    cycles, so an append in progress is never cut short.
    """

    def __init__(self, app, feed, interval: Optional[float] = None):
        self.app = app
        self.feed = feed
        self.interval = float(interval if interval is not None else app.config.get('PRICE_FETCH_INTERVAL_SEC', 60))
        self._stopped = threading.Event()
        self._cycle_lock = threading.Lock()
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._stopped.is_set()

    def start(self):
        if self.running:
            return self
        # Fresh flag per run; a worker that outlived stop() still sees its own
        self._stopped = threading.Event()
        self.app.logger.info(f"[ingest-start] symbol={self.feed.symbol} interval={self.interval}s")
        self._task = socketio.start_background_task(self._loop, self._stopped)
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stopped.set()
        task = self._task
        if task is not None and hasattr(task, 'join'):
            task.join(timeout)
        self._task = None
        self.app.logger.info("[ingest-stop]")

    def _loop(self, stopped: threading.Event):
        # Ticks run on fixed deadlines; fetch latency does not shift them
        next_at = time.monotonic()
        while not stopped.is_set():
            self.run_cycle()
            next_at += self.interval
            now = time.monotonic()
            if next_at <= now:
                missed = int((now - next_at) // self.interval) + 1
                self.app.logger.warning(f"[ingest-skip] cycle overran, skipping {missed} tick(s)")
                next_at += missed * self.interval
            if stopped.wait(next_at - now):
                break

    def run_cycle(self, now: Optional[datetime] = None) -> Optional[PriceSample]:
        """Fetch once and append; returns the new sample or None if skipped."""
        if not self._cycle_lock.acquire(blocking=False):
            self.app.logger.warning("[ingest-skip] previous cycle still running")
            return None
        try:
            if has_app_context():
                return self._fetch_and_append(now)
            with self.app.app_context():
                return self._fetch_and_append(now)
        finally:
            self._cycle_lock.release()

    def _fetch_and_append(self, now):
        try:
            price = self.feed.fetch_price()
        except UpstreamFetchFailure as exc:
            self.app.logger.error(f"[price-fetch-failed] symbol={self.feed.symbol} {exc.message} detail={exc.detail}")
            return None

        timestamp = now or utcnow()
        try:
            sample = append_sample(timestamp, price)
        except StorageFailure as exc:
            self.app.logger.error(f"[price-insert-failed] timestamp={timestamp.isoformat()} error={exc}")
            return None

        payload = sample.to_dict()
        self.app.logger.info(f"[price-inserted] symbol={self.feed.symbol} price={payload['price']} timestamp={payload['timestamp']}")
        socketio.emit('price_update', payload, namespace='/ws')
        return sample
