from flask_socketio import emit
from pricegame import socketio
from pricegame.models import PriceSample


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})
    # Give fresh clients the current price without waiting for the next tick
    latest = PriceSample.latest()
    if latest is not None:
        emit('price_update', latest.to_dict())


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'.

    Price updates are broadcast from the ingestion task; clients only listen.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')
