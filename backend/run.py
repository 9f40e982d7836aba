from pricegame import create_app, socketio

app = create_app()

if __name__ == '__main__':
    ingestor = app.extensions['price_ingestor']
    if app.config.get('PRICE_INGESTION_ENABLED'):
        ingestor.start()
    try:
        # Use SocketIO server to enable websockets in dev
        socketio.run(app, debug=True, use_reloader=False)
    finally:
        ingestor.stop(timeout=app.config.get('PRICE_FETCH_TIMEOUT_SEC', 10))
