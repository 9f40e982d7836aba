import os


def _database_url():
    if os.environ.get('DATABASE_URL'):
        return os.environ['DATABASE_URL']
    user = os.environ.get('DB_USERNAME', 'postgres')
    password = os.environ.get('DB_PASSWORD', 'password')
    host = os.environ.get('DB_HOST', 'localhost')
    port = os.environ.get('DB_PORT', '5432')
    database = os.environ.get('DB_DATABASE', 'pricegame')
    return f'postgresql://{user}:{password}@{host}:{port}/{database}'


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Price feed (Binance public ticker)
    PRICE_FEED_BASE_URL = os.environ.get('PRICE_FEED_BASE_URL', 'https://api.binance.com/api/v3')
    PRICE_SYMBOL = os.environ.get('PRICE_SYMBOL', 'BTCUSDT')
    PRICE_FETCH_TIMEOUT_SEC = float(os.environ.get('PRICE_FETCH_TIMEOUT_SEC', '10'))
    # Ingestion cadence (seconds)
    PRICE_FETCH_INTERVAL_SEC = int(os.environ.get('PRICE_FETCH_INTERVAL_SEC', '60'))
    PRICE_INGESTION_ENABLED = os.environ.get('PRICE_INGESTION_ENABLED', 'true').lower() in ('1', 'true', 'yes')
    # Minimum spacing between a player's accepted guesses (seconds)
    GUESS_COOLDOWN_SEC = int(os.environ.get('GUESS_COOLDOWN_SEC', '60'))
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
        ).split(',') if o.strip()
    ]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Reported by /health
    STAGE = os.environ.get('STAGE', 'local')
    CI_COMMIT_SHA = os.environ.get('CI_COMMIT_SHA', 'unknown')
