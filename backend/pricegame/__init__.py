from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
import math
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from pricegame.main import main
    flask_app.register_blueprint(main)

    from pricegame.api.guesses import guesses
    flask_app.register_blueprint(guesses, url_prefix='/api/guesses')

    from pricegame.api.prices import prices
    flask_app.register_blueprint(prices, url_prefix='/api/prices')

    from pricegame.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    _register_error_handlers(flask_app)

    from pricegame.services.prices.feed import PriceFeedClient
    from pricegame.services.prices.ingestion import PriceIngestor
    flask_app.extensions['price_ingestor'] = PriceIngestor(
        flask_app, PriceFeedClient.from_config(flask_app.config)
    )

    _register_cli(flask_app)

    return flask_app


def _register_error_handlers(flask_app):
    from pricegame.errors import ValidationError, CooldownActive, NoPriceAvailable, StorageFailure

    @flask_app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        return jsonify({'error': exc.message}), 400

    @flask_app.errorhandler(CooldownActive)
    def handle_cooldown(exc):
        retry_after = int(math.ceil(exc.retry_after))
        response = jsonify({
            'error': 'Already submitted a guess! Please wait until the next minute!',
            'retry_after': retry_after,
        })
        response.headers['Retry-After'] = str(retry_after)
        return response, 429

    @flask_app.errorhandler(NoPriceAvailable)
    def handle_no_price(exc):
        return jsonify({'error': 'No price available yet'}), 404

    @flask_app.errorhandler(StorageFailure)
    @flask_app.errorhandler(SQLAlchemyError)
    def handle_storage_failure(exc):
        flask_app.logger.error(f"[storage-failure] {type(exc).__name__}: {exc}")
        db.session.rollback()
        return jsonify({'error': 'Internal Server error'}), 500

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        if isinstance(exc, HTTPException):
            return exc
        flask_app.logger.exception(f"[unhandled-error] {type(exc).__name__}")
        return jsonify({'error': 'Internal Server error'}), 500


def _register_cli(flask_app):
    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the price and guess tables."""
        import pricegame.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('ingest-once')
    def ingest_once_command():
        """Runs a single price ingestion cycle."""
        with flask_app.app_context():
            sample = flask_app.extensions['price_ingestor'].run_cycle()
        if sample is None:
            print('No price sample appended (see logs).')
        else:
            print(f"Appended price {sample.price} at {sample.timestamp.isoformat()}")

    @click.command('score')
    @click.argument('player_uid')
    def score_command(player_uid):
        """Prints the net score for a player."""
        from pricegame.services.guesses.scoring import score_for
        with flask_app.app_context():
            print(score_for(player_uid))

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(ingest_once_command)
    flask_app.cli.add_command(score_command)
