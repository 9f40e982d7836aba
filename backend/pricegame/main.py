from flask import Blueprint, jsonify, current_app

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the price guessing game server!'})


@main.route('/health')
def health():
    return jsonify({
        'status': 'ok',
        'stage': current_app.config.get('STAGE', 'local'),
        'commit': current_app.config.get('CI_COMMIT_SHA', 'unknown'),
    })
