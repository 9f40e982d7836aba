from flask import Blueprint, jsonify, request
import math
from pricegame.errors import ValidationError
from pricegame.models import Guess
from pricegame.services.guesses.gate import try_accept, cooldown_remaining
from pricegame.services.guesses.scoring import score_for


guesses = Blueprint('guesses', __name__)


@guesses.route('/submit/<string:player_uid>', methods=['POST'])
def submit_guess(player_uid):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('JSON body with a guess is required')
    guess = try_accept(player_uid, data.get('guess'))
    return jsonify({'guessId': guess.guess_id}), 201


@guesses.route('/score/<string:player_uid>', methods=['GET'])
def get_score(player_uid):
    return jsonify({'score': score_for(player_uid)})


@guesses.route('/<string:player_uid>', methods=['GET'])
def list_guesses(player_uid):
    history = Guess.for_player(player_uid).order_by(Guess.timestamp.desc()).all()
    return jsonify({
        'guesses': [g.to_dict() for g in history],
        'cooldown_remaining': int(math.ceil(cooldown_remaining(player_uid))),
    })
