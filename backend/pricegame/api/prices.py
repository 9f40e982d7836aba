from flask import Blueprint, jsonify
from pricegame.errors import NoPriceAvailable
from pricegame.models import PriceSample


prices = Blueprint('prices', __name__)


@prices.route('/current', methods=['GET'])
def get_current_price():
    latest = PriceSample.latest()
    if latest is None:
        raise NoPriceAvailable()
    return jsonify(latest.to_dict())
