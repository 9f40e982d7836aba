from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.exc import OperationalError

from pricegame.models import Guess, utcnow


def at(minute, second=0):
    return datetime(2025, 1, 1, 12, minute, second)


def test_health(client):
    res = client.get('/health')
    assert res.status_code == 200
    assert res.get_json() == {'status': 'ok', 'stage': 'test', 'commit': 'abc123'}


def test_submit_guess(client):
    res = client.post('/api/guesses/submit/alice', json={'guess': 'higher'})
    assert res.status_code == 201
    guess_id = res.get_json()['guessId']
    stored = Guess.query.filter_by(guess_id=guess_id).one()
    assert stored.player_uid == 'alice'
    assert stored.direction == 'higher'


def test_second_guess_in_window_is_cooldown(client):
    assert client.post('/api/guesses/submit/bob', json={'guess': 'lower'}).status_code == 201
    res = client.post('/api/guesses/submit/bob', json={'guess': 'higher'})
    assert res.status_code == 429
    body = res.get_json()
    assert 'wait' in body['error']
    assert 0 < body['retry_after'] <= 60
    assert res.headers['Retry-After'] == str(body['retry_after'])
    assert Guess.for_player('bob').count() == 1


def test_invalid_direction_is_bad_request(client):
    res = client.post('/api/guesses/submit/carol', json={'guess': 'sideways'})
    assert res.status_code == 400
    assert 'higher' in res.get_json()['error']
    assert Guess.query.count() == 0


def test_missing_body_is_bad_request(client):
    res = client.post('/api/guesses/submit/carol', data='not json', content_type='text/plain')
    assert res.status_code == 400
    assert Guess.query.count() == 0


def test_blank_player_is_bad_request(client):
    res = client.post('/api/guesses/submit/%20%20', json={'guess': 'higher'})
    assert res.status_code == 400


def test_score_for_unknown_player_is_zero(client):
    res = client.get('/api/guesses/score/nobody')
    assert res.status_code == 200
    assert res.get_json() == {'score': 0}


def test_score_endpoint_scenario_a(client, add_prices, add_guesses):
    add_prices((at(0), 100), (at(1), 105), (at(2), 103))
    add_guesses(('dora', 'higher', at(0, 12)), ('dora', 'lower', at(1, 48)))
    res = client.get('/api/guesses/score/dora')
    assert res.get_json() == {'score': 2}


def test_guess_history_and_cooldown(client, add_guesses):
    now = utcnow()
    add_guesses(('eve', 'lower', now - timedelta(minutes=5)), ('eve', 'higher', now - timedelta(seconds=20)))
    res = client.get('/api/guesses/eve')
    assert res.status_code == 200
    body = res.get_json()
    assert [g['guess'] for g in body['guesses']] == ['higher', 'lower']
    assert 35 <= body['cooldown_remaining'] <= 40


def test_current_price_empty_is_not_found(client):
    res = client.get('/api/prices/current')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'No price available yet'}


def test_current_price_returns_latest_sample(client, add_prices):
    add_prices((at(0), '100.5'), (at(2), '102.25'), (at(1), '101'))
    res = client.get('/api/prices/current')
    assert res.status_code == 200
    body = res.get_json()
    assert isinstance(body['price'], str)
    assert Decimal(body['price']) == Decimal('102.25')
    assert body['timestamp'] == at(2).isoformat()


def test_storage_errors_are_generic(client, monkeypatch):
    def broken(player_uid):
        raise OperationalError('SELECT', {}, Exception('connection refused on 10.0.0.5'))

    monkeypatch.setattr('pricegame.api.guesses.score_for', broken)
    res = client.get('/api/guesses/score/frank')
    assert res.status_code == 500
    assert res.get_json() == {'error': 'Internal Server error'}


def test_cors_allows_configured_origin(client):
    res = client.get('/health', headers={'Origin': 'http://localhost:3000'})
    assert res.headers.get('Access-Control-Allow-Origin') == 'http://localhost:3000'


def test_unexpected_errors_are_generic_json(client, monkeypatch):
    def broken(player_uid):
        raise RuntimeError('secret internals')

    monkeypatch.setattr('pricegame.api.guesses.score_for', broken)
    res = client.get('/api/guesses/score/grace')
    assert res.status_code == 500
    assert res.get_json() == {'error': 'Internal Server error'}


def test_http_errors_pass_through(client):
    assert client.get('/api/does-not-exist').status_code == 404
    assert client.get('/api/guesses/submit/henry').status_code == 405
