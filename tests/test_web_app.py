"""
API tests run against TestingConfig (rate limiting disabled).
"""
import pytest

from config.settings import TestingConfig
from web.app import create_app


@pytest.fixture
def client():
    app = create_app(TestingConfig)
    return app.test_client()


@pytest.fixture
def payload():
    transactions = [
        {'date': f'2024-{month:02d}-10', 'type': 'expense', 'amount': 100 + 10 * month}
        for month in range(1, 7)
    ]
    transactions.append({'date': '2024-03-01', 'type': 'income', 'amount': 5000})
    return {
        'transactions': transactions,
        'kind': 'expense',
        'months_back': 6,
        'horizon': 3,
        'as_of': '2024-06-30',
    }


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok'}


def test_forecast_defaults_to_ensemble(client, payload):
    response = client.post('/api/forecast', json=payload)
    data = response.get_json()

    assert response.status_code == 200
    assert data['success'] is True
    assert [p['value'] for p in data['series']] == [110, 120, 130, 140, 150, 160]
    assert data['forecast']['method'] == 'Ensemble'
    assert data['forecast']['trend'] == 'increasing'
    assert [p['date'] for p in data['forecast']['forecasts']] == ['2024-07-01', '2024-08-01', '2024-09-01']


def test_forecast_with_single_method(client, payload):
    payload['method'] = 'linear'
    data = client.post('/api/forecast', json=payload).get_json()

    assert data['forecast']['method'] == 'Linear Trend'
    assert [p['predicted'] for p in data['forecast']['forecasts']] == [170.0, 180.0, 190.0]


def test_forecast_bounds_are_non_negative_in_testing(client, payload):
    payload['kind'] = 'income'
    data = client.post('/api/forecast', json=payload).get_json()

    for point in data['forecast']['forecasts']:
        assert point['lower'] >= 0


def test_rejects_fewer_than_three_months(client, payload):
    payload['months_back'] = 2
    response = client.post('/api/forecast', json=payload)

    assert response.status_code == 400
    assert 'at least 3 months' in response.get_json()['error']


def test_rejects_empty_history(client):
    response = client.post('/api/forecast', json={'transactions': [], 'as_of': '2024-06-01'})

    assert response.status_code == 400


@pytest.mark.parametrize(
    "change, field",
    [
        ({'method': 'arima'}, 'method'),
        ({'kind': 'transfer'}, 'kind'),
        ({'horizon': 0}, 'horizon'),
        ({'horizon': 'soon'}, 'horizon'),
        ({'months_back': -4}, 'months_back'),
        ({'as_of': 'yesterday'}, 'as_of'),
        ({'transactions': 'all of them'}, 'transactions'),
    ],
)
def test_invalid_fields_name_the_field(client, payload, change, field):
    payload.update(change)
    response = client.post('/api/forecast', json=payload)

    assert response.status_code == 400
    assert response.get_json()['field'] == field


def test_bad_transaction_amount(client, payload):
    payload['transactions'][2]['amount'] = 'lots'
    response = client.post('/api/forecast', json=payload)

    assert response.status_code == 400
    assert response.get_json()['field'] == 'transactions[2].amount'


def test_bad_transaction_date(client, payload):
    payload['transactions'][0]['date'] = '2024-13-40'
    response = client.post('/api/forecast', json=payload)

    assert response.status_code == 400
    assert response.get_json()['field'] == 'transactions[0].date'


def test_compare_returns_every_method(client, payload):
    data = client.post('/api/forecast/compare', json=payload).get_json()

    assert set(data['forecasts']) == {'linear', 'exponential', 'moving_average', 'ensemble'}
    assert data['forecasts']['moving_average']['method'] == 'Moving Average'


def test_demo_forecast(client):
    response = client.get('/api/forecast/demo?profile=retired_couple&seed=3&horizon=4&as_of=2024-12-01')
    data = response.get_json()

    assert response.status_code == 200
    assert data['household'] == 'Retired Couple'
    assert len(data['series']) == 24
    assert len(data['forecast']['forecasts']) == 4
    assert isinstance(data['forecast']['seasonality'], bool)


def test_demo_is_deterministic_for_a_seed(client):
    url = '/api/forecast/demo?seed=11&as_of=2024-12-01&method=exponential'

    assert client.get(url).get_json() == client.get(url).get_json()


def test_demo_unknown_profile(client):
    response = client.get('/api/forecast/demo?profile=pirate')

    assert response.status_code == 400
    assert response.get_json()['field'] == 'profile'


def test_unknown_route_returns_json_404(client):
    response = client.get('/api/nothing-here')

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Not found'}


@pytest.mark.parametrize("url", ['/api/forecast', '/api/forecast/compare'])
def test_non_object_body_rejected(client, url):
    response = client.post(url, json=[1, 2])

    assert response.status_code == 400
    assert response.get_json()['field'] == 'body'


def test_window_before_year_one_rejected(client, payload):
    payload.update({'as_of': '0001-01-15', 'months_back': 24})
    response = client.post('/api/forecast', json=payload)

    assert response.status_code == 400
    assert response.get_json()['field'] == 'as_of'
