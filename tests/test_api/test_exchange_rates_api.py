from unittest.mock import AsyncMock

import pytest

from domain.exceptions.exchange_rate import DataUnavailableError

PAST_DATE_WARNING = 'Date must be in the past; current or future dates are not allowed.'


# ============================================================================
# TEST: GET /api/exchange-rates/currencies
# ============================================================================

def test_get_currencies(client, auth_headers):
    response = client.get('/api/exchange-rates/currencies', headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == ['USD', 'INR']


# ============================================================================
# TEST: GET /api/exchange-rates
# ============================================================================

def test_get_all_rates(client, auth_headers):
    response = client.get('/api/exchange-rates', headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {'USD', 'INR'}
    assert data['USD'] == {'2024-06-06': 1.088, '2024-06-07': 1.2, '2024-06-10': 1.1}
    assert data['INR'] == {'2024-06-07': 98.4}


def test_get_all_rates_before_first_load(empty_client, auth_headers):
    response = empty_client.get('/api/exchange-rates', headers=auth_headers)

    assert response.status_code == 503
    assert response.json()['error'] == 'Service unavailable'


# ============================================================================
# TEST: GET /api/exchange-rates/date/{day}
# ============================================================================

def test_get_rates_by_date(client, auth_headers):
    response = client.get('/api/exchange-rates/date/2024-06-07', headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {'USD': 1.2, 'INR': 98.4}


def test_get_rates_by_date_missing_currency_is_null(client, auth_headers):
    response = client.get('/api/exchange-rates/date/2024-06-06', headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {'USD': 1.088, 'INR': None}


@pytest.mark.parametrize('day', ['2024-06-10', '2024-06-11', '2030-01-01'])
def test_get_rates_by_date_rejects_today_and_future(client, auth_headers, day):
    response = client.get(f'/api/exchange-rates/date/{day}', headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {'error': 'Invalid date', 'message': PAST_DATE_WARNING}


@pytest.mark.parametrize('day', ['07-06-2024', '2024-13-01', 'yesterday'])
def test_get_rates_by_date_malformed_date(client, auth_headers, day):
    response = client.get(f'/api/exchange-rates/date/{day}', headers=auth_headers)

    assert response.status_code == 422


# ============================================================================
# TEST: GET /api/exchange-rates/{currency}/date/{day}
# ============================================================================

def test_get_rate(client, auth_headers):
    response = client.get('/api/exchange-rates/USD/date/2024-06-07', headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == 1.2


def test_get_rate_lowercase_currency(client, auth_headers):
    response = client.get('/api/exchange-rates/inr/date/2024-06-07', headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == 98.4


def test_get_rate_missing_for_date(client, auth_headers):
    response = client.get('/api/exchange-rates/INR/date/2024-06-06', headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {'error': 'Exchange rate unavailable'}


def test_get_rate_unknown_currency(client, auth_headers):
    response = client.get('/api/exchange-rates/XXX/date/2024-06-07', headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {'error': 'Exchange rate unavailable'}


def test_get_rate_today_rejected(client, auth_headers):
    response = client.get('/api/exchange-rates/USD/date/2024-06-10', headers=auth_headers)

    assert response.status_code == 400
    assert response.json()['message'] == PAST_DATE_WARNING


def test_get_rate_invalid_currency_length(client, auth_headers):
    response = client.get('/api/exchange-rates/USDX/date/2024-06-07', headers=auth_headers)

    assert response.status_code == 422


# ============================================================================
# TEST: GET /api/exchange-rates/{currency}/convert-to-eur/{day}/{amount}
# ============================================================================

def test_convert_to_eur(client, auth_headers):
    response = client.get(
        '/api/exchange-rates/USD/convert-to-eur/2024-06-07/12.0', headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == 10.0


def test_convert_to_eur_rounds_to_cents(client, auth_headers):
    # 100 / 98.4 = 1.01626...
    response = client.get(
        '/api/exchange-rates/INR/convert-to-eur/2024-06-07/100', headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == 1.02


def test_convert_to_eur_large_amount(client, auth_headers):
    response = client.get(
        '/api/exchange-rates/USD/convert-to-eur/2024-06-07/1e30', headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == pytest.approx(8.333333333333333e29)


def test_convert_to_eur_amount_above_limit(client, auth_headers):
    response = client.get(
        '/api/exchange-rates/USD/convert-to-eur/2024-06-07/1e101', headers=auth_headers
    )

    assert response.status_code == 422


def test_convert_to_eur_negative_amount(client, auth_headers):
    response = client.get(
        '/api/exchange-rates/USD/convert-to-eur/2024-06-07/-5.0', headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json() == {'error': 'Conversion unavailable'}


def test_convert_to_eur_missing_rate(client, auth_headers):
    response = client.get(
        '/api/exchange-rates/INR/convert-to-eur/2024-06-06/100', headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json() == {'error': 'Conversion unavailable'}


def test_convert_to_eur_future_date(client, auth_headers):
    response = client.get(
        '/api/exchange-rates/USD/convert-to-eur/2024-06-11/10', headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()['message'] == PAST_DATE_WARNING


def test_convert_to_eur_invalid_amount(client, auth_headers):
    response = client.get(
        '/api/exchange-rates/USD/convert-to-eur/2024-06-07/ten', headers=auth_headers
    )

    assert response.status_code == 422


# ============================================================================
# TEST: POST /api/exchange-rates/refresh
# ============================================================================

def test_refresh(client, auth_headers, mock_builder):
    response = client.post('/api/exchange-rates/refresh', headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data['refreshed'] is True
    assert data['version'] == 2
    assert 'publishedAt' in data
    mock_builder.build_all.assert_awaited_once()


def test_refresh_failure_keeps_serving_previous_data(client, auth_headers, mock_builder):
    mock_builder.build_all = AsyncMock(side_effect=DataUnavailableError('source down'))

    response = client.post('/api/exchange-rates/refresh', headers=auth_headers)

    assert response.status_code == 503
    assert response.json() == {
        'error': 'Service unavailable',
        'message': 'Exchange rate data unavailable',
    }

    response = client.get('/api/exchange-rates/USD/date/2024-06-07', headers=auth_headers)
    assert response.json() == 1.2
