import json
import logging
from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse

from dynamic_pricing.models import ListingPrice, Location, PricingAudit, SeasonalitySetting

pytestmark = pytest.mark.django_db


def post_json(client, url, data):
    return client.post(url, data=json.dumps(data), content_type='application/json')


def put_json(client, url, data):
    return client.put(url, data=json.dumps(data), content_type='application/json')


def run_payload(room_type, **overrides):
    payload = {'roomTypeId': room_type.pk, 'from': '2026-11-01', 'to': '2026-11-07'}
    payload.update(overrides)
    return payload


# =============================================================================
# RUN
# =============================================================================

def test_run_returns_priced_count(client, room_type):
    response = post_json(client, reverse('dynamic_pricing:pricing_run'), run_payload(room_type))

    assert response.status_code == 200
    body = response.json()
    assert body['ok'] is True
    assert body['priced'] == 7
    assert isinstance(body['runId'], int)
    assert ListingPrice.objects.filter(room_type=room_type).count() == 7


@pytest.mark.parametrize('payload, message', [
    ({'from': '2026-11-01', 'to': '2026-11-07'}, 'roomTypeId, from, and to dates are required'),
    ({'roomTypeId': 1, 'to': '2026-11-07'}, 'roomTypeId, from, and to dates are required'),
    ({'roomTypeId': 1, 'from': '01/11/2026', 'to': '2026-11-07'}, 'Dates must be in YYYY-MM-DD format'),
    ({'roomTypeId': 1, 'from': '2026-11-08', 'to': '2026-11-07'}, 'from must be on or before to'),
])
def test_run_validates_input(client, payload, message):
    response = post_json(client, reverse('dynamic_pricing:pricing_run'), payload)

    assert response.status_code == 400
    assert response.json()['error'] == message


def test_run_rejects_invalid_json(client):
    response = client.post(reverse('dynamic_pricing:pricing_run'), data='{nope', content_type='application/json')

    assert response.status_code == 400
    assert response.json()['error'] == 'Invalid JSON'


def test_run_unknown_room_type_is_404(client, db):
    response = post_json(client, reverse('dynamic_pricing:pricing_run'), {
        'roomTypeId': 999, 'from': '2026-11-01', 'to': '2026-11-07',
    })

    assert response.status_code == 404


def test_run_without_bounds_names_the_room_type(client, unpriced_room_type):
    response = post_json(client, reverse('dynamic_pricing:pricing_run'), run_payload(unpriced_room_type))

    assert response.status_code == 400
    assert 'Loft Suite' in response.json()['error']
    assert not ListingPrice.objects.exists()


def test_run_unexpected_failure_is_500(client, room_type, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError('boom')

    monkeypatch.setattr('dynamic_pricing.views.pricing.run_pricing', explode)

    response = post_json(client, reverse('dynamic_pricing:pricing_run'), run_payload(room_type))

    assert response.status_code == 500
    assert response.json()['error'] == 'Failed to run pricing calculation'


def test_run_defaults_to_room_type_location(client, room_type, location, monkeypatch):
    calls = []

    def record(room_type_id, date_from, date_to, location_id=None):
        calls.append(location_id)
        from dynamic_pricing.services import RunResult
        return RunResult(ok=True, priced=0, run_id=None)

    monkeypatch.setattr('dynamic_pricing.views.pricing.run_pricing', record)
    url = reverse('dynamic_pricing:pricing_run')

    post_json(client, url, run_payload(room_type))
    post_json(client, url, run_payload(room_type, locationId=None))
    post_json(client, url, run_payload(room_type, locationId='null'))

    assert calls == [location.pk, None, None]


# =============================================================================
# CALENDAR / OVERRIDE / BREAKDOWN
# =============================================================================

def test_calendar_shows_override_over_suggested(client, room_type):
    post_json(client, reverse('dynamic_pricing:pricing_run'), run_payload(room_type, to='2026-11-02'))
    post_json(client, reverse('dynamic_pricing:pricing_override'), {
        'roomTypeId': room_type.pk, 'date': '2026-11-02', 'price': 12345.5, 'locked': True,
    })

    response = client.get(reverse('dynamic_pricing:pricing_calendar'), {
        'roomTypeId': room_type.pk, 'from': '2026-11-01', 'to': '2026-11-30',
    })

    assert response.status_code == 200
    assert response.json()['days'] == [
        {'date': '2026-11-01', 'price': 10000, 'hasOverride': False, 'locked': False},
        {'date': '2026-11-02', 'price': 12345.5, 'hasOverride': True, 'locked': True},
    ]


def test_calendar_requires_parameters(client, db):
    response = client.get(reverse('dynamic_pricing:pricing_calendar'), {'roomTypeId': 1})

    assert response.status_code == 400


def test_override_outside_bounds_is_stored_and_flagged(client, room_type):
    response = post_json(client, reverse('dynamic_pricing:pricing_override'), {
        'roomTypeId': room_type.pk, 'date': '2026-11-05', 'price': 20000,
    })

    assert response.status_code == 200
    body = response.json()
    assert body['ok'] is True
    assert body['outsideBounds'] is True
    assert body['roomBounds'] == {'min': 8000, 'max': 15000}
    assert body['row']['overridePrice'] == 20000
    assert body['row']['suggestedPrice'] is None
    assert body['row']['locked'] is False


def test_override_can_be_cleared(client, room_type):
    url = reverse('dynamic_pricing:pricing_override')
    post_json(client, url, {'roomTypeId': room_type.pk, 'date': '2026-11-05', 'price': 9000})

    response = post_json(client, url, {'roomTypeId': room_type.pk, 'date': '2026-11-05', 'price': None})

    assert response.json()['outsideBounds'] is False
    assert ListingPrice.objects.get(room_type=room_type, date=date(2026, 11, 5)).override_price is None


def test_lock_only_update_keeps_override(client, room_type):
    url = reverse('dynamic_pricing:pricing_override')
    post_json(client, url, {'roomTypeId': room_type.pk, 'date': '2026-11-05', 'price': 9000})

    response = post_json(client, url, {'roomTypeId': room_type.pk, 'date': '2026-11-05', 'locked': True})

    assert response.status_code == 200
    assert response.json()['row']['overridePrice'] == 9000
    assert response.json()['outsideBounds'] is False
    cell = ListingPrice.objects.get(room_type=room_type, date=date(2026, 11, 5))
    assert cell.override_price == Decimal('9000')
    assert cell.locked is True


@pytest.mark.parametrize('price', [-1, 'abc', True, 'NaN'])
def test_override_rejects_bad_price(client, room_type, price):
    response = post_json(client, reverse('dynamic_pricing:pricing_override'), {
        'roomTypeId': room_type.pk, 'date': '2026-11-05', 'price': price,
    })

    assert response.status_code == 400
    assert not ListingPrice.objects.exists()


def test_breakdown_for_priced_cell(client, room_type):
    post_json(client, reverse('dynamic_pricing:pricing_run'), run_payload(room_type))

    response = client.get(reverse('dynamic_pricing:pricing_breakdown'), {
        'roomTypeId': room_type.pk, 'date': '2026-11-03',
    })

    assert response.status_code == 200
    body = response.json()
    assert body['price'] == 10000
    assert body['date'] == '2026-11-03'
    assert body['runId'] == PricingAudit.objects.get(date=date(2026, 11, 3)).run_id
    assert body['breakdown']['basePrice'] == 10000
    assert body['breakdown']['seasonality'] == 1
    assert body['breakdown']['minPrice'] == 8000


def test_breakdown_for_unpriced_cell_is_404(client, room_type):
    response = client.get(reverse('dynamic_pricing:pricing_breakdown'), {
        'roomTypeId': room_type.pk, 'date': '2026-11-03',
    })

    assert response.status_code == 404
    assert response.json()['error'] == 'No pricing data found for this date'


# =============================================================================
# RULES
# =============================================================================

def test_rules_round_trip(client, room_type):
    url = reverse('dynamic_pricing:pricing_rules', args=[room_type.pk])

    response = put_json(client, url, {'lead_time_curve': {'0-30': 1.1}, 'ignored': 1})
    assert response.status_code == 200

    response = client.get(url)
    assert response.json()['rules']['lead_time_curve'] == [{'range': '0-30', 'value': 1.1}]


@pytest.mark.parametrize('payload', [
    {},
    {'ignored': 1},
    {'lead_time_curve': {'soon': 1.1}},
    {'dow_adjustments': {'Funday': 1.1}},
    {'lead_time_curve': {'0+': '1e30'}},
    {'lead_time_curve': {'0+': 'NaN'}},
    {'los_discounts': {'7+': 'Infinity'}},
    {'dow_adjustments': {'Fri': 0}},
    {'dow_adjustments': {'Sat': 'NaN'}},
    {'occupancy_grid': {'leadBuckets': {'0-30': {'80-100': 5000}}}},
])
def test_rules_put_rejects_invalid_payload(client, room_type, payload):
    response = put_json(client, reverse('dynamic_pricing:pricing_rules', args=[room_type.pk]), payload)

    assert response.status_code == 400


# =============================================================================
# SEASONALITY
# =============================================================================

def test_seasonality_replace_and_list(client, location):
    url = reverse('dynamic_pricing:seasonality_location', args=[location.pk])
    SeasonalitySetting.objects.create(
        location=location, season_name='Old', start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31), multiplier=Decimal('1.100'),
    )

    response = put_json(client, url, {'settings': [{
        'season_name': 'Cherry Blossom', 'start_date': '2024-03-25', 'end_date': '2024-04-10',
        'multiplier': 1.25, 'year_recurring': True,
    }]})
    assert response.status_code == 200

    listed = client.get(url).json()
    assert [s['season_name'] for s in listed] == ['Cherry Blossom']
    assert listed[0]['multiplier'] == 1.25
    assert listed[0]['location_id'] == location.pk


def test_seasonality_replace_does_not_touch_global(client, location):
    SeasonalitySetting.objects.create(
        season_name='Global', start_date=date(2024, 1, 1), end_date=date(2024, 1, 31),
        multiplier=Decimal('1.100'),
    )

    put_json(client, reverse('dynamic_pricing:seasonality_location', args=[location.pk]), {'settings': []})

    assert client.get(reverse('dynamic_pricing:seasonality_global')).json()[0]['season_name'] == 'Global'


@pytest.mark.parametrize('setting, message', [
    ({'season_name': 'X', 'start_date': '2024-01-01', 'end_date': '2024-01-31'},
     'Each setting must have season_name, start_date, end_date, and multiplier'),
    ({'season_name': 'X', 'start_date': '2024-01-01', 'end_date': '2024-01-31', 'multiplier': -1},
     'multiplier must be greater than 0'),
    ({'season_name': 'X', 'start_date': '2024/01/01', 'end_date': '2024-01-31', 'multiplier': 1.1},
     'start_date and end_date must be valid dates (YYYY-MM-DD format)'),
    ({'season_name': 'X', 'start_date': '2024-03-01', 'end_date': '2024-01-31', 'multiplier': 1.1},
     'X: start_date must be on or before end_date'),
])
def test_seasonality_put_validation(client, db, setting, message):
    response = put_json(client, reverse('dynamic_pricing:seasonality_global'), {'settings': [setting]})

    assert response.status_code == 400
    assert response.json()['error'] == message


def test_seasonality_put_requires_a_list(client, db):
    response = put_json(client, reverse('dynamic_pricing:seasonality_global'), {'settings': {}})

    assert response.status_code == 400


def test_seasonality_reset_restores_defaults(client, location):
    response = client.post(reverse('dynamic_pricing:seasonality_location_reset', args=[location.pk]))

    assert response.status_code == 200
    body = response.json()
    assert body['success'] is True
    assert [s['season_name'] for s in body['settings']] == ['Winter', 'Spring', 'Summer', 'Fall']
    assert body['settings'][0]['multiplier'] == 0.92
    assert SeasonalitySetting.objects.filter(location=location).count() == 4
    assert not SeasonalitySetting.objects.filter(location__isnull=True).exists()


def test_seasonality_unknown_location_is_404(client, db):
    response = client.get(reverse('dynamic_pricing:seasonality_location', args=[999]))

    assert response.status_code == 404


def test_health(client):
    response = client.get(reverse('dynamic_pricing:pricing_health'))

    assert response.status_code == 200
    assert response.json()['status'] == 'OK'
    assert response.json()['service'] == 'Pricing API'


def test_rejected_rules_leave_pricing_runnable(client, room_type):
    rules_url = reverse('dynamic_pricing:pricing_rules', args=[room_type.pk])
    put_json(client, rules_url, {'lead_time_curve': {'0+': 1.1}})

    response = put_json(client, rules_url, {'lead_time_curve': {'0+': '1e30'}})
    assert response.status_code == 400

    response = post_json(client, reverse('dynamic_pricing:pricing_run'), run_payload(room_type))
    assert response.status_code == 200
    assert client.get(rules_url).json()['rules']['lead_time_curve'] == [{'range': '0+', 'value': 1.1}]


def test_invalid_json_is_logged(client, db, caplog, monkeypatch):
    monkeypatch.setattr(logging.getLogger('dynamic_pricing'), 'propagate', True)

    with caplog.at_level(logging.WARNING, logger='dynamic_pricing'):
        client.post(reverse('dynamic_pricing:pricing_run'), data='{nope', content_type='application/json')

    assert 'Rejected request body on /api/pricing/run/' in caplog.text


# =============================================================================
# OVERRIDE FLAGS
# =============================================================================

def test_lock_only_update_on_new_cell(client, room_type):
    response = post_json(client, reverse('dynamic_pricing:pricing_override'), {
        'roomTypeId': room_type.pk, 'date': '2026-11-06', 'locked': True,
    })

    assert response.json()['row']['overridePrice'] is None
    assert ListingPrice.objects.get(room_type=room_type, date=date(2026, 11, 6)).locked is True


def test_lock_only_update_reports_stored_override_outside_bounds(client, room_type):
    url = reverse('dynamic_pricing:pricing_override')
    post_json(client, url, {'roomTypeId': room_type.pk, 'date': '2026-11-05', 'price': 20000})

    response = post_json(client, url, {'roomTypeId': room_type.pk, 'date': '2026-11-05', 'locked': False})

    assert response.json()['outsideBounds'] is True


@pytest.mark.parametrize('locked, expected', [('false', False), ('true', True), (0, False), (1, True)])
def test_override_lock_flag_parsing(client, room_type, locked, expected):
    post_json(client, reverse('dynamic_pricing:pricing_override'), {
        'roomTypeId': room_type.pk, 'date': '2026-11-05', 'locked': locked,
    })

    assert ListingPrice.objects.get(room_type=room_type).locked is expected


@pytest.mark.parametrize('payload', [
    {'locked': 'maybe'},
    {'locked': 2},
    {'price': '1e30'},
    {'price': 100000000},
])
def test_override_rejects_bad_flags_and_oversized_prices(client, room_type, payload):
    response = post_json(client, reverse('dynamic_pricing:pricing_override'), {
        'roomTypeId': room_type.pk, 'date': '2026-11-05', **payload,
    })

    assert response.status_code == 400
    assert not ListingPrice.objects.exists()


# =============================================================================
# SEASONALITY FLAGS
# =============================================================================

def season(**overrides):
    values = {'season_name': 'Autumn', 'start_date': '2024-09-01', 'end_date': '2024-11-30', 'multiplier': 1.05}
    values.update(overrides)
    return values


def test_seasonality_string_flags_are_parsed(client, db):
    url = reverse('dynamic_pricing:seasonality_global')

    response = put_json(client, url, {'settings': [
        season(year_recurring='false', is_active='true', display_order='3'),
    ]})

    assert response.status_code == 200
    stored = SeasonalitySetting.objects.get()
    assert stored.year_recurring is False
    assert stored.is_active is True
    assert stored.display_order == 3


@pytest.mark.parametrize('overrides', [
    {'year_recurring': 'sometimes'},
    {'is_active': [1]},
    {'display_order': 'first'},
    {'display_order': -1},
    {'display_order': 1.5},
    {'display_order': 2 ** 40},
    {'multiplier': '1e30'},
    {'year_recurring': 'false', 'start_date': '2024-12-01', 'end_date': '2024-02-28'},
])
def test_seasonality_bad_flags_are_rejected(client, db, overrides):
    url = reverse('dynamic_pricing:seasonality_global')

    response = put_json(client, url, {'settings': [season(**overrides)]})

    assert response.status_code == 400
    assert not SeasonalitySetting.objects.exists()
