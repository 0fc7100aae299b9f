from datetime import date
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from dynamic_pricing.models import ListingPrice, MarketFactor, PricingRun, SeasonalitySetting

pytestmark = pytest.mark.django_db


def run_command(*args, **options):
    out = StringIO()
    call_command(*args, stdout=out, **options)
    return out.getvalue()


def test_run_pricing_with_explicit_range(room_type):
    output = run_command('run_pricing', room_type.pk, '2026-11-01', '2026-11-03')

    assert 'Priced 3 dates' in output
    assert ListingPrice.objects.filter(room_type=room_type).count() == 3


def test_run_pricing_with_days(room_type):
    run_command('run_pricing', room_type.pk, '2026-11-01', days=30)

    run = PricingRun.objects.get()
    assert run.date_to == date(2026, 11, 30)
    assert run.priced_count == 30


def test_run_pricing_uses_room_type_location_unless_global(room_type, location):
    MarketFactor.objects.create(location=location, date=date(2026, 11, 1), demand=Decimal('1.2'))

    run_command('run_pricing', room_type.pk, '2026-11-01', '2026-11-01')
    assert ListingPrice.objects.get().suggested_price == Decimal('12000.00')

    run_command('run_pricing', room_type.pk, '2026-11-01', '2026-11-01', global_only=True)
    assert ListingPrice.objects.get().suggested_price == Decimal('10000.00')
    assert PricingRun.objects.filter(location__isnull=True).count() == 1


@pytest.mark.parametrize('args, options', [
    (('2026-11-01',), {}),
    (('2026-11-01',), {'days': 0}),
    (('2026-11-05', '2026-11-01'), {}),
    (('tomorrow', '2026-11-01'), {}),
])
def test_run_pricing_rejects_bad_ranges(room_type, args, options):
    with pytest.raises(CommandError):
        run_command('run_pricing', room_type.pk, *args, **options)

    assert not PricingRun.objects.exists()


def test_run_pricing_unknown_room_type(db):
    with pytest.raises(CommandError, match='not found'):
        run_command('run_pricing', 999, '2026-11-01', '2026-11-03')


def test_run_pricing_configuration_error(unpriced_room_type):
    with pytest.raises(CommandError, match='Loft Suite'):
        run_command('run_pricing', unpriced_room_type.pk, '2026-11-01', '2026-11-03')


def test_reset_seasonality_global(db):
    SeasonalitySetting.objects.create(
        season_name='Custom', start_date=date(2024, 1, 1), end_date=date(2024, 1, 31),
        multiplier=Decimal('1.500'),
    )

    output = run_command('reset_seasonality')

    assert 'Reset 4 global seasons' in output
    assert list(
        SeasonalitySetting.objects.filter(location__isnull=True).values_list('season_name', flat=True)
    ) == ['Winter', 'Spring', 'Summer', 'Fall']


def test_reset_seasonality_for_location(location):
    output = run_command('reset_seasonality', location=location.pk)

    assert f'Reset 4 location {location.pk} seasons' in output
    assert SeasonalitySetting.objects.filter(location=location).count() == 4


def test_reset_seasonality_unknown_location(db):
    with pytest.raises(CommandError):
        run_command('reset_seasonality', location=999)
