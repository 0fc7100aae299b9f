from datetime import date
from decimal import Decimal

import pytest
from django.db import DatabaseError

from dynamic_pricing.models import SeasonalitySetting, Location
from dynamic_pricing.services import SeasonalityResolver, season_contains
from dynamic_pricing.services.stores import DjangoSeasonalityStore

from .conftest import FakeSeasonStore, make_season

WINTER = make_season('Winter', date(2023, 12, 1), date(2024, 2, 28), 0.92, year_recurring=True)


@pytest.mark.parametrize('check_date', [
    date(2024, 12, 15),
    date(2024, 1, 15),
    date(2024, 2, 15),
    date(2024, 12, 1),
    date(2030, 2, 28),
])
def test_recurring_window_wraps_the_new_year(check_date):
    assert season_contains(WINTER, check_date)


@pytest.mark.parametrize('check_date', [
    date(2024, 3, 15),
    date(2024, 11, 15),
    date(2024, 11, 30),
    date(2024, 3, 1),
])
def test_recurring_window_excludes_dates_outside(check_date):
    assert not season_contains(WINTER, check_date)


def test_recurring_window_within_one_year_ignores_the_year():
    summer = make_season('Summer', date(2024, 6, 1), date(2024, 8, 31), 1.15, year_recurring=True)

    assert season_contains(summer, date(2031, 6, 1))
    assert season_contains(summer, date(2019, 8, 31))
    assert not season_contains(summer, date(2024, 9, 1))


def test_non_recurring_window_is_a_plain_date_range():
    festival = make_season('Festival', date(2026, 7, 14), date(2026, 7, 17), 1.4)

    assert season_contains(festival, date(2026, 7, 14))
    assert season_contains(festival, date(2026, 7, 17))
    assert not season_contains(festival, date(2027, 7, 15))
    assert not season_contains(festival, date(2026, 7, 18))


def test_no_settings_resolves_to_exactly_one():
    resolver = SeasonalityResolver(FakeSeasonStore([]))

    assert resolver.resolve(date(2026, 7, 15)) == Decimal('1.0')
    assert resolver.resolve(date(2026, 7, 15), location_id=4) == Decimal('1.0')


def test_first_match_in_display_order_wins():
    store = FakeSeasonStore([
        make_season('Summer', date(2024, 6, 1), date(2024, 8, 31), 1.15, year_recurring=True, display_order=2),
        make_season('Festival', date(2026, 7, 14), date(2026, 7, 17), 1.4, display_order=1),
    ])
    resolver = SeasonalityResolver(store)

    assert resolver.resolve(date(2026, 7, 15)) == Decimal('1.4')
    assert resolver.resolve(date(2026, 7, 20)) == Decimal('1.15')
    assert resolver.resolve(date(2026, 10, 1)) == Decimal('1.0')


def test_store_failure_degrades_to_default():
    class BrokenStore:
        def list_active(self, location_id=None):
            raise DatabaseError('connection reset')

    assert SeasonalityResolver(BrokenStore()).resolve(date(2026, 7, 15)) == Decimal('1.0')


def test_unexpected_error_degrades_to_default():
    broken = make_season('Broken', None, None, 1.3)

    resolver = SeasonalityResolver(FakeSeasonStore([broken]))

    assert resolver.resolve(date(2026, 7, 15)) == Decimal('1.0')


# =============================================================================
# DATABASE STORE
# =============================================================================

@pytest.mark.django_db
def test_global_only_when_no_location(location):
    SeasonalitySetting.objects.create(
        season_name='Global Summer', start_date=date(2024, 6, 1), end_date=date(2024, 8, 31),
        multiplier=Decimal('1.100'), year_recurring=True, display_order=5,
    )
    SeasonalitySetting.objects.create(
        location=location, season_name='Kyoto Summer', start_date=date(2024, 6, 1),
        end_date=date(2024, 8, 31), multiplier=Decimal('1.300'), year_recurring=True, display_order=1,
    )
    resolver = SeasonalityResolver(DjangoSeasonalityStore())

    assert resolver.resolve(date(2026, 7, 1)) == Decimal('1.100')
    # Location rows join the global ones; display_order decides
    assert resolver.resolve(date(2026, 7, 1), location_id=location.id) == Decimal('1.300')


@pytest.mark.django_db
def test_other_locations_and_inactive_rows_are_ignored(location):
    other = Location.objects.create(name='Okinawa', code='okinawa')
    SeasonalitySetting.objects.create(
        location=other, season_name='Okinawa Summer', start_date=date(2024, 6, 1),
        end_date=date(2024, 8, 31), multiplier=Decimal('1.500'), year_recurring=True,
    )
    SeasonalitySetting.objects.create(
        location=location, season_name='Closed', start_date=date(2024, 6, 1),
        end_date=date(2024, 8, 31), multiplier=Decimal('0.500'), year_recurring=True, is_active=False,
    )
    resolver = SeasonalityResolver(DjangoSeasonalityStore())

    assert resolver.resolve(date(2026, 7, 1), location_id=location.id) == Decimal('1.0')


@pytest.mark.django_db
def test_model_contains_date():
    setting = SeasonalitySetting.objects.create(
        season_name='Winter', start_date=date(2024, 12, 1), end_date=date(2025, 2, 28),
        multiplier=Decimal('0.920'), year_recurring=True,
    )

    assert setting.contains_date(date(2027, 1, 10))
    assert not setting.contains_date(date(2027, 4, 10))
