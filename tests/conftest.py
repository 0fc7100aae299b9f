"""
Shared fixtures for the pricing engine tests.

Pure services (buckets, seasonality, calculator, orchestrator) run against
the in-memory stores below; ORM stores, views and commands use the test
database via pytest-django.
"""

from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from dynamic_pricing.models import Location, RoomType, PricingRules


# =============================================================================
# IN-MEMORY STORES
# =============================================================================

class FakeRoomTypeStore:
    def __init__(self, room_types):
        self.room_types = room_types

    def get(self, room_type_id):
        return self.room_types[room_type_id]


class FakeRulesStore:
    def __init__(self, rules=None):
        self.rules = rules or {}

    def get(self, room_type_id):
        return self.rules.get(room_type_id, {})


class FakeSeasonStore:
    def __init__(self, settings=None):
        self.settings = settings or []

    def list_active(self, location_id=None):
        rows = [
            s for s in self.settings
            if s.is_active and (s.location_id is None or s.location_id == location_id)
        ]
        return sorted(rows, key=lambda s: s.display_order)


class FakeMarketFactorStore:
    def __init__(self, by_date=None):
        self.by_date = by_date or {}

    def list_range(self, date_from, date_to, location_id=None):
        return {d: row for d, row in self.by_date.items() if date_from <= d <= date_to}


class FakeOccupancyProvider:
    def __init__(self, rows=None):
        self.rows = rows

    def occupancy_by_date(self, room_type_id, date_from, date_to):
        if self.rows is not None:
            return [(d, pct) for d, pct in self.rows if date_from <= d <= date_to]
        days = (date_to - date_from).days + 1
        return [(date_from + timedelta(days=i), Decimal('0')) for i in range(days)]


class FakeListingPriceStore:
    def __init__(self):
        self.cells = {}
        self.writes = []

    def upsert_suggested(self, rows):
        self.writes.append(list(rows))
        for row in rows:
            key = (row['room_type_id'], row['date'])
            cell = self.cells.setdefault(key, {'override_price': None, 'locked': False})
            cell['suggested_price'] = row['suggested_price']
            cell['source_run_id'] = row['source_run_id']
        return len(rows)


class FakeAuditStore:
    def __init__(self):
        self.rows = []

    def bulk_insert(self, rows):
        self.rows.extend(rows)
        return len(rows)


class FakeRunStore:
    def __init__(self):
        self.runs = {}

    def start(self, room_type_id, date_from, date_to, location_id, started_at):
        run_id = len(self.runs) + 1
        self.runs[run_id] = {
            'room_type_id': room_type_id,
            'date_from': date_from,
            'date_to': date_to,
            'location_id': location_id,
            'started_at': started_at,
            'finished_at': None,
        }
        return run_id

    def finish(self, run_id, finished_at, priced_count, notes):
        self.runs[run_id].update(finished_at=finished_at, priced_count=priced_count, notes=notes)


def make_season(name, start, end, multiplier, year_recurring=False,
                location_id=None, display_order=0, is_active=True):
    return SimpleNamespace(
        season_name=name,
        start_date=start,
        end_date=end,
        multiplier=Decimal(str(multiplier)),
        year_recurring=year_recurring,
        location_id=location_id,
        display_order=display_order,
        is_active=is_active,
    )


def make_room_type(name='Standard Twin', base='10000', min_price='8000', max_price='15000'):
    return SimpleNamespace(
        name=name,
        base_price=Decimal(base) if base is not None else None,
        min_price=Decimal(min_price) if min_price is not None else None,
        max_price=Decimal(max_price) if max_price is not None else None,
    )


class Ticker:
    """Clock that advances 5ms per call."""

    def __init__(self):
        self.current = datetime(2026, 10, 19, 9, 0, tzinfo=dt_timezone.utc)

    def __call__(self):
        value = self.current
        self.current += timedelta(milliseconds=5)
        return value


@pytest.fixture
def today():
    return date(2026, 10, 19)


@pytest.fixture
def fake_stores():
    return SimpleNamespace(
        room_types=FakeRoomTypeStore({1: make_room_type()}),
        rules=FakeRulesStore(),
        seasons=FakeSeasonStore(),
        market_factors=FakeMarketFactorStore(),
        occupancy=FakeOccupancyProvider(),
        listing_prices=FakeListingPriceStore(),
        audits=FakeAuditStore(),
        runs=FakeRunStore(),
    )


@pytest.fixture
def orchestrator_factory(fake_stores, today):
    from dynamic_pricing.services import PricingRunOrchestrator

    def factory(**overrides):
        kwargs = dict(vars(fake_stores))
        kwargs.update(today=lambda: today, clock=Ticker())
        kwargs.update(overrides)
        return PricingRunOrchestrator(**kwargs)

    return factory


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def location(db):
    return Location.objects.create(name='Kyoto Central', code='kyoto-central')


@pytest.fixture
def room_type(db, location):
    return RoomType.objects.create(
        name='Standard Twin',
        location=location,
        base_price=Decimal('10000.00'),
        min_price=Decimal('8000.00'),
        max_price=Decimal('15000.00'),
    )


@pytest.fixture
def unpriced_room_type(db, location):
    return RoomType.objects.create(name='Loft Suite', location=location, base_price=Decimal('20000.00'))


@pytest.fixture
def rules(room_type):
    return PricingRules.objects.get(room_type=room_type)
