"""
Pricing Runs
============

Drives one end-to-end computation for a room type over an inclusive date
range:

    created   -> PricingRun row inserted (started_at = now)
    running   -> validate room type bounds, load rules, market factors and
                 occupancy ONCE, price every occupancy date, bulk-write
                 suggested prices then audit rows
    finished  -> finished_at, priced count and a summary note recorded

Any failure propagates to the caller and leaves the run unfinished.
Re-running is safe: the suggested price is a pure function of the loaded
inputs, so a repeat run converges to the same values.
"""

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.db import DatabaseError, transaction
from django.utils import timezone

from dynamic_pricing.conf import pricing_setting

from .buckets import to_decimal
from .exceptions import PricingConfigurationError, PricingDataError
from .pricing_service import PriceCalculator, PriceFactors, PriceInputs, PricingRuleSet
from .seasonality_service import SeasonalityResolver
from .stores import (
    DjangoRoomTypeStore, DjangoPricingRulesStore, DjangoSeasonalityStore,
    DjangoMarketFactorStore, DjangoOccupancyProvider, DjangoListingPriceStore,
    DjangoAuditStore, DjangoRunStore,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    ok: bool
    priced: int
    run_id: object = None

    def as_dict(self):
        return {'ok': self.ok, 'priced': self.priced, 'runId': self.run_id}


def validate_bounds(room_type):
    """
    Return (base, min, max) as Decimals.

    Raises:
        PricingConfigurationError: if any of them is missing or not positive.
    """
    name = getattr(room_type, 'name', str(room_type))
    checks = (
        ('base_price', f'Room type "{name}" must have a valid base price set before pricing can be calculated'),
        ('min_price', f'Room type "{name}" must have a valid minimum price set'),
        ('max_price', f'Room type "{name}" must have a valid maximum price set'),
    )
    values = []
    for attr, message in checks:
        value = to_decimal(getattr(room_type, attr, None))
        if value is None or value <= 0:
            raise PricingConfigurationError(name, message)
        values.append(value)
    base_price, min_price, max_price = values
    if min_price > max_price:
        raise PricingConfigurationError(
            name, f'Room type "{name}" has a minimum price above its maximum price'
        )
    return base_price, min_price, max_price


class PricingRunOrchestrator:
    """
    Pricing run service with injected data access.

    Usage:
        orchestrator = build_orchestrator()
        result = orchestrator.run(room_type.id, date(2026, 11, 1), date(2026, 11, 30))
        result.priced   # -> 30
    """

    def __init__(self, room_types, rules, seasons, market_factors, occupancy,
                 listing_prices, audits, runs, calculator=None, today=None,
                 clock=None, atomic=None):
        self.room_types = room_types
        self.rules = rules
        self.seasons = SeasonalityResolver(seasons)
        self.market_factors = market_factors
        self.occupancy = occupancy
        self.listing_prices = listing_prices
        self.audits = audits
        self.runs = runs
        self.calculator = calculator or PriceCalculator()
        self.today = today or timezone.localdate
        self.clock = clock or timezone.now
        self.atomic = atomic or nullcontext

    def _load(self, what, loader, *args):
        try:
            return loader(*args)
        except DatabaseError as exc:
            raise PricingDataError(f"Failed to load {what}: {exc}") from exc

    def run(self, room_type_id, date_from: date, date_to: date, location_id=None) -> RunResult:
        if date_from > date_to:
            raise ValueError(f"Invalid date range: {date_from} is after {date_to}")

        started_at = self.clock()
        run_id = self.runs.start(room_type_id, date_from, date_to, location_id, started_at)
        logger.info(
            "Pricing run #%s started: room type %s, %s to %s (location=%s)",
            run_id, room_type_id, date_from, date_to, location_id,
        )

        # Fail fast before any load or write
        room_type = self.room_types.get(room_type_id)
        base_price, min_price, max_price = validate_bounds(room_type)

        # One snapshot of every input for the whole run
        rule_set = PricingRuleSet.from_rules(self._load('pricing rules', self.rules.get, room_type_id))
        factors_by_date = self._load(
            'market factors', self.market_factors.list_range, date_from, date_to, location_id
        )
        occupancy_rows = self._load(
            'occupancy', self.occupancy.occupancy_by_date, room_type_id, date_from, date_to
        )
        season_settings = self.seasons.load(location_id)

        today = self.today()
        length_of_stay = pricing_setting('DEFAULT_LENGTH_OF_STAY')
        price_rows = []
        audit_rows = []

        for stay_date, occupancy_pct in occupancy_rows:
            seasonality = self.seasons.resolve_from(season_settings, stay_date)
            factors = PriceFactors.from_market_factor(factors_by_date.get(stay_date), seasonality)
            quote = self.calculator.calculate(PriceInputs(
                base_price=base_price,
                min_price=min_price,
                max_price=max_price,
                date=stay_date,
                days_out=max((stay_date - today).days, 0),
                length_of_stay=length_of_stay,
                factors=factors,
                rules=rule_set,
                occupancy_pct=to_decimal(occupancy_pct, Decimal('0')),
            ))

            price_rows.append({
                'room_type_id': room_type_id,
                'date': stay_date,
                'suggested_price': quote.final,
                'source_run_id': run_id,
            })
            audit_rows.append({
                'run_id': run_id,
                'room_type_id': room_type_id,
                'date': stay_date,
                **quote.breakdown,
            })

        with self.atomic():
            self.listing_prices.upsert_suggested(price_rows)
            self.audits.bulk_insert(audit_rows)

        finished_at = self.clock()
        elapsed_ms = int((finished_at - started_at).total_seconds() * 1000)
        notes = f"Processed {len(price_rows)} dates in {elapsed_ms}ms"
        self.runs.finish(run_id, finished_at, len(price_rows), notes)
        logger.info("Pricing run #%s finished: %s", run_id, notes)

        return RunResult(ok=True, priced=len(price_rows), run_id=run_id)


def build_orchestrator(**overrides):
    """Orchestrator wired to the Django ORM stores."""
    atomic = transaction.atomic if pricing_setting('ATOMIC_WRITES') else nullcontext
    kwargs = {
        'room_types': DjangoRoomTypeStore(),
        'rules': DjangoPricingRulesStore(),
        'seasons': DjangoSeasonalityStore(),
        'market_factors': DjangoMarketFactorStore(),
        'occupancy': DjangoOccupancyProvider(),
        'listing_prices': DjangoListingPriceStore(),
        'audits': DjangoAuditStore(),
        'runs': DjangoRunStore(),
        'atomic': atomic,
        'calculator': PriceCalculator(Decimal(str(pricing_setting('PRICE_QUANTUM')))),
    }
    kwargs.update(overrides)
    return PricingRunOrchestrator(**kwargs)


def run_pricing(room_type_id, date_from, date_to, location_id=None):
    """Entry point used by views and management commands."""
    return build_orchestrator().run(room_type_id, date_from, date_to, location_id)
