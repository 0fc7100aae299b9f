"""
Nightly Rate Calculation
========================

Combines a room type's base price with every pricing factor into one
clamped nightly rate.

Calculation Flow:
1. Day-of-week factor      dow_adjustments["Fri"]            (default 1)
2. Lead time factor        lead_time_curve bucket by days out (default 1)
3. Length-of-stay factor   los_discounts bucket by nights     (default 1)
4. Occupancy factor        1 + occupancy_grid percent / 100   (default 0%)
5. Orphan-gap factor       always 1 (gap penalties are not computed here)
6. Unclamped = base × seasonality × dow × lead time × los × demand
               × comp pressure × manual multiplier × occupancy × orphan
7. Final = clamp(unclamped, min_price, max_price), quantized to cents

The pickup / availability / competitor-price signals and the events weight
are carried into the breakdown for audit only; they never multiply.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, Optional

from .buckets import BucketTable, LeadBuckets, to_decimal

WEEKDAY_KEYS = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')

ONE = Decimal('1')
ZERO = Decimal('0')
HUNDRED = Decimal('100')
CENTS = Decimal('0.01')
AUDIT_PRECISION = Decimal('0.0001')
# Enough digits for the full factor product at 4 decimal places
WORKING_PRECISION = 50


def weekday_key(value: date) -> str:
    """Short weekday name, independent of locale."""
    return WEEKDAY_KEYS[value.weekday()]


def clamp(value, lower, upper):
    return min(max(value, lower), upper)


@dataclass(frozen=True)
class PriceFactors:
    """Market factors resolved for one date. Missing values are neutral."""
    seasonality: Decimal = ONE
    demand: Decimal = ONE
    comp_pressure: Decimal = ONE
    manual_multiplier: Decimal = ONE
    events_weight: Decimal = ONE
    pickup_signal: Decimal = ZERO
    availability_signal: Decimal = ZERO
    comp_price_signal: Decimal = ZERO

    @classmethod
    def from_market_factor(cls, row, seasonality=ONE):
        """
        Build factors from a MarketFactor-like row (or None).

        Zero/empty multiplicative values fall back to 1, empty signals to 0.
        """
        if row is None:
            return cls(seasonality=seasonality)

        def multiplier(name):
            value = to_decimal(getattr(row, name, None))
            return value if value else ONE

        def signal(name):
            return to_decimal(getattr(row, name, None), ZERO)

        return cls(
            seasonality=seasonality,
            demand=multiplier('demand'),
            comp_pressure=multiplier('comp_pressure_auto'),
            manual_multiplier=multiplier('manual_multiplier'),
            events_weight=multiplier('events_weight'),
            pickup_signal=signal('pickup_z'),
            availability_signal=signal('availability_z'),
            comp_price_signal=signal('comp_price_z'),
        )


@dataclass(frozen=True)
class PricingRuleSet:
    """Parsed pricing rules. An empty rule set makes every lookup neutral."""
    dow_adjustments: Dict[str, Decimal] = field(default_factory=dict)
    lead_time_curve: BucketTable = BucketTable()
    los_discounts: BucketTable = BucketTable()
    occupancy_grid: LeadBuckets = LeadBuckets()

    @classmethod
    def from_rules(cls, rules=None):
        """
        Parse a rules dict ({} when a room type has no rules row).

        Raises:
            InvalidBucketSpec: if any bucket key or value is malformed.
        """
        rules = rules or {}
        dow = {}
        for key, value in (rules.get('dow_adjustments') or {}).items():
            parsed = to_decimal(value)
            if parsed is not None:
                dow[key] = parsed
        return cls(
            dow_adjustments=dow,
            lead_time_curve=BucketTable.parse(rules.get('lead_time_curve')),
            los_discounts=BucketTable.parse(rules.get('los_discounts')),
            occupancy_grid=LeadBuckets.parse(rules.get('occupancy_grid')),
        )


@dataclass(frozen=True)
class PriceInputs:
    base_price: Decimal
    min_price: Decimal
    max_price: Decimal
    date: date
    days_out: int = 0
    length_of_stay: int = 1
    factors: PriceFactors = PriceFactors()
    rules: PricingRuleSet = PricingRuleSet()
    occupancy_pct: Decimal = ZERO


@dataclass(frozen=True)
class PriceQuote:
    final: Decimal
    breakdown: Dict[str, object]


class PriceCalculator:
    """
    Stateless nightly rate calculator.

    Usage:
        calculator = PriceCalculator()
        quote = calculator.calculate(PriceInputs(
            base_price=Decimal('10000'),
            min_price=Decimal('8000'),
            max_price=Decimal('15000'),
            date=date(2026, 3, 14),
            days_out=10,
            factors=PriceFactors(seasonality=Decimal('1.15')),
            rules=PricingRuleSet.from_rules(room_type.pricing_rules.as_rules()),
            occupancy_pct=Decimal('72.5'),
        ))
        quote.final        # Decimal('11500.00')
        quote.breakdown    # every factor, for audit/display
    """

    def __init__(self, quantum: Optional[Decimal] = None):
        self.quantum = quantum or CENTS

    def dow_factor(self, rules: PricingRuleSet, stay_date: date) -> Decimal:
        return rules.dow_adjustments.get(weekday_key(stay_date)) or ONE

    def occupancy_adjustment(self, rules: PricingRuleSet, days_out, occupancy_pct):
        """Return (factor, percent) from the occupancy grid."""
        sub_table = rules.occupancy_grid.select(days_out)
        percent = sub_table.lookup(occupancy_pct, default=ZERO)
        return ONE + percent / HUNDRED, percent

    def calculate(self, inputs: PriceInputs) -> PriceQuote:
        rules = inputs.rules
        factors = inputs.factors
        base_price = to_decimal(inputs.base_price)
        min_price = to_decimal(inputs.min_price)
        max_price = to_decimal(inputs.max_price)
        occupancy_pct = to_decimal(inputs.occupancy_pct, ZERO)

        # A past or same-day stay is treated as 0 days out
        days_out = max(int(inputs.days_out), 0)

        dow = self.dow_factor(rules, inputs.date)
        lead_time = rules.lead_time_curve.lookup(days_out, default=ONE)
        los = rules.los_discounts.lookup(inputs.length_of_stay, default=ONE)
        occupancy, occupancy_percent = self.occupancy_adjustment(rules, days_out, occupancy_pct)
        orphan = ONE

        with localcontext() as ctx:
            ctx.prec = WORKING_PRECISION
            unclamped = (
                base_price
                * factors.seasonality
                * dow
                * lead_time
                * los
                * factors.demand
                * factors.comp_pressure
                * factors.manual_multiplier
                * occupancy
                * orphan
            )
            unclamped_audit = unclamped.quantize(AUDIT_PRECISION, rounding=ROUND_HALF_UP)

        # Re-clamp after rounding: a coarse quantum could step past a bound
        final = clamp(
            clamp(unclamped, min_price, max_price).quantize(self.quantum, rounding=ROUND_HALF_UP),
            min_price,
            max_price,
        )

        breakdown = {
            'base_price': base_price,
            'seasonality': factors.seasonality,
            'dow': dow,
            'lead_time': lead_time,
            'los': los,
            'demand': factors.demand,
            'comp_pressure': factors.comp_pressure,
            'manual_multiplier': factors.manual_multiplier,
            'events_weight': factors.events_weight,
            'occupancy': occupancy,
            'occupancy_pct': occupancy_pct.quantize(CENTS, rounding=ROUND_HALF_UP),
            'occupancy_percent': occupancy_percent,
            'orphan': orphan,
            'unclamped': unclamped_audit,
            'min_price': min_price,
            'max_price': max_price,
            'final_price': final,
            'days_out': days_out,
            'pickup_signal': factors.pickup_signal,
            'availability_signal': factors.availability_signal,
            'comp_price_signal': factors.comp_price_signal,
        }
        return PriceQuote(final=final, breakdown=breakdown)
