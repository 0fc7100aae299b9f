"""
Bucket Tables
=============

Range-keyed lookup tables used for the pricing curves:
lead time, length of stay and the occupancy grid.

Admin tooling edits buckets as string keys:
    "0-30"   inclusive range 0..30
    "61+"    open-ended, 61 and above

Internally each table is an ordered tuple of BucketRange. Order is the
order the keys were supplied in and the FIRST matching range wins, even
when a later range is tighter.

Persisted form (see PricingRules) is a list so key order survives JSON
backends that sort object keys:
    [{"range": "0-30", "value": 1.1}, {"range": "61+", "value": 0.9}]
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

from .exceptions import InvalidBucketSpec


@dataclass(frozen=True)
class ValueLimits:
    """Accepted range for bucket values; NaN and infinities are always rejected."""
    minimum: Decimal
    maximum: Decimal
    include_minimum: bool = True

    def check(self, label, value):
        """
        Raises:
            InvalidBucketSpec: if `value` is not finite or falls outside the limits.
        """
        if not value.is_finite():
            raise InvalidBucketSpec(f"{label} must be a finite number, got {value}")
        too_low = value < self.minimum if self.include_minimum else value <= self.minimum
        if too_low or value > self.maximum:
            opener = '[' if self.include_minimum else '('
            raise InvalidBucketSpec(
                f"{label} must be within {opener}{self.minimum}, {self.maximum}], got {value}"
            )
        return value


# Multiplicative factors: lead time, length of stay, day of week
MULTIPLIER_LIMITS = ValueLimits(Decimal('0'), Decimal('100'), include_minimum=False)
# Occupancy grid adjustments, in percent
PERCENT_LIMITS = ValueLimits(Decimal('-100'), Decimal('1000'))


def to_decimal(value, default=None):
    """Convert a JSON number/string to Decimal via str() to avoid float noise."""
    if value is None or value == '':
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


def parse_range_key(key: str) -> Tuple[Decimal, Optional[Decimal]]:
    """
    Parse a bucket key into (lower, upper).

    Returns upper=None for open-ended "lo+" keys.

    Raises:
        InvalidBucketSpec: if the key is not "lo-hi" or "lo+".
    """
    text = str(key).strip()
    try:
        if text.endswith('+'):
            lower, upper = Decimal(text[:-1].strip()), None
        else:
            lo, hi = text.split('-')
            lower, upper = Decimal(lo.strip()), Decimal(hi.strip())
    except (ValueError, InvalidOperation):
        raise InvalidBucketSpec(f"Invalid bucket key '{key}' (expected 'lo-hi' or 'lo+')")

    if not lower.is_finite() or (upper is not None and not upper.is_finite()):
        raise InvalidBucketSpec(f"Invalid bucket key '{key}': bounds must be finite numbers")

    if upper is not None and lower > upper:
        raise InvalidBucketSpec(f"Invalid bucket key '{key}': lower bound exceeds upper bound")
    return lower, upper


def format_range_key(lower: Decimal, upper: Optional[Decimal]) -> str:
    lo = format(lower.normalize(), 'f')
    if upper is None:
        return f"{lo}+"
    return f"{lo}-{format(upper.normalize(), 'f')}"


def _iter_entries(spec) -> Iterable[Tuple[str, Any]]:
    """Yield (key, value) pairs from a mapping or the persisted list form."""
    if not spec:
        return
    if isinstance(spec, Mapping):
        yield from spec.items()
        return
    if isinstance(spec, Sequence) and not isinstance(spec, (str, bytes)):
        for entry in spec:
            if isinstance(entry, Mapping) and 'range' in entry:
                yield entry['range'], entry.get('value')
            elif isinstance(entry, Sequence) and not isinstance(entry, (str, bytes)) and len(entry) == 2:
                yield entry[0], entry[1]
            else:
                raise InvalidBucketSpec(f"Invalid bucket entry: {entry!r}")
        return
    raise InvalidBucketSpec(f"Bucket spec must be a mapping or a list, got {type(spec).__name__}")


@dataclass(frozen=True)
class BucketRange:
    """One inclusive range; upper=None means no upper bound."""
    lower: Decimal
    upper: Optional[Decimal]
    value: Any

    def contains(self, value) -> bool:
        if value < self.lower:
            return False
        return self.upper is None or value <= self.upper

    @property
    def key(self) -> str:
        return format_range_key(self.lower, self.upper)


@dataclass(frozen=True)
class BucketTable:
    """
    Ordered range table with first-match-wins lookup.

    Usage:
        table = BucketTable.parse({"0-30": 1.1, "61+": 0.9})
        table.lookup(100, default=Decimal('1'))   # -> Decimal('0.9')
        table.lookup(45, default=Decimal('1'))    # -> Decimal('1')  (no match)
    """
    ranges: Tuple[BucketRange, ...] = ()

    @classmethod
    def parse(cls, spec, limits: ValueLimits = MULTIPLIER_LIMITS) -> 'BucketTable':
        """
        Build a table from a mapping or persisted list; values become Decimals.

        Raises:
            InvalidBucketSpec: on a malformed key, or a value outside `limits`.
        """
        ranges = []
        for key, raw in _iter_entries(spec):
            lower, upper = parse_range_key(key)
            value = to_decimal(raw)
            if value is None:
                raise InvalidBucketSpec(f"Bucket '{key}' has a non-numeric value: {raw!r}")
            limits.check(f"Bucket '{key}'", value)
            ranges.append(BucketRange(lower, upper, value))
        return cls(tuple(ranges))

    def __bool__(self):
        return bool(self.ranges)

    def match(self, value) -> Optional[BucketRange]:
        value = to_decimal(value)
        if value is None:
            return None
        for bucket in self.ranges:
            if bucket.contains(value):
                return bucket
        return None

    def lookup(self, value, default):
        """Return the value of the first range containing `value`, else `default`."""
        bucket = self.match(value)
        if bucket is None:
            return default
        return bucket.value

    def to_spec(self):
        """Persisted list form, preserving order."""
        return [{'range': b.key, 'value': float(b.value)} for b in self.ranges]


@dataclass(frozen=True)
class LeadBuckets:
    """
    Two-level table: lead-time (days out) range -> BucketTable of occupancy %.

    select() falls back to the most distant lead bucket (the one with the
    highest lower bound, conventionally "61+") when no range matches, and
    finally to an empty table.
    """
    ranges: Tuple[BucketRange, ...] = ()

    @classmethod
    def parse(cls, grid) -> 'LeadBuckets':
        if not grid:
            return cls()
        if isinstance(grid, Mapping) and 'leadBuckets' in grid:
            lead_spec = grid.get('leadBuckets')
        elif isinstance(grid, Mapping) and 'mode' in grid:
            lead_spec = {}
        else:
            lead_spec = grid
        ranges = []
        for key, sub_spec in _iter_entries(lead_spec):
            lower, upper = parse_range_key(key)
            ranges.append(BucketRange(lower, upper, BucketTable.parse(sub_spec, limits=PERCENT_LIMITS)))
        return cls(tuple(ranges))

    def select(self, days_out) -> BucketTable:
        days_out = to_decimal(days_out, Decimal('0'))
        for bucket in self.ranges:
            if bucket.contains(days_out):
                return bucket.value
        if not self.ranges:
            return BucketTable()
        most_distant = max(self.ranges, key=lambda b: b.lower)
        return most_distant.value

    def to_spec(self):
        return [{'range': b.key, 'value': b.value.to_spec()} for b in self.ranges]


def normalize_bucket_spec(spec):
    """Validate a bucket spec and return its persisted list form."""
    return BucketTable.parse(spec).to_spec()


def normalize_occupancy_grid(grid):
    """Validate an occupancy grid and return its persisted form."""
    if not grid:
        return {}
    mode = grid.get('mode', 'percent') if isinstance(grid, Mapping) else 'percent'
    return {'mode': mode, 'leadBuckets': LeadBuckets.parse(grid).to_spec()}


def lookup(value, spec, default):
    """One-shot lookup against an unparsed spec."""
    return BucketTable.parse(spec).lookup(value, default)
