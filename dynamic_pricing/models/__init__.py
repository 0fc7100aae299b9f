"""
Dynamic pricing models package.

Re-exports all models so Django migrations and imports work unchanged:
    from dynamic_pricing.models import RoomType, ListingPrice, etc.
"""

# Core: Location, RoomType
from .core import (
    Location,
    RoomType,
)

# Pricing: rules, seasons, listing prices
from .pricing import (
    PricingRules,
    SeasonalitySetting,
    ListingPrice,
)

# Market: external signals
from .market import (
    MarketFactor,
    OccupancyByDate,
)

# Audit: run bookkeeping
from .audit import (
    PricingRun,
    PricingAudit,
)

__all__ = [
    'Location',
    'RoomType',
    'PricingRules',
    'SeasonalitySetting',
    'ListingPrice',
    'MarketFactor',
    'OccupancyByDate',
    'PricingRun',
    'PricingAudit',
]
