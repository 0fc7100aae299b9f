"""
Services package.

Re-exports the pricing engine services so imports stay short:
    from dynamic_pricing.services import PriceCalculator, run_pricing
"""

from .exceptions import (
    PricingError,
    PricingConfigurationError,
    PricingDataError,
    InvalidBucketSpec,
)
from .buckets import BucketRange, BucketTable, LeadBuckets
from .seasonality_service import SeasonalityResolver, season_contains, DEFAULT_SEASONS
from .pricing_service import (
    PriceCalculator,
    PriceFactors,
    PriceInputs,
    PriceQuote,
    PricingRuleSet,
)
from .run_service import PricingRunOrchestrator, RunResult, build_orchestrator, run_pricing
from .calendar_service import CalendarService, build_calendar_service

__all__ = [
    'PricingError',
    'PricingConfigurationError',
    'PricingDataError',
    'InvalidBucketSpec',
    'BucketRange',
    'BucketTable',
    'LeadBuckets',
    'SeasonalityResolver',
    'season_contains',
    'DEFAULT_SEASONS',
    'PriceCalculator',
    'PriceFactors',
    'PriceInputs',
    'PriceQuote',
    'PricingRuleSet',
    'PricingRunOrchestrator',
    'RunResult',
    'build_orchestrator',
    'run_pricing',
    'CalendarService',
    'build_calendar_service',
]
