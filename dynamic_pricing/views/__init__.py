"""
Views package.

Re-exports all views so URL modules can import from one place:
    from dynamic_pricing.views import PricingRunView, etc.
"""

# Mixins
from .mixins import PricingApiMixin

# Pricing views
from .pricing import (
    PricingRulesView,
    PricingRunView,
    PricingCalendarView,
    PriceOverrideView,
    PriceBreakdownView,
    pricing_health,
)

# Seasonality views
from .seasonality import (
    SeasonalitySettingsView,
    SeasonalityResetView,
)
