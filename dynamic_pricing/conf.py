"""
App-level settings with defaults, overridable via settings.DYNAMIC_PRICING.
"""

from django.conf import settings

DEFAULTS = {
    'MARKET_FACTOR_LIMIT': 4000,
    'DEFAULT_LENGTH_OF_STAY': 1,
    'PRICE_QUANTUM': '0.01',
    'ATOMIC_WRITES': True,
}


def pricing_setting(name):
    """Return a pricing engine setting, falling back to DEFAULTS."""
    overrides = getattr(settings, 'DYNAMIC_PRICING', {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
