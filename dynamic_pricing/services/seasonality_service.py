"""
Seasonality Resolution
======================

Resolves the seasonality multiplier for a stay date:

1. Load active settings: global only when no location is given, otherwise
   global + that location's settings.
2. Walk them in display_order; the FIRST window containing the date wins.
3. No match (or a failed load) -> default multiplier 1.0.
"""

import logging
from datetime import date
from decimal import Decimal

from django.db import DatabaseError

logger = logging.getLogger(__name__)

NEUTRAL_SEASONALITY = Decimal('1.0')

# Four recurring seasons restored by "reset to defaults"
DEFAULT_SEASONS = [
    {'season_name': 'Winter', 'start_date': date(2024, 12, 1), 'end_date': date(2025, 2, 28), 'multiplier': Decimal('0.92'), 'year_recurring': True},
    {'season_name': 'Spring', 'start_date': date(2024, 3, 1), 'end_date': date(2024, 5, 31), 'multiplier': Decimal('0.97'), 'year_recurring': True},
    {'season_name': 'Summer', 'start_date': date(2024, 6, 1), 'end_date': date(2024, 8, 31), 'multiplier': Decimal('1.15'), 'year_recurring': True},
    {'season_name': 'Fall', 'start_date': date(2024, 9, 1), 'end_date': date(2024, 11, 30), 'multiplier': Decimal('1.05'), 'year_recurring': True},
]


def month_day(value):
    """Date as an MMDD integer (Feb 28 -> 228, Dec 1 -> 1201)."""
    return value.month * 100 + value.day


def season_contains(season, check_date):
    """
    Check if a date falls within a season window.

    Non-recurring: inclusive calendar range.
    Recurring: month/day only; a start after the end means the window
    crosses the new year (Dec 01 - Feb 28).
    """
    if not season.year_recurring:
        return season.start_date <= check_date <= season.end_date

    check = month_day(check_date)
    start = month_day(season.start_date)
    end = month_day(season.end_date)

    if start <= end:
        return start <= check <= end
    return check >= start or check <= end


class SeasonalityResolver:
    """
    Seasonality lookup over an injected settings store.

    The store must provide list_active(location_id) returning settings
    ordered by display_order.

    Usage:
        resolver = SeasonalityResolver(DjangoSeasonalityStore())
        resolver.resolve(date(2024, 12, 15), location_id=3)  # -> Decimal('0.92')
    """

    def __init__(self, store):
        self.store = store

    def load(self, location_id=None):
        """Active settings for a location, or [] if the store fails."""
        try:
            return list(self.store.list_active(location_id))
        except DatabaseError:
            logger.exception("Failed to load seasonality settings (location=%s)", location_id)
            return []

    def resolve(self, check_date, location_id=None, default=NEUTRAL_SEASONALITY):
        """Multiplier for a date. Never raises; failures degrade to `default`."""
        try:
            return self.resolve_from(self.load(location_id), check_date, default=default)
        except Exception:
            logger.exception("Error calculating seasonality factor for %s", check_date)
            return default

    @staticmethod
    def resolve_from(settings, check_date, default=NEUTRAL_SEASONALITY):
        """Resolve against an already-loaded, ordered list of settings."""
        for season in settings:
            if season_contains(season, check_date):
                return Decimal(str(season.multiplier)) if season.multiplier else default
        return default
