"""
Seasonality API views: list, replace and reset season windows per location.

A missing location id (or the literal "null") addresses the global seasons.
"""

import logging
from decimal import Decimal

from django.shortcuts import get_object_or_404
from django.views.generic import View

from dynamic_pricing.models import Location
from dynamic_pricing.services import DEFAULT_SEASONS
from dynamic_pricing.services.stores import DjangoSeasonalityStore

from .mixins import PricingApiMixin, InvalidJSON

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('season_name', 'start_date', 'end_date', 'multiplier')
# PositiveIntegerField upper bound
MAX_DISPLAY_ORDER = 2147483647
MAX_SEASON_MULTIPLIER = Decimal('100')


def serialize_setting(setting):
    return {
        'id': setting.pk,
        'location_id': setting.location_id,
        'season_name': setting.season_name,
        'start_date': setting.start_date,
        'end_date': setting.end_date,
        'multiplier': setting.multiplier,
        'year_recurring': setting.year_recurring,
        'is_active': setting.is_active,
        'display_order': setting.display_order,
    }


class SeasonalityMixin(PricingApiMixin):

    def get_location_id(self):
        location_id = self.parse_id(self.kwargs.get('location_id'))
        if location_id is not None:
            get_object_or_404(Location, pk=location_id)
        return location_id

    def validate_settings(self, settings):
        """
        Validate and coerce submitted settings.

        Returns:
            (cleaned list, None) or (None, error message)
        """
        if not isinstance(settings, list):
            return None, 'settings must be an array of seasonality configurations'

        cleaned = []
        for setting in settings:
            if not isinstance(setting, dict) or not all(setting.get(name) for name in REQUIRED_FIELDS):
                return None, 'Each setting must have season_name, start_date, end_date, and multiplier'

            multiplier = self.parse_decimal(setting['multiplier'], None)
            if multiplier is None or not multiplier.is_finite() or multiplier <= 0:
                return None, 'multiplier must be greater than 0'
            if multiplier > MAX_SEASON_MULTIPLIER:
                return None, f'multiplier must be at most {MAX_SEASON_MULTIPLIER}'

            start_date = self.parse_date(str(setting['start_date']))
            end_date = self.parse_date(str(setting['end_date']))
            if start_date is None or end_date is None:
                return None, 'start_date and end_date must be valid dates (YYYY-MM-DD format)'

            year_recurring = self.parse_bool(setting.get('year_recurring', False))
            is_active = self.parse_bool(setting.get('is_active', True))
            if year_recurring is None or is_active is None:
                return None, 'year_recurring and is_active must be true or false'

            display_order = self.parse_non_negative_int(setting.get('display_order', len(cleaned)))
            if display_order is None or display_order > MAX_DISPLAY_ORDER:
                return None, f'display_order must be an integer between 0 and {MAX_DISPLAY_ORDER}'

            if not year_recurring and start_date > end_date:
                return None, f"{setting['season_name']}: start_date must be on or before end_date"

            cleaned.append({
                'season_name': str(setting['season_name']).strip(),
                'start_date': start_date,
                'end_date': end_date,
                'multiplier': multiplier.quantize(Decimal('0.001')),
                'year_recurring': year_recurring,
                'is_active': is_active,
                'display_order': display_order,
            })
        return cleaned, None


class SeasonalitySettingsView(SeasonalityMixin, View):
    """API: List (GET) or replace (PUT {"settings": [...]}) a location's seasons."""

    def get(self, request, location_id=None):
        location_id = self.get_location_id()
        settings = DjangoSeasonalityStore().list_for_location(location_id)
        return self.json_response([serialize_setting(s) for s in settings])

    def put(self, request, location_id=None):
        location_id = self.get_location_id()

        try:
            data = self.parse_json(request)
        except InvalidJSON as e:
            return self.error_response(str(e))

        cleaned, error = self.validate_settings(data.get('settings'))
        if error:
            return self.error_response(error)

        created = DjangoSeasonalityStore().replace(location_id, cleaned)
        return self.json_response([serialize_setting(s) for s in created])


class SeasonalityResetView(SeasonalityMixin, View):
    """API: Restore the four default recurring seasons for a location."""

    def post(self, request, location_id=None):
        location_id = self.get_location_id()
        cleaned, error = self.validate_settings(DEFAULT_SEASONS)
        if error:
            logger.error("Default seasons failed validation: %s", error)
            return self.error_response(error, 500)

        created = DjangoSeasonalityStore().replace(location_id, cleaned)
        return self.json_response({'success': True, 'settings': [serialize_setting(s) for s in created]})
