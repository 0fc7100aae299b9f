"""
Pricing API views: rules, pricing runs, calendar, overrides, breakdown.
"""

import logging
from decimal import Decimal

from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.views.decorators.http import require_GET
from django.views.generic import View
from django.http import JsonResponse

from dynamic_pricing.models import RoomType, PricingRules
from dynamic_pricing.services import (
    PricingConfigurationError,
    PricingDataError,
    InvalidBucketSpec,
    build_calendar_service,
    run_pricing,
)
from dynamic_pricing.services.stores import DjangoPricingRulesStore, KEEP_OVERRIDE

from .mixins import PricingApiMixin, InvalidJSON

logger = logging.getLogger(__name__)

# Largest value a ListingPrice price column holds
MAX_PRICE = Decimal('99999999.99')


# =============================================================================
# RULES
# =============================================================================

class PricingRulesView(PricingApiMixin, View):
    """API: Get or upsert pricing rules for a room type."""

    def get(self, request, room_type_id):
        get_object_or_404(RoomType, pk=room_type_id)
        rules = DjangoPricingRulesStore().get(room_type_id)
        return self.json_response({'roomTypeId': room_type_id, 'rules': rules})

    def put(self, request, room_type_id):
        get_object_or_404(RoomType, pk=room_type_id)

        try:
            data = self.parse_json(request)
        except InvalidJSON as e:
            return self.error_response(str(e))

        updates = {name: data[name] for name in PricingRules.RULE_FIELDS if name in data}
        if not updates:
            return self.error_response(
                f"No valid fields to update (expected any of {', '.join(PricingRules.RULE_FIELDS)})"
            )

        try:
            rules = DjangoPricingRulesStore().upsert(room_type_id, updates)
        except InvalidBucketSpec as e:
            return self.error_response(str(e))

        return self.json_response({'ok': True, 'roomTypeId': room_type_id, 'rules': rules.as_rules()})


# =============================================================================
# PRICING RUN
# =============================================================================

class PricingRunView(PricingApiMixin, View):
    """
    API: Run pricing for a room type.

    Body: {"roomTypeId": 1, "from": "YYYY-MM-DD", "to": "YYYY-MM-DD", "locationId": null}
    Returns: {"ok": true, "priced": <count>, "runId": <id>}
    """

    def post(self, request):
        try:
            data = self.parse_json(request)
        except InvalidJSON as e:
            return self.error_response(str(e))

        room_type_id = self.parse_id(data.get('roomTypeId'))
        if room_type_id is None or not data.get('from') or not data.get('to'):
            return self.error_response('roomTypeId, from, and to dates are required')

        date_from = self.parse_date(data.get('from'))
        date_to = self.parse_date(data.get('to'))
        if date_from is None or date_to is None:
            return self.error_response('Dates must be in YYYY-MM-DD format')
        if date_from > date_to:
            return self.error_response('from must be on or before to')

        room_type = get_object_or_404(RoomType, pk=room_type_id)
        location_id = self.parse_id(data.get('locationId'))
        if location_id is None and 'locationId' not in data:
            location_id = room_type.location_id

        try:
            result = run_pricing(room_type_id, date_from, date_to, location_id)
        except PricingConfigurationError as e:
            return self.error_response(str(e))
        except PricingDataError:
            logger.exception("Pricing run data load failed (room type %s)", room_type_id)
            return self.error_response('Failed to load pricing inputs', 502)
        except Exception:
            logger.exception("Error running pricing calculation (room type %s)", room_type_id)
            return self.error_response('Failed to run pricing calculation', 500)

        return self.json_response(result.as_dict())


# =============================================================================
# CALENDAR / OVERRIDES / BREAKDOWN
# =============================================================================

class PricingCalendarView(PricingApiMixin, View):
    """
    API: Displayed prices for a date range.

    GET ?roomTypeId=..&from=YYYY-MM-DD&to=YYYY-MM-DD
    Returns: {"roomTypeId", "days": [{"date", "price", "hasOverride", "locked"}]}
    """

    def get(self, request):
        room_type_id = self.parse_id(request.GET.get('roomTypeId'))
        if room_type_id is None or not request.GET.get('from') or not request.GET.get('to'):
            return self.error_response('roomTypeId, from, and to query parameters are required')

        date_from = self.parse_date(request.GET.get('from'))
        date_to = self.parse_date(request.GET.get('to'))
        if date_from is None or date_to is None:
            return self.error_response('Dates must be in YYYY-MM-DD format')

        days = build_calendar_service().get_calendar(room_type_id, date_from, date_to)
        return self.json_response({'roomTypeId': room_type_id, 'days': days})


class PriceOverrideView(PricingApiMixin, View):
    """
    API: Set a manual price and/or lock flag for one cell.

    Body: {"roomTypeId": 1, "date": "YYYY-MM-DD", "price": 12000, "locked": true}
    Send "price": null to clear the override; omit price to change only
    the lock flag.

    Overrides are not clamped; the response flags prices outside the room
    type's min/max bounds.
    """

    def post(self, request):
        try:
            data = self.parse_json(request)
        except InvalidJSON as e:
            return self.error_response(str(e))

        room_type_id = self.parse_id(data.get('roomTypeId'))
        if room_type_id is None or not data.get('date'):
            return self.error_response('roomTypeId and date are required')

        day = self.parse_date(data.get('date'))
        if day is None:
            return self.error_response('Date must be in YYYY-MM-DD format')

        price = KEEP_OVERRIDE
        if 'price' in data:
            price = None
        if data.get('price') is not None:
            price = self.parse_decimal(data['price'], None)
            if (price is None or isinstance(data['price'], bool) or not price.is_finite()
                    or price < 0 or price > MAX_PRICE):
                return self.error_response(f'Price must be a number between 0 and {MAX_PRICE}')

        locked = self.parse_bool(data.get('locked', False))
        if locked is None:
            return self.error_response('locked must be true or false')

        room_type = get_object_or_404(RoomType, pk=room_type_id)
        row = build_calendar_service().set_override(room_type_id, day, price, locked)

        override = row.override_price
        outside_bounds = override is not None and (
            (room_type.min_price is not None and override < room_type.min_price)
            or (room_type.max_price is not None and override > room_type.max_price)
        )
        return self.json_response({
            'ok': True,
            'outsideBounds': outside_bounds,
            'roomBounds': {'min': room_type.min_price, 'max': room_type.max_price},
            'row': {
                'roomTypeId': row.room_type_id,
                'date': row.date,
                'suggestedPrice': row.suggested_price,
                'overridePrice': row.override_price,
                'locked': row.locked,
            },
        })


class PriceBreakdownView(PricingApiMixin, View):
    """
    API: Most recent audit breakdown for one cell.

    GET ?roomTypeId=..&date=YYYY-MM-DD
    Returns 404 {"error": "No pricing data found for this date"} if never priced.
    """

    def get(self, request):
        room_type_id = self.parse_id(request.GET.get('roomTypeId'))
        if room_type_id is None or not request.GET.get('date'):
            return self.error_response('roomTypeId and date query parameters are required')

        day = self.parse_date(request.GET.get('date'))
        if day is None:
            return self.error_response('Date must be in YYYY-MM-DD format')

        breakdown = build_calendar_service().get_breakdown(room_type_id, day)
        if breakdown is None:
            return self.error_response('No pricing data found for this date', 404)
        return self.json_response(breakdown)


@require_GET
def pricing_health(request):
    """Health check for the pricing API."""
    return JsonResponse({
        'status': 'OK',
        'service': 'Pricing API',
        'timestamp': timezone.now().isoformat(),
    })
