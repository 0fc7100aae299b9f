"""
View mixins: PricingApiMixin.
"""

import json
import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt

logger = logging.getLogger(__name__)

DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
BOOL_STRINGS = {'true': True, '1': True, 'false': False, '0': False}


class InvalidJSON(ValueError):
    pass


def jsonable(value):
    """Convert Decimals to numbers and dates to YYYY-MM-DD, recursively."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(item) for item in value]
    return value


class PricingApiMixin:
    """Base mixin for pricing JSON API views."""

    @method_decorator(csrf_exempt)
    def dispatch(self, request, *args, **kwargs):
        return super().dispatch(request, *args, **kwargs)

    def json_response(self, data, status=200):
        """Return JSON response."""
        return JsonResponse(jsonable(data), status=status, safe=False)

    def error_response(self, message, status=400):
        """Return error JSON response."""
        return JsonResponse({'success': False, 'error': message}, status=status)

    def parse_json(self, request):
        """Parse request body; raises InvalidJSON."""
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except ValueError as e:
            logger.warning("Rejected request body on %s: %s", request.path, e)
            raise InvalidJSON('Invalid JSON')
        if not isinstance(data, dict):
            raise InvalidJSON('Request body must be a JSON object')
        return data

    def parse_decimal(self, value, default=Decimal('0.00')):
        """Safely parse decimal from string."""
        if value is None or value == '':
            return default
        try:
            return Decimal(str(value))
        except (InvalidOperation, ValueError):
            return default

    def parse_date(self, value):
        """Parse date from string (YYYY-MM-DD)."""
        if not value or not DATE_RE.match(str(value)):
            return None
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None

    def parse_bool(self, value):
        """Parse a JSON boolean; also accepts 0/1 and "true"/"false". None if invalid."""
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str) and value.strip().lower() in BOOL_STRINGS:
            return BOOL_STRINGS[value.strip().lower()]
        return None

    def parse_non_negative_int(self, value):
        """Parse a non-negative integer (int or digit string). None if invalid."""
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value if value >= 0 else None
        if isinstance(value, str) and value.strip().isdecimal():
            return int(value.strip())
        return None

    def parse_id(self, value):
        """Parse an integer id; 'null', '' and None mean no id."""
        if value in (None, '', 'null'):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
