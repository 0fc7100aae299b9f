"""
Calendar and override read/write surface.

The engine owns suggested_price; this service owns override_price and
locked. Neither ever writes the other's columns.
"""

import logging

from .stores import DjangoListingPriceStore, DjangoAuditStore, KEEP_OVERRIDE

logger = logging.getLogger(__name__)


class CalendarService:

    def __init__(self, listing_prices, audits):
        self.listing_prices = listing_prices
        self.audits = audits

    def get_calendar(self, room_type_id, date_from, date_to):
        """
        Displayed prices for a date range.

        Returns:
            list of {'date', 'price', 'hasOverride', 'locked'} ordered by date,
            where price = override_price if set, else suggested_price.
        """
        days = []
        for row in self.listing_prices.list_range(room_type_id, date_from, date_to):
            has_override = row.override_price is not None
            days.append({
                'date': row.date,
                'price': row.override_price if has_override else row.suggested_price,
                'hasOverride': has_override,
                'locked': row.locked,
            })
        return days

    def set_override(self, room_type_id, day, price=KEEP_OVERRIDE, locked=False):
        """
        Set (or clear, with price=None) a manual price for one cell.

        Leaving price out keeps the stored override and only sets the lock.
        """
        row = self.listing_prices.set_override(room_type_id, day, price, locked)
        logger.info(
            "Override set: room type %s %s -> %s (locked=%s)",
            room_type_id, day, row.override_price, locked,
        )
        return row

    def get_breakdown(self, room_type_id, day):
        """
        Most recent audit row for a cell.

        Returns:
            dict with roomTypeId, date, price and breakdown, or None when
            the cell has never been priced.
        """
        audit = self.audits.latest(room_type_id, day)
        if audit is None:
            return None
        return {
            'roomTypeId': room_type_id,
            'date': day,
            'price': audit.final_price,
            'runId': audit.run_id,
            'breakdown': audit.as_breakdown(),
        }


def build_calendar_service():
    return CalendarService(DjangoListingPriceStore(), DjangoAuditStore())
