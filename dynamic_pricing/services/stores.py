"""
Data access for the pricing engine.

Each store implements one narrow read/write contract used by the
orchestrator and the calendar service. Tests swap these for in-memory
fakes; production wires the Django ORM versions below.
"""

import logging
from datetime import datetime, time

from dateutil.rrule import rrule, DAILY
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from dynamic_pricing.conf import pricing_setting
from dynamic_pricing.models import (
    RoomType, PricingRules, SeasonalitySetting, MarketFactor,
    OccupancyByDate, ListingPrice, PricingAudit, PricingRun,
)

logger = logging.getLogger(__name__)

# Passed as an override price to leave the stored override untouched
KEEP_OVERRIDE = object()


def iter_dates(date_from, date_to):
    """Every calendar date in [date_from, date_to], inclusive."""
    start = datetime.combine(date_from, time.min)
    until = datetime.combine(date_to, time.min)
    for dt in rrule(DAILY, dtstart=start, until=until):
        yield dt.date()


def location_filter(location_id):
    """Global rows only when no location is given, else global + matching."""
    if location_id is None:
        return Q(location__isnull=True)
    return Q(location__isnull=True) | Q(location_id=location_id)


# =============================================================================
# READ CONTRACTS
# =============================================================================

class DjangoRoomTypeStore:

    def get(self, room_type_id):
        return RoomType.objects.get(pk=room_type_id)


class DjangoPricingRulesStore:

    def get(self, room_type_id):
        """Rules dict for a room type, {} if none configured."""
        rules = PricingRules.objects.filter(room_type_id=room_type_id).first()
        if rules is None:
            return {}
        return rules.as_rules()

    def upsert(self, room_type_id, data):
        """
        Update the given rule fields, creating the row if needed.

        Raises:
            InvalidBucketSpec: if a submitted bucket table is malformed.
        """
        rules, _ = PricingRules.objects.get_or_create(room_type_id=room_type_id)
        for name in PricingRules.RULE_FIELDS:
            if name in data:
                setattr(rules, name, data[name])
        rules.save()
        return rules


class DjangoSeasonalityStore:

    def list_active(self, location_id=None):
        return (
            SeasonalitySetting.objects
            .filter(location_filter(location_id), is_active=True)
            .order_by('display_order', 'id')
        )

    def list_for_location(self, location_id=None):
        """All settings owned by exactly this location (None = global)."""
        if location_id is None:
            qs = SeasonalitySetting.objects.filter(location__isnull=True)
        else:
            qs = SeasonalitySetting.objects.filter(location_id=location_id)
        return qs.order_by('display_order', 'id')

    @transaction.atomic
    def replace(self, location_id, settings):
        """Replace a location's settings with `settings` (list of field dicts)."""
        self.list_for_location(location_id).delete()
        created = []
        for index, data in enumerate(settings):
            created.append(SeasonalitySetting.objects.create(
                location_id=location_id,
                season_name=data['season_name'],
                start_date=data['start_date'],
                end_date=data['end_date'],
                multiplier=data['multiplier'],
                year_recurring=data.get('year_recurring', False),
                is_active=data.get('is_active', True),
                display_order=data.get('display_order', index),
            ))
        logger.info("Replaced seasonality settings (location=%s): %d rows", location_id, len(created))
        return created


class DjangoMarketFactorStore:

    def list_range(self, date_from, date_to, location_id=None):
        """
        Market factors keyed by date.

        When both a global and a location row exist for one date, the
        location row wins.
        """
        limit = pricing_setting('MARKET_FACTOR_LIMIT')
        rows = (
            MarketFactor.objects
            .filter(location_filter(location_id), date__gte=date_from, date__lte=date_to)
            .order_by('date', 'location_id')[:limit]
        )
        by_date = {}
        for row in rows:
            current = by_date.get(row.date)
            if current is None or (current.location_id is None and row.location_id is not None):
                by_date[row.date] = row
        return by_date


class DjangoOccupancyProvider:

    def occupancy_by_date(self, room_type_id, date_from, date_to):
        """
        One (date, occupancy_pct) pair per date in the range.

        Dates without an occupancy row report 0%.
        """
        stored = dict(
            OccupancyByDate.objects
            .filter(room_type_id=room_type_id, date__gte=date_from, date__lte=date_to)
            .values_list('date', 'occupancy_pct')
        )
        return [(day, stored.get(day, 0)) for day in iter_dates(date_from, date_to)]


# =============================================================================
# WRITE CONTRACTS
# =============================================================================

class DjangoListingPriceStore:

    def upsert_suggested(self, rows):
        """
        Bulk upsert suggested prices keyed by (room_type, date).

        Only suggested_price, source_run and updated_at are written on
        conflict; override_price and locked are left as they are.
        """
        if not rows:
            return 0
        now = timezone.now()
        objs = [
            ListingPrice(
                room_type_id=row['room_type_id'],
                date=row['date'],
                suggested_price=row['suggested_price'],
                source_run_id=row.get('source_run_id'),
                updated_at=now,
            )
            for row in rows
        ]
        ListingPrice.objects.bulk_create(
            objs,
            update_conflicts=True,
            unique_fields=['room_type', 'date'],
            update_fields=['suggested_price', 'source_run', 'updated_at'],
        )
        return len(objs)

    def list_range(self, room_type_id, date_from, date_to):
        return (
            ListingPrice.objects
            .filter(room_type_id=room_type_id, date__gte=date_from, date__lte=date_to)
            .order_by('date')
        )

    def set_override(self, room_type_id, day, price, locked):
        """
        Write override_price/locked for one cell; suggested_price is untouched.

        price=KEEP_OVERRIDE updates only the lock flag.
        """
        defaults = {'locked': locked}
        if price is not KEEP_OVERRIDE:
            defaults['override_price'] = price
        row, _ = ListingPrice.objects.update_or_create(
            room_type_id=room_type_id,
            date=day,
            defaults=defaults,
        )
        return row


class DjangoAuditStore:

    def bulk_insert(self, rows):
        if not rows:
            return 0
        PricingAudit.objects.bulk_create([PricingAudit(**row) for row in rows])
        return len(rows)

    def latest(self, room_type_id, day):
        return (
            PricingAudit.objects
            .filter(room_type_id=room_type_id, date=day)
            .order_by('-created_at', '-id')
            .first()
        )


class DjangoRunStore:

    def start(self, room_type_id, date_from, date_to, location_id, started_at):
        run = PricingRun.objects.create(
            room_type_id=room_type_id,
            location_id=location_id,
            date_from=date_from,
            date_to=date_to,
            started_at=started_at,
        )
        return run.pk

    def finish(self, run_id, finished_at, priced_count, notes):
        PricingRun.objects.filter(pk=run_id).update(
            finished_at=finished_at,
            priced_count=priced_count,
            notes=notes,
        )
