"""
Management command to run the pricing engine for a room type.

Usage:
    python manage.py run_pricing 3 2026-11-01 2026-11-30
    python manage.py run_pricing 3 2026-11-01 --days 90
    python manage.py run_pricing 3 2026-11-01 2026-11-30 --location 2
    python manage.py run_pricing 3 2026-11-01 2026-11-30 --global
"""

from datetime import date

from dateutil.relativedelta import relativedelta
from django.core.management.base import BaseCommand, CommandError

from dynamic_pricing.models import RoomType
from dynamic_pricing.services import PricingConfigurationError, PricingDataError, run_pricing


def parse_date(value):
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise CommandError(f'Invalid date "{value}" (expected YYYY-MM-DD)')


class Command(BaseCommand):
    help = 'Compute suggested nightly prices for a room type over a date range'

    def add_arguments(self, parser):
        parser.add_argument('room_type_id', type=int, help='Room type to price')
        parser.add_argument('date_from', type=str, help='First stay date (YYYY-MM-DD)')
        parser.add_argument('date_to', type=str, nargs='?', help='Last stay date (YYYY-MM-DD), inclusive')
        parser.add_argument(
            '--days',
            type=int,
            help='Price this many days starting at date_from instead of giving date_to'
        )
        parser.add_argument(
            '--location',
            type=int,
            help="Location for seasonality and market factors (defaults to the room type's)"
        )
        parser.add_argument(
            '--global',
            action='store_true',
            dest='global_only',
            help='Use only global seasonality and market factors'
        )

    def handle(self, *args, **options):
        try:
            room_type = RoomType.objects.get(pk=options['room_type_id'])
        except RoomType.DoesNotExist:
            raise CommandError(f"Room type {options['room_type_id']} not found")

        date_from = parse_date(options['date_from'])
        if options['date_to']:
            date_to = parse_date(options['date_to'])
        elif options['days']:
            if options['days'] < 1:
                raise CommandError('--days must be at least 1')
            date_to = date_from + relativedelta(days=options['days'] - 1)
        else:
            raise CommandError('Give either date_to or --days')

        if date_from > date_to:
            raise CommandError(f'{date_from} is after {date_to}')

        if options['global_only']:
            location_id = None
        else:
            location_id = options['location'] or room_type.location_id

        self.stdout.write(f'Pricing {room_type.name}: {date_from} to {date_to}')

        try:
            result = run_pricing(room_type.pk, date_from, date_to, location_id)
        except (PricingConfigurationError, PricingDataError) as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS(
            f"✓ Priced {result.priced} dates (run #{result.run_id})"
        ))
