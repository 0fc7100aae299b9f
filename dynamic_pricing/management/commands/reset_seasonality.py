"""
Management command to restore the default recurring seasons.

Usage:
    python manage.py reset_seasonality            # global seasons
    python manage.py reset_seasonality --location 2
"""

from django.core.management.base import BaseCommand, CommandError

from dynamic_pricing.models import Location
from dynamic_pricing.services import DEFAULT_SEASONS
from dynamic_pricing.services.stores import DjangoSeasonalityStore


class Command(BaseCommand):
    help = 'Replace seasonality settings with the default Winter/Spring/Summer/Fall seasons'

    def add_arguments(self, parser):
        parser.add_argument(
            '--location',
            type=int,
            help='Location id; omit for the global seasons'
        )

    def handle(self, *args, **options):
        location_id = options['location']
        if location_id is not None and not Location.objects.filter(pk=location_id).exists():
            raise CommandError(f'Location {location_id} not found')

        created = DjangoSeasonalityStore().replace(location_id, DEFAULT_SEASONS)

        scope = f'location {location_id}' if location_id else 'global'
        for setting in created:
            self.stdout.write(f"  {setting.season_name}: {setting.date_range_display()} x{setting.multiplier}")

        self.stdout.write(self.style.SUCCESS(
            f"\n✓ Reset {len(created)} {scope} seasons"
        ))
