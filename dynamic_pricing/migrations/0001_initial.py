import decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Location name (e.g., 'Kyoto Central')", max_length=200)),
                ('code', models.SlugField(help_text="URL-friendly code (e.g., 'kyoto-central')", unique=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Location',
                'verbose_name_plural': 'Locations',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='RoomType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='e.g., Standard Twin, Family Suite', max_length=100)),
                ('base_price', models.DecimalField(blank=True, decimal_places=2, help_text='Nightly base price before any factor', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.01'))])),
                ('min_price', models.DecimalField(blank=True, decimal_places=2, help_text='Lowest price the engine may suggest', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.01'))])),
                ('max_price', models.DecimalField(blank=True, decimal_places=2, help_text='Highest price the engine may suggest', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.01'))])),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('location', models.ForeignKey(blank=True, help_text='Location used for seasonality and market factors', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='room_types', to='dynamic_pricing.location')),
            ],
            options={
                'verbose_name': 'Room Type',
                'verbose_name_plural': 'Room Types',
                'ordering': ['sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='PricingRun',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date_from', models.DateField()),
                ('date_to', models.DateField()),
                ('started_at', models.DateTimeField()),
                ('finished_at', models.DateTimeField(blank=True, null=True)),
                ('priced_count', models.PositiveIntegerField(default=0)),
                ('notes', models.TextField(blank=True)),
                ('location', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='pricing_runs', to='dynamic_pricing.location')),
                ('room_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pricing_runs', to='dynamic_pricing.roomtype')),
            ],
            options={
                'verbose_name': 'Pricing Run',
                'verbose_name_plural': 'Pricing Runs',
                'ordering': ['-started_at'],
            },
        ),
        migrations.CreateModel(
            name='ListingPrice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('suggested_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('override_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('locked', models.BooleanField(default=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('room_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='listing_prices', to='dynamic_pricing.roomtype')),
                ('source_run', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='listing_prices', to='dynamic_pricing.pricingrun')),
            ],
            options={
                'verbose_name': 'Listing Price',
                'verbose_name_plural': 'Listing Prices',
                'ordering': ['room_type', 'date'],
                'constraints': [models.UniqueConstraint(fields=('room_type', 'date'), name='unique_listing_price_cell')],
            },
        ),
        migrations.CreateModel(
            name='MarketFactor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(db_index=True)),
                ('demand', models.DecimalField(blank=True, decimal_places=4, default=decimal.Decimal('1.0000'), max_digits=8, null=True)),
                ('comp_pressure_auto', models.DecimalField(blank=True, decimal_places=4, default=decimal.Decimal('1.0000'), max_digits=8, null=True)),
                ('manual_multiplier', models.DecimalField(blank=True, decimal_places=4, default=decimal.Decimal('1.0000'), max_digits=8, null=True)),
                ('events_weight', models.DecimalField(blank=True, decimal_places=4, default=decimal.Decimal('1.0000'), max_digits=8, null=True)),
                ('pickup_z', models.DecimalField(blank=True, decimal_places=4, max_digits=8, null=True)),
                ('availability_z', models.DecimalField(blank=True, decimal_places=4, max_digits=8, null=True)),
                ('comp_price_z', models.DecimalField(blank=True, decimal_places=4, max_digits=8, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('location', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='market_factors', to='dynamic_pricing.location')),
            ],
            options={
                'verbose_name': 'Market Factor',
                'verbose_name_plural': 'Market Factors',
                'ordering': ['date'],
                'constraints': [models.UniqueConstraint(fields=('location', 'date'), name='unique_market_factor_per_day')],
            },
        ),
        migrations.CreateModel(
            name='OccupancyByDate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('occupancy_pct', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), max_digits=5)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('room_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='occupancy', to='dynamic_pricing.roomtype')),
            ],
            options={
                'verbose_name': 'Occupancy by Date',
                'verbose_name_plural': 'Occupancy by Date',
                'ordering': ['room_type', 'date'],
                'constraints': [models.UniqueConstraint(fields=('room_type', 'date'), name='unique_occupancy_per_day')],
            },
        ),
        migrations.CreateModel(
            name='PricingAudit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('base_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('seasonality', models.DecimalField(decimal_places=4, max_digits=8)),
                ('dow', models.DecimalField(decimal_places=4, max_digits=8)),
                ('lead_time', models.DecimalField(decimal_places=4, max_digits=8)),
                ('los', models.DecimalField(decimal_places=4, max_digits=8)),
                ('demand', models.DecimalField(decimal_places=4, max_digits=8)),
                ('comp_pressure', models.DecimalField(decimal_places=4, max_digits=8)),
                ('manual_multiplier', models.DecimalField(decimal_places=4, max_digits=8)),
                ('events_weight', models.DecimalField(decimal_places=4, max_digits=8)),
                ('occupancy', models.DecimalField(decimal_places=4, max_digits=8)),
                ('occupancy_pct', models.DecimalField(decimal_places=2, max_digits=5)),
                ('occupancy_percent', models.DecimalField(decimal_places=2, max_digits=8)),
                ('orphan', models.DecimalField(decimal_places=4, max_digits=8)),
                ('unclamped', models.DecimalField(decimal_places=4, max_digits=14)),
                ('min_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('max_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('final_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('days_out', models.PositiveIntegerField()),
                ('pickup_signal', models.DecimalField(decimal_places=4, default=0, max_digits=8)),
                ('availability_signal', models.DecimalField(decimal_places=4, default=0, max_digits=8)),
                ('comp_price_signal', models.DecimalField(decimal_places=4, default=0, max_digits=8)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('room_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pricing_audits', to='dynamic_pricing.roomtype')),
                ('run', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='audits', to='dynamic_pricing.pricingrun')),
            ],
            options={
                'verbose_name': 'Pricing Audit',
                'verbose_name_plural': 'Pricing Audits',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['room_type', 'date', '-created_at'], name='audit_cell_latest_idx')],
            },
        ),
        migrations.CreateModel(
            name='PricingRules',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('dow_adjustments', models.JSONField(blank=True, default=dict)),
                ('lead_time_curve', models.JSONField(blank=True, default=list)),
                ('los_discounts', models.JSONField(blank=True, default=list)),
                ('occupancy_grid', models.JSONField(blank=True, default=dict)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('room_type', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='pricing_rules', to='dynamic_pricing.roomtype')),
            ],
            options={
                'verbose_name': 'Pricing Rules',
                'verbose_name_plural': 'Pricing Rules',
            },
        ),
        migrations.CreateModel(
            name='SeasonalitySetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('season_name', models.CharField(help_text='e.g., Winter, Cherry Blossom', max_length=100)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('multiplier', models.DecimalField(decimal_places=3, default=decimal.Decimal('1.000'), help_text='Multiplier applied to base price (e.g., 1.15)', max_digits=6, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.001'))])),
                ('year_recurring', models.BooleanField(default=False, help_text='Match on month/day every year, ignoring the year part')),
                ('is_active', models.BooleanField(default=True)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('location', models.ForeignKey(blank=True, help_text='Leave empty for a global season', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='seasonality_settings', to='dynamic_pricing.location')),
            ],
            options={
                'verbose_name': 'Seasonality Setting',
                'verbose_name_plural': 'Seasonality Settings',
                'ordering': ['display_order', 'id'],
            },
        ),
    ]
