"""
Pricing models: PricingRules, SeasonalitySetting, ListingPrice.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from .core import Location, RoomType


# =============================================================================
# RULES
# =============================================================================

class PricingRules(models.Model):
    """
    Per-room-type tunables.

    dow_adjustments:  {"Fri": 1.1, "Sat": 1.2}
    lead_time_curve:  [{"range": "0-30", "value": 1.1}, {"range": "61+", "value": 0.9}]
    los_discounts:    [{"range": "7+", "value": 0.9}]
    occupancy_grid:   {"mode": "percent",
                       "leadBuckets": [{"range": "0-30",
                                        "value": [{"range": "80-100", "value": 20}]}]}

    Bucket tables may be submitted as plain mappings ({"0-30": 1.1}); save()
    normalizes them to the ordered list form.
    """
    room_type = models.OneToOneField(
        RoomType,
        on_delete=models.CASCADE,
        related_name='pricing_rules'
    )
    dow_adjustments = models.JSONField(default=dict, blank=True)
    lead_time_curve = models.JSONField(default=list, blank=True)
    los_discounts = models.JSONField(default=list, blank=True)
    occupancy_grid = models.JSONField(default=dict, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    RULE_FIELDS = ('dow_adjustments', 'lead_time_curve', 'los_discounts', 'occupancy_grid')

    class Meta:
        verbose_name = "Pricing Rules"
        verbose_name_plural = "Pricing Rules"

    def __str__(self):
        return f"Rules for {self.room_type}"

    def normalize(self):
        """Validate and normalize bucket specs. Raises InvalidBucketSpec."""
        from dynamic_pricing.services.buckets import (
            MULTIPLIER_LIMITS, normalize_bucket_spec, normalize_occupancy_grid, to_decimal,
        )
        from dynamic_pricing.services.exceptions import InvalidBucketSpec
        from dynamic_pricing.services.pricing_service import WEEKDAY_KEYS

        dow = {}
        for key, value in (self.dow_adjustments or {}).items():
            if key not in WEEKDAY_KEYS:
                raise InvalidBucketSpec(f"Unknown weekday '{key}' (expected one of {', '.join(WEEKDAY_KEYS)})")
            parsed = to_decimal(value)
            if parsed is None:
                raise InvalidBucketSpec(f"Weekday '{key}' has a non-numeric value: {value!r}")
            MULTIPLIER_LIMITS.check(f"Weekday '{key}'", parsed)
            dow[key] = float(parsed)
        self.dow_adjustments = dow
        self.lead_time_curve = normalize_bucket_spec(self.lead_time_curve)
        self.los_discounts = normalize_bucket_spec(self.los_discounts)
        self.occupancy_grid = normalize_occupancy_grid(self.occupancy_grid)

    def save(self, *args, **kwargs):
        self.normalize()
        super().save(*args, **kwargs)

    def as_rules(self):
        """Plain dict consumed by the pricing calculator."""
        return {field: getattr(self, field) for field in self.RULE_FIELDS}


# =============================================================================
# SEASONALITY
# =============================================================================

class SeasonalitySetting(models.Model):
    """
    Named season window with a rate multiplier.

    Non-recurring seasons match the literal date range. Recurring seasons
    match on month/day only and may wrap the new year:
        Winter: Dec 01 - Feb 28, recurring, x0.92

    The resolver takes the first active match by display_order.
    """
    location = models.ForeignKey(
        Location,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='seasonality_settings',
        help_text="Leave empty for a global season"
    )
    season_name = models.CharField(max_length=100, help_text="e.g., Winter, Cherry Blossom")
    start_date = models.DateField()
    end_date = models.DateField()
    multiplier = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        default=Decimal('1.000'),
        validators=[MinValueValidator(Decimal('0.001'))],
        help_text="Multiplier applied to base price (e.g., 1.15)"
    )
    year_recurring = models.BooleanField(
        default=False,
        help_text="Match on month/day every year, ignoring the year part"
    )
    is_active = models.BooleanField(default=True)
    display_order = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['display_order', 'id']
        verbose_name = "Seasonality Setting"
        verbose_name_plural = "Seasonality Settings"

    def __str__(self):
        recurring = " (yearly)" if self.year_recurring else ""
        return f"{self.season_name} x{self.multiplier}{recurring}"

    def date_range_display(self):
        """Display formatted date range."""
        if self.year_recurring:
            return f"{self.start_date.strftime('%b %d')} - {self.end_date.strftime('%b %d')}"
        return f"{self.start_date.strftime('%b %d, %Y')} - {self.end_date.strftime('%b %d, %Y')}"

    def contains_date(self, check_date):
        from dynamic_pricing.services.seasonality_service import season_contains
        return season_contains(self, check_date)


# =============================================================================
# LISTING PRICES
# =============================================================================

class ListingPrice(models.Model):
    """
    Persisted price cell for a room type and date.

    suggested_price is owned by the pricing engine and rewritten on every run.
    override_price and locked are owned by humans (override API / admin) and
    are never written by a run.

    Displayed price = override_price if set, else suggested_price.
    """
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name='listing_prices'
    )
    date = models.DateField()

    suggested_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    override_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    locked = models.BooleanField(default=False)

    source_run = models.ForeignKey(
        'PricingRun',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='listing_prices'
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['room_type', 'date']
        verbose_name = "Listing Price"
        verbose_name_plural = "Listing Prices"
        constraints = [
            models.UniqueConstraint(fields=['room_type', 'date'], name='unique_listing_price_cell'),
        ]

    def __str__(self):
        return f"{self.room_type} {self.date}: {self.display_price}"

    @property
    def display_price(self):
        if self.override_price is not None:
            return self.override_price
        return self.suggested_price

    @property
    def has_override(self):
        return self.override_price is not None
