"""
Core models: Location, RoomType.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


# =============================================================================
# LOCATION & ROOM TYPE
# =============================================================================

class Location(models.Model):
    """
    A market/area that groups properties.

    Seasonality settings and market factors are either global
    (location is NULL) or scoped to one location.

    Example: "Kyoto Central", "Okinawa Beachfront"
    """
    name = models.CharField(
        max_length=200,
        help_text="Location name (e.g., 'Kyoto Central')"
    )
    code = models.SlugField(
        max_length=50,
        unique=True,
        help_text="URL-friendly code (e.g., 'kyoto-central')"
    )
    is_active = models.BooleanField(default=True)

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Location"
        verbose_name_plural = "Locations"

    def __str__(self):
        return self.name


class RoomType(models.Model):
    """
    Sellable inventory category.

    The engine reads base_price, min_price and max_price; all three must be
    set and positive before a pricing run is allowed. They are nullable so a
    half-configured room type can exist in admin without breaking saves.
    """
    location = models.ForeignKey(
        Location,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='room_types',
        help_text="Location used for seasonality and market factors"
    )
    name = models.CharField(max_length=100, help_text="e.g., Standard Twin, Family Suite")

    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text="Nightly base price before any factor"
    )
    min_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text="Lowest price the engine may suggest"
    )
    max_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text="Highest price the engine may suggest"
    )

    sort_order = models.PositiveIntegerField(default=0)

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'name']
        verbose_name = "Room Type"
        verbose_name_plural = "Room Types"

    def __str__(self):
        return self.name

    def price_bounds_display(self):
        """Display formatted min/max bounds."""
        if self.min_price is None or self.max_price is None:
            return "Not set"
        return f"{self.min_price} - {self.max_price}"

    def is_priceable(self):
        """True when base/min/max are all present and positive."""
        return all(
            value is not None and value > 0
            for value in (self.base_price, self.min_price, self.max_price)
        )
