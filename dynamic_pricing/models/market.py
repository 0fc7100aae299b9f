"""
Market signal models: MarketFactor, OccupancyByDate.

Both are produced outside the engine (signal pipeline, booking aggregation)
and are read-only inputs to a pricing run.
"""

from decimal import Decimal

from django.db import models

from .core import Location, RoomType


class MarketFactor(models.Model):
    """
    Per-date demand and competitor signal.

    Multiplicative factors (demand, comp_pressure_auto, manual_multiplier,
    events_weight) default to neutral 1.0. The z-score signals are carried
    into the audit for transparency only.
    """
    location = models.ForeignKey(
        Location,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='market_factors'
    )
    date = models.DateField(db_index=True)

    demand = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True, default=Decimal('1.0000'))
    comp_pressure_auto = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True, default=Decimal('1.0000'))
    manual_multiplier = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True, default=Decimal('1.0000'))
    events_weight = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True, default=Decimal('1.0000'))

    pickup_z = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True)
    availability_z = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True)
    comp_price_z = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['date']
        verbose_name = "Market Factor"
        verbose_name_plural = "Market Factors"
        constraints = [
            models.UniqueConstraint(fields=['location', 'date'], name='unique_market_factor_per_day'),
        ]

    def __str__(self):
        scope = self.location or "Global"
        return f"{scope} {self.date}: demand {self.demand}"


class OccupancyByDate(models.Model):
    """
    Occupancy percentage per room type and date, maintained by an external
    aggregation over live bookings.
    """
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name='occupancy'
    )
    date = models.DateField()
    occupancy_pct = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['room_type', 'date']
        verbose_name = "Occupancy by Date"
        verbose_name_plural = "Occupancy by Date"
        constraints = [
            models.UniqueConstraint(fields=['room_type', 'date'], name='unique_occupancy_per_day'),
        ]

    def __str__(self):
        return f"{self.room_type} {self.date}: {self.occupancy_pct}%"
