"""
Run bookkeeping models: PricingRun, PricingAudit.
"""

from django.db import models

from .core import Location, RoomType


class PricingRun(models.Model):
    """
    One invocation of the pricing run orchestrator.

    Created when the run starts; finished_at and notes are filled in when it
    completes. A run that failed part-way keeps finished_at = NULL.
    """
    STATUS_RUNNING = 'running'
    STATUS_FINISHED = 'finished'

    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name='pricing_runs'
    )
    location = models.ForeignKey(
        Location,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='pricing_runs'
    )
    date_from = models.DateField()
    date_to = models.DateField()

    started_at = models.DateTimeField()
    finished_at = models.DateTimeField(null=True, blank=True)
    priced_count = models.PositiveIntegerField(default=0)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['-started_at']
        verbose_name = "Pricing Run"
        verbose_name_plural = "Pricing Runs"

    def __str__(self):
        return f"Run #{self.pk} {self.room_type} {self.date_from} - {self.date_to} ({self.status})"

    @property
    def status(self):
        return self.STATUS_FINISHED if self.finished_at else self.STATUS_RUNNING

    @property
    def duration(self):
        if not self.finished_at:
            return None
        return self.finished_at - self.started_at


class PricingAudit(models.Model):
    """
    Snapshot of every factor that produced one suggested price.

    Append-only: one row per date per run.
    """
    run = models.ForeignKey(
        PricingRun,
        on_delete=models.CASCADE,
        related_name='audits'
    )
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name='pricing_audits'
    )
    date = models.DateField()

    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    seasonality = models.DecimalField(max_digits=8, decimal_places=4)
    dow = models.DecimalField(max_digits=8, decimal_places=4)
    lead_time = models.DecimalField(max_digits=8, decimal_places=4)
    los = models.DecimalField(max_digits=8, decimal_places=4)
    demand = models.DecimalField(max_digits=8, decimal_places=4)
    comp_pressure = models.DecimalField(max_digits=8, decimal_places=4)
    manual_multiplier = models.DecimalField(max_digits=8, decimal_places=4)
    events_weight = models.DecimalField(max_digits=8, decimal_places=4)
    occupancy = models.DecimalField(max_digits=8, decimal_places=4)
    occupancy_pct = models.DecimalField(max_digits=5, decimal_places=2)
    occupancy_percent = models.DecimalField(max_digits=8, decimal_places=2)
    orphan = models.DecimalField(max_digits=8, decimal_places=4)
    unclamped = models.DecimalField(max_digits=14, decimal_places=4)
    min_price = models.DecimalField(max_digits=10, decimal_places=2)
    max_price = models.DecimalField(max_digits=10, decimal_places=2)
    final_price = models.DecimalField(max_digits=10, decimal_places=2)
    days_out = models.PositiveIntegerField()

    pickup_signal = models.DecimalField(max_digits=8, decimal_places=4, default=0)
    availability_signal = models.DecimalField(max_digits=8, decimal_places=4, default=0)
    comp_price_signal = models.DecimalField(max_digits=8, decimal_places=4, default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = "Pricing Audit"
        verbose_name_plural = "Pricing Audits"
        indexes = [
            models.Index(fields=['room_type', 'date', '-created_at'], name='audit_cell_latest_idx'),
        ]

    def __str__(self):
        return f"{self.room_type} {self.date}: {self.final_price} (run #{self.run_id})"

    def as_breakdown(self):
        """Breakdown dict in the shape returned by the calendar read API."""
        return {
            'basePrice': self.base_price,
            'seasonality': self.seasonality,
            'dow': self.dow,
            'leadTime': self.lead_time,
            'los': self.los,
            'demand': self.demand,
            'compPressure': self.comp_pressure,
            'manualMultiplier': self.manual_multiplier,
            'eventsWeight': self.events_weight,
            'occupancy': self.occupancy,
            'occupancyPct': self.occupancy_pct,
            'occupancyPercent': self.occupancy_percent,
            'orphan': self.orphan,
            'unclamped': self.unclamped,
            'minPrice': self.min_price,
            'maxPrice': self.max_price,
            'daysOut': self.days_out,
            'pickupSignal': self.pickup_signal,
            'availabilitySignal': self.availability_signal,
            'compPriceSignal': self.comp_price_signal,
        }
