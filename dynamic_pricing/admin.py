"""
Dynamic pricing admin configuration.

Supports:
- Location and room type management with pricing rules inline
- Seasonality settings (global or per location)
- Read-only views of external signals, listing prices and run history
"""

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import (
    Location, RoomType, PricingRules, SeasonalitySetting,
    MarketFactor, OccupancyByDate, ListingPrice, PricingRun, PricingAudit,
)


# =============================================================================
# LOCATION & ROOM TYPE ADMIN
# =============================================================================

@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'room_types_display', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'code']
    prepopulated_fields = {'code': ('name',)}

    def room_types_display(self, obj):
        """Display count of room types."""
        count = obj.room_types.count()
        if count > 0:
            url = reverse('admin:dynamic_pricing_roomtype_changelist') + f'?location__id__exact={obj.id}'
            return format_html('<a href="{}">{} types</a>', url, count)
        return '0'
    room_types_display.short_description = 'Room Types'


class PricingRulesInline(admin.StackedInline):
    """Pricing rules edited alongside the room type."""
    model = PricingRules
    extra = 0
    can_delete = False
    fields = ['dow_adjustments', 'lead_time_curve', 'los_discounts', 'occupancy_grid']


@admin.register(RoomType)
class RoomTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'base_price', 'price_bounds_display', 'priceable_display', 'sort_order']
    list_filter = ['location']
    search_fields = ['name']
    ordering = ['sort_order', 'name']

    fieldsets = (
        (None, {
            'fields': ('name', 'location', 'sort_order')
        }),
        ('Pricing Bounds', {
            'fields': ('base_price', 'min_price', 'max_price'),
            'description': 'All three must be positive before the engine will price this room type'
        }),
    )

    inlines = [PricingRulesInline]

    def priceable_display(self, obj):
        return obj.is_priceable()
    priceable_display.short_description = 'Priceable'
    priceable_display.boolean = True


# =============================================================================
# SEASONALITY ADMIN
# =============================================================================

@admin.register(SeasonalitySetting)
class SeasonalitySettingAdmin(admin.ModelAdmin):
    list_display = ['season_name', 'location_display', 'date_range_display', 'multiplier',
                    'year_recurring', 'is_active', 'display_order']
    list_filter = ['location', 'year_recurring', 'is_active']
    list_editable = ['multiplier', 'is_active', 'display_order']
    ordering = ['location', 'display_order']

    def location_display(self, obj):
        return obj.location or 'Global'
    location_display.short_description = 'Location'


# =============================================================================
# EXTERNAL SIGNALS (READ-ONLY)
# =============================================================================

class ReadOnlyAdmin(admin.ModelAdmin):

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(MarketFactor)
class MarketFactorAdmin(ReadOnlyAdmin):
    list_display = ['date', 'location', 'demand', 'comp_pressure_auto', 'manual_multiplier', 'events_weight']
    list_filter = ['location']
    date_hierarchy = 'date'


@admin.register(OccupancyByDate)
class OccupancyByDateAdmin(ReadOnlyAdmin):
    list_display = ['date', 'room_type', 'occupancy_pct']
    list_filter = ['room_type']
    date_hierarchy = 'date'


# =============================================================================
# LISTING PRICES & RUNS
# =============================================================================

@admin.register(ListingPrice)
class ListingPriceAdmin(admin.ModelAdmin):
    """Only override_price and locked are editable; suggested_price belongs to the engine."""
    list_display = ['date', 'room_type', 'suggested_price', 'override_price', 'locked', 'display_price']
    list_filter = ['room_type', 'locked']
    list_editable = ['override_price', 'locked']
    readonly_fields = ['room_type', 'date', 'suggested_price', 'source_run', 'updated_at']
    date_hierarchy = 'date'

    def has_add_permission(self, request):
        return False


class PricingAuditInline(admin.TabularInline):
    model = PricingAudit
    extra = 0
    can_delete = False
    fields = ['date', 'seasonality', 'dow', 'lead_time', 'los', 'demand', 'occupancy', 'unclamped', 'final_price']
    readonly_fields = fields
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(PricingRun)
class PricingRunAdmin(ReadOnlyAdmin):
    list_display = ['id', 'room_type', 'date_from', 'date_to', 'started_at', 'status_display', 'duration', 'priced_count', 'notes']
    list_filter = ['room_type']
    inlines = [PricingAuditInline]

    def status_display(self, obj):
        if obj.status == PricingRun.STATUS_FINISHED:
            return format_html('<span style="color: green;">{}</span>', obj.status)
        return format_html('<span style="color: orange;">{}</span>', obj.status)
    status_display.short_description = 'Status'


@admin.register(PricingAudit)
class PricingAuditAdmin(ReadOnlyAdmin):
    list_display = ['date', 'room_type', 'run', 'final_price', 'unclamped', 'days_out', 'created_at']
    list_filter = ['room_type']
    date_hierarchy = 'date'
