"""Pricing URL patterns: rules, runs, calendar, overrides, breakdown."""

from django.urls import path
from dynamic_pricing.views import (
    PricingRulesView,
    PricingRunView,
    PricingCalendarView,
    PriceOverrideView,
    PriceBreakdownView,
    pricing_health,
)

urlpatterns = [
    path('api/pricing/rules/<int:room_type_id>/',
         PricingRulesView.as_view(), name='pricing_rules'),
    path('api/pricing/run/',
         PricingRunView.as_view(), name='pricing_run'),
    path('api/pricing/calendar/',
         PricingCalendarView.as_view(), name='pricing_calendar'),
    path('api/pricing/override/',
         PriceOverrideView.as_view(), name='pricing_override'),
    path('api/pricing/breakdown/',
         PriceBreakdownView.as_view(), name='pricing_breakdown'),
    path('api/pricing/health/',
         pricing_health, name='pricing_health'),
]
