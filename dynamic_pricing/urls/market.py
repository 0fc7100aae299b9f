"""Market URL patterns: seasonality settings (global or per location)."""

from django.urls import path
from dynamic_pricing.views import (
    SeasonalitySettingsView,
    SeasonalityResetView,
)

urlpatterns = [
    path('api/market/seasonality/',
         SeasonalitySettingsView.as_view(), name='seasonality_global'),
    path('api/market/seasonality/reset/',
         SeasonalityResetView.as_view(), name='seasonality_global_reset'),
    path('api/market/seasonality/<int:location_id>/',
         SeasonalitySettingsView.as_view(), name='seasonality_location'),
    path('api/market/seasonality/<int:location_id>/reset/',
         SeasonalityResetView.as_view(), name='seasonality_location_reset'),
]
