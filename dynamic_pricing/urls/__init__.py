"""
URL configuration package.

Combines the pricing and market (seasonality) URL patterns into a single
urlpatterns list under the 'dynamic_pricing' namespace.
"""

from .pricing import urlpatterns as pricing_urls
from .market import urlpatterns as market_urls

app_name = 'dynamic_pricing'

urlpatterns = (
    pricing_urls
    + market_urls
)
