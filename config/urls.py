"""
URL configuration for Dynamic Pricing Engine project.
"""

from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Dynamic Pricing Admin"
admin.site.site_title = "Pricing Admin Portal"
admin.site.index_title = "Nightly Rate Management"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('dynamic_pricing.urls')),
]
