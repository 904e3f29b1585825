"""
Stockroom Device Inventory - URL Configuration
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings

from stockroom.views import IndexView, DashboardView

urlpatterns = [
    # Admin site
    path('admin/', admin.site.urls),

    # Authentication and user management
    path('', include('stockroom.accounts.urls')),

    # Dashboard (home)
    path('', IndexView.as_view(), name='index'),
    path('dashboard/', DashboardView.as_view(), name='dashboard'),

    # Devices, entry, search and tags
    path('dashboard/', include('stockroom.inventory.urls')),
]

if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    urlpatterns = [
        path('__debug__/', include('debug_toolbar.urls')),
    ] + urlpatterns

# Customize admin site
admin.site.site_header = 'Stockroom Device Inventory'
admin.site.site_title = 'Stockroom Admin'
admin.site.index_title = 'Inventory Administration'
