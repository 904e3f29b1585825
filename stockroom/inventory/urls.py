from django.urls import path
from . import views

app_name = 'inventory'

urlpatterns = [
    # Devices
    path('devices/', views.DeviceListView.as_view(), name='device_list'),
    path('devices/<int:pk>/', views.DeviceUpdateView.as_view(), name='device_edit'),
    path('devices/<int:pk>/logs/', views.DeviceLogsView.as_view(), name='device_logs'),
    path('logs/', views.DeviceLogListView.as_view(), name='log_list'),

    # Bulk entry
    path('entry/', views.DeviceEntryView.as_view(), name='entry'),
    path('entry/count/', views.SerialCountView.as_view(), name='entry_count'),

    # Search & export
    path('search/', views.DeviceSearchView.as_view(), name='search'),

    # Tags
    path('manage/', views.ManageView.as_view(), name='manage'),
]
