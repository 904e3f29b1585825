"""
Inventory Admin

Devices are registered and edited through the web UI so that every change
goes through the audit trail. The admin only offers read access to the
trail and primary tag renaming.
"""

from django.contrib import admin

from .models import PrimaryTag, DeviceLog


@admin.register(PrimaryTag)
class PrimaryTagAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(DeviceLog)
class DeviceLogAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'action', 'device_name', 'serial_number', 'user']
    list_filter = ['action']
    search_fields = ['device_name', 'serial_number', 'details']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
