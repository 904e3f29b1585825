"""
Search filters for devices and the device audit trail.
"""

import django_filters
from django import forms
from django.contrib.auth import get_user_model

from .models import Device, DeviceLog, PrimaryTag, SecondaryTag


class DeviceFilter(django_filters.FilterSet):
    """Filter devices by name, serial number, tags and location."""

    name = django_filters.CharFilter(
        field_name='name',
        lookup_expr='icontains',
        label='设备名称',
    )
    serial_number = django_filters.CharFilter(
        field_name='serial_number',
        lookup_expr='exact',
        label='序列号',
    )
    primary_tag = django_filters.ModelChoiceFilter(
        queryset=PrimaryTag.objects.all(),
        label='一级标签',
        empty_label='全部',
    )
    secondary_tag = django_filters.ModelChoiceFilter(
        queryset=SecondaryTag.objects.select_related('primary_tag'),
        label='二级标签',
        empty_label='全部',
    )
    location = django_filters.CharFilter(
        field_name='location',
        lookup_expr='icontains',
        label='位置',
    )

    class Meta:
        model = Device
        fields = ['name', 'serial_number', 'primary_tag', 'secondary_tag', 'location']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for f in self.form.fields.values():
            if isinstance(f.widget, forms.Select):
                f.widget.attrs['class'] = 'form-select form-select-sm'
            else:
                f.widget.attrs['class'] = 'form-control form-control-sm'


def filtered_devices(data, queryset=None):
    """Apply DeviceFilter to ``data`` and return the ordered queryset."""
    if queryset is None:
        queryset = Device.objects.select_related('primary_tag', 'secondary_tag')
    device_filter = DeviceFilter(data, queryset=queryset.order_by('-updated_at', '-id'))
    return device_filter, device_filter.qs


class DeviceLogFilter(django_filters.FilterSet):
    """Filter the audit trail by action and acting user."""

    action = django_filters.ChoiceFilter(
        choices=DeviceLog.Action.choices,
        label='操作',
        empty_label='全部',
    )
    user = django_filters.ModelChoiceFilter(
        queryset=get_user_model().objects.all(),
        label='操作人',
        empty_label='全部',
    )

    class Meta:
        model = DeviceLog
        fields = ['action', 'user']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for f in self.form.fields.values():
            f.widget.attrs['class'] = 'form-select form-select-sm'
