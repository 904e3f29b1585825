import logging

from django.conf import settings
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.db.models import Count, Prefetch, Q
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse_lazy
from django.views.generic import ListView, TemplateView, UpdateView, View

from stockroom.accounts.views import EntryRequiredMixin, RoleRequiredMixin, SuperAdminRequiredMixin
from stockroom.accounts.models import User
from . import services
from .exceptions import InventoryError
from .exports import csv_response
from .filters import DeviceLogFilter, filtered_devices
from .forms import DeviceEntryFormSet, DeviceForm
from .models import Device, DeviceLog, PrimaryTag, SecondaryTag
from .serials import count_serial_numbers, is_valid_serial_input

logger = logging.getLogger('stockroom.inventory')


def object_or_404(queryset, pk):
    """get_object_or_404 for a raw form value, which may not be numeric."""
    if not str(pk or '').isdigit():
        raise Http404
    return get_object_or_404(queryset, pk=pk)


def error_message(exc):
    if isinstance(exc, ValidationError):
        return '; '.join(exc.messages)
    return str(exc)


class IntentDispatchMixin:
    """
    Route a POST to a handler method by its ``intent`` field.

    ``intents`` maps intent names to method names. A handler returns an
    optional success message; domain and validation errors are shown via
    the messages framework. Every POST redirects back to the same page.
    """

    intents = {}

    def post(self, request, *args, **kwargs):
        intent = request.POST.get('intent', '')
        handler = self.intents.get(intent)
        if handler is None:
            logger.warning("Unknown intent %r from %s", intent, request.user.username)
            messages.error(request, '无效的操作')
            return redirect(request.get_full_path())

        try:
            message = getattr(self, handler)(request)
        except (InventoryError, ValidationError) as exc:
            logger.warning("Intent %s by %s rejected: %s", intent, request.user.username, error_message(exc))
            messages.error(request, error_message(exc))
        else:
            if message:
                messages.success(request, message)
        return redirect(request.get_full_path())

    def handle_delete_device(self, request):
        device = object_or_404(Device, request.POST.get('device_id'))
        services.delete_device(device, request.user)
        return f'设备 "{device.name} #{device.serial_number}" 已删除'


# ============== Device Views ==============

class DeviceListView(SuperAdminRequiredMixin, IntentDispatchMixin, ListView):
    """List devices with a free-text filter."""

    model = Device
    template_name = 'inventory/device_list.html'
    context_object_name = 'devices'
    intents = {'deleteDevice': 'handle_delete_device'}

    def get_paginate_by(self, queryset):
        return settings.STOCKROOM_DEVICE_PAGE_SIZE

    def get_queryset(self):
        queryset = Device.objects.select_related('primary_tag', 'secondary_tag')
        search = self.request.GET.get('q', '').strip()
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(serial_number__icontains=search) |
                Q(location__icontains=search)
            )
        return queryset

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['search'] = self.request.GET.get('q', '').strip()
        context['total_count'] = Device.objects.count()
        return context


class DeviceUpdateView(SuperAdminRequiredMixin, UpdateView):
    """Edit a device's serial number, location and tags."""

    model = Device
    form_class = DeviceForm
    template_name = 'inventory/device_form.html'
    context_object_name = 'device'
    success_url = reverse_lazy('inventory:device_list')

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['tag_tree'] = tag_tree()
        return context

    def form_valid(self, form):
        # The bound form has already written its values onto form.instance
        device = Device.objects.select_related('secondary_tag').get(pk=self.object.pk)
        data = form.cleaned_data
        try:
            self.object = services.update_device(
                device, self.request.user,
                serial_number=data['serial_number'],
                location=data['location'],
                primary_tag_id=data['primary_tag'].pk,
                secondary_tag_id=data['secondary_tag'].pk,
            )
        except InventoryError as exc:
            form.add_error(None, exc.message)
            return self.form_invalid(form)
        messages.success(self.request, f'设备 "{self.object}" 已更新')
        return redirect(self.get_success_url())


class DeviceLogsView(SuperAdminRequiredMixin, ListView):
    """Audit trail of a single device, still available after it is deleted."""

    template_name = 'inventory/device_logs.html'
    context_object_name = 'logs'

    def get_paginate_by(self, queryset):
        return settings.STOCKROOM_LOG_PAGE_SIZE

    def get_queryset(self):
        self.device = Device.objects.select_related('primary_tag', 'secondary_tag').filter(pk=self.kwargs['pk']).first()
        queryset = DeviceLog.objects.filter(device_id=self.kwargs['pk']).select_related('user')
        if self.device is None and not queryset.exists():
            raise Http404('设备不存在')
        return queryset

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['device'] = self.device
        if self.device is not None:
            context['device_name'], context['serial_number'] = self.device.name, self.device.serial_number
        else:
            latest = self.object_list.first()
            context['device_name'], context['serial_number'] = latest.device_name, latest.serial_number
        return context


class DeviceLogListView(SuperAdminRequiredMixin, ListView):
    """All device log entries, filterable by action and user."""

    template_name = 'inventory/log_list.html'
    context_object_name = 'logs'

    def get_paginate_by(self, queryset):
        return settings.STOCKROOM_LOG_PAGE_SIZE

    def get_queryset(self):
        self.filterset = DeviceLogFilter(
            self.request.GET, queryset=DeviceLog.objects.select_related('user')
        )
        return self.filterset.qs

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['filter'] = self.filterset
        return context


# ============== Entry Views ==============

def tag_tree():
    """Secondary tags grouped by primary tag id, for the tag pickers."""
    tree = {}
    for tag in SecondaryTag.objects.order_by('primary_tag_id', 'id'):
        tree.setdefault(str(tag.primary_tag_id), []).append({'id': tag.pk, 'name': tag.name})
    return tree


class DeviceEntryView(EntryRequiredMixin, TemplateView):
    """Bulk registration of devices from serial-number ranges."""

    template_name = 'inventory/entry.html'
    formset_prefix = 'entries'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        if 'formset' not in context:
            context['formset'] = DeviceEntryFormSet(prefix=self.formset_prefix)
        context['tag_tree'] = tag_tree()
        context['max_serials'] = settings.STOCKROOM_MAX_SERIALS_PER_ENTRY
        return context

    def post(self, request, *args, **kwargs):
        formset = DeviceEntryFormSet(request.POST, prefix=self.formset_prefix)
        if not formset.is_valid():
            return self.render_to_response(self.get_context_data(formset=formset))

        try:
            result = services.register_devices(formset.rows(), request.user)
        except InventoryError as exc:
            logger.warning("Bulk entry by %s rejected: %s", request.user.username, exc.message)
            messages.error(request, exc.message)
            return self.render_to_response(self.get_context_data(formset=formset))

        messages.success(
            request,
            f'成功录入 {result.total} 台设备（新建 {len(result.created)} 台，更新位置 {len(result.updated)} 台）'
        )
        return redirect('inventory:entry')


class SerialCountView(EntryRequiredMixin, View):
    """Live preview of how many devices a serial string expands to."""

    def get(self, request, *args, **kwargs):
        raw = request.GET.get('serial_numbers', '')
        return JsonResponse({
            'count': count_serial_numbers(raw),
            'valid': is_valid_serial_input(raw, limit=settings.STOCKROOM_MAX_SERIALS_PER_ENTRY),
        })


# ============== Search ==============

class DeviceSearchView(RoleRequiredMixin, ListView):
    """Filtered device search; POST ``intent=export`` downloads the same result as CSV."""

    allowed_roles = tuple(User.Role.values)
    template_name = 'inventory/search.html'
    context_object_name = 'devices'

    def get_paginate_by(self, queryset):
        return settings.STOCKROOM_SEARCH_PAGE_SIZE

    def get_queryset(self):
        self.filterset, queryset = filtered_devices(self.request.GET)
        return queryset

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['filter'] = self.filterset
        context['result_count'] = self.object_list.count()
        return context

    def post(self, request, *args, **kwargs):
        if request.POST.get('intent') != 'export':
            messages.error(request, '无效的操作')
            return redirect(request.get_full_path())

        device_filter, queryset = filtered_devices(request.POST)
        if not device_filter.is_valid():
            messages.error(request, '筛选条件无效')
            return redirect(request.get_full_path())
        logger.info("CSV export by %s: %d devices", request.user.username, queryset.count())
        return csv_response(queryset)


# ============== Tag Management ==============

class ManageView(SuperAdminRequiredMixin, IntentDispatchMixin, ListView):
    """Tag tree with device counts, plus the device table for editing."""

    template_name = 'inventory/manage.html'
    context_object_name = 'devices'
    intents = {
        'createPrimaryTag': 'handle_create_primary_tag',
        'deletePrimaryTag': 'handle_delete_primary_tag',
        'createTag': 'handle_create_tag',
        'updateTag': 'handle_update_tag',
        'deleteTag': 'handle_delete_tag',
        'updateDevice': 'handle_update_device',
        'deleteDevice': 'handle_delete_device',
    }

    def get_paginate_by(self, queryset):
        return settings.STOCKROOM_DEVICE_PAGE_SIZE

    def get_queryset(self):
        queryset = Device.objects.select_related('primary_tag', 'secondary_tag')
        self.selected_tag = None
        tag_id = self.request.GET.get('tag', '')
        if tag_id.isdigit():
            self.selected_tag = SecondaryTag.objects.filter(pk=tag_id).first()
            queryset = queryset.filter(secondary_tag_id=tag_id)
        return queryset

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        secondary_tags = SecondaryTag.objects.annotate(device_count=Count('devices'))
        context['primary_tags'] = PrimaryTag.objects.annotate(
            device_count=Count('devices')
        ).prefetch_related(Prefetch('secondary_tags', queryset=secondary_tags))
        context['selected_tag'] = self.selected_tag
        context['tag_tree'] = tag_tree()
        return context

    def handle_create_primary_tag(self, request):
        tag = services.create_primary_tag(request.POST.get('name'))
        return f'一级标签 "{tag.name}" 已创建'

    def handle_delete_primary_tag(self, request):
        tag = object_or_404(PrimaryTag, request.POST.get('tag_id'))
        services.delete_primary_tag(tag)
        return f'一级标签 "{tag.name}" 已删除'

    def handle_create_tag(self, request):
        tag = services.create_secondary_tag(request.POST.get('primary_tag_id'), request.POST.get('name'))
        return f'二级标签 "{tag.name}" 已创建'

    def handle_update_tag(self, request):
        tag = object_or_404(SecondaryTag, request.POST.get('tag_id'))
        tag = services.rename_secondary_tag(tag, request.POST.get('name'), request.user)
        return f'二级标签已更名为 "{tag.name}"'

    def handle_delete_tag(self, request):
        tag = object_or_404(SecondaryTag, request.POST.get('tag_id'))
        services.delete_secondary_tag(tag)
        return f'二级标签 "{tag.name}" 已删除'

    def handle_update_device(self, request):
        device = object_or_404(Device.objects.select_related('secondary_tag'), request.POST.get('device_id'))
        device = services.update_device(
            device, request.user,
            serial_number=request.POST.get('serial_number'),
            location=request.POST.get('location'),
            primary_tag_id=request.POST.get('primary_tag_id'),
            secondary_tag_id=request.POST.get('secondary_tag_id'),
        )
        return f'设备 "{device}" 已更新'
