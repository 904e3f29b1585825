"""
Main views for Stockroom Device Inventory
"""

from django.conf import settings
from django.core.paginator import Paginator
from django.db.models import Count
from django.views.generic import RedirectView, TemplateView

from stockroom.accounts.models import User
from stockroom.accounts.views import RoleRequiredMixin
from stockroom.inventory.models import Device, DeviceLog


class IndexView(RedirectView):
    pattern_name = 'dashboard'


class DashboardView(RoleRequiredMixin, TemplateView):
    """Inventory overview: totals, breakdowns and the latest devices."""

    template_name = 'dashboard.html'
    allowed_roles = tuple(User.Role.values)
    recent_log_count = 10

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)

        context['stats'] = {
            'total_devices': Device.objects.count(),
            'locations': Device.objects.values('location').distinct().count(),
        }

        # Breakdowns
        context['devices_by_location'] = (
            Device.objects.values('location')
            .annotate(count=Count('id'))
            .order_by('-count', 'location')
        )
        context['devices_by_primary_tag'] = (
            Device.objects.values('primary_tag__name')
            .annotate(count=Count('id'))
            .order_by('-count', 'primary_tag__name')
        )

        # Recent devices, newest first
        recent_devices = Device.objects.select_related(
            'primary_tag', 'secondary_tag'
        ).order_by('-created_at', '-id')
        paginator = Paginator(recent_devices, settings.STOCKROOM_DASHBOARD_PAGE_SIZE)
        context['page_obj'] = paginator.get_page(self.request.GET.get('page'))
        context['recent_devices'] = context['page_obj'].object_list

        context['show_logs'] = self.request.user.can_view_logs()
        if context['show_logs']:
            context['recent_logs'] = DeviceLog.objects.select_related('user')[:self.recent_log_count]

        return context
