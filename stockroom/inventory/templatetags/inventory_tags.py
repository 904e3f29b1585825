"""
Template tags for inventory app.

Registered as a template builtin, so no ``{% load %}`` is needed:
    {{ device.updated_at|stock_datetime }}  -> "2026-02-16 14:30:45"
    {{ log.action|action_badge }}           -> "bg-success"
    <a href="?{% url_replace page=2 %}">    -> keeps the current filters
"""

from django import template
from django.utils import timezone
from django.utils.dateformat import format as django_format

register = template.Library()

DATETIME_FORMAT = 'Y-m-d H:i:s'
DATETIME_SHORT_FORMAT = 'Y-m-d H:i'

ACTION_BADGES = {
    'create': 'bg-success',
    'update': 'bg-primary',
    'delete': 'bg-danger',
}


def _format_date(value, format_string):
    if value is None:
        return ''
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return django_format(value, format_string)


@register.filter(name='stock_datetime')
def stock_datetime(value):
    """Full local timestamp, the same format as the CSV export."""
    return _format_date(value, DATETIME_FORMAT)


@register.filter(name='stock_datetime_short')
def stock_datetime_short(value):
    return _format_date(value, DATETIME_SHORT_FORMAT)


@register.filter(name='action_badge')
def action_badge(action):
    """Bootstrap badge class for a device log action."""
    return ACTION_BADGES.get(action, 'bg-secondary')


@register.simple_tag(takes_context=True)
def url_replace(context, **kwargs):
    """
    Current query string with ``kwargs`` replaced, for pagination links
    that keep the active filters.
    """
    query = context['request'].GET.copy()
    for key, value in kwargs.items():
        if value in (None, ''):
            query.pop(key, None)
        else:
            query[key] = value
    return query.urlencode()
