"""
Context processors for Stockroom Device Inventory
"""

from django.conf import settings

from stockroom.accounts.models import User

ALL_ROLES = tuple(User.Role.values)
ENTRY_ROLES = (User.Role.SUPER_ADMIN, User.Role.ADMIN)
SUPER_ADMIN_ROLES = (User.Role.SUPER_ADMIN,)

# (label, url name, roles allowed to see it)
NAV_ITEMS = [
    ('概览', 'dashboard', ALL_ROLES),
    ('设备录入', 'inventory:entry', ENTRY_ROLES),
    ('设备查询', 'inventory:search', ALL_ROLES),
    ('设备列表', 'inventory:device_list', SUPER_ADMIN_ROLES),
    ('标签管理', 'inventory:manage', SUPER_ADMIN_ROLES),
    ('操作日志', 'inventory:log_list', SUPER_ADMIN_ROLES),
    ('用户管理', 'accounts:user_list', SUPER_ADMIN_ROLES),
]


def app_context(request):
    """Add common context variables to all templates."""
    user = getattr(request, 'user', None)
    nav_items = []
    if user is not None and user.is_authenticated:
        nav_items = [
            {'label': label, 'url_name': url_name}
            for label, url_name, roles in NAV_ITEMS
            if user.has_role(*roles)
        ]

    return {
        'app_name': 'Stockroom Device Inventory',
        'app_version': '1.0.0',
        'debug_mode': settings.DEBUG,
        'nav_items': nav_items,
        'user_type': request.session.get('user_type', '') if hasattr(request, 'session') else '',
    }
