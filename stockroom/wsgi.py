"""
WSGI config for Stockroom Device Inventory.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import os

from django.core.wsgi import get_wsgi_application
from django.core.exceptions import ImproperlyConfigured

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'stockroom.settings.production')


def validate_production_keys():
    """
    Refuse to serve with the development SECRET_KEY when DEBUG is off.

    The session lives in a cookie signed with SECRET_KEY, so a known key
    lets anyone forge a login.
    """
    from django.conf import settings

    if settings.DEBUG:
        return

    if 'insecure' in settings.SECRET_KEY.lower():
        raise ImproperlyConfigured(
            "\n" + "=" * 70 + "\n"
            "FATAL SECURITY ERROR: Using development SECRET_KEY in production!\n"
            "=" * 70 + "\n\n"
            "Generate a new key with:\n"
            "  python -c \"import secrets; print(secrets.token_urlsafe(50))\"\n\n"
            "Then set it in the service environment:\n"
            "  DJANGO_SECRET_KEY=your-new-secure-key\n"
            + "=" * 70
        )


application = get_wsgi_application()

# Validate keys after Django is loaded
validate_production_keys()
