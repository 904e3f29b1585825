"""
Stockroom Device Inventory - Test Settings
In-memory SQLite, fast hashing, no debug toolbar.
"""

from .base import *

DEBUG = False
SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

if 'debug_toolbar' in INSTALLED_APPS:
    INSTALLED_APPS.remove('debug_toolbar')
if 'debug_toolbar.middleware.DebugToolbarMiddleware' in MIDDLEWARE:
    MIDDLEWARE.remove('debug_toolbar.middleware.DebugToolbarMiddleware')

SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

LOGGING['loggers']['stockroom']['level'] = 'WARNING'
