"""Production settings for the Fintrack API.

This module extends the base settings with production specific
configuration. Secrets and gateway credentials must come from the
environment; startup fails when they are missing.
"""

from .base import *  # noqa: F401,F403
from .base import get_bool_env, get_env

# Never run with debug enabled in production
DEBUG = False

SECRET_KEY = get_env('DJANGO_SECRET_KEY', required=True)

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = get_env('DJANGO_ALLOWED_HOSTS', required=True).split(',')

# Database metrics for /metrics
DATABASES['default']['ENGINE'] = get_env(  # noqa: F405
    'DB_ENGINE', 'django_prometheus.db.backends.postgresql'
)

# Configure secure proxies and cookies
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True

# Gateway credentials are mandatory outside development
MIDTRANS_SERVER_KEY = get_env('MIDTRANS_SERVER_KEY', required=True)
MIDTRANS_CLIENT_KEY = get_env('MIDTRANS_CLIENT_KEY', required=True)
MIDTRANS_IS_PRODUCTION = get_bool_env('MIDTRANS_IS_PRODUCTION', True)
MIDTRANS_API_URL = get_env(
    'MIDTRANS_API_URL',
    'https://app.midtrans.com' if MIDTRANS_IS_PRODUCTION else 'https://app.sandbox.midtrans.com',
)
