"""Test settings for the Fintrack API.

In-memory database, fast password hashing, eager Celery and a fixed
gateway key so webhook signatures can be computed in tests.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    **STORAGES,  # noqa: F405
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

MIDTRANS_SERVER_KEY = 'test-secret'
MIDTRANS_CLIENT_KEY = 'test-client-key'
MIDTRANS_IS_PRODUCTION = False
MIDTRANS_API_URL = 'https://app.sandbox.midtrans.com'
MIDTRANS_TIMEOUT_SECONDS = 10.0
