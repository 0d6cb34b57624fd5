"""
Django TEST settings for accubooks_project.

Runs against an in-memory SQLite database and a local-memory cache so the
suite needs neither PostgreSQL nor Redis.
"""
from .settings import *  # noqa: F401,F403

SECRET_KEY = 'accubooks-test-secret-key-not-for-production-use'
DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'accubooks-tests',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'WARNING',
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
}

SIMPLE_JWT = {**SIMPLE_JWT, 'SIGNING_KEY': SECRET_KEY}

OPENAI_API_KEY = 'sk-test'
ASSISTANT_RETRY_INITIAL_DELAY = 0
ASSISTANT_RETRY_MAX_DELAY = 0

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
