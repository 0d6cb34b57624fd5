"""
Django settings for accubooks_project.
"""
import os
import json
from datetime import timedelta
from pathlib import Path

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Load configuration from accubooks.json
def load_config():
    config_path = Path(os.environ.get('ACCUBOOKS_CONFIG', BASE_DIR.parent / 'accubooks.json'))
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}

CONFIG = load_config()
APP_CONFIG = CONFIG.get('application', {})

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', APP_CONFIG.get('secret_key', 'django-insecure-fallback-key'))

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.environ.get('DJANGO_DEBUG', str(APP_CONFIG.get('debug', False))).lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = APP_CONFIG.get('allowed_hosts', ['localhost', '127.0.0.1', '0.0.0.0'])
if os.environ.get('ALLOWED_HOSTS'):
    ALLOWED_HOSTS = os.environ['ALLOWED_HOSTS'].split(',')

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    # Django REST Framework
    'rest_framework',
    'corsheaders',
    'django_filters',
    # Local apps
    'apps.api',
    'apps.businesses',
    'apps.contacts',
    'apps.bank_accounts',
    'apps.invoices',
    'apps.payments',
    'apps.purchases',
    'apps.dashboard',
    'apps.assistant',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',  # Serve static files in production
    'django.contrib.sessions.middleware.SessionMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'accubooks_project.middleware.NoCacheApiMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'accubooks_project.middleware.SecurityHeadersMiddleware',
]

ROOT_URLCONF = 'accubooks_project.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'accubooks_project.wsgi.application'

# Database configuration - prioritize environment variables over accubooks.json
DB_CONFIG = CONFIG.get('database', {})
DB_ENGINE = os.environ.get('DB_ENGINE', DB_CONFIG.get('engine', 'postgresql'))

if DB_ENGINE == 'sqlite':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.environ.get('DB_NAME', DB_CONFIG.get('db_name', str(BASE_DIR / 'accubooks.sqlite3'))),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ.get('DB_NAME', DB_CONFIG.get('db_name', 'accubooks_db')),
            'USER': os.environ.get('DB_USER', DB_CONFIG.get('db_user', 'accubooks')),
            'PASSWORD': os.environ.get('DB_PASSWORD', DB_CONFIG.get('db_password', '')),
            'HOST': os.environ.get('DB_HOST', DB_CONFIG.get('db_host', 'localhost')),
            'PORT': int(os.environ.get('DB_PORT', DB_CONFIG.get('db_port', 5432))),
            'ATOMIC_REQUESTS': False,
        }
    }

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',
    },
]

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# WhiteNoise configuration for static file serving
STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Session settings
SESSION_COOKIE_AGE = 28800  # 8 hours
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SECURE = not DEBUG
SESSION_SAVE_EVERY_REQUEST = True

# Security settings
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = 'strict-origin-when-cross-origin'
X_FRAME_OPTIONS = 'DENY'

# Email (password reset links)
EMAIL_CONFIG = CONFIG.get('email', {})
EMAIL_BACKEND = os.environ.get(
    'EMAIL_BACKEND', EMAIL_CONFIG.get('backend', 'django.core.mail.backends.console.EmailBackend')
)
EMAIL_HOST = os.environ.get('EMAIL_HOST', EMAIL_CONFIG.get('host', 'localhost'))
EMAIL_PORT = int(os.environ.get('EMAIL_PORT', EMAIL_CONFIG.get('port', 25)))
EMAIL_HOST_USER = os.environ.get('EMAIL_HOST_USER', EMAIL_CONFIG.get('user', ''))
EMAIL_HOST_PASSWORD = os.environ.get('EMAIL_HOST_PASSWORD', EMAIL_CONFIG.get('password', ''))
EMAIL_USE_TLS = str(os.environ.get('EMAIL_USE_TLS', EMAIL_CONFIG.get('use_tls', False))).lower() in ('1', 'true', 'yes')
DEFAULT_FROM_EMAIL = os.environ.get('DEFAULT_FROM_EMAIL', EMAIL_CONFIG.get('from_email', 'AccuBooks <no-reply@localhost>'))
PASSWORD_RESET_TIMEOUT = 3600  # 1 hour

# Cache configuration (Redis-backed, shared by throttles and health checks)
CACHE_CONFIG = CONFIG.get('cache', {})
CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': "redis://{host}:{port}/{db}".format(
            host=os.getenv('REDIS_HOST', CACHE_CONFIG.get('redis_host', 'redis')),
            port=os.getenv('REDIS_PORT', CACHE_CONFIG.get('redis_port', '6379')),
            db=CACHE_CONFIG.get('redis_db', 1),
        ),
        'TIMEOUT': 900,  # 15 minutes default timeout
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'COMPRESSOR': 'django_redis.compressors.zlib.ZlibCompressor',
            'SERIALIZER': 'django_redis.serializers.json.JSONSerializer',
        },
        'KEY_PREFIX': 'accubooks',
    }
}

# Logging
LOG_DIR = BASE_DIR / 'logs'
LOG_DIR.mkdir(exist_ok=True)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'file': {
            'level': 'INFO',
            'class': 'logging.FileHandler',
            'filename': LOG_DIR / 'accubooks.log',
            'formatter': 'verbose',
        },
        'console': {
            'level': 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['file', 'console'],
        'level': 'INFO',
    },
}

# Django REST Framework Configuration
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'apps.api.authentication.CsrfExemptSessionAuthentication',  # Session auth without CSRF for API
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_THROTTLE_CLASSES': [
        'rest_framework.throttling.AnonRateThrottle',
        'rest_framework.throttling.UserRateThrottle',
    ],
    'DEFAULT_THROTTLE_RATES': {
        'anon': '100/hour',      # Unauthenticated users: 100 requests per hour
        'user': '5000/hour',     # Authenticated users: 5000 requests per hour
    },
    'DEFAULT_PAGINATION_CLASS': 'apps.api.pagination.StandardResultsSetPagination',
    'PAGE_SIZE': 50,
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
        'rest_framework.filters.SearchFilter',
        'rest_framework.filters.OrderingFilter',
    ],
    'COERCE_DECIMAL_TO_STRING': True,
}

# CORS Configuration
CORS_ALLOWED_ORIGINS = APP_CONFIG.get('cors_allowed_origins', [
    "http://localhost:5173",  # Local development frontend
    "http://localhost:8080",
])
if os.environ.get('CORS_ALLOWED_ORIGINS'):
    CORS_ALLOWED_ORIGINS = os.environ['CORS_ALLOWED_ORIGINS'].split(',')

CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_HEADERS = [
    'accept',
    'authorization',
    'content-type',
    'origin',
    'x-business-id',
    'x-csrftoken',
    'x-requested-with',
]

# JWT Configuration
SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=8),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=7),
    'ROTATE_REFRESH_TOKENS': False,
    'UPDATE_LAST_LOGIN': True,
    'ALGORITHM': 'HS256',
    'SIGNING_KEY': SECRET_KEY,
    'VERIFYING_KEY': None,
    'AUTH_HEADER_TYPES': ('Bearer',),
    'AUTH_HEADER_NAME': 'HTTP_AUTHORIZATION',
    'USER_ID_FIELD': 'id',
    'USER_ID_CLAIM': 'user_id',
    'TOKEN_TYPE_CLAIM': 'token_type',
}

# Assistant (OpenAI) configuration
OPENAI_CONFIG = CONFIG.get('openai', {})
OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY', OPENAI_CONFIG.get('api_key', ''))

ASSISTANT_DEFAULT_MODEL = OPENAI_CONFIG.get('chat_model', 'gpt-4')
ASSISTANT_ANALYSIS_MODEL = OPENAI_CONFIG.get('analysis_model', 'gpt-4')
ASSISTANT_ANALYSIS_TEMPERATURE = 0.7
ASSISTANT_ANALYSIS_MAX_TOKENS = 2000
ASSISTANT_RATE_LIMIT = 100              # Analysis requests per user per hour
ASSISTANT_RETRY_MAX_RETRIES = 3         # Retries after the first attempt
ASSISTANT_RETRY_INITIAL_DELAY = 1       # Seconds, doubled on each retry
ASSISTANT_RETRY_MAX_DELAY = 5           # Seconds
ASSISTANT_RECENT_DAYS = 30
ASSISTANT_TRANSACTION_LIMIT = 50
