"""
Django settings for bubble_panel project.

Всё, что отличается между окружениями, берётся из переменных окружения.
Локальная разработка: DJANGO_SETTINGS_MODULE=bubble_panel.settings_dev
"""
import os
import sys
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    return os.environ.get(name, str(default)).lower() in ('true', '1', 'yes')


TESTING = 'test' in sys.argv or 'pytest' in sys.modules

SECRET_KEY = os.environ.get('SECRET_KEY', 'django-insecure-bubble-panel-dev-key')
DEBUG = env_bool('DEBUG', False)
ALLOWED_HOSTS = [h.strip() for h in os.environ.get('ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h.strip()]

VERSION = os.environ.get('APP_VERSION', '1.0.0')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'core',
    'accounts',
    'tenants',
    'classrooms',
    'curriculum',
    'assessments',
    'gradebook',
    'tutor',
]

MIDDLEWARE = [
    'core.middleware.RequestMetricsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'bubble_panel.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'bubble_panel.wsgi.application'

# ============================================================================
# DATABASE
# ============================================================================
DB_TIMEOUT_SECONDS = int(os.environ.get('DB_TIMEOUT_SECONDS', '5'))
DB_ENGINE = os.environ.get('DB_ENGINE', 'sqlite')

if DB_ENGINE == 'postgresql':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ.get('DB_NAME', 'bubble_panel'),
            'USER': os.environ.get('DB_USER', 'bubble_panel'),
            'PASSWORD': os.environ.get('DB_PASSWORD', ''),
            'HOST': os.environ.get('DB_HOST', 'localhost'),
            'PORT': os.environ.get('DB_PORT', '5432'),
            'CONN_MAX_AGE': int(os.environ.get('DB_CONN_MAX_AGE', '60')),
            'OPTIONS': {'connect_timeout': DB_TIMEOUT_SECONDS},
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.environ.get('DB_NAME', str(BASE_DIR / 'db.sqlite3')),
            'OPTIONS': {'timeout': DB_TIMEOUT_SECONDS},
        }
    }

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
AUTH_USER_MODEL = 'accounts.User'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

EMAIL_BACKEND = os.environ.get('EMAIL_BACKEND', 'django.core.mail.backends.smtp.EmailBackend')
DEFAULT_FROM_EMAIL = os.environ.get('DEFAULT_FROM_EMAIL', 'noreply@bubble-panel.local')

# ============================================================================
# REST FRAMEWORK / AUTH
# ============================================================================
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'accounts.authentication.ProviderJWTAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_RENDERER_CLASSES': (
        'rest_framework.renderers.JSONRenderer',
    ),
    'DEFAULT_THROTTLE_RATES': {
        'tutor': os.environ.get('TUTOR_THROTTLE_RATE', '30/hour'),
    },
}

# Токены выпускает внешний identity provider; здесь только проверка
SIMPLE_JWT = {
    'ALGORITHM': os.environ.get('JWT_ALGORITHM', 'HS256'),
    'SIGNING_KEY': os.environ.get('JWT_SIGNING_KEY', SECRET_KEY),
    'VERIFYING_KEY': os.environ.get('JWT_VERIFYING_KEY') or None,
    'AUDIENCE': os.environ.get('JWT_AUDIENCE') or None,
    'ISSUER': os.environ.get('JWT_ISSUER') or None,
    'AUTH_HEADER_TYPES': ('Bearer',),
    'USER_ID_FIELD': 'id',
    'USER_ID_CLAIM': 'sub',
    'TOKEN_TYPE_CLAIM': None,
    'JTI_CLAIM': None,
    'LEEWAY': timedelta(seconds=30),
}

# ============================================================================
# DOMAIN
# ============================================================================
# False - учитель видит в очереди проверки только работы учеников своей школы
REVIEW_QUEUE_CROSS_TENANT = env_bool('REVIEW_QUEUE_CROSS_TENANT', False)

GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY', '')
GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-2.5-flash')
TUTOR_TIMEOUT_SECONDS = float(os.environ.get('TUTOR_TIMEOUT_SECONDS', '8'))

# ============================================================================
# CELERY
# ============================================================================
CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', 'memory://')
CELERY_RESULT_BACKEND = os.environ.get('CELERY_RESULT_BACKEND', None)
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_ALWAYS_EAGER = TESTING or env_bool('CELERY_TASK_ALWAYS_EAGER', False)

# ============================================================================
# LOGGING
# ============================================================================
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'bubble_panel.safe_logging.ThreadSafeStreamHandler',
            'formatter': 'verbose',
        },
        'metrics': {
            'class': 'bubble_panel.safe_logging.ThreadSafeStreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'request_metrics': {
            'handlers': ['metrics'],
            'level': 'WARNING' if TESTING else 'INFO',
            'propagate': False,
        },
        **{
            app: {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False}
            for app in (
                'core', 'accounts', 'tenants', 'classrooms',
                'curriculum', 'assessments', 'gradebook', 'tutor', 'bubble_panel',
            )
        },
    },
}

# ============================================================================
# SENTRY
# ============================================================================
from .sentry_config import init_sentry  # noqa: E402

init_sentry()
