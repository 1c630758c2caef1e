"""
Sentry Integration для Django.

Включается, только если задан SENTRY_DSN:
    SENTRY_DSN=https://xxx@xxx.ingest.sentry.io/xxx
"""
import logging
import os

import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.django import DjangoIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

logger = logging.getLogger(__name__)

# Ожидаемые ошибки API - не инциденты
IGNORED_API_ERRORS = (
    'ValidationError',
    'NotFound',
    'ClassKeyNotFound',
    'WeekNotFound',
    'SubmissionNotFound',
    'ClassroomLocked',
    'PermissionDenied',
    'TenantLimitError',
    'NotAuthenticated',
    'AuthenticationFailed',
    'InvalidToken',
)

SENSITIVE_KEYS = ('password', 'token', 'secret', 'api_key', 'key')


def init_sentry():
    """Вызывать в конце settings.py."""
    sentry_dsn = os.environ.get('SENTRY_DSN', '')

    if not sentry_dsn:
        logger.info("Sentry: DSN not configured, skipping initialization")
        return False

    environment = os.environ.get('DJANGO_ENV', 'production')
    if os.environ.get('DEBUG', 'False').lower() in ('true', '1', 'yes'):
        environment = 'development'

    sentry_sdk.init(
        dsn=sentry_dsn,
        integrations=[
            DjangoIntegration(transaction_style='url'),
            CeleryIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        environment=environment,
        release=os.environ.get('APP_VERSION', 'unknown'),
        traces_sample_rate=float(os.environ.get('SENTRY_TRACES_SAMPLE_RATE', '0.1')),
        send_default_pii=False,
        ignore_errors=['django.security.DisallowedHost'],
        before_send=before_send_callback,
    )

    logger.info("Sentry: initialized for %s environment", environment)
    return True


def before_send_callback(event, hint):
    """Отбросить ожидаемые ошибки API и замаскировать секреты."""
    if 'exc_info' in hint:
        exc_type, _, _ = hint['exc_info']
        if exc_type.__name__ in IGNORED_API_ERRORS:
            return None

    request_data = event.get('request')
    if request_data:
        data = request_data.get('data')
        if isinstance(data, dict):
            for key in SENSITIVE_KEYS:
                if key in data:
                    data[key] = '[FILTERED]'
        headers = request_data.get('headers')
        if isinstance(headers, dict) and 'Authorization' in headers:
            headers['Authorization'] = '[FILTERED]'
        query = request_data.get('query_string')
        if isinstance(query, str) and 'key=' in query:
            request_data['query_string'] = '[FILTERED]'

    return event

