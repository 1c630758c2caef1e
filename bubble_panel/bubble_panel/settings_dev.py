"""
Development settings - локальная разработка
"""
from .settings import *  # noqa: F401,F403

DEBUG = True
ALLOWED_HOSTS = ['*']

# Email в консоль
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Задачи выполняются сразу, без брокера
CELERY_TASK_ALWAYS_EAGER = True

LOG_LEVEL = 'DEBUG'
for _app_logger in ('core', 'accounts', 'tenants', 'classrooms', 'curriculum', 'assessments', 'gradebook', 'tutor'):
    LOGGING['loggers'][_app_logger]['level'] = LOG_LEVEL  # noqa: F405
