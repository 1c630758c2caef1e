"""Celery application instance for Bubble Panel."""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "bubble_panel.settings")

app = Celery("bubble_panel")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
