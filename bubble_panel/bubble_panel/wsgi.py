"""
WSGI config for bubble_panel project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'bubble_panel.settings')

application = get_wsgi_application()
