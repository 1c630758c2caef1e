"""
ASGI config for bubble_panel project.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'bubble_panel.settings')

application = get_asgi_application()
