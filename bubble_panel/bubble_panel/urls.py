"""
URL configuration for bubble_panel project.
"""
from django.contrib import admin
from django.urls import include, path

from .health import health_check, live_check, ready_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health/', health_check, name='health'),
    path('api/health/ready/', ready_check, name='health-ready'),
    path('api/health/live/', live_check, name='health-live'),
    path('api/me/', include('accounts.urls')),
    path('api/schools/', include('tenants.urls')),
    path('api/classrooms/', include('classrooms.urls')),
    path('api/curriculum/', include('curriculum.urls')),
    path('api/assessments/', include('assessments.urls')),
    path('api/gradebook/', include('gradebook.urls')),
    path('api/tutor/', include('tutor.urls')),
]
