from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import SchoolViewSet

router = SimpleRouter()
router.register(r'', SchoolViewSet, basename='school')

urlpatterns = [
    path('', include(router.urls)),
]
