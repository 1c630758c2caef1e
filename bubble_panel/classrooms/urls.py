from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import ClassroomViewSet

router = SimpleRouter()
router.register(r'', ClassroomViewSet, basename='classroom')

urlpatterns = [
    path('', include(router.urls)),
]
