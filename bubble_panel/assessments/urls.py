from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import AssignmentViewSet, QuizAttemptViewSet, ReviewQueueView

router = DefaultRouter()
router.register(r'quiz-attempts', QuizAttemptViewSet, basename='quiz-attempt')
router.register(r'assignments', AssignmentViewSet, basename='assignment')

urlpatterns = [
    path('review-queue/', ReviewQueueView.as_view(), name='review-queue'),
    path('', include(router.urls)),
]
