from django.urls import path

from .views import MyReportView, StudentReportView

urlpatterns = [
    path('me/', MyReportView.as_view(), name='gradebook-me'),
    path('students/<str:student_id>/', StudentReportView.as_view(), name='gradebook-student'),
]
