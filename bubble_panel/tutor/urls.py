from django.urls import path

from .views import AskTutorView, TutorExchangeListView

urlpatterns = [
    path('ask/', AskTutorView.as_view(), name='tutor-ask'),
    path('exchanges/', TutorExchangeListView.as_view(), name='tutor-exchanges'),
]
