from django.urls import path

from .views import WeekDetailView, WeekListView, WeekPublishView

urlpatterns = [
    path('<str:namespace>/<int:grade>/weeks/', WeekListView.as_view(), name='curriculum-weeks'),
    path(
        '<str:namespace>/<int:grade>/weeks/<str:week_id>/',
        WeekDetailView.as_view(),
        name='curriculum-week-detail',
    ),
    path(
        '<str:namespace>/<int:grade>/weeks/<str:week_id>/publish/',
        WeekPublishView.as_view(publish=True),
        name='curriculum-week-publish',
    ),
    path(
        '<str:namespace>/<int:grade>/weeks/<str:week_id>/lock/',
        WeekPublishView.as_view(publish=False),
        name='curriculum-week-lock',
    ),
]
