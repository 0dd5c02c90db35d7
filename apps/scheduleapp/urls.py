# apps/scheduleapp/urls.py
from datetime import date

from django.urls import path, register_converter

from apps.scheduleapp import views


class IsoDateConverter:
    regex = r"\d{4}-\d{2}-\d{2}"

    def to_python(self, value):
        return date.fromisoformat(value)

    def to_url(self, value):
        return value.isoformat()


register_converter(IsoDateConverter, "isodate")

urlpatterns = [
    path(
        "schedules/<str:kind>/<uuid:resource_id>/entries/",
        views.ScheduleEntryListView.as_view(),
        name="schedule-entry-list",
    ),
    path(
        "schedules/<str:kind>/<uuid:resource_id>/entries/<isodate:day>/",
        views.ScheduleEntryDetailView.as_view(),
        name="schedule-entry-detail",
    ),
    path(
        "schedules/<str:kind>/<uuid:resource_id>/recurring/",
        views.RecurringScheduleView.as_view(),
        name="schedule-recurring",
    ),
    path(
        "schedules/<str:kind>/<uuid:resource_id>/closed-days/",
        views.ClosedDaysView.as_view(),
        name="schedule-closed-days",
    ),
    path(
        "schedules/<str:kind>/<uuid:resource_id>/conflicts/",
        views.ConflictCheckView.as_view(),
        name="schedule-conflicts",
    ),
    path("assignments/", views.AssignmentListView.as_view(), name="assignment-list"),
    path("assignments/single/", views.SingleAssignmentView.as_view(), name="assignment-single"),
    path("assignments/recurring/", views.RecurringAssignmentView.as_view(), name="assignment-recurring"),
]
