"""Agenda project main URL configuration."""

from __future__ import annotations

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health(request):
    """Minimal health-check endpoint used by load-balancers / uptime checks."""
    return JsonResponse({"status": "ok"})


urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/", include("apps.scheduleapp.urls")),
    path("api/v1/", include("apps.bookingapp.urls")),
    path("health/", health, name="health"),
]
