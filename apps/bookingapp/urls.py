# apps/bookingapp/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from apps.bookingapp.views import AppointmentViewSet, AvailabilityViewSet

router = DefaultRouter()
router.register(r"appointments", AppointmentViewSet)
router.register(r"availability", AvailabilityViewSet, basename="availability")

urlpatterns = [
    path("", include(router.urls)),
]
