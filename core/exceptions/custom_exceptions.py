"""
Custom exceptions for the Agenda platform.

This module defines the hierarchy of exceptions raised by the scheduling
engine. Every failure is local to a single request (or a single date inside a
bulk operation) and is surfaced to the caller untouched; nothing here is
retried automatically.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import status


class APIException(Exception):
    """Base exception for all API-related exceptions."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = _("An unexpected error occurred.")

    def __init__(self, message=None, status_code=None, errors=None):
        self.message = message or self.default_message
        if status_code:
            self.status_code = status_code
        self.errors = errors
        super().__init__(self.message)

    @property
    def error_code(self):
        return self.__class__.__name__

    def to_dict(self):
        """Convert exception to dictionary representation."""
        error_dict = {
            "message": str(self.message),
            "status_code": self.status_code,
            "code": self.error_code,
        }

        if self.errors:
            error_dict["errors"] = self.errors

        return error_dict


class ResourceNotFoundException(APIException):
    """Exception raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = _("The requested resource was not found.")


class InvalidRequestException(APIException):
    """Exception raised for structurally invalid input (bad range, past date)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = _("Invalid data provided.")


class InvalidWindowException(InvalidRequestException):
    """Exception raised when an opening window is malformed or out of bounds."""

    default_message = _("Close time must be after open time.")


class ScheduleConflictException(APIException):
    """
    Exception raised when existing schedule entries block a requested write.

    Carries the resource id and the conflicting dates so the caller can offer
    to replace or skip them.
    """

    status_code = status.HTTP_409_CONFLICT
    default_message = _("Schedule entries already exist for the requested dates.")

    def __init__(self, message=None, resource_id=None, conflicting_dates=None):
        self.resource_id = resource_id
        self.conflicting_dates = sorted(conflicting_dates or [])
        super().__init__(
            message,
            errors={
                "resource_id": str(resource_id) if resource_id else None,
                "conflicting_dates": [d.isoformat() for d in self.conflicting_dates],
            },
        )


class BookingConflictException(APIException):
    """Exception raised when an appointment collides with availability or another booking."""

    status_code = status.HTTP_409_CONFLICT
    default_message = _("A scheduling conflict was detected.")

    def __init__(self, reason=None):
        self.reason = reason or str(self.default_message)
        super().__init__(self.reason, errors={"reason": self.reason})


class PaymentRequiredException(APIException):
    """Exception raised when a pre-paid item has no completed payment inside its window."""

    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = _("A completed payment is required for this booking.")
