"""
Centralised custom exceptions for the Agenda platform.

Import these from `core.exceptions` across the project instead of redefining
ad-hoc `Exception` subclasses in each app.
"""

from .custom_exceptions import (
    APIException,
    BookingConflictException,
    InvalidRequestException,
    InvalidWindowException,
    PaymentRequiredException,
    ResourceNotFoundException,
    ScheduleConflictException,
)

__all__ = [
    "APIException",
    "BookingConflictException",
    "InvalidRequestException",
    "InvalidWindowException",
    "PaymentRequiredException",
    "ResourceNotFoundException",
    "ScheduleConflictException",
]
