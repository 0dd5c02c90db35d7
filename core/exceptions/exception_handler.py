"""
Global exception handler for the Agenda platform.

This module provides a custom exception handler for DRF that handles
custom exceptions and provides consistent error responses.
"""

import logging
from typing import Any, Dict, Optional

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.utils import IntegrityError
from django.http import Http404
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from .custom_exceptions import APIException

logger = logging.getLogger(__name__)


def get_error_code(exception: Exception) -> str:
    """
    Get standardized error code from exception.

    Args:
        exception: The exception to get code for

    Returns:
        str: Standardized error code
    """
    if isinstance(exception, APIException):
        return exception.error_code
    elif isinstance(exception, ValidationError):
        return "validation_error"
    elif isinstance(exception, (Http404, NotFound, ObjectDoesNotExist)):
        return "not_found"
    elif isinstance(exception, IntegrityError):
        return "integrity_error"
    return (
        exception.__class__.__name__.lower()
        .replace("error", "")
        .replace("exception", "")
    )


def get_error_details(exception: Exception) -> Optional[Dict[str, Any]]:
    """
    Get detailed error information from exception.

    Args:
        exception: The exception

    Returns:
        Optional[Dict]: Error details if available
    """
    if isinstance(exception, APIException):
        return exception.errors

    if (
        isinstance(exception, ValidationError)
        and hasattr(exception, "detail")
        and not isinstance(exception.detail, str)
    ):
        if isinstance(exception.detail, list):
            return {"validation_errors": exception.detail}
        return exception.detail

    return None


def exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """
    Custom exception handler for DRF views.

    Maps the engine's exception taxonomy onto HTTP responses
    (404/400/409/402) and standardizes DRF's own errors to the same shape.

    Args:
        exc: The exception
        context: The exception context

    Returns:
        Response: Consistent error response, or None for unexpected errors so
        Django's default 500 handling applies
    """
    if isinstance(exc, APIException):
        logger.warning(f"{exc.error_code}: {exc.message} ({context.get('view').__class__.__name__})")
        return Response(
            {
                "error": exc.error_code,
                "message": str(exc.message),
                **({"details": exc.errors} if exc.errors is not None else {}),
            },
            status=exc.status_code,
        )

    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, "message_dict"):
            exc = ValidationError(detail=exc.message_dict)
        else:
            exc = ValidationError(detail=exc.messages)

    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error: {exc}")
        return Response(
            {
                "error": "integrity_error",
                "message": _("A conflict occurred with the existing data"),
            },
            status=status.HTTP_409_CONFLICT,
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        logger.exception(f"Unhandled exception: {exc}")
        return None

    error_details = get_error_details(exc)
    if isinstance(response.data, dict) and "detail" in response.data:
        message = str(response.data["detail"])
    else:
        message = _("Invalid request.")
    response.data = {
        "error": get_error_code(exc),
        "message": message,
        **({"details": error_details} if error_details is not None else {}),
    }
    return response
