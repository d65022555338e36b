"""
API exception handlers.

This module maps domain exceptions onto HTTP responses with the error body

    {"error": {"code", "message", "detail"?}, "status": <http status>}
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    ActivationNotFoundError,
    AppMismatchError,
    DeviceLimitExceededError,
    DeviceNotActiveError,
    DomainException,
    DuplicateVoucherCodeError,
    InvalidLicenseStatusError,
    InvalidTokenError,
    LicenseNotFoundError,
    LicenseStatusError,
    NonceAlreadyUsedError,
    OfflineLicenseFileNotFoundError,
    OfflineNotAllowedError,
    PermissionDeniedError,
    VersionBlockedError,
    VoucherNotFoundError,
    VoucherUnavailableError,
)

logger = logging.getLogger(__name__)

# Checked in order; anything not listed is a 400.
STATUS_BY_EXCEPTION = (
    (
        (
            LicenseNotFoundError,
            VoucherNotFoundError,
            ActivationNotFoundError,
            OfflineLicenseFileNotFoundError,
        ),
        status.HTTP_404_NOT_FOUND,
    ),
    ((InvalidTokenError,), status.HTTP_401_UNAUTHORIZED),
    (
        (
            LicenseStatusError,
            DeviceLimitExceededError,
            VersionBlockedError,
            OfflineNotAllowedError,
            AppMismatchError,
            DeviceNotActiveError,
            PermissionDeniedError,
        ),
        status.HTTP_403_FORBIDDEN,
    ),
    (
        (
            NonceAlreadyUsedError,
            VoucherUnavailableError,
            InvalidLicenseStatusError,
            DuplicateVoucherCodeError,
        ),
        status.HTTP_409_CONFLICT,
    ),
)


def error_body(
    code: str, message: str, status_code: int, detail: Optional[str] = None, **extra
) -> Dict[str, Any]:
    """Build the error response body."""
    error = {"code": code, "message": message}
    if detail:
        error["detail"] = detail
    error.update(extra)
    return {"error": error, "status": status_code}


def error_response(
    code: str, message: str, status_code: int, detail: Optional[str] = None, **extra
) -> Response:
    return Response(error_body(code, message, status_code, detail, **extra), status=status_code)


def validation_error_response(errors: Dict[str, Any]) -> Response:
    """400 response for serializer errors."""
    return error_response(
        "VALIDATION_ERROR",
        "Invalid request",
        status.HTTP_400_BAD_REQUEST,
        fields=errors,
    )


def status_for(exc: DomainException) -> int:
    for exception_types, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exception_types):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, ValidationError):
        response = validation_error_response(exc.detail)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        message = response.data.get("detail", exc.default_detail) if response.data else ""
        response.data = error_body(code, str(message), response.status_code)
    elif isinstance(exc, Http404):
        response = error_response("NOT_FOUND", "Resource not found", status.HTTP_404_NOT_FOUND)
    else:
        response = _handle_unexpected_exception(exc, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_for(exc)
    logger.warning(
        "Domain exception: %s - %s",
        exc.code,
        exc.message,
        extra={"trace_id": trace_id, "status_code": status_code},
    )
    return error_response(exc.code, exc.message, status_code, exc.detail)


def _handle_unexpected_exception(exc: Exception, trace_id: Optional[str]) -> Response:
    """Handle unexpected exceptions. Internal detail never reaches the client."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return error_response(
        "INTERNAL_ERROR",
        "An internal error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
