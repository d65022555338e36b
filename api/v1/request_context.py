"""
Request helpers shared by API views.
"""
from typing import Optional

from django.core.exceptions import ValidationError
from django.core.validators import validate_ipv46_address
from rest_framework.request import Request

from core.domain.exceptions import PermissionDeniedError
from core.domain.value_objects import Operator


def client_ip(request: Request) -> Optional[str]:
    """Client address as seen by the observability middleware, if it is a valid IP."""
    ip = getattr(request, "client_ip", None) or request.META.get("REMOTE_ADDR")
    if not ip:
        return None
    try:
        validate_ipv46_address(ip)
    except ValidationError:
        return None
    return ip


def user_agent(request: Request) -> Optional[str]:
    return request.META.get("HTTP_USER_AGENT") or None


def require_permission(request: Request, permission: str) -> Operator:
    """
    Return the authenticated operator if it holds ``permission``.

    Raises:
        PermissionDeniedError: If no operator is attached or it lacks the permission
    """
    operator = getattr(request, "operator", None)
    if operator is None or not operator.has_permission(permission):
        raise PermissionDeniedError(f"Missing permission: {permission}")
    return operator
