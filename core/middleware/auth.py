"""
Operator authentication middleware.

Back-office endpoints under ``/api/v1/admin/`` require a bearer access
token (audience ``backoffice``). The verified identity is attached to the
request as ``request.operator``.
"""

import logging
from typing import Optional

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.config import ActivationConfig
from core.crypto.tokens import TokenSigner
from core.domain.exceptions import InvalidTokenError
from core.domain.value_objects import Operator

logger = logging.getLogger(__name__)

ADMIN_PATH_PREFIX = "/api/v1/admin/"


def operator_from_claims(claims: dict) -> Operator:
    """Build an Operator from verified access token claims."""
    permissions = claims.get("permissions") or []
    if not isinstance(permissions, list):
        permissions = []
    return Operator(
        subject=str(claims.get("sub", "")),
        email=claims.get("email"),
        role=claims.get("role"),
        permissions=frozenset(str(p) for p in permissions),
    )


class OperatorAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for operator bearer token authentication.

    Returns 401 for admin paths without a valid access token; every
    other path passes through untouched.
    """

    _signer: Optional[TokenSigner] = None

    def _get_signer(self) -> TokenSigner:
        if self._signer is None:
            self._signer = ActivationConfig.from_settings().access_token_signer()
        return self._signer

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Validate the bearer token on admin paths.

        Args:
            request: HTTP request

        Returns:
            JsonResponse with 401 if authentication fails, None otherwise
        """
        if not request.path.startswith(ADMIN_PATH_PREFIX):
            return None

        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return self._unauthorized("Missing bearer token")

        try:
            claims = self._get_signer().verify(token.strip())
        except InvalidTokenError as exc:
            logger.warning("Rejected operator token on %s", request.path)
            return self._unauthorized(exc.message)

        request.operator = operator_from_claims(claims)  # type: ignore[attr-defined]
        return None

    @staticmethod
    def _unauthorized(message: str) -> JsonResponse:
        return JsonResponse(
            {"error": {"code": "UNAUTHORIZED", "message": message}, "status": 401},
            status=401,
        )
