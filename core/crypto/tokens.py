"""
Signed bearer tokens.

Tokens are compact HS256 JWTs pinned to an issuer and an audience.
Activation tokens (audience ``activation``) are handed to client
applications; access tokens (audience ``backoffice``) authenticate operators.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from core.domain.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACTIVATION_AUDIENCE = "activation"
ACCESS_AUDIENCE = "backoffice"


class TokenSigner:
    """Issues and verifies tokens for a single audience."""

    def __init__(self, secret: str, issuer: str, audience: str):
        if not secret:
            raise ValueError(f"Token secret for audience '{audience}' is not configured")
        self.secret = secret
        self.issuer = issuer
        self.audience = audience

    def sign(
        self, claims: Dict[str, Any], ttl: timedelta, now: Optional[datetime] = None
    ) -> str:
        """
        Sign ``claims`` into a compact token.

        Args:
            claims: Application claims
            ttl: Token lifetime
            now: Issue time (defaults to now, UTC)

        Returns:
            Encoded token string
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = dict(claims)
        payload.update(
            {
                "iss": self.issuer,
                "aud": self.audience,
                "iat": issued_at,
                "exp": issued_at + ttl,
            }
        )
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Verify signature, issuer, audience and expiry.

        Args:
            token: Encoded token

        Returns:
            Decoded claims

        Raises:
            InvalidTokenError: If any check fails
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["exp", "iat", "iss", "aud"]},
            )
        except jwt.ExpiredSignatureError as exc:
            logger.info("Rejected expired %s token", self.audience)
            raise InvalidTokenError("Token has expired") from exc
        except jwt.PyJWTError as exc:
            logger.info("Rejected %s token: %s", self.audience, exc)
            raise InvalidTokenError() from exc
