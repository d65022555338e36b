"""
Service configuration.

Key material and protocol defaults are read once from the
``ACTIVATION_SERVICE`` Django setting and passed to handlers explicitly.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional

from core.crypto.signing import Ed25519Signer
from core.crypto.tokens import ACCESS_AUDIENCE, ACTIVATION_AUDIENCE, TokenSigner

DEFAULT_ISSUER = "license-activation-service"


@dataclass(frozen=True)
class ActivationConfig:
    """
    Configuration for the activation engine.

    Attributes:
        signing_key: Base64 Ed25519 seed used to sign offline license files
        activation_token_secret: HMAC secret for client activation tokens
        access_token_secret: HMAC secret for operator access tokens
        token_issuer: ``iss`` claim pinned on every token
        offline_days: Default revalidation window when neither the license
            nor the ``revalidation`` setting provides one
        token_ttl_access: Lifetime of operator access tokens
        token_ttl_activation: Fixed lifetime for activation tokens; when unset
            the token lives as long as the revalidation window
        offline_fallback_days: Offline file lifetime for licenses without expiry
        voucher_prefix: Prefix of generated voucher codes
        settings_cache_timeout: Seconds stored settings are cached for
    """

    signing_key: str = ""
    activation_token_secret: str = ""
    access_token_secret: str = ""
    token_issuer: str = DEFAULT_ISSUER
    offline_days: int = 7
    token_ttl_access: timedelta = timedelta(minutes=30)
    token_ttl_activation: Optional[timedelta] = None
    offline_fallback_days: int = 3650
    voucher_prefix: str = "FT"
    settings_cache_timeout: int = 60

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "ActivationConfig":
        """Build from an ``ACTIVATION_SERVICE``-style dict."""
        ttl_activation_days = values.get("TOKEN_TTL_ACTIVATION_DAYS")
        return cls(
            signing_key=values.get("SIGNING_KEY", ""),
            activation_token_secret=values.get("ACTIVATION_TOKEN_SECRET", ""),
            access_token_secret=values.get("ACCESS_TOKEN_SECRET", ""),
            token_issuer=values.get("TOKEN_ISSUER", DEFAULT_ISSUER),
            offline_days=int(values.get("OFFLINE_DAYS", 7)),
            token_ttl_access=timedelta(minutes=int(values.get("TOKEN_TTL_ACCESS_MINUTES", 30))),
            token_ttl_activation=(
                timedelta(days=int(ttl_activation_days)) if ttl_activation_days else None
            ),
            offline_fallback_days=int(values.get("OFFLINE_FALLBACK_DAYS", 3650)),
            voucher_prefix=values.get("VOUCHER_PREFIX", "FT"),
            settings_cache_timeout=int(values.get("SETTINGS_CACHE_TIMEOUT", 60)),
        )

    @classmethod
    def from_settings(cls) -> "ActivationConfig":
        """Build from ``settings.ACTIVATION_SERVICE``."""
        from django.conf import settings

        return cls.from_dict(getattr(settings, "ACTIVATION_SERVICE", {}))

    def activation_token_signer(self) -> TokenSigner:
        return TokenSigner(self.activation_token_secret, self.token_issuer, ACTIVATION_AUDIENCE)

    def access_token_signer(self) -> TokenSigner:
        return TokenSigner(self.access_token_secret, self.token_issuer, ACCESS_AUDIENCE)

    def offline_signer(self) -> Ed25519Signer:
        """
        Raises:
            SigningKeyError: If ``signing_key`` is not a 32 or 64 byte base64 key
        """
        return Ed25519Signer(self.signing_key)
