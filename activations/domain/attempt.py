"""
ActivationAttempt domain entity.

An append-only record of every activation, revalidation and offline
issuance attempt with its outcome.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from core.domain.clock import utcnow
from core.domain.exceptions import DomainException


class AttemptChannel(Enum):
    """Protocol an attempt came through."""

    ONLINE = "ONLINE"
    REVALIDATE = "REVALIDATE"
    OFFLINE = "OFFLINE"

    def __str__(self) -> str:
        return self.value


class AttemptResult(Enum):
    """Outcome taxonomy recorded for attempts."""

    SUCCESS = "SUCCESS"
    INVALID_KEY = "INVALID_KEY"
    APP_MISMATCH = "APP_MISMATCH"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"
    SUSPENDED = "SUSPENDED"
    DEVICE_LIMIT = "DEVICE_LIMIT"
    VERSION_BLOCKED = "VERSION_BLOCKED"
    OFFLINE_NOT_ALLOWED = "OFFLINE_NOT_ALLOWED"
    ERROR = "ERROR"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_exception(cls, exc: BaseException) -> "AttemptResult":
        """Map an exception to its taxonomy code. Anything unrecognised is ERROR."""
        if isinstance(exc, DomainException):
            try:
                return cls(exc.code)
            except ValueError:
                return cls.ERROR
        return cls.ERROR


@dataclass(frozen=True)
class ActivationAttempt:
    """ActivationAttempt domain entity."""

    id: uuid.UUID
    channel: AttemptChannel
    result: AttemptResult
    product_id: Optional[uuid.UUID]
    license_id: Optional[uuid.UUID]
    license_key: Optional[str]
    device_id_hash: Optional[str]
    ip: Optional[str]
    reason: Optional[str]
    created_at: datetime

    @classmethod
    def create(
        cls,
        channel: AttemptChannel,
        result: AttemptResult,
        product_id: Optional[uuid.UUID] = None,
        license_id: Optional[uuid.UUID] = None,
        license_key: Optional[str] = None,
        device_id_hash: Optional[str] = None,
        ip: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> "ActivationAttempt":
        return cls(
            id=uuid.uuid4(),
            channel=channel,
            result=result,
            product_id=product_id,
            license_id=license_id,
            license_key=license_key,
            device_id_hash=device_id_hash,
            ip=ip,
            reason=reason,
            created_at=utcnow(),
        )
