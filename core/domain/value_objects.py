"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional

from core.crypto.hashing import hash_device_fingerprint


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation. Stored lower-cased."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")
        object.__setattr__(self, "value", self.value.strip().lower())

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class ProductSlug(ValueObject):
    """Product slug value object."""

    value: str

    def __post_init__(self):
        """Validate slug format."""
        if not self.value:
            raise ValueError("Product slug cannot be empty")
        if not self.value.replace("-", "").replace("_", "").isalnum():
            raise ValueError(f"Invalid product slug format: {self.value}")

    def __str__(self) -> str:
        """Return slug as string."""
        return self.value


@dataclass(frozen=True)
class DeviceFingerprint(ValueObject):
    """
    Client-generated machine identifier.

    Only the SHA-256 of the fingerprint is ever persisted or put in tokens.
    """

    value: str

    def __post_init__(self):
        """Validate fingerprint length."""
        if not self.value or len(self.value) < 8:
            raise ValueError("Device fingerprint must be at least 8 characters")

    def hash(self) -> str:
        """Return the one-way device id hash."""
        return hash_device_fingerprint(self.value)

    def __str__(self) -> str:
        """Never render the raw fingerprint."""
        return self.hash()


class LicenseStatus(Enum):
    """License status value object."""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class LicenseType(Enum):
    """License type value object."""

    DEMO = "DEMO"
    FULL = "FULL"

    def __str__(self) -> str:
        return self.value


class PlanType(Enum):
    """License plan value object."""

    SUBSCRIPTION = "SUBSCRIPTION"
    PERPETUAL = "PERPETUAL"

    def __str__(self) -> str:
        return self.value


WILDCARD_PERMISSION = "*"


@dataclass(frozen=True)
class Operator(ValueObject):
    """Authenticated back-office identity taken from an access token."""

    subject: str
    email: Optional[str] = None
    role: Optional[str] = None
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    def has_permission(self, permission: str) -> bool:
        """Check whether the operator holds ``permission`` (or the wildcard)."""
        return WILDCARD_PERMISSION in self.permissions or permission in self.permissions

    def __str__(self) -> str:
        return self.email or self.subject
