"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. The ``code`` of each exception
is the machine-readable taxonomy code returned to API callers and
recorded on activation attempts.
"""

from typing import Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None, detail: Optional[str] = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            detail: Optional extra context shown to the caller
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.detail = detail


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when no license matches the key/product or id."""

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="INVALID_KEY")


class LicenseStatusError(LicenseException):
    """Base exception for licenses that are not ACTIVE."""

    pass


class LicenseExpiredError(LicenseStatusError):
    """Raised when a license has expired."""

    def __init__(self, message: str = "License has expired"):
        super().__init__(message, code="EXPIRED", detail="Estado: EXPIRED")


class LicenseSuspendedError(LicenseStatusError):
    """Raised when a license is suspended."""

    def __init__(self, message: str = "License is suspended"):
        super().__init__(message, code="SUSPENDED", detail="Estado: SUSPENDED")


class LicenseRevokedError(LicenseStatusError):
    """Raised when a license is revoked."""

    def __init__(self, message: str = "License is revoked"):
        super().__init__(message, code="REVOKED", detail="Estado: REVOKED")


class InvalidLicenseStatusError(LicenseException):
    """Raised when a license operation is invalid for the current status."""

    def __init__(self, message: str = "Invalid license status transition"):
        super().__init__(message, code="INVALID_STATUS_TRANSITION")


class VersionBlockedError(LicenseException):
    """Raised when the client version is outside the allowed window."""

    def __init__(self, message: str = "Application version not allowed", detail: str = None):
        super().__init__(message, code="VERSION_BLOCKED", detail=detail)


class AppMismatchError(LicenseException):
    """Raised when a license is used with a product it was not issued for."""

    def __init__(self, message: str = "License does not belong to this product"):
        super().__init__(message, code="APP_MISMATCH")


class ActivationException(DomainException):
    """Base exception for activation-related errors."""

    pass


class DeviceLimitExceededError(ActivationException):
    """Raised when the concurrent or lifetime device cap is reached."""

    def __init__(self, message: str = "Device limit reached"):
        super().__init__(message, code="DEVICE_LIMIT")


class DeviceNotActiveError(ActivationException):
    """Raised when a device has no active activation for the license."""

    def __init__(self, message: str = "Device is not active"):
        super().__init__(message, code="DEVICE_NOT_ACTIVE")


class ActivationNotFoundError(ActivationException):
    """Raised when an activation is not found."""

    def __init__(self, message: str = "Activation not found"):
        super().__init__(message, code="ACTIVATION_NOT_FOUND")


class InvalidTokenError(DomainException):
    """Raised when a bearer token fails signature, issuer, audience or expiry checks."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_TOKEN")


class PermissionDeniedError(DomainException):
    """Raised when an operator lacks the permission an operation requires."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, code="FORBIDDEN")


class OfflineException(DomainException):
    """Base exception for offline issuance errors."""

    pass


class InvalidRequestFileError(OfflineException):
    """Raised when an offline request file is malformed or its checksum does not match."""

    def __init__(
        self,
        message: str = "Invalid request file",
        code: str = "INVALID_REQUEST_FILE",
        detail: Optional[str] = None,
    ):
        super().__init__(message, code=code, detail=detail)


class InvalidSignatureError(InvalidRequestFileError):
    """Raised when an offline request signature does not verify."""

    def __init__(self, message: str = "Invalid request signature"):
        super().__init__(message, code="INVALID_SIGNATURE")


class InvalidProductError(OfflineException):
    """Raised when an offline request names an unknown product."""

    def __init__(self, message: str = "Invalid product"):
        super().__init__(message, code="INVALID_PRODUCT")


class OfflineNotAllowedError(OfflineException):
    """Raised when a license does not permit offline activation."""

    def __init__(self, message: str = "Offline activation not allowed for this license"):
        super().__init__(message, code="OFFLINE_NOT_ALLOWED")


class NonceAlreadyUsedError(OfflineException):
    """Raised when an offline request nonce has already produced a license file."""

    def __init__(self, message: str = "Request nonce already used"):
        super().__init__(message, code="NONCE_USED")


class OfflineLicenseFileNotFoundError(OfflineException):
    """Raised when an offline license file is not found."""

    def __init__(self, message: str = "Offline license file not found"):
        super().__init__(message, code="NOT_FOUND")


class VoucherException(DomainException):
    """Base exception for voucher-related errors."""

    pass


class VoucherNotFoundError(VoucherException):
    """Raised when a voucher code does not exist."""

    def __init__(self, message: str = "Voucher not found"):
        super().__init__(message, code="INVALID_KEY")


class VoucherUnavailableError(VoucherException):
    """Raised when a voucher is no longer UNUSED."""

    def __init__(self, status: str, message: str = "Voucher is not available"):
        super().__init__(message, code="VOUCHER_UNAVAILABLE", detail=f"Estado: {status}")
        self.status = status


class DuplicateVoucherCodeError(VoucherException):
    """Raised when a generated voucher code collides with an existing one."""

    def __init__(self, message: str = "Voucher code already exists"):
        super().__init__(message, code="DUPLICATE_VOUCHER_CODE")


def status_error(status) -> LicenseStatusError:
    """
    Build the exception reporting why a license with ``status`` cannot be used.

    Args:
        status: LicenseStatus of the license

    Returns:
        The matching LicenseStatusError subclass instance
    """
    value = getattr(status, "value", status)
    if value == "SUSPENDED":
        return LicenseSuspendedError()
    if value == "REVOKED":
        return LicenseRevokedError()
    return LicenseExpiredError()
