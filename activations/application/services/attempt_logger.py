"""
Attempt logger.

Best-effort sink for activation attempts. A failing write must never
change the outcome of the attempt it describes, so errors are logged and
dropped here.
"""
import logging
import uuid
from typing import Optional

from activations.domain.attempt import ActivationAttempt, AttemptChannel, AttemptResult
from activations.ports.attempt_repository import ActivationAttemptRepository
from core.metrics import activation_attempt_log_failures_total, activation_attempts_total

logger = logging.getLogger(__name__)


class AttemptLogger:
    """Records ActivationAttempt rows and attempt metrics."""

    def __init__(self, attempt_repository: ActivationAttemptRepository):
        self.attempt_repository = attempt_repository

    async def record(
        self,
        channel: AttemptChannel,
        result: AttemptResult,
        product_id: Optional[uuid.UUID] = None,
        license_id: Optional[uuid.UUID] = None,
        license_key: Optional[str] = None,
        device_id_hash: Optional[str] = None,
        ip: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Optional[ActivationAttempt]:
        """
        Record one attempt.

        Returns:
            The stored attempt, or None if the write failed
        """
        activation_attempts_total.labels(channel=channel.value, result=result.value).inc()
        attempt = ActivationAttempt.create(
            channel=channel,
            result=result,
            product_id=product_id,
            license_id=license_id,
            license_key=license_key,
            device_id_hash=device_id_hash,
            ip=ip,
            reason=reason,
        )
        try:
            await self.attempt_repository.add(attempt)
        except Exception:  # pylint: disable=broad-exception-caught
            activation_attempt_log_failures_total.inc()
            logger.exception(
                "Failed to record %s attempt (%s)",
                channel.value,
                result.value,
                extra={"license_id": str(license_id) if license_id else None},
            )
            return None
        return attempt

    async def record_failure(
        self, channel: AttemptChannel, exc: BaseException, **fields
    ) -> Optional[ActivationAttempt]:
        """Record a failed attempt, mapping ``exc`` onto the result taxonomy."""
        result = AttemptResult.from_exception(exc)
        reason = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
        return await self.record(channel, result, reason=reason, **fields)
