"""
Django implementation of ActivationAttemptRepository port.
"""

from asgiref.sync import sync_to_async

from activations.domain.attempt import ActivationAttempt
from activations.infrastructure.models import ActivationAttempt as ActivationAttemptModel
from activations.ports.attempt_repository import ActivationAttemptRepository


class DjangoActivationAttemptRepository(ActivationAttemptRepository):
    """Django ORM implementation of ActivationAttemptRepository."""

    async def add(self, attempt: ActivationAttempt) -> None:
        # pylint: disable=no-member
        await sync_to_async(ActivationAttemptModel.objects.create)(
            id=attempt.id,
            channel=attempt.channel.value,
            result=attempt.result.value,
            product_id=attempt.product_id,
            license_id=attempt.license_id,
            license_key=attempt.license_key,
            device_id_hash=attempt.device_id_hash,
            ip=attempt.ip,
            reason=attempt.reason,
            created_at=attempt.created_at,
        )
