"""
Public API views.

Unauthenticated endpoints for end customers.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import validation_error_response
from api.v1.public.serializers import (
    RedeemVoucherRequestSerializer,
    RedeemVoucherResponseSerializer,
)
from catalog.infrastructure.repositories.django_product_repository import (
    DjangoProductRepository,
)
from catalog.infrastructure.repositories.django_tenant_repository import DjangoTenantRepository
from core.infrastructure.database import DjangoUnitOfWork
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from vouchers.application.commands.redeem_voucher import RedeemVoucherCommand
from vouchers.application.handlers.redeem_voucher_handler import RedeemVoucherHandler
from vouchers.infrastructure.repositories.django_voucher_repository import (
    DjangoVoucherRepository,
)

# Initialize repositories (in production, use DI container)
_voucher_repo = DjangoVoucherRepository()
_product_repo = DjangoProductRepository()
_tenant_repo = DjangoTenantRepository()
_license_repo = DjangoLicenseRepository()
_unit_of_work = DjangoUnitOfWork()

tracer = get_tracer(__name__)


class RedeemVoucherView(APIView):
    """View for voucher redemption."""

    @extend_schema(
        operation_id="redeem_voucher",
        summary="Redeem Voucher",
        description=(
            "Redeem a voucher code. The tenant is found by contact email or "
            "created, and a license is issued from the voucher's template."
        ),
        tags=["Public API"],
        request=RedeemVoucherRequestSerializer,
        responses={
            200: RedeemVoucherResponseSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "Voucher code not found"},
            409: {"description": "Voucher not available"},
        },
    )
    def post(self, request: Request) -> Response:
        """Redeem a voucher."""
        return async_to_sync(self._handle_redeem)(request)

    async def _handle_redeem(self, request: Request) -> Response:
        """Async handler for voucher redemption."""
        with tracer.start_as_current_span("redeem_voucher") as span:
            serializer = RedeemVoucherRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            handler = RedeemVoucherHandler(
                voucher_repository=_voucher_repo,
                product_repository=_product_repo,
                tenant_repository=_tenant_repo,
                license_repository=_license_repo,
                unit_of_work=_unit_of_work,
            )
            result = await handler.handle(
                RedeemVoucherCommand(
                    code=data["code"],
                    trade_name=data["trade_name"],
                    contact_email=data.get("contact_email") or None,
                    contact_phone=data.get("contact_phone") or None,
                )
            )

            span.set_attribute("license.id", str(result.license.id))
            span.set_status(Status(StatusCode.OK))
            return Response(RedeemVoucherResponseSerializer(result).data)
