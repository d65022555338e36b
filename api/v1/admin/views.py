"""
Operator API views.

Back-office endpoints. ``OperatorAuthenticationMiddleware`` authenticates
the bearer token; each view checks the permission it needs.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.revoke_device import RevokeDeviceCommand
from activations.application.handlers.activation_stats_handler import ActivationStatsHandler
from activations.application.handlers.revoke_device_handler import RevokeDeviceHandler
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoDeviceActivationRepository,
)
from activations.infrastructure.repositories.django_attempt_repository import (
    DjangoActivationAttemptRepository,
)
from api.exceptions import validation_error_response
from api.v1.admin.serializers import (
    CreateVoucherBatchRequestSerializer,
    DeviceActivationResponseSerializer,
    GenerateLicenseFileRequestSerializer,
    LicenseFileResponseSerializer,
    LicenseStatusResponseSerializer,
    RenewLicenseRequestSerializer,
    RevalidationSettingSerializer,
    RevokeDeviceRequestSerializer,
    StatsResponseSerializer,
    VoucherBatchResponseSerializer,
    VoucherResponseSerializer,
)
from api.v1.request_context import client_ip, require_permission
from catalog.infrastructure.repositories.django_product_repository import (
    DjangoProductRepository,
)
from core.application.commands.update_revalidation_setting import (
    UpdateRevalidationSettingCommand,
)
from core.application.handlers.update_revalidation_setting_handler import (
    UpdateRevalidationSettingHandler,
)
from core.config import ActivationConfig
from core.domain.value_objects import DeviceFingerprint, LicenseType, PlanType
from core.infrastructure.database import DjangoUnitOfWork
from core.infrastructure.repositories.django_settings_repository import (
    DjangoSettingsRepository,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.handlers.license_lifecycle_handlers import (
    RenewLicenseHandler,
    ResumeLicenseHandler,
    RevokeLicenseHandler,
    SuspendLicenseHandler,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from offline.application.commands.generate_license_file import GenerateLicenseFileCommand
from offline.application.dto.offline_dto import LicenseFileDTO
from offline.application.handlers.download_license_file_handler import (
    DownloadLicenseFileHandler,
)
from offline.application.handlers.generate_license_file_handler import (
    GenerateLicenseFileHandler,
)
from offline.infrastructure.repositories.django_license_file_repository import (
    DjangoOfflineLicenseFileRepository,
)
from offline.infrastructure.repositories.django_offline_request_repository import (
    DjangoOfflineRequestRepository,
)
from vouchers.application.commands.cancel_voucher import CancelVoucherCommand
from vouchers.application.commands.create_voucher_batch import CreateVoucherBatchCommand
from vouchers.application.handlers.cancel_voucher_handler import CancelVoucherHandler
from vouchers.application.handlers.create_voucher_batch_handler import (
    CreateVoucherBatchHandler,
)
from vouchers.domain.voucher import LicenseTemplate
from vouchers.infrastructure.repositories.django_voucher_repository import (
    DjangoVoucherRepository,
)

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoDeviceActivationRepository()
_attempt_repo = DjangoActivationAttemptRepository()
_product_repo = DjangoProductRepository()
_offline_request_repo = DjangoOfflineRequestRepository()
_license_file_repo = DjangoOfflineLicenseFileRepository()
_voucher_repo = DjangoVoucherRepository()
_unit_of_work = DjangoUnitOfWork()

tracer = get_tracer(__name__)


class GenerateLicenseFileView(APIView):
    """View for issuing signed offline license files."""

    @extend_schema(
        operation_id="generate_offline_license_file",
        summary="Generate Offline License File",
        tags=["Admin API"],
        request=GenerateLicenseFileRequestSerializer,
        responses={
            200: LicenseFileResponseSerializer,
            400: {"description": "Invalid request file"},
            403: {"description": "Offline not allowed or license not usable"},
            404: {"description": "License not found"},
            409: {"description": "Nonce already used"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue an offline license file."""
        return async_to_sync(self._handle_generate)(request)

    async def _handle_generate(self, request: Request) -> Response:
        """Async handler for license file generation."""
        with tracer.start_as_current_span("generate_offline_license_file") as span:
            operator = require_permission(request, "offline:write")

            serializer = GenerateLicenseFileRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            span.set_attribute("license.id", str(data["license_id"]))

            handler = GenerateLicenseFileHandler(
                license_repository=_license_repo,
                offline_request_repository=_offline_request_repo,
                license_file_repository=_license_file_repo,
                attempt_repository=_attempt_repo,
                config=ActivationConfig.from_settings(),
                unit_of_work=_unit_of_work,
            )
            result = await handler.handle(
                GenerateLicenseFileCommand(
                    request_file=dict(data["request_file"]),
                    license_id=data["license_id"],
                    actor=operator.subject,
                    ip=client_ip(request),
                )
            )

            span.set_attribute("offline.file", result.file_name)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseFileResponseSerializer(result).data)


class DownloadLicenseFileView(APIView):
    """View for downloading an issued offline license file."""

    @extend_schema(
        operation_id="download_offline_license_file",
        summary="Download Offline License File",
        tags=["Admin API"],
        responses={200: {"description": "License file attachment"}, 404: {"description": "Not found"}},
    )
    def get(self, request: Request, file_id) -> Response:
        """Download a license file as a JSON attachment."""
        require_permission(request, "offline:write")
        handler = DownloadLicenseFileHandler(license_file_repository=_license_file_repo)
        license_file = async_to_sync(handler.handle)(file_id)

        body = LicenseFileDTO.from_entity(license_file).artifact()
        response = Response(body)
        response["Content-Disposition"] = f'attachment; filename="{license_file.file_name}"'
        return response


class OfflinePublicKeyView(APIView):
    """View publishing the offline signing public key."""

    @extend_schema(
        operation_id="offline_public_key",
        summary="Offline Public Key",
        tags=["Admin API"],
        responses={200: {"description": "Base64 Ed25519 public key"}},
    )
    def get(self, request: Request) -> Response:
        require_permission(request, "offline:write")
        signer = ActivationConfig.from_settings().offline_signer()
        return Response({"publicKeyEd25519": signer.public_key_b64})


class _LicenseTransitionView(APIView):
    """Shared body of the license lifecycle views."""

    handler_class = None
    command_class = None
    span_name = None

    @extend_schema(
        tags=["Admin API"],
        request=None,
        responses={
            200: LicenseStatusResponseSerializer,
            404: {"description": "License not found"},
            409: {"description": "Transition not allowed"},
        },
    )
    def post(self, request: Request, license_id) -> Response:
        return async_to_sync(self._handle_transition)(request, license_id)

    def build_command(self, request: Request, license_id, actor: str):
        return self.command_class(license_id=license_id, actor=actor)

    async def _handle_transition(self, request: Request, license_id) -> Response:
        with tracer.start_as_current_span(self.span_name) as span:
            operator = require_permission(request, "licenses:write")
            span.set_attribute("license.id", str(license_id))

            command = self.build_command(request, license_id, operator.subject)
            if isinstance(command, Response):
                return command

            handler = self.handler_class(license_repository=_license_repo)
            result = await handler.handle(command)

            span.set_attribute("license.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseStatusResponseSerializer(result).data)


class SuspendLicenseView(_LicenseTransitionView):
    """View for suspending a license."""

    handler_class = SuspendLicenseHandler
    command_class = SuspendLicenseCommand
    span_name = "suspend_license"


class ResumeLicenseView(_LicenseTransitionView):
    """View for resuming a suspended license."""

    handler_class = ResumeLicenseHandler
    command_class = ResumeLicenseCommand
    span_name = "resume_license"


class RevokeLicenseView(_LicenseTransitionView):
    """View for revoking a license."""

    handler_class = RevokeLicenseHandler
    command_class = RevokeLicenseCommand
    span_name = "revoke_license"


class RenewLicenseView(_LicenseTransitionView):
    """View for renewing a license."""

    handler_class = RenewLicenseHandler
    command_class = RenewLicenseCommand
    span_name = "renew_license"

    @extend_schema(
        tags=["Admin API"],
        request=RenewLicenseRequestSerializer,
        responses={
            200: LicenseStatusResponseSerializer,
            404: {"description": "License not found"},
            409: {"description": "License is revoked"},
        },
    )
    def post(self, request: Request, license_id) -> Response:
        return super().post(request, license_id)

    def build_command(self, request: Request, license_id, actor: str):
        serializer = RenewLicenseRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        return RenewLicenseCommand(
            license_id=license_id,
            add_days=serializer.validated_data["add_days"],
            actor=actor,
        )


class RevokeDeviceView(APIView):
    """View for revoking a device on a license."""

    @extend_schema(
        operation_id="revoke_device",
        summary="Revoke Device",
        tags=["Admin API"],
        request=RevokeDeviceRequestSerializer,
        responses={200: DeviceActivationResponseSerializer, 404: {"description": "Not found"}},
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_revoke)(request)

    async def _handle_revoke(self, request: Request) -> Response:
        with tracer.start_as_current_span("revoke_device") as span:
            operator = require_permission(request, "activations:write")

            serializer = RevokeDeviceRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            device_id_hash = data.get("device_id_hash") or DeviceFingerprint(
                data["device_fingerprint"]
            ).hash()

            handler = RevokeDeviceHandler(activation_repository=_activation_repo)
            result = await handler.handle(
                RevokeDeviceCommand(
                    license_id=data["license_id"],
                    device_id_hash=device_id_hash,
                    actor=operator.subject,
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(DeviceActivationResponseSerializer(result).data)


class CreateVoucherBatchView(APIView):
    """View for creating a batch of vouchers."""

    @extend_schema(
        operation_id="create_voucher_batch",
        summary="Create Voucher Batch",
        tags=["Admin API"],
        request=CreateVoucherBatchRequestSerializer,
        responses={201: VoucherBatchResponseSerializer, 400: {"description": "Bad Request"}},
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_create_batch)(request)

    async def _handle_create_batch(self, request: Request) -> Response:
        with tracer.start_as_current_span("create_voucher_batch") as span:
            operator = require_permission(request, "vouchers:write")

            serializer = CreateVoucherBatchRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            template = LicenseTemplate(
                license_type=LicenseType(data["license_type"]),
                plan_type=PlanType(data["plan_type"]),
                license_duration_days=data.get("license_duration_days"),
                max_devices=data["max_devices"],
                max_activations=data["max_activations"],
                offline_allowed=data["offline_allowed"],
                revalidate_days=data.get("revalidate_days"),
                allowed_version_min=data.get("allowed_version_min") or None,
                allowed_version_max=data.get("allowed_version_max") or None,
                modules=dict(data["modules"]),
                features=dict(data["features"]),
                notes=data.get("notes") or "",
            )

            handler = CreateVoucherBatchHandler(
                voucher_repository=_voucher_repo,
                product_repository=_product_repo,
                config=ActivationConfig.from_settings(),
            )
            result = await handler.handle(
                CreateVoucherBatchCommand(
                    product_id=data["product_id"],
                    quantity=data["quantity"],
                    template=template,
                    batch_name=data.get("batch_name"),
                    actor=operator.subject,
                )
            )

            span.set_attribute("voucher.count", result.count)
            span.set_status(Status(StatusCode.OK))
            return Response(
                VoucherBatchResponseSerializer(result).data, status=status.HTTP_201_CREATED
            )


class CancelVoucherView(APIView):
    """View for cancelling an unused voucher."""

    @extend_schema(
        operation_id="cancel_voucher",
        summary="Cancel Voucher",
        tags=["Admin API"],
        request=None,
        responses={
            200: VoucherResponseSerializer,
            404: {"description": "Voucher not found"},
            409: {"description": "Voucher is not UNUSED"},
        },
    )
    def post(self, request: Request, voucher_id) -> Response:
        operator = require_permission(request, "vouchers:write")
        handler = CancelVoucherHandler(voucher_repository=_voucher_repo)
        result = async_to_sync(handler.handle)(
            CancelVoucherCommand(voucher_id=voucher_id, actor=operator.subject)
        )
        return Response(VoucherResponseSerializer(result).data)


class RevalidationSettingView(APIView):
    """View for updating the global revalidation window."""

    @extend_schema(
        operation_id="update_revalidation_setting",
        summary="Update Revalidation Setting",
        tags=["Admin API"],
        request=RevalidationSettingSerializer,
        responses={200: RevalidationSettingSerializer},
    )
    def put(self, request: Request) -> Response:
        operator = require_permission(request, "settings:write")

        serializer = RevalidationSettingSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        config = ActivationConfig.from_settings()
        handler = UpdateRevalidationSettingHandler(
            settings_repository=DjangoSettingsRepository(
                cache_timeout=config.settings_cache_timeout
            )
        )
        setting = async_to_sync(handler.handle)(
            UpdateRevalidationSettingCommand(
                offline_days=serializer.validated_data["offline_days"],
                actor=operator.subject,
            )
        )
        return Response(setting.to_value())


class StatsView(APIView):
    """View for operator statistics."""

    @extend_schema(
        operation_id="stats",
        summary="Statistics",
        tags=["Admin API"],
        responses={200: StatsResponseSerializer},
    )
    def get(self, request: Request) -> Response:
        require_permission(request, "stats:read")
        handler = ActivationStatsHandler(
            license_repository=_license_repo,
            activation_repository=_activation_repo,
            voucher_repository=_voucher_repo,
        )
        result = async_to_sync(handler.handle)()
        return Response(StatsResponseSerializer(result).data)
