"""
Activation API views.

These endpoints are used by client applications to:
- Activate a device online
- Revalidate an activation token
- Validate an offline request file before sending it to an operator
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.online_activation import OnlineActivationCommand
from activations.application.commands.revalidate import RevalidateCommand
from activations.application.handlers.online_activation_handler import OnlineActivationHandler
from activations.application.handlers.revalidate_handler import RevalidateHandler
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoDeviceActivationRepository,
)
from activations.infrastructure.repositories.django_attempt_repository import (
    DjangoActivationAttemptRepository,
)
from api.exceptions import validation_error_response
from api.v1.activation.serializers import (
    ActivationTokenResponseSerializer,
    OfflineRequestFileSerializer,
    OnlineActivationRequestSerializer,
    RequestValidationResponseSerializer,
    RevalidateRequestSerializer,
)
from api.v1.request_context import client_ip, user_agent
from catalog.infrastructure.repositories.django_product_repository import (
    DjangoProductRepository,
)
from core.config import ActivationConfig
from core.infrastructure.repositories.django_settings_repository import (
    DjangoSettingsRepository,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from offline.application.commands.validate_request import ValidateRequestCommand
from offline.application.handlers.validate_request_handler import ValidateRequestHandler
from offline.infrastructure.repositories.django_offline_request_repository import (
    DjangoOfflineRequestRepository,
)

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoDeviceActivationRepository()
_attempt_repo = DjangoActivationAttemptRepository()
_product_repo = DjangoProductRepository()
_offline_request_repo = DjangoOfflineRequestRepository()

tracer = get_tracer(__name__)


def _settings_repo(config: ActivationConfig) -> DjangoSettingsRepository:
    return DjangoSettingsRepository(cache_timeout=config.settings_cache_timeout)


class OnlineActivationView(APIView):
    """View for online device activation."""

    @extend_schema(
        operation_id="activate_online",
        summary="Online Activation",
        description=(
            "Activate a device against a license key for a product. "
            "Returns a signed activation token and its offline window."
        ),
        tags=["Activation API"],
        request=OnlineActivationRequestSerializer,
        responses={
            200: ActivationTokenResponseSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "License not usable, version blocked or device limit reached"},
            404: {"description": "License key not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a device online."""
        return async_to_sync(self._handle_online_activation)(request)

    async def _handle_online_activation(self, request: Request) -> Response:
        """Async handler for online activation."""
        with tracer.start_as_current_span("online_activation") as span:
            span.set_attribute("operation", "online_activation")

            serializer = OnlineActivationRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            span.set_attribute("product.id", str(data["product_id"]))
            span.set_attribute("app.version", data["app_version"])

            config = ActivationConfig.from_settings()
            handler = OnlineActivationHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
                attempt_repository=_attempt_repo,
                settings_repository=_settings_repo(config),
                config=config,
            )
            command = OnlineActivationCommand(
                license_key=data["license_key"],
                product_id=data["product_id"],
                app_version=data["app_version"],
                device_fingerprint=data["device_fingerprint"],
                ip=client_ip(request),
                user_agent=user_agent(request),
            )

            result = await handler.handle(command)

            span.set_attribute("offline_days", result.offline_days)
            span.set_status(Status(StatusCode.OK))
            return Response(
                ActivationTokenResponseSerializer(result).data, status=status.HTTP_200_OK
            )


class RevalidateView(APIView):
    """View for activation token revalidation."""

    @extend_schema(
        operation_id="revalidate",
        summary="Revalidate Activation",
        description="Exchange a valid activation token for a fresh one.",
        tags=["Activation API"],
        request=RevalidateRequestSerializer,
        responses={
            200: ActivationTokenResponseSerializer,
            401: {"description": "Invalid activation token"},
            403: {"description": "License not usable or device not active"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Revalidate an activation token."""
        return async_to_sync(self._handle_revalidate)(request)

    async def _handle_revalidate(self, request: Request) -> Response:
        """Async handler for revalidation."""
        with tracer.start_as_current_span("revalidate") as span:
            span.set_attribute("operation", "revalidate")

            serializer = RevalidateRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            config = ActivationConfig.from_settings()
            handler = RevalidateHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
                attempt_repository=_attempt_repo,
                settings_repository=_settings_repo(config),
                config=config,
            )
            result = await handler.handle(
                RevalidateCommand(
                    activation_token=data["activation_token"],
                    device_fingerprint=data["device_fingerprint"],
                    app_version=data["app_version"],
                    ip=client_ip(request),
                    user_agent=user_agent(request),
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(ActivationTokenResponseSerializer(result).data)


class ValidateOfflineRequestView(APIView):
    """View for offline request file validation."""

    @extend_schema(
        operation_id="validate_offline_request",
        summary="Validate Offline Request",
        description=(
            "Check the checksum, product and optional signature of an offline "
            "request file, and that its nonce has not been used."
        ),
        tags=["Activation API"],
        request=OfflineRequestFileSerializer,
        responses={
            200: RequestValidationResponseSerializer,
            400: {"description": "Invalid request file, product or signature"},
            409: {"description": "Nonce already used"},
        },
    )
    def post(self, request: Request) -> Response:
        """Validate an offline request file."""
        return async_to_sync(self._handle_validate)(request)

    async def _handle_validate(self, request: Request) -> Response:
        """Async handler for offline request validation."""
        with tracer.start_as_current_span("validate_offline_request") as span:
            serializer = OfflineRequestFileSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            span.set_attribute("offline.nonce", str(data["payload"].get("nonce")))

            handler = ValidateRequestHandler(
                product_repository=_product_repo,
                offline_request_repository=_offline_request_repo,
            )
            result = await handler.handle(
                ValidateRequestCommand(
                    payload=data["payload"],
                    checksum_sha256=data["checksumSha256"],
                    signature_ed25519=data.get("signatureEd25519"),
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(RequestValidationResponseSerializer(result).data)
