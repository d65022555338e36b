"""
App configuration for License Activation Service.
"""

import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class LicenseActivationServiceConfig(AppConfig):
    """App configuration for LicenseActivationService."""

    name = "LicenseActivationService"
    verbose_name = "License Activation Service"

    def ready(self):
        """Called when Django starts."""
        # Audit logging is wired up for every process, tests included.
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()

        # Skip tracing for management commands that don't serve traffic
        if len(sys.argv) > 1 and sys.argv[1] in [
            "migrate",
            "makemigrations",
            "collectstatic",
            "shell",
            "test",
            "check",
        ]:
            return

        # RUN_MAIN is "false" in the autoreloader's watcher process
        if os.environ.get("RUN_MAIN") == "false":
            return

        self.setup_observability()

    def setup_observability(self):
        """Setup OpenTelemetry after apps are ready."""
        from core.instrumentation import setup_opentelemetry

        try:
            setup_opentelemetry()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to setup OpenTelemetry: %s", e)
