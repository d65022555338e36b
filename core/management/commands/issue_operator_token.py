"""
Django management command to mint an operator access token.

The token authenticates requests to the ``/api/v1/admin/`` endpoints.
"""

from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError

from core.config import ActivationConfig


class Command(BaseCommand):
    """Command to issue an operator access token."""

    help = "Issue a bearer access token for the operator API"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("--subject", required=True, help="Operator identifier (sub claim)")
        parser.add_argument("--email", default=None, help="Operator email")
        parser.add_argument("--role", default=None, help="Operator role")
        parser.add_argument(
            "--permission",
            action="append",
            dest="permissions",
            default=[],
            help="Granted permission, repeatable (use '*' for all)",
        )
        parser.add_argument(
            "--ttl-minutes",
            type=int,
            default=None,
            help="Token lifetime in minutes (default: configured access TTL)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        config = ActivationConfig.from_settings()
        try:
            signer = config.access_token_signer()
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        if not options["permissions"]:
            raise CommandError("At least one --permission is required")

        ttl = (
            timedelta(minutes=options["ttl_minutes"])
            if options["ttl_minutes"]
            else config.token_ttl_access
        )
        claims = {"sub": options["subject"], "permissions": sorted(set(options["permissions"]))}
        if options["email"]:
            claims["email"] = options["email"]
        if options["role"]:
            claims["role"] = options["role"]

        self.stdout.write(signer.sign(claims, ttl=ttl))
