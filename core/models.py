"""
Model registration for the core app.
"""
from core.infrastructure.models import Setting  # noqa: F401
