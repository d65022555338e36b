"""
Model registration for the activations app.
"""
from activations.infrastructure.models import ActivationAttempt, DeviceActivation  # noqa: F401
