"""Serializable state invariant middleware and its diagnostics."""

from serialguard.kernel.middleware.diagnostics import (
    Diagnostic,
    NonSerializableActionValue,
    NonSerializableStateValue,
    ScanPerformanceWarning,
)
from serialguard.kernel.middleware.invariant import (
    DispatchCheck,
    SerializableStateInvariantMiddleware,
    create_serializable_state_invariant_middleware,
    get_action_type,
)
from serialguard.kernel.middleware.models import MiddlewareConfig

__all__ = [
    "Diagnostic",
    "DispatchCheck",
    "MiddlewareConfig",
    "NonSerializableActionValue",
    "NonSerializableStateValue",
    "ScanPerformanceWarning",
    "SerializableStateInvariantMiddleware",
    "create_serializable_state_invariant_middleware",
    "get_action_type",
]
