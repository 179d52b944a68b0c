"""serialguard - serializability guard for message-dispatch stores.

Before and after each dispatched action, the invariant middleware walks the
action and the resulting state tree and reports the first value that could
not be persisted, transmitted or replayed.
"""

# Version is defined in pyproject.toml and read dynamically
try:
    from importlib.metadata import version

    __version__ = version("serialguard")
except Exception:
    __version__ = "0.0.0.dev0"  # Fallback for development installs

from serialguard.drivers.diagnostic_sink import (
    ConsoleDiagnosticSink,
    InMemoryDiagnosticSink,
    LoggingDiagnosticSink,
)
from serialguard.kernel.config import SerialGuardConfig, load_config
from serialguard.kernel.exceptions import (
    ConfigurationError,
    ResolveError,
    SerialGuardError,
    ValidationError,
)
from serialguard.kernel.middleware import (
    MiddlewareConfig,
    NonSerializableActionValue,
    NonSerializableStateValue,
    ScanPerformanceWarning,
    SerializableStateInvariantMiddleware,
    create_serializable_state_invariant_middleware,
)
from serialguard.kernel.scanning import (
    NonSerializableValue,
    ScanCache,
    find_non_serializable_value,
    get_entries,
    is_plain,
)

__all__ = [
    "ConfigurationError",
    "ConsoleDiagnosticSink",
    "InMemoryDiagnosticSink",
    "LoggingDiagnosticSink",
    "MiddlewareConfig",
    "NonSerializableActionValue",
    "NonSerializableStateValue",
    "NonSerializableValue",
    "ResolveError",
    "ScanCache",
    "ScanPerformanceWarning",
    "SerialGuardConfig",
    "SerialGuardError",
    "SerializableStateInvariantMiddleware",
    "ValidationError",
    "create_serializable_state_invariant_middleware",
    "find_non_serializable_value",
    "get_entries",
    "is_plain",
    "load_config",
]
