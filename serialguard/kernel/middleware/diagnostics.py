"""Diagnostic data classes reported by the invariant middleware.

Diagnostics describe a problem; they are never raised. Each one renders
itself through :meth:`Diagnostic.log_message` into the fixed text shape
that sinks print or log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Literal

from rich.pretty import pretty_repr

ACTION_DOCS_URL = (
    "https://redux.js.org/faq/actions"
    "#why-should-type-be-a-string-or-at-least-serializable-why-should-my-action-types-be-constants"
)
STATE_DOCS_URL = (
    "https://redux.js.org/faq/organizing-state"
    "#can-i-put-functions-promises-or-other-non-serializable-items-in-my-store-state"
)

Severity = Literal["error", "warning"]


def render_value(value: Any) -> str:
    """Human-readable rendering of an arbitrary value.

    Examples
    --------
    >>> render_value({"type": "todos/added"})
    "{'type': 'todos/added'}"
    >>> render_value(set())
    'set()'
    """
    return pretty_repr(value)


@dataclass(slots=True)
class Diagnostic:
    """Base class for all diagnostics - provides timestamp and severity."""

    severity: ClassVar[Severity] = "error"

    timestamp: datetime = field(default_factory=datetime.now, init=False)

    def log_message(self) -> str:
        """Get the formatted text for this diagnostic."""
        return f"{self.__class__.__name__} at {self.timestamp.isoformat()}"


@dataclass(slots=True)
class NonSerializableActionValue(Diagnostic):
    """A dispatched action contains a non-serializable value."""

    key_path: str
    value: Any
    action: Any

    def log_message(self) -> str:
        return (
            "A non-serializable value was detected in an action, in the path: "
            f"`{self.key_path}`. Value: {render_value(self.value)}\n"
            f"Take a look at the logic that dispatched this action: {render_value(self.action)}\n"
            f"(See {ACTION_DOCS_URL})"
        )


@dataclass(slots=True)
class NonSerializableStateValue(Diagnostic):
    """The state produced by a dispatch contains a non-serializable value."""

    key_path: str
    value: Any
    action_type: Any

    def log_message(self) -> str:
        return (
            "A non-serializable value was detected in the state, in the path: "
            f"`{self.key_path}`. Value: {render_value(self.value)}\n"
            f"Take a look at the reducer(s) handling this action type: {self.action_type}.\n"
            f"(See {STATE_DOCS_URL})"
        )


@dataclass(slots=True)
class ScanPerformanceWarning(Diagnostic):
    """The scans around one dispatch took longer than the configured threshold.

    Attributes
    ----------
    elapsed_ms : float
        Combined duration of the action and state scans
    warn_after_ms : float
        Configured threshold
    """

    severity: ClassVar[Severity] = "warning"

    elapsed_ms: float
    warn_after_ms: float

    def log_message(self) -> str:
        return (
            f"SerializableStateInvariantMiddleware took {self.elapsed_ms:.0f}ms, "
            f"which is more than the warning threshold of {self.warn_after_ms:g}ms.\n"
            "If your state or actions are very large, you may want to narrow ignored_paths "
            "or disable the middleware as it might cause too much of a slowdown "
            "in development mode.\n"
            "It is meant for development only; disable it in production."
        )
