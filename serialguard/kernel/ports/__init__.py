"""Port interfaces between the invariant middleware and its host."""

from serialguard.kernel.ports.diagnostic_sink import DiagnosticSink
from serialguard.kernel.ports.store import Dispatch, GetState, StoreAPI

__all__ = ["DiagnosticSink", "Dispatch", "GetState", "StoreAPI"]
