"""Diagnostic Sink Port - where the invariant middleware reports problems.

Sinks are write-only observers: they must not raise for well-formed
diagnostics and cannot influence the dispatch that produced them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from serialguard.kernel.middleware.diagnostics import Diagnostic


@runtime_checkable
class DiagnosticSink(Protocol):
    """Port interface for diagnostic output."""

    def report(self, diagnostic: Diagnostic) -> None:
        """Emit one diagnostic."""
        ...
