"""Diagnostic sink that keeps reports in memory."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from serialguard.kernel.middleware.diagnostics import Diagnostic

D = TypeVar("D", bound="Diagnostic")


class InMemoryDiagnosticSink:
    """Collects diagnostics for later inspection.

    Examples
    --------
    >>> sink = InMemoryDiagnosticSink()
    >>> sink.messages
    []
    """

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def messages(self) -> list[str]:
        """Rendered text of every collected diagnostic, oldest first."""
        return [diagnostic.log_message() for diagnostic in self.diagnostics]

    def of_type(self, diagnostic_type: type[D]) -> list[D]:
        """Return the collected diagnostics of one class."""
        return [d for d in self.diagnostics if isinstance(d, diagnostic_type)]

    def clear(self) -> None:
        self.diagnostics.clear()

    def __len__(self) -> int:
        return len(self.diagnostics)
