"""Diagnostic sink that prints plain text to a rich console."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from serialguard.kernel.middleware.diagnostics import Diagnostic


class ConsoleDiagnosticSink:
    """Print each diagnostic verbatim, one block per report.

    Markup, highlighting and wrapping are disabled so the text printed is
    exactly :meth:`Diagnostic.log_message` followed by a newline.

    Examples
    --------
    >>> import io
    >>> from rich.console import Console
    >>> buffer = io.StringIO()
    >>> sink = ConsoleDiagnosticSink(Console(file=buffer))
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console if console is not None else Console(stderr=True)

    def report(self, diagnostic: Diagnostic) -> None:
        self.console.print(
            diagnostic.log_message(),
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
