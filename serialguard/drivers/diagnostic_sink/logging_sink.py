"""Diagnostic sink that writes through the package logger."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from serialguard.kernel.logging import get_logger

if TYPE_CHECKING:
    from serialguard.kernel.middleware.diagnostics import Diagnostic

LOGGER = get_logger(__name__)


class LoggingDiagnosticSink:
    """Default sink: violations are logged as errors, slow scans as warnings."""

    def __init__(self, logger: Any | None = None) -> None:
        """Initialize with optional logger."""
        self.logger: Any = logger if logger is not None else LOGGER

    def report(self, diagnostic: Diagnostic) -> None:
        """Log the diagnostic text at its severity."""
        # No format args, so braces in rendered values are left alone
        if diagnostic.severity == "warning":
            self.logger.warning(diagnostic.log_message())
        else:
            self.logger.error(diagnostic.log_message())
