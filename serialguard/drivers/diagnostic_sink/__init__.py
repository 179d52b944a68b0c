"""Diagnostic sink implementations."""

from serialguard.drivers.diagnostic_sink.console import ConsoleDiagnosticSink
from serialguard.drivers.diagnostic_sink.logging_sink import LoggingDiagnosticSink
from serialguard.drivers.diagnostic_sink.memory import InMemoryDiagnosticSink

__all__ = ["ConsoleDiagnosticSink", "InMemoryDiagnosticSink", "LoggingDiagnosticSink"]
