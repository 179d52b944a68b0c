"""Tests for the diagnostic sink drivers."""

from __future__ import annotations

import io
from typing import Any

import pytest
from rich.console import Console

from serialguard.drivers.diagnostic_sink import (
    ConsoleDiagnosticSink,
    InMemoryDiagnosticSink,
    LoggingDiagnosticSink,
)
from serialguard.kernel.middleware.diagnostics import (
    NonSerializableActionValue,
    NonSerializableStateValue,
    ScanPerformanceWarning,
)
from serialguard.kernel.ports.diagnostic_sink import DiagnosticSink


class RecordingLogger:
    """Stand-in logger that keeps (level, message) pairs."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append(("error", message))

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append(("warning", message))


@pytest.fixture
def state_violation() -> NonSerializableStateValue:
    return NonSerializableStateValue(key_path="a.b", value={1}, action_type="x")


@pytest.mark.parametrize(
    "sink",
    [InMemoryDiagnosticSink(), ConsoleDiagnosticSink(Console(file=io.StringIO())),
     LoggingDiagnosticSink(RecordingLogger())],
)
def test_sinks_implement_port(sink: Any) -> None:
    assert isinstance(sink, DiagnosticSink)


class TestLoggingDiagnosticSink:
    """Tests for LoggingDiagnosticSink."""

    def test_violations_are_errors(self, state_violation: NonSerializableStateValue) -> None:
        recorder = RecordingLogger()

        LoggingDiagnosticSink(recorder).report(state_violation)

        assert recorder.calls == [("error", state_violation.log_message())]

    def test_slow_scans_are_warnings(self) -> None:
        recorder = RecordingLogger()
        warning = ScanPerformanceWarning(elapsed_ms=50, warn_after_ms=32)

        LoggingDiagnosticSink(recorder).report(warning)

        assert recorder.calls == [("warning", warning.log_message())]

    def test_braces_reach_loguru_unformatted(self, log_capture: list[dict[str, Any]]) -> None:
        diagnostic = NonSerializableActionValue(
            key_path="type", value={"k": "{placeholder}"}, action={"type": "{x}"}
        )

        LoggingDiagnosticSink().report(diagnostic)

        assert [log["message"] for log in log_capture if log["level"] == "ERROR"] == [
            diagnostic.log_message()
        ]


class TestConsoleDiagnosticSink:
    """Tests for ConsoleDiagnosticSink."""

    def test_prints_message_verbatim(self, state_violation: NonSerializableStateValue) -> None:
        buffer = io.StringIO()

        ConsoleDiagnosticSink(Console(file=buffer, width=40)).report(state_violation)

        assert buffer.getvalue() == state_violation.log_message() + "\n"

    def test_markup_is_not_interpreted(self) -> None:
        buffer = io.StringIO()
        diagnostic = NonSerializableStateValue(
            key_path="[bold]x[/bold]", value=set(), action_type="[red]t"
        )

        ConsoleDiagnosticSink(Console(file=buffer)).report(diagnostic)

        assert "`[bold]x[/bold]`" in buffer.getvalue()
        assert "action type: [red]t." in buffer.getvalue()

    def test_defaults_to_stderr_console(self) -> None:
        sink = ConsoleDiagnosticSink()

        assert sink.console.stderr is True


class TestInMemoryDiagnosticSink:
    """Tests for InMemoryDiagnosticSink."""

    def test_collects_in_order(self, state_violation: NonSerializableStateValue) -> None:
        sink = InMemoryDiagnosticSink()
        warning = ScanPerformanceWarning(elapsed_ms=50, warn_after_ms=32)

        sink.report(state_violation)
        sink.report(warning)

        assert sink.diagnostics == [state_violation, warning]
        assert sink.messages == [state_violation.log_message(), warning.log_message()]
        assert len(sink) == 2

    def test_of_type(self, state_violation: NonSerializableStateValue) -> None:
        sink = InMemoryDiagnosticSink()
        sink.report(state_violation)

        assert sink.of_type(NonSerializableStateValue) == [state_violation]
        assert sink.of_type(NonSerializableActionValue) == []

    def test_clear(self, state_violation: NonSerializableStateValue) -> None:
        sink = InMemoryDiagnosticSink()
        sink.report(state_violation)

        sink.clear()

        assert len(sink) == 0
