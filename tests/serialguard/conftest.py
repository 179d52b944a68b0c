"""Shared fixtures for serialguard tests.

Provides:
- make_store: factory for a minimal reducer store that applies middleware
- sink: an in-memory diagnostic sink
- log_capture: loguru records emitted during a test
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import Any

import pytest
from loguru import logger

from serialguard.drivers.diagnostic_sink import InMemoryDiagnosticSink

Reducer = Callable[[Any, Any], Any]
INIT_ACTION = {"type": "@@INIT"}


class MiniStore:
    """Reducer store with redux-style middleware, enough to drive the guard.

    The initial state is computed before the middleware chain is built, so
    middleware only sees dispatches made through :meth:`dispatch`.
    """

    def __init__(self, reducer: Reducer, middleware: Sequence[Any] = ()) -> None:
        self._reducer = reducer
        self._state = reducer(None, INIT_ACTION)
        dispatch: Callable[[Any], Any] = self._reduce
        for item in reversed(middleware):
            dispatch = item(self)(dispatch)
        self._dispatch = dispatch

    def get_state(self) -> Any:
        return self._state

    def dispatch(self, action: Any) -> Any:
        return self._dispatch(action)

    def _reduce(self, action: Any) -> Any:
        self._state = self._reducer(self._state, action)
        return action


def combine(**slices: Reducer) -> Reducer:
    """Combine slice reducers into one reducer over a dict state."""

    def reducer(state: Any, action: Any) -> dict[str, Any]:
        state = state or {}
        return {name: fn(state.get(name), action) for name, fn in slices.items()}

    return reducer


@pytest.fixture
def make_store() -> type[MiniStore]:
    """Return the MiniStore class."""
    return MiniStore


@pytest.fixture
def combine_reducers() -> Callable[..., Reducer]:
    """Return the slice combinator."""
    return combine


@pytest.fixture
def sink() -> InMemoryDiagnosticSink:
    """Fresh in-memory diagnostic sink."""
    return InMemoryDiagnosticSink()


@pytest.fixture
def log_capture() -> Iterator[list[dict[str, Any]]]:
    """Capture loguru records emitted during the test."""
    captured_logs: list[dict[str, Any]] = []

    def capture(message: Any) -> None:
        record = message.record
        captured_logs.append({"level": record["level"].name, "message": record["message"]})

    handler_id = logger.add(capture, level="DEBUG", format="{message}")
    yield captured_logs
    logger.remove(handler_id)
