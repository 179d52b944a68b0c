"""Serializable state invariant middleware.

Wraps one dispatch stage of a message-dispatch store. Before the action is
forwarded it is scanned for non-serializable values; after the next stage
returns, the resulting state is scanned as well. Problems are reported to a
diagnostic sink and never block, alter or fail the dispatch.

Three equivalent ways to install it:

- redux-style chain: ``middleware(store)(next_dispatch)(action)``
- explicit wrapper: ``middleware.wrap(next_dispatch, get_state)``
- hook pair: ``before_dispatch(action)`` then ``after_dispatch(check, state)``

Examples
--------
Example usage::

    guard = SerializableStateInvariantMiddleware(ignored_paths=["session.socket"])
    dispatch = guard.wrap(store.dispatch, store.get_state)
    dispatch({"type": "todos/added", "text": "write docs"})
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from serialguard.kernel.logging import configure_logging, get_logger
from serialguard.kernel.middleware.diagnostics import (
    NonSerializableActionValue,
    NonSerializableStateValue,
    ScanPerformanceWarning,
)
from serialguard.kernel.middleware.models import MiddlewareConfig
from serialguard.kernel.scanning.cache import ScanCache
from serialguard.kernel.scanning.scanner import find_non_serializable_value
from serialguard.kernel.utils.timing import TimeBudget

if TYPE_CHECKING:
    from serialguard.kernel.config.models import SerialGuardConfig
    from serialguard.kernel.ports.diagnostic_sink import DiagnosticSink
    from serialguard.kernel.ports.store import Dispatch, GetState, StoreAPI

logger = get_logger(__name__)


def get_action_type(action: Any) -> Any:
    """Read the type of an action: ``action["type"]`` or ``action.type``."""
    if isinstance(action, Mapping):
        return action.get("type")
    return getattr(action, "type", None)


@dataclass(slots=True)
class DispatchCheck:
    """Per-dispatch bookkeeping shared by the before and after hooks.

    Attributes
    ----------
    action : Any
        The dispatched action
    action_type : Any
        Type read from the action
    skipped : bool
        True when the action type is ignored and no scan runs
    budget : TimeBudget
        Accumulated scan time of this dispatch
    """

    action: Any
    action_type: Any
    skipped: bool
    budget: TimeBudget


class SerializableStateInvariantMiddleware:
    """Reports the first non-serializable value in each action and resulting state.

    The middleware owns a :class:`ScanCache` for the state scans unless
    ``disable_cache`` is set. Dispatches are expected to run one at a time.
    """

    def __init__(
        self,
        config: MiddlewareConfig | None = None,
        *,
        sink: DiagnosticSink | None = None,
        **options: Any,
    ) -> None:
        """Initialize the middleware.

        Args
        ----
            config: Prebuilt configuration; ``options`` override its fields
            sink: Where diagnostics go; defaults to the logging sink
            **options: Fields of :class:`MiddlewareConfig`
        """
        if config is None:
            config = MiddlewareConfig(**options)
        elif options:
            overrides = MiddlewareConfig(**options)
            config = config.model_copy(
                update={name: getattr(overrides, name) for name in overrides.model_fields_set}
            )

        if sink is None:
            from serialguard.drivers.diagnostic_sink import LoggingDiagnosticSink

            sink = LoggingDiagnosticSink()

        self._config = config
        self._sink: DiagnosticSink = sink
        self._cache: ScanCache | None = None if config.disable_cache else ScanCache()

    @classmethod
    def from_config(
        cls,
        settings: SerialGuardConfig,
        *,
        sink: DiagnosticSink | None = None,
        **options: Any,
    ) -> SerializableStateInvariantMiddleware:
        """Build a middleware from loaded settings, overriding selected options.

        Also applies the logging section of the settings.
        """
        log = settings.logging
        configure_logging(
            level=log.level,
            format=log.format,
            output_file=log.output_file,
            use_color=log.use_color,
            include_timestamp=log.include_timestamp,
        )
        return cls(settings.middleware, sink=sink, **options)

    @property
    def config(self) -> MiddlewareConfig:
        """The immutable configuration of this instance."""
        return self._config

    @property
    def cache(self) -> ScanCache | None:
        """The state scan cache, or None when caching is disabled."""
        return self._cache

    @property
    def sink(self) -> DiagnosticSink:
        """The diagnostic sink receiving reports."""
        return self._sink

    def __call__(self, store: StoreAPI) -> Callable[[Dispatch], Dispatch]:
        """Redux-style entry point: ``middleware(store)(next_dispatch)``."""

        def bind_next(next_dispatch: Dispatch) -> Dispatch:
            return self.wrap(next_dispatch, store.get_state)

        return bind_next

    def wrap(self, next_dispatch: Dispatch, get_state: GetState) -> Dispatch:
        """Return a dispatch function that checks around ``next_dispatch``."""

        def dispatch(action: Any) -> Any:
            check = self.before_dispatch(action)
            result = next_dispatch(action)
            self.after_dispatch(check, get_state())
            return result

        return dispatch

    def before_dispatch(self, action: Any) -> DispatchCheck:
        """Scan an incoming action and start timing the dispatch."""
        config = self._config
        action_type = get_action_type(action)
        check = DispatchCheck(
            action=action,
            action_type=action_type,
            skipped=_is_ignored_type(action_type, config.ignored_actions),
            budget=TimeBudget(config.warn_after),
        )
        if check.skipped:
            logger.debug("Skipping serializability checks for action type {}", action_type)
            return check

        if not config.ignore_actions:
            with check.budget.measure():
                found = find_non_serializable_value(
                    action,
                    is_serializable=config.is_serializable,
                    get_entries=config.get_entries,
                    ignored_paths=config.ignored_action_paths,
                )
            if found is not None:
                self._sink.report(
                    NonSerializableActionValue(
                        key_path=found.key_path, value=found.value, action=action
                    )
                )
        return check

    def after_dispatch(self, check: DispatchCheck, state: Any) -> None:
        """Scan the state produced by a dispatch and report slow checks."""
        if check.skipped:
            return

        config = self._config
        if not config.ignore_state:
            with check.budget.measure():
                found = find_non_serializable_value(
                    state,
                    is_serializable=config.is_serializable,
                    get_entries=config.get_entries,
                    ignored_paths=config.ignored_paths,
                    cache=self._cache,
                )
                if self._cache is not None:
                    released = self._cache.sweep()
                    if released:
                        logger.debug("Released {} stale scan cache entries", released)
            if found is not None:
                self._sink.report(
                    NonSerializableStateValue(
                        key_path=found.key_path, value=found.value, action_type=check.action_type
                    )
                )

        if check.budget.exceeded:
            self._sink.report(
                ScanPerformanceWarning(
                    elapsed_ms=check.budget.elapsed_ms, warn_after_ms=config.warn_after
                )
            )


def _is_ignored_type(action_type: Any, ignored_actions: frozenset[Any]) -> bool:
    if not ignored_actions:
        return False
    try:
        return action_type in ignored_actions
    except TypeError:
        # Unhashable action types can't be listed as ignored
        return False


def create_serializable_state_invariant_middleware(
    *, sink: DiagnosticSink | None = None, **options: Any
) -> SerializableStateInvariantMiddleware:
    """Create a middleware from keyword options.

    Examples
    --------
    Example usage::

        middleware = create_serializable_state_invariant_middleware(
            ignored_actions=["persist/REHYDRATE"],
            warn_after=64,
        )
    """
    return SerializableStateInvariantMiddleware(sink=sink, **options)
