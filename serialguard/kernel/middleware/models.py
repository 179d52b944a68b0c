"""Validated configuration for the serializable state invariant middleware."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from serialguard.kernel.exceptions import ValidationError
from serialguard.kernel.scanning.classifier import (
    EntryEnumerator,
    ValueClassifier,
    get_entries,
    is_plain,
)
from serialguard.kernel.scanning.paths import IgnorePattern, compile_patterns

DEFAULT_WARN_AFTER_MS = 32.0


class MiddlewareConfig(BaseModel):
    """Options of one middleware instance, immutable once built.

    Attributes
    ----------
    is_serializable : ValueClassifier
        Decides whether one value, taken alone, is serializable
    get_entries : EntryEnumerator
        Yields ``(key, child)`` pairs of containers the classifier accepts
    ignored_actions : frozenset
        Action types whose dispatches are passed through without any scan
    ignored_action_paths : frozenset[IgnorePattern]
        Paths exempt from scanning inside actions
    ignored_paths : frozenset[IgnorePattern]
        Paths exempt from scanning inside state
    warn_after : float
        Milliseconds the two scans of a dispatch may take before a warning
    disable_cache : bool
        Re-scan the whole state on every dispatch
    ignore_actions : bool
        Never scan actions
    ignore_state : bool
        Never scan state

    Examples
    --------
    >>> config = MiddlewareConfig(ignored_paths=["meta.*"], warn_after=50)
    >>> sorted(config.ignored_paths)
    [('meta', '*')]
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    is_serializable: ValueClassifier = is_plain
    get_entries: EntryEnumerator = get_entries
    ignored_actions: frozenset[Any] = frozenset()
    ignored_action_paths: frozenset[IgnorePattern] = frozenset()
    ignored_paths: frozenset[IgnorePattern] = frozenset()
    warn_after: float = DEFAULT_WARN_AFTER_MS
    disable_cache: bool = False
    ignore_actions: bool = False
    ignore_state: bool = False

    @field_validator("ignored_actions", mode="before")
    @classmethod
    def validate_ignored_actions(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            raise ValidationError(
                "ignored_actions", "expected a collection of action types, not a string", value
            )
        return frozenset(value)

    @field_validator("ignored_action_paths", "ignored_paths", mode="before")
    @classmethod
    def validate_patterns(cls, value: Any) -> frozenset[IgnorePattern]:
        return compile_patterns(value)

    @field_validator("warn_after")
    @classmethod
    def validate_warn_after(cls, value: float) -> float:
        if value < 0:
            raise ValidationError("warn_after", "must be non-negative", value)
        return value
