"""Recursive search for the first non-serializable value in a tree.

The walk is depth-first and pre-order: a parent is classified before its
children, children are visited in the order the enumerator yields them,
and the walk stops at the first offending node.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from serialguard.kernel.scanning.cache import ScanCache
from serialguard.kernel.scanning.classifier import (
    EntryEnumerator,
    ValueClassifier,
    get_entries,
    is_leaf,
    is_plain,
)
from serialguard.kernel.scanning.paths import (
    IgnorePattern,
    KeyPath,
    compile_patterns,
    matches_any,
    render_key_path,
)


@dataclass(frozen=True, slots=True)
class NonSerializableValue:
    """The first offending node found by a scan.

    Attributes
    ----------
    key_path : str
        Dot-joined path to the node, ``"<root>"`` for the scanned value itself
    value : Any
        The offending value, unchanged
    """

    key_path: str
    value: Any


def find_non_serializable_value(
    value: Any,
    path: KeyPath = (),
    is_serializable: ValueClassifier = is_plain,
    get_entries: EntryEnumerator = get_entries,
    ignored_paths: Iterable[str | Sequence[str]] = frozenset(),
    cache: ScanCache | None = None,
) -> NonSerializableValue | None:
    """Return the first non-serializable node of ``value``, or None.

    Parameters
    ----------
    value : Any
        Root of the tree to scan
    path : KeyPath
        Path of ``value`` inside a larger tree; empty for a root scan
    is_serializable : ValueClassifier
        Decides whether one value, taken alone, is acceptable
    get_entries : EntryEnumerator
        Yields the ``(key, child)`` pairs of an accepted container
    ignored_paths : Iterable[str | Sequence[str]]
        Paths whose nodes, and everything below them, are not inspected.
        Dotted strings and segment sequences are both accepted
    cache : ScanCache | None
        Containers already verified on earlier scans; updated in place

    Returns
    -------
    NonSerializableValue | None
        The offending node, or None when the whole tree is serializable

    Notes
    -----
    A container that contains itself is reported at the path where the
    cycle closes. The cycle check runs before ``is_serializable``, so a
    cycle is reported even by a classifier that accepts every value; only
    an ignore pattern or a cache hit on that path suppresses it. Exceptions
    raised by ``is_serializable`` or ``get_entries`` propagate unchanged.

    Examples
    --------
    >>> find_non_serializable_value({"a": 42, "b": {"b1": "test"}}) is None
    True
    >>> find_non_serializable_value({"a": {"b": {1, 2}}})
    NonSerializableValue(key_path='a.b', value={1, 2})
    """
    patterns = compile_patterns(ignored_paths)
    found = _scan(
        value, tuple(path), is_serializable, get_entries, patterns, cache, ancestors=set()
    )
    if found is None:
        return None
    found_path, found_value = found
    return NonSerializableValue(key_path=render_key_path(found_path), value=found_value)


def _scan(
    value: Any,
    path: KeyPath,
    is_serializable: ValueClassifier,
    get_entries: EntryEnumerator,
    ignored_paths: frozenset[IgnorePattern],
    cache: ScanCache | None,
    ancestors: set[int],
) -> tuple[KeyPath, Any] | None:
    if ignored_paths and matches_any(path, ignored_paths):
        return None

    if cache is not None and cache.has(value):
        return None

    if id(value) in ancestors:
        return path, value

    if not is_serializable(value):
        return path, value

    if is_leaf(value):
        return None

    verified_children: list[Any] = []
    ancestors.add(id(value))
    try:
        for key, child in get_entries(value):
            found = _scan(
                child,
                (*path, str(key)),
                is_serializable,
                get_entries,
                ignored_paths,
                cache,
                ancestors,
            )
            if found is not None:
                return found
            if cache is not None and not is_leaf(child):
                verified_children.append(child)
    finally:
        ancestors.discard(id(value))

    if cache is not None:
        cache.mark_verified(value, verified_children)
    return None
