"""Key paths and ignore patterns.

A key path is kept as a tuple of segments while scanning and only joined
with dots when it is reported, so keys that contain dots stay unambiguous.

Ignore patterns match exact lengths: ``"meta.*"`` matches ``meta.at`` but
not ``meta`` or ``meta.at.iso``. The scanner stops descending as soon as a
path matches, so ignoring a node ignores everything below it as well.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from serialguard.kernel.exceptions import ValidationError

KeyPath = tuple[str, ...]
IgnorePattern = tuple[str, ...]

WILDCARD = "*"
ROOT_MARKER = "<root>"
PATH_SEPARATOR = "."


def render_key_path(path: Sequence[str]) -> str:
    """Join a key path for display, using the root marker for the empty path.

    Examples
    --------
    >>> render_key_path(("todos", "0", "due"))
    'todos.0.due'
    >>> render_key_path(())
    '<root>'
    """
    return PATH_SEPARATOR.join(path) if path else ROOT_MARKER


def parse_pattern(pattern: str | Sequence[str]) -> IgnorePattern:
    """Normalize one ignore pattern to a tuple of segments.

    Strings are split on dots; the empty string is the root pattern.
    Sequences are taken segment by segment, which allows dots inside keys.

    Raises
    ------
    ValidationError
        If the pattern is neither a string nor a sequence of strings

    Examples
    --------
    >>> parse_pattern("meta.*.timestamp")
    ('meta', '*', 'timestamp')
    >>> parse_pattern(("files", "report.pdf"))
    ('files', 'report.pdf')
    >>> parse_pattern("")
    ()
    """
    if isinstance(pattern, str):
        return tuple(pattern.split(PATH_SEPARATOR)) if pattern else ()
    if isinstance(pattern, Sequence):
        segments = tuple(pattern)
        if not all(isinstance(segment, str) for segment in segments):
            raise ValidationError("ignored_paths", "pattern segments must be strings", pattern)
        return segments
    raise ValidationError("ignored_paths", "pattern must be a string or a sequence", pattern)


def compile_patterns(patterns: Iterable[Any] | None) -> frozenset[IgnorePattern]:
    """Normalize a collection of ignore patterns.

    Raises
    ------
    ValidationError
        If the collection is a bare string or contains a malformed pattern
    """
    if patterns is None:
        return frozenset()
    if isinstance(patterns, str):
        raise ValidationError(
            "ignored_paths", "expected a collection of patterns, not a single string", patterns
        )
    return frozenset(parse_pattern(pattern) for pattern in patterns)


def matches_pattern(path: Sequence[str], pattern: IgnorePattern) -> bool:
    """Segment-wise equality, where the wildcard matches exactly one segment."""
    if len(path) != len(pattern):
        return False
    return all(
        expected == WILDCARD or expected == segment
        for segment, expected in zip(path, pattern, strict=True)
    )


def matches_any(path: Sequence[str], patterns: Iterable[IgnorePattern]) -> bool:
    """Return True when any pattern matches the concrete path.

    Examples
    --------
    >>> patterns = compile_patterns(["meta.*", "cache"])
    >>> matches_any(("meta", "at"), patterns)
    True
    >>> matches_any(("meta",), patterns)
    False
    """
    return any(matches_pattern(path, pattern) for pattern in patterns)
