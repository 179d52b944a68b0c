"""Default value classifier and entry enumerator.

The classifier decides whether a single value, taken alone, may appear in a
serializable tree. Containers are accepted structurally; their children are
checked by the scanner, not here.

Both functions can be replaced through the middleware configuration. When the
classifier is widened to accept a new container type, the enumerator has to
be replaced alongside it so the scanner knows how to reach its children.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

# Primitive types that never have children of their own.
_LEAF_TYPES: tuple[type, ...] = (str, int, float, bytes, type(None))

# Accepted scalars. ``bytes`` is a leaf but not accepted.
_SCALAR_TYPES: frozenset[type] = frozenset({str, int, float, bool, type(None)})

ValueClassifier = Callable[[Any], bool]
EntryEnumerator = Callable[[Any], Iterable[tuple[Any, Any]]]


def is_plain_record(value: Any) -> bool:
    """Return True for a keyed container without class identity of its own.

    Only an exact ``dict`` qualifies. Subclasses such as ``OrderedDict`` or
    ``defaultdict`` carry behaviour beyond plain data and are rejected.

    Examples
    --------
    >>> is_plain_record({"a": 1})
    True
    >>> from collections import OrderedDict
    >>> is_plain_record(OrderedDict(a=1))
    False
    """
    return type(value) is dict


def is_plain(value: Any) -> bool:
    """Default classifier: accept scalars, sequences and plain records.

    Accepts: None, bool, int, float, str, list, tuple and exact dicts.
    Rejects: callables, sets, bytes, dates, compiled patterns, enum members,
    dict subclasses and any other class instance.

    Examples
    --------
    >>> is_plain({"todos": [1, 2.5, None, "x"]})
    True
    >>> is_plain(lambda: None)
    False
    >>> is_plain({1, 2})
    False
    """
    # Exact types: enum members subclassing str/int are domain objects
    if type(value) in _SCALAR_TYPES:
        return True
    if isinstance(value, (list, tuple)):
        return True
    return is_plain_record(value)


def is_leaf(value: Any) -> bool:
    """Return True for values the scanner never enumerates."""
    return isinstance(value, _LEAF_TYPES)


def get_entries(value: Any) -> Iterable[tuple[Any, Any]]:
    """Default enumerator: yield ``(key, child)`` pairs of a container.

    - dict: items in insertion order
    - list / tuple: ``(index, element)`` in ascending index order
    - objects with ``__dict__``: instance attributes in definition order
    - anything else: nothing

    The fallbacks keep the enumerator total, so a classifier that accepts
    everything never makes the scanner fail.

    Examples
    --------
    >>> list(get_entries({"a": 1, "b": 2}))
    [('a', 1), ('b', 2)]
    >>> list(get_entries(["x", "y"]))
    [(0, 'x'), (1, 'y')]
    """
    if isinstance(value, dict):
        return value.items()
    if isinstance(value, (list, tuple)):
        return enumerate(value)
    attributes = getattr(value, "__dict__", None)
    if isinstance(attributes, dict):
        return attributes.items()
    return ()
