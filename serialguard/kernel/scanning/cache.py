"""Identity-keyed memo of subtrees already proven serializable.

Entries are never invalidated: a reference that once scanned clean is
assumed never to be mutated in place afterwards. Hosts that update state
immutably get structural sharing for free, so unchanged branches of a
large state tree are skipped on every later dispatch.

CPython cannot weakly reference ``dict``, ``list`` or ``tuple``. Values that
support weak references are tracked through ``weakref.ref`` and vanish with
their referent. The rest are pinned and released by :meth:`ScanCache.sweep`,
which drops every pinned entry that was not used since the previous sweep.
An entry counts as used when it, or any cached ancestor recorded through
``mark_verified(value, children)``, was hit or marked. Pinned values are held
strongly until then, so an ``id()`` cannot be recycled while an entry for it
exists.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterable
from typing import Any


class ScanCache:
    """Non-owning memo from value identity to a verified flag.

    Examples
    --------
    >>> cache = ScanCache()
    >>> state = {"todos": []}
    >>> cache.has(state)
    False
    >>> cache.mark_verified(state, [state["todos"]])
    >>> cache.has(state)
    True
    >>> state in cache
    True
    """

    __slots__ = ("__weakref__", "_children", "_pinned", "_refs", "_touched")

    def __init__(self) -> None:
        self._refs: dict[int, weakref.ref[Any]] = {}
        self._pinned: dict[int, Any] = {}
        # id -> ids of the verified child containers below it
        self._children: dict[int, tuple[int, ...]] = {}
        self._touched: set[int] = set()

    def has(self, value: Any) -> bool:
        """Return True if this exact reference was marked verified.

        A hit keeps the entry and every cached entry below it alive through
        the next :meth:`sweep`.
        """
        key = id(value)
        ref = self._refs.get(key)
        hit = (ref is not None and ref() is value) or (
            key in self._pinned and self._pinned[key] is value
        )
        if hit:
            self._touch(key)
        return hit

    def mark_verified(self, value: Any, children: Iterable[Any] = ()) -> None:
        """Remember that ``value`` and everything below it is serializable.

        Parameters
        ----------
        value : Any
            The verified container
        children : Iterable[Any]
            Its direct child containers, already marked verified
        """
        key = id(value)
        try:
            self._refs[key] = weakref.ref(value, self._evictor(key))
        except TypeError:
            self._pinned[key] = value
        self._children[key] = tuple(id(child) for child in children)
        self._touched.add(key)

    def sweep(self) -> int:
        """Release pinned entries not used since the previous sweep.

        Returns
        -------
        int
            Number of entries dropped
        """
        stale = [key for key in self._pinned if key not in self._touched]
        for key in stale:
            del self._pinned[key]
            self._children.pop(key, None)
        self._touched.clear()
        return len(stale)

    def clear(self) -> None:
        """Remove all cached entries."""
        self._refs.clear()
        self._pinned.clear()
        self._children.clear()
        self._touched.clear()

    def _touch(self, key: int) -> None:
        pending = [key]
        while pending:
            current = pending.pop()
            if current in self._touched:
                continue
            self._touched.add(current)
            pending.extend(self._children.get(current, ()))

    def _evictor(self, key: int) -> Any:
        cache_ref = weakref.ref(self)

        def _evict(ref: weakref.ref[Any], key: int = key) -> None:
            cache = cache_ref()
            if cache is not None and cache._refs.get(key) is ref:
                del cache._refs[key]
                cache._children.pop(key, None)

        return _evict

    def __len__(self) -> int:
        return len(self._refs) + len(self._pinned)

    def __contains__(self, value: Any) -> bool:
        return self.has(value)
