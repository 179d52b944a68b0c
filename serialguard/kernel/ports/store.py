"""Store Port - the slice of a message-dispatch store the middleware needs.

The store itself lives outside serialguard. The middleware only reads the
current state and forwards actions to the next dispatch stage.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

# Type aliases for dispatch stages
Dispatch = Callable[[Any], Any]
GetState = Callable[[], Any]


class StoreAPI(Protocol):
    """Protocol for the store handle passed to a middleware."""

    def get_state(self) -> Any:
        """Return the current state tree."""
        ...

    def dispatch(self, action: Any) -> Any:
        """Dispatch an action through the full middleware chain."""
        ...
