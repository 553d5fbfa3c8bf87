"""Single-flight guard for reservation submission."""

from collections.abc import Awaitable, Callable, Hashable
from typing import TypeVar

T = TypeVar("T")


class InFlightError(Exception):
    """Another call for the same key has not finished yet."""

    def __init__(self, key: Hashable) -> None:
        self.key = key
        super().__init__(f"Request for {key} is still in progress")


class SingleFlightGuard:
    """At most one in-flight call per key.

    - A key is marked pending before the call starts
    - A second call while the key is pending is refused with InFlightError
    - The key is released when the call finishes, successfully or not, so a
      failed attempt can be retried
    """

    def __init__(self) -> None:
        self._pending: set[Hashable] = set()

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    async def run(self, key: Hashable, call: Callable[[], Awaitable[T]]) -> T:
        """Run ``call`` unless one is already in flight for ``key``.

        Raises:
            InFlightError: A call for this key is pending
        """
        if key in self._pending:
            raise InFlightError(key)

        self._pending.add(key)
        try:
            return await call()
        finally:
            self._pending.discard(key)
