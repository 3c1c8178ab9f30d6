from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from split_macros.exceptions import RebuildTimeoutError

if TYPE_CHECKING:
    from collections.abc import Callable


class _Call[T]:
    def __init__(self) -> None:
        self.done = threading.Event()
        self.result: T | None = None
        self.error: BaseException | None = None


class SingleFlight[T]:
    """Collapse concurrent calls for the same key into one execution.

    The first caller for a key runs ``fn``; callers arriving while it is in
    flight block and receive the same result or exception.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: dict[str, _Call[T]] = {}

    def in_flight(self, key: str) -> bool:
        with self._lock:
            return key in self._calls

    def do(self, key: str, fn: Callable[[], T], timeout: float | None = None) -> T:
        with self._lock:
            call = self._calls.get(key)
            leader = call is None
            if call is None:
                call = _Call()
                self._calls[key] = call

        if not leader:
            if not call.done.wait(timeout):
                raise RebuildTimeoutError(key, timeout or 0.0)
            if call.error is not None:
                raise call.error
            return call.result  # type: ignore[return-value]

        try:
            call.result = fn()
        except BaseException as e:
            call.error = e
            raise
        finally:
            with self._lock:
                self._calls.pop(key, None)
            call.done.set()
        return call.result
