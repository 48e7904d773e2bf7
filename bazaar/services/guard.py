from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType

from ..errors import ReentrantCall


class ReentrancyGuard:
    """Non-reentrant scope around the exchange's public operations.

    Entering again from the thread that already holds the guard (a payment
    recipient calling back into the exchange) raises ``ReentrantCall``.
    Other threads block until the holder leaves.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._holder: int | None = None

    @property
    def entered(self) -> bool:
        return self._holder is not None

    def __enter__(self) -> ReentrancyGuard:
        me = threading.get_ident()
        if self._holder == me:
            raise ReentrantCall("reentrant call")
        self._lock.acquire()
        self._holder = me
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._holder = None
        self._lock.release()

    @contextmanager
    def reading(self) -> Iterator[None]:
        """Scope for reads: waits out another thread's operation.

        The holding thread itself reads straight through and sees its own
        in-progress state.
        """
        if self._holder == threading.get_ident():
            yield
            return
        with self._lock:
            yield
