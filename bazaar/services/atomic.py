from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol


class Journaled(Protocol):
    def checkpoint(self) -> Any: ...

    def restore(self, state: Any) -> None: ...


@contextmanager
def atomic(*participants: Journaled) -> Iterator[None]:
    """Run a block as one unit: on any exception every participant is
    restored to the state it had on entry, then the exception propagates."""
    saved = [(p, p.checkpoint()) for p in participants]
    try:
        yield
    except BaseException:
        for participant, state in reversed(saved):
            participant.restore(state)
        raise
