from __future__ import annotations

import threading
import time
from typing import Any

import pytest

from bazaar.errors import ReentrantCall
from bazaar.services.atomic import atomic
from bazaar.services.guard import ReentrancyGuard


class _Box:
    def __init__(self, value: int) -> None:
        self.value = value

    def checkpoint(self) -> Any:
        return self.value

    def restore(self, state: Any) -> None:
        self.value = state


def test_guard_rejects_nested_entry() -> None:
    guard = ReentrancyGuard()
    with guard:
        assert guard.entered
        with pytest.raises(ReentrantCall):
            with guard:
                pass
    assert not guard.entered


def test_guard_released_on_exception() -> None:
    guard = ReentrancyGuard()
    with pytest.raises(RuntimeError):
        with guard:
            raise RuntimeError("boom")
    with guard:
        pass


def test_guard_serializes_threads() -> None:
    guard = ReentrancyGuard()
    order: list[str] = []
    entered = threading.Event()

    def _holder() -> None:
        with guard:
            entered.set()
            time.sleep(0.05)
            order.append("first")

    t = threading.Thread(target=_holder)
    t.start()
    entered.wait()
    with guard:
        order.append("second")
    t.join()

    assert order == ["first", "second"]


def test_atomic_restores_all_participants() -> None:
    a, b = _Box(1), _Box(2)
    with pytest.raises(ValueError):
        with atomic(a, b):
            a.value = 10
            b.value = 20
            raise ValueError("abort")
    assert (a.value, b.value) == (1, 2)


def test_atomic_keeps_changes_on_success() -> None:
    a = _Box(1)
    with atomic(a):
        a.value = 5
    assert a.value == 5


def test_reading_passes_through_for_the_holder() -> None:
    guard = ReentrancyGuard()
    with guard:
        with guard.reading():
            assert guard.entered
    with guard.reading():
        assert not guard.entered


def test_reading_waits_for_another_holder() -> None:
    guard = ReentrancyGuard()
    order: list[str] = []
    entered = threading.Event()

    def _holder() -> None:
        with guard:
            entered.set()
            time.sleep(0.05)
            order.append("write")

    t = threading.Thread(target=_holder)
    t.start()
    entered.wait()
    with guard.reading():
        order.append("read")
    t.join()

    assert order == ["write", "read"]
