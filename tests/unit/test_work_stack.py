"""Unit tests for the WorkStack LIFO container."""

from __future__ import annotations

import threading

import pytest

from depwalk.graph import EmptyStackError, WorkStack
from depwalk.models.package import Package


class TestWorkStack:
    def test_new_stack_is_empty(self) -> None:
        stack = WorkStack()
        assert stack.is_empty()
        assert len(stack) == 0

    def test_pop_returns_last_pushed(self) -> None:
        stack = WorkStack()
        for name in ("a", "b", "c"):
            stack.push(Package(name))
        assert [stack.pop().name for _ in range(3)] == ["c", "b", "a"]
        assert stack.is_empty()

    def test_pop_empty_raises(self) -> None:
        with pytest.raises(EmptyStackError):
            WorkStack().pop()

    def test_empty_stack_error_is_index_error(self) -> None:
        with pytest.raises(IndexError):
            WorkStack().pop()

    def test_concurrent_pushes_from_threads(self) -> None:
        stack = WorkStack()

        def push_many(prefix: str) -> None:
            for i in range(500):
                stack.push(Package(f"{prefix}-{i}"))

        threads = [threading.Thread(target=push_many, args=(f"t{n}",)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(stack) == 4000
        names = set()
        while not stack.is_empty():
            names.add(stack.pop().name)
        assert len(names) == 4000
