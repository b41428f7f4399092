"""A min-priority queue of search states ordered by f-cost."""

from __future__ import annotations

from typing import Generic, TypeVar

from puzzlekit.state import State

T = TypeVar("T")


class FrontierQueue(Generic[T]):
    """Binary min heap of :class:`State` objects keyed on ``f_cost``."""

    def __init__(self) -> None:
        self._queue: list[State[T]] = []

    def __len__(self) -> int:
        return len(self._queue)

    def is_empty(self) -> bool:
        """Return True when the frontier holds no states."""
        return not self._queue

    def _sift_up(self, index: int) -> None:
        queue = self._queue
        moving = queue[index]
        while index > 0:
            parent = (index - 1) // 2
            if queue[parent].f_cost > moving.f_cost:
                queue[index] = queue[parent]
                index = parent
            else:
                break
        queue[index] = moving

    def _sift_down(self, index: int) -> None:
        queue = self._queue
        count = len(queue)
        while True:
            left = 2 * index + 1
            right = left + 1
            smallest = index
            if left < count and queue[left].f_cost < queue[smallest].f_cost:
                smallest = left
            if right < count and queue[right].f_cost < queue[smallest].f_cost:
                smallest = right
            if smallest == index:
                return
            queue[index], queue[smallest] = queue[smallest], queue[index]
            index = smallest

    def push(self, value: T, cost: int, heuristic: int) -> None:
        """Add a state for ``value`` with the given path cost and heuristic."""
        self._queue.append(State(value, cost, heuristic))
        self._sift_up(len(self._queue) - 1)

    def pop(self) -> State[T]:
        """Remove and return the state with the smallest f-cost."""
        if not self._queue:
            raise IndexError("pop from empty frontier")
        removed = self._queue[0]
        last = self._queue.pop()
        if self._queue:
            self._queue[0] = last
            self._sift_down(0)
        return removed

    def __contains__(self, value: object) -> bool:
        return any(state.value == value for state in self._queue)

    def replace_if(self, value: T, cost: int) -> None:
        """Lower the path cost of the state holding ``value`` if ``cost`` is smaller."""
        for index, state in enumerate(self._queue):
            if state.value == value:
                if cost < state.path_cost:
                    state.update_path_cost(cost)
                    self._sift_up(index)
                return