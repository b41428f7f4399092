"""Search states: a value with its path cost and heuristic estimate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class State(Generic[T]):
    """A search node holding ``value``, the cost to reach it and a heuristic."""

    value: T
    path_cost: int
    heuristic: int

    @property
    def f_cost(self) -> int:
        """Total estimated cost: path cost plus heuristic."""
        return self.path_cost + self.heuristic

    def update_path_cost(self, cost: int) -> None:
        """Replace the path cost, keeping the heuristic."""
        self.path_cost = cost