"""A* search over sliding-tile puzzles."""

from __future__ import annotations

from puzzlekit.frontier import FrontierQueue
from puzzlekit.puzzle import Action, Puzzle


class PuzzleSolver:
    """Finds the cost of reaching ``goal`` from ``initial``."""

    def __init__(self, initial: Puzzle, goal: Puzzle) -> None:
        self.initial = initial
        self.goal = goal

    def search(self) -> int | None:
        """Return the solution's path cost, or None if the goal cannot be reached."""
        goal = self.goal
        frontier: FrontierQueue[Puzzle] = FrontierQueue()
        explored: set[Puzzle] = set()
        frontier.push(self.initial, 0, self.initial.heuristic(goal))

        while not frontier.is_empty():
            node = frontier.pop()
            value = node.value
            cost = node.path_cost
            explored.add(value)

            if value.heuristic(goal) == 0:
                return cost

            for action in Action:
                result = value.apply(action)
                if result is None:
                    continue
                in_frontier = result in frontier
                if result not in explored and not in_frontier:
                    frontier.push(result, cost + 1, result.heuristic(goal))
                elif in_frontier:
                    frontier.replace_if(result, cost + 1)
        return None