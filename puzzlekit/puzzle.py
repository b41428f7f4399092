"""The 3x3 sliding-tile puzzle."""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple


class Tile(IntEnum):
    """Tile labels A to H and the blank."""

    A = 0
    B = 1
    C = 2
    D = 3
    E = 4
    F = 5
    G = 6
    H = 7
    BLANK = 8


class Action(IntEnum):
    """Moves of the blank tile."""

    LEFT = 0
    RIGHT = 1
    UP = 2
    DOWN = 3


class Position(NamedTuple):
    """A cell on the board, with 0 <= row < 3 and 0 <= col < 3."""

    row: int
    col: int


_MOVES = {
    Action.LEFT: (0, -1),
    Action.RIGHT: (0, 1),
    Action.UP: (-1, 0),
    Action.DOWN: (1, 0),
}

_DIGITS = frozenset("012345678")


def _index(position: Position) -> int:
    row, col = position
    if not (0 <= row <= 2 and 0 <= col <= 2):
        raise IndexError(f"invalid row/column {position}")
    return 3 * row + col


class Puzzle:
    """A 3x3 board of tiles; the default board is solved with the blank last."""

    __slots__ = ("_board", "_blank")

    def __init__(self) -> None:
        self._board: list[Tile] = list(Tile)
        self._blank = Position(2, 2)

    @classmethod
    def from_string(cls, text: str) -> Puzzle:
        """Build a puzzle from nine digits 0-8, each used once; 8 is the blank."""
        if len(text) != 9:
            raise ValueError(f"expected 9 digits, got {len(text)}")
        if any(ch not in _DIGITS for ch in text):
            raise ValueError(f"digits must be 0-8: {text!r}")
        if len(set(text)) != 9:
            raise ValueError(f"every digit must appear once: {text!r}")
        puzzle = cls()
        puzzle._board = [Tile(int(ch)) for ch in text]
        puzzle._blank = Position(*divmod(text.index(str(int(Tile.BLANK))), 3))
        return puzzle

    def __str__(self) -> str:
        return "".join(str(int(tile)) for tile in self._board)

    def __repr__(self) -> str:
        return f"{type(self).__name__}.from_string({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Puzzle):
            return NotImplemented
        return self._board == other._board

    def __hash__(self) -> int:
        return self.code()

    def code(self) -> int:
        """Pack the board into an integer, four bits per tile."""
        value = 0
        for tile in self._board:
            value = (value << 4) + int(tile)
        return value

    def get_label(self, position: Position) -> Tile:
        """Return the tile at ``position``."""
        return self._board[_index(position)]

    def set_label(self, position: Position, tile: Tile) -> None:
        """Place ``tile`` at ``position``."""
        self._board[_index(position)] = Tile(tile)
        if tile == Tile.BLANK:
            self._blank = Position(*position)

    def _copy(self) -> Puzzle:
        other = Puzzle()
        other._board = list(self._board)
        other._blank = self._blank
        return other

    def apply(self, action: Action) -> Puzzle | None:
        """Return the puzzle after moving the blank, or None if the move is off the board."""
        d_row, d_col = _MOVES[Action(action)]
        target = Position(self._blank.row + d_row, self._blank.col + d_col)
        if not (0 <= target.row <= 2 and 0 <= target.col <= 2):
            return None
        result = self._copy()
        a, b = _index(self._blank), _index(target)
        result._board[a], result._board[b] = result._board[b], result._board[a]
        result._blank = target
        return result

    def heuristic(self, goal: Puzzle) -> int:
        """City-block distance of every tile, blank included, from its place in ``goal``."""
        return sum(
            abs(i // 3 - j // 3) + abs(i % 3 - j % 3)
            for i, tile in enumerate(self._board)
            for j, goal_tile in enumerate(goal._board)
            if tile == goal_tile
        )