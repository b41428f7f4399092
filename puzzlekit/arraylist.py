"""A list addressed by 1-based positions."""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")


class ArrayList(Generic[T]):
    """A sequence whose positions run from 1 to ``len(self)``."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: list[T] = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"

    def is_empty(self) -> bool:
        """Return True when the list holds no items."""
        return not self._items

    def _check(self, position: int) -> None:
        if not 1 <= position <= len(self._items):
            raise IndexError(f"position {position} out of range 1..{len(self._items)}")

    def insert(self, position: int, item: T) -> None:
        """Insert ``item`` so that it ends up at ``position``.

        Valid positions run from 1 to ``len(self) + 1``.
        """
        if not 1 <= position <= len(self._items) + 1:
            raise IndexError(
                f"insert position {position} out of range 1..{len(self._items) + 1}"
            )
        self._items.insert(position - 1, item)

    def remove(self, position: int) -> T:
        """Remove and return the item at ``position``."""
        self._check(position)
        return self._items.pop(position - 1)

    def clear(self) -> None:
        """Remove every item."""
        self._items.clear()

    def get(self, position: int) -> T:
        """Return the item at ``position``."""
        self._check(position)
        return self._items[position - 1]

    def set(self, position: int, value: T) -> None:
        """Replace the item at ``position`` with ``value``."""
        self._check(position)
        self._items[position - 1] = value

    def move(self, source: int, target: int) -> None:
        """Move the item at ``source`` to ``target``, keeping the others in order."""
        self._check(source)
        self._check(target)
        if source == target:
            return
        item = self._items.pop(source - 1)
        self._items.insert(target - 1, item)