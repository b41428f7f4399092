"""A fixed-capacity max heap backed by a list."""

from __future__ import annotations

from typing import Generic, Iterable, MutableSequence, TypeVar

T = TypeVar("T")


class HeapFullError(Exception):
    """Raised when an item is added to a heap that is at capacity."""


class ArrayMaxHeap(Generic[T]):
    """A max heap of distinct items holding at most ``CAPACITY`` of them."""

    CAPACITY = 63

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: list[T] = list(items)
        if len(self._items) > self.CAPACITY:
            raise HeapFullError(
                f"{len(self._items)} items exceed heap capacity {self.CAPACITY}"
            )
        for index in range(len(self._items) // 2 - 1, -1, -1):
            self._sift_down(index)

    def __len__(self) -> int:
        return len(self._items)

    def _sift_down(self, index: int) -> None:
        items = self._items
        count = len(items)
        while True:
            left = 2 * index + 1
            if left >= count:
                return
            right = left + 1
            larger = right if right < count and items[right] > items[left] else left
            if not items[index] < items[larger]:
                return
            items[index], items[larger] = items[larger], items[index]
            index = larger

    def _sift_up(self, index: int) -> None:
        items = self._items
        while index > 0:
            parent = (index - 1) // 2
            if not items[index] > items[parent]:
                return
            items[index], items[parent] = items[parent], items[index]
            index = parent

    def is_empty(self) -> bool:
        """Return True when the heap holds no items."""
        return not self._items

    @property
    def height(self) -> int:
        """Number of levels in the heap's complete binary tree."""
        return len(self._items).bit_length()

    def peek_top(self) -> T:
        """Return the largest item without removing it."""
        if not self._items:
            raise IndexError("peek on empty heap")
        return self._items[0]

    def add(self, item: T) -> bool:
        """Add ``item``; return False if an equal item is already present.

        Raises HeapFullError when the heap is at capacity.
        """
        if len(self._items) == self.CAPACITY:
            raise HeapFullError(f"heap capacity {self.CAPACITY} reached")
        if item in self._items:
            return False
        self._items.append(item)
        self._sift_up(len(self._items) - 1)
        return True

    def remove(self) -> T:
        """Remove and return the largest item."""
        if not self._items:
            raise IndexError("remove from empty heap")
        top = self._items[0]
        last = self._items.pop()
        if self._items:
            self._items[0] = last
            self._sift_down(0)
        return top

    def clear(self) -> None:
        """Remove every item."""
        self._items.clear()

    def heap_sort(self, values: MutableSequence[T]) -> None:
        """Sort ``values`` in place into descending order.

        Uses and empties this heap. Raises ValueError if ``values`` has more
        items than the heap's capacity or holds duplicates.
        """
        if len(values) > self.CAPACITY:
            raise ValueError(f"{len(values)} values exceed heap capacity {self.CAPACITY}")
        for i, value in enumerate(values):
            if value in values[i + 1 :]:
                raise ValueError(f"duplicate value {value!r}")
        self.clear()
        for value in values:
            self.add(value)
        for i in range(len(values)):
            values[i] = self.remove()