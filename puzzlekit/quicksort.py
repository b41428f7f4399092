"""Quick sort over a 1-based :class:`~puzzlekit.arraylist.ArrayList`."""

from __future__ import annotations

from typing import Any

from puzzlekit.arraylist import ArrayList


def quick_sort(items: ArrayList[Any], first: int, last: int) -> None:
    """Sort ``items[first..last]`` into ascending order in place.

    Raises IndexError if ``first < 1`` or ``last > len(items)``.
    """
    if first < 1 or last > len(items):
        raise IndexError(f"invalid range {first}..{last} for list of length {len(items)}")
    if first >= last:
        return
    pivot_index = partition(items, first, last)
    quick_sort(items, first, pivot_index - 1)
    quick_sort(items, pivot_index + 1, last)


def partition(items: ArrayList[Any], first: int, last: int) -> int:
    """Partition ``items[first..last]`` around its last entry.

    Afterwards entries before the returned position are ``<=`` the pivot and
    entries after it are ``>=`` the pivot. Raises ValueError on an invalid range.
    """
    if first < 1 or last > len(items) or first > last:
        raise ValueError(f"invalid range {first}..{last} for list of length {len(items)}")
    pivot = items.get(last)
    index = first - 1
    for i in range(first, last):
        if items.get(i) <= pivot:
            index += 1
            items.move(i, index)
    if index + 1 != last:
        items.move(last, index + 1)
    return index + 1