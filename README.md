# puzzlekit

Some textbook data structures, an A* solver for the 3×3 sliding-tile puzzle and a small animated GIF encoder. The package uses only the standard library.

| Module | What it holds |
| --- | --- |
| `puzzlekit.arraylist` | `ArrayList`, a list addressed by 1-based positions |
| `puzzlekit.quicksort` | `quick_sort` and `partition` over an `ArrayList` |
| `puzzlekit.max_heap` | `ArrayMaxHeap` with a fixed capacity, and `HeapFullError` |
| `puzzlekit.state` | `State`, a search node with path cost, heuristic and `f_cost` |
| `puzzlekit.frontier` | `FrontierQueue`, a min heap of states ordered by `f_cost` |
| `puzzlekit.puzzle` | `Puzzle`, `Tile`, `Action` and `Position` |
| `puzzlekit.solver` | `PuzzleSolver`, an A* search |
| `puzzlekit.image` | `Image` and `Pixel`, with the colours `BLACK`, `WHITE`, `RED`, `GREEN`, `BLUE` and `YELLOW` |
| `puzzlekit.gif_palette` | `Palette`, `make_palette`, `dither_image` and `threshold_image` |
| `puzzlekit.gif_writer` | `GifWriter`, `write_palette` and `write_lzw_image` |

## Install

```
pip install .
```

## Solving a puzzle

```python
from puzzlekit.puzzle import Puzzle
from puzzlekit.solver import PuzzleSolver

start = Puzzle.from_string("012345678")
goal = Puzzle.from_string("182045367")

cost = PuzzleSolver(start, goal).search()
print(cost)   # 5
```

A board is written as nine digits, one per cell, row by row. Digit `8` is the blank (`Tile.BLANK`). `Puzzle.from_string` raises `ValueError` when the text is not a permutation of `0` to `8`. `str(puzzle)` gives those nine digits back.

`search()` returns the path cost of the solution, or `None` when the goal cannot be reached.

Other parts of `Puzzle`:

- `apply(action)` moves the blank by one `Action` (`LEFT`, `RIGHT`, `UP` or `DOWN`). It returns a new puzzle, or `None` when the move would leave the board.
- `heuristic(goal)` returns the sum of the city-block distances of every tile from its place in `goal`. The blank is counted too.
- `get_label(position)` and `set_label(position, tile)` read and write a cell. A `Position` is `(row, col)` with both in `0..2`. Any other position raises `IndexError`.
- Puzzles are equal when their boards are equal. They hash by `code()`, which packs the board at four bits per tile.

## The frontier queue

```python
from puzzlekit.frontier import FrontierQueue

frontier = FrontierQueue()
frontier.push("a", 100, 100)
frontier.replace_if("a", 1)     # lowers the path cost only if smaller
state = frontier.pop()
print(state.value, state.path_cost, state.f_cost)   # a 1 101
```

`"a" in frontier` tells whether a value is queued. `pop()` raises `IndexError` when the frontier is empty.

## Sorting

```python
from puzzlekit.arraylist import ArrayList
from puzzlekit.quicksort import quick_sort

items = ArrayList([100, 4, 10, 25, 11])
quick_sort(items, 1, len(items))
print(list(items))   # [4, 10, 11, 25, 100]
```

These `ArrayList` methods take a 1-based position and raise `IndexError` when the position is out of range: `insert`, `remove`, `get`, `set` and `move`. `move(source, target)` keeps the other items in their order.

For `quick_sort`, `IndexError` means that `first < 1` or `last > len(items)`. For `partition`, an invalid range raises `ValueError`.

```python
from puzzlekit.max_heap import ArrayMaxHeap

values = [15, 5, 20, 10, 30]
ArrayMaxHeap().heap_sort(values)
print(values)        # [30, 20, 15, 10, 5]
```

`ArrayMaxHeap` has the following rules:

- It holds at most `ArrayMaxHeap.CAPACITY` (63) distinct items.
- `add` returns `False` for a duplicate. It raises `HeapFullError` when the heap is full.
- `remove` returns the largest item. It raises `IndexError` when the heap is empty, and so does `peek_top`.
- `height` is the number of levels in the tree.
- `heap_sort` raises `ValueError` when there are more values than the capacity, or when the values contain duplicates.

## Writing an animated GIF

```python
from puzzlekit.gif_writer import GifWriter

width, height = 2, 2
frame = bytes([255, 0, 0, 255] * (width * height))   # RGBA pixels

with open("out.gif", "wb") as stream, GifWriter(stream, width, height, 10) as gif:
    gif.write_frame(frame, width, height, 10, 8, False)
```

- A frame is a flat sequence of `width * height * 4` RGBA bytes.
- Each frame gets its own palette, built by median splitting. With `dither=True` it is quantised with Floyd-Steinberg dithering.
- Pixels that did not change since the last frame are written as transparent.
- `delay` is given in hundredths of a second. A non-zero delay makes the animation loop.
- `close()`, which leaving the `with` block also calls, writes the trailer and leaves the stream open.

## What the package does not do

- It does not read or write PNG files.
- It does not draw puzzle boards into `Image` pictures.
- It does not turn a search into an animation on its own. To make one, build the RGBA frames yourself and pass them to `GifWriter`.
- It has no command-line program.

## Tests

```
pip install .[test]
pytest
```