"""A rectangular grid of RGBA pixels."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Pixel:
    """An RGBA colour with 8-bit channels."""

    red: int = 0
    green: int = 0
    blue: int = 0
    alpha: int = 0


BLACK = Pixel(0, 0, 0, 255)
WHITE = Pixel(255, 255, 255, 255)
RED = Pixel(255, 0, 0, 255)
GREEN = Pixel(0, 255, 0, 255)
BLUE = Pixel(0, 0, 255, 255)
YELLOW = Pixel(255, 255, 0, 255)


class Image:
    """Pixels addressed as ``image[row, col]`` with 0 <= row < height, 0 <= col < width."""

    def __init__(self, height: int = 0, width: int = 0) -> None:
        if height < 0 or width < 0:
            raise ValueError(f"invalid image size {height}x{width}")
        self._height = height
        self._width = width
        self._data: list[Pixel] = [Pixel()] * (height * width)

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    def _offset(self, key: tuple[int, int]) -> int:
        row, col = key
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(f"invalid image location ({row}, {col})")
        return row * self._width + col

    def __getitem__(self, key: tuple[int, int]) -> Pixel:
        return self._data[self._offset(key)]

    def __setitem__(self, key: tuple[int, int], value: Pixel) -> None:
        self._data[self._offset(key)] = value