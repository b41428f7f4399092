"""Palette construction and colour quantisation for GIF frames.

Frames are flat RGBA byte sequences of ``width * height * 4`` bytes. The
palette is a k-d tree over colour space built by median splits; leaf entries
hold the colours and entry 0 is reserved for transparency.
"""

from __future__ import annotations

from typing import Optional, Sequence

TRANSPARENT_INDEX = 0

_Frame = Optional[Sequence[int]]


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // denominator
    return quotient if numerator >= 0 else -quotient


def _check_frame(frame: Sequence[int], width: int, height: int, name: str) -> None:
    if width < 0 or height < 0:
        raise ValueError(f"invalid frame size {width}x{height}")
    needed = width * height * 4
    if len(frame) < needed:
        raise ValueError(f"{name} holds {len(frame)} bytes, {needed} needed")


class Palette:
    """Colour table of ``2 ** bit_depth`` entries with its k-d split tree."""

    def __init__(self, bit_depth: int = 8) -> None:
        if not 1 <= bit_depth <= 8:
            raise ValueError(f"bit depth must be 1..8, got {bit_depth}")
        self.bit_depth = bit_depth
        self.red = [0] * 256
        self.green = [0] * 256
        self.blue = [0] * 256
        self.split_component = [0] * 256
        self.split_value = [0] * 256

    @property
    def size(self) -> int:
        """Number of entries in the colour table."""
        return 1 << self.bit_depth

    def color(self, index: int) -> tuple[int, int, int]:
        """Return the RGB triple stored at ``index``."""
        return self.red[index], self.green[index], self.blue[index]

    def _walk(
        self, red: int, green: int, blue: int, best: tuple[int, int], node: int
    ) -> tuple[int, int]:
        count = self.size
        if node > count - 1:
            index = node - count
            if index == TRANSPARENT_INDEX:
                return best
            diff = (
                abs(red - self.red[index])
                + abs(green - self.green[index])
                + abs(blue - self.blue[index])
            )
            return (index, diff) if diff < best[1] else best

        component = (red, green, blue)[self.split_component[node]]
        split = self.split_value[node]
        if split > component:
            best = self._walk(red, green, blue, best, node * 2)
            if best[1] > split - component:
                best = self._walk(red, green, blue, best, node * 2 + 1)
        else:
            best = self._walk(red, green, blue, best, node * 2 + 1)
            if best[1] > component - split:
                best = self._walk(red, green, blue, best, node * 2)
        return best

    def closest_index(
        self, red: int, green: int, blue: int, default_index: int = TRANSPARENT_INDEX
    ) -> int:
        """Return the entry nearest to the colour in city-block distance.

        The transparent entry is never chosen; ``default_index`` is returned
        when no entry is found.
        """
        index, _ = self._walk(red, green, blue, (default_index, 1_000_000), 1)
        return index


def _swap_pixels(image: bytearray, a: int, b: int) -> None:
    if a != b:
        sa, sb = a * 4, b * 4
        image[sa : sa + 4], image[sb : sb + 4] = image[sb : sb + 4], image[sa : sa + 4]


def _partition(image: bytearray, left: int, right: int, component: int, pivot: int) -> int:
    store = left
    split = False
    for index in range(left, right):
        value = image[index * 4 + component]
        if value < pivot:
            _swap_pixels(image, index, store)
            store += 1
        elif value == pivot:
            if split:
                _swap_pixels(image, index, store)
                store += 1
            split = not split
    return store


def _partition_by_median(
    image: bytearray, left: int, right: int, component: int, center: int
) -> None:
    while left < right - 1:
        pivot = image[center * 4 + component]
        _swap_pixels(image, center, right - 1)
        pivot_index = _partition(image, left, right - 1, component, pivot)
        _swap_pixels(image, pivot_index, right - 1)
        if pivot_index > center:
            right = pivot_index
        elif pivot_index < center:
            left = pivot_index + 1
        else:
            return


def _partition_by_mean(
    image: bytearray, left: int, right: int, component: int, mean: int
) -> int:
    if left < right - 1:
        return _partition(image, left, right - 1, component, mean)
    return left


def _channel(image: bytearray, start: int, count: int, component: int) -> list[int]:
    return [image[i * 4 + component] for i in range(start, start + count)]


def _split_palette(
    image: bytearray,
    start: int,
    count: int,
    node: int,
    level: int,
    build_for_dither: bool,
    palette: Palette,
) -> None:
    if count == 0:
        return
    num_colors = palette.size
    channels = [_channel(image, start, count, c) for c in range(3)]

    if node >= num_colors:
        entry = node - num_colors
        if build_for_dither and entry == 1:
            # darkest colour in the image, so dithering error cannot build up
            rgb = [min(255, min(values)) for values in channels]
        elif build_for_dither and entry == num_colors - 1:
            rgb = [max(0, max(values)) for values in channels]
        else:
            rgb = [(sum(values) + count // 2) // count for values in channels]
        palette.red[entry], palette.green[entry], palette.blue[entry] = rgb
        return

    (min_r, min_g, min_b) = (min(values) for values in channels)
    (max_r, max_g, max_b) = (max(values) for values in channels)
    r_range, g_range, b_range = max_r - min_r, max_g - min_g, max_b - min_b

    component, range_min, range_max = 1, min_g, max_g
    if b_range > g_range:
        component, range_min, range_max = 2, min_b, max_b
    if r_range > b_range and r_range > g_range:
        component, range_min, range_max = 0, min_r, max_r

    sub_a = count // 2
    _partition_by_median(image, start, start + count, component, start + sub_a)
    split_value = image[(start + sub_a) * 4 + component]

    # split at the mean when the median is lopsided, to keep rare colours
    unbalance = abs((split_value - range_min) - (range_max - split_value))
    if unbalance > (1536 >> level):
        split_value = range_min + (range_max - range_min) // 2
        sub_a = (
            _partition_by_mean(image, start, start + count, component, split_value)
            - start
        )

    if node == num_colors // 2:
        # the leaf under this node is kept for the transparent entry
        sub_a = 0
        split_value = 0

    palette.split_component[node] = component
    palette.split_value[node] = split_value & 0xFF

    _split_palette(image, start, sub_a, node * 2, level + 1, build_for_dither, palette)
    _split_palette(
        image, start + sub_a, count - sub_a, node * 2 + 1, level + 1, build_for_dither, palette
    )


def _pick_changed_pixels(last_frame: Sequence[int], frame: bytearray, count: int) -> int:
    changed = 0
    for index in range(count):
        offset = index * 4
        if (
            last_frame[offset] != frame[offset]
            or last_frame[offset + 1] != frame[offset + 1]
            or last_frame[offset + 2] != frame[offset + 2]
        ):
            write = changed * 4
            frame[write : write + 3] = frame[offset : offset + 3]
            changed += 1
    return changed


def make_palette(
    last_frame: _Frame,
    next_frame: Sequence[int],
    width: int,
    height: int,
    bit_depth: int = 8,
    build_for_dither: bool = False,
) -> Palette:
    """Build a palette for ``next_frame`` by median splitting its colours.

    With ``last_frame`` given, only pixels that changed from it are considered.
    """
    palette = Palette(bit_depth)
    _check_frame(next_frame, width, height, "next_frame")
    count = width * height
    image = bytearray(next_frame[: count * 4])
    if last_frame is not None:
        _check_frame(last_frame, width, height, "last_frame")
        count = _pick_changed_pixels(last_frame, image, count)

    _split_palette(image, 0, count, 1, 0, build_for_dither, palette)

    transparent_node = 1 << (bit_depth - 1)
    palette.split_value[transparent_node] = 0
    palette.split_component[transparent_node] = 0
    palette.red[0] = palette.green[0] = palette.blue[0] = 0
    return palette


def dither_image(
    last_frame: _Frame,
    next_frame: Sequence[int],
    width: int,
    height: int,
    palette: Palette,
) -> bytearray:
    """Quantise ``next_frame`` with Floyd-Steinberg dithering.

    Returns an RGBA frame whose alpha byte holds the palette index of each
    pixel; pixels unchanged from ``last_frame`` get the transparent index.
    """
    _check_frame(next_frame, width, height, "next_frame")
    if last_frame is not None:
        _check_frame(last_frame, width, height, "last_frame")
    count = width * height
    # colours carry 8 extra bits so sub-unit errors can propagate
    quant = [value * 256 for value in next_frame[: count * 4]]

    for y in range(height):
        for x in range(width):
            pixel = y * width + x
            base = pixel * 4
            rr = (quant[base] + 127) // 256
            gg = (quant[base + 1] + 127) // 256
            bb = (quant[base + 2] + 127) // 256

            if (
                last_frame is not None
                and last_frame[base] == rr
                and last_frame[base + 1] == gg
                and last_frame[base + 2] == bb
            ):
                quant[base : base + 4] = [rr, gg, bb, TRANSPARENT_INDEX]
                continue

            best = palette.closest_index(rr, gg, bb, TRANSPARENT_INDEX)
            errors = (
                quant[base] - palette.red[best] * 256,
                quant[base + 1] - palette.green[best] * 256,
                quant[base + 2] - palette.blue[best] * 256,
            )
            quant[base : base + 4] = [
                palette.red[best],
                palette.green[best],
                palette.blue[best],
                best,
            ]

            for location, weight in (
                (pixel + 1, 7),
                (pixel + width - 1, 3),
                (pixel + width, 5),
                (pixel + width + 1, 1),
            ):
                if location < count:
                    target = location * 4
                    for channel, error in enumerate(errors):
                        current = quant[target + channel]
                        quant[target + channel] = current + max(
                            -current, _trunc_div(error * weight, 16)
                        )

    return bytearray(value & 0xFF for value in quant)


def threshold_image(
    last_frame: _Frame,
    next_frame: Sequence[int],
    width: int,
    height: int,
    palette: Palette,
) -> bytearray:
    """Quantise ``next_frame`` to the nearest palette colours, without dithering.

    Returns an RGBA frame whose alpha byte holds the palette index of each
    pixel; pixels unchanged from ``last_frame`` get the transparent index.
    """
    _check_frame(next_frame, width, height, "next_frame")
    if last_frame is not None:
        _check_frame(last_frame, width, height, "last_frame")
    out = bytearray(width * height * 4)
    for pixel in range(width * height):
        base = pixel * 4
        rgb = tuple(next_frame[base : base + 3])
        if last_frame is not None and tuple(last_frame[base : base + 3]) == rgb:
            out[base : base + 3] = bytes(last_frame[base : base + 3])
            out[base + 3] = TRANSPARENT_INDEX
        else:
            best = palette.closest_index(rgb[0], rgb[1], rgb[2], 1)
            out[base : base + 4] = bytes(
                [palette.red[best], palette.green[best], palette.blue[best], best & 0xFF]
            )
    return out