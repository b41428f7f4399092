"""Animated GIF encoding from RGBA frames.

Each frame gets its own local palette, built by median splitting, and is
LZW-compressed. Pixels that did not change from the previous frame are
written with the transparent index so the earlier frame shows through.
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Optional, Sequence

from puzzlekit.gif_palette import (
    TRANSPARENT_INDEX,
    Palette,
    dither_image,
    make_palette,
    threshold_image,
)

_MAX_CODE = 4095
_CHUNK_SIZE = 255


def _u16(value: int) -> bytes:
    return struct.pack("<H", value & 0xFFFF)


class _BitPacker:
    """Packs variable-width codes, low bit first, into GIF data sub-blocks."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._chunk = bytearray()
        self._byte = 0
        self._bit = 0

    def _write_bit(self, bit: int) -> None:
        self._byte |= (bit & 1) << self._bit
        self._bit += 1
        if self._bit > 7:
            self._chunk.append(self._byte)
            self._bit = 0
            self._byte = 0

    def _flush_chunk(self) -> None:
        self._stream.write(bytes([len(self._chunk)]) + bytes(self._chunk))
        self._chunk.clear()
        self._bit = 0
        self._byte = 0

    def write_code(self, code: int, length: int) -> None:
        for _ in range(length):
            self._write_bit(code)
            code >>= 1
            if len(self._chunk) == _CHUNK_SIZE:
                self._flush_chunk()

    def finish(self) -> None:
        while self._bit:
            self._write_bit(0)
        if self._chunk:
            self._flush_chunk()


def write_palette(palette: Palette, stream: BinaryIO) -> None:
    """Write the palette's colour table; entry 0 is always black for transparency."""
    table = bytearray(3)
    for index in range(1, palette.size):
        table.extend(palette.color(index))
    stream.write(bytes(table))


def write_lzw_image(
    stream: BinaryIO,
    image: Sequence[int],
    left: int,
    top: int,
    width: int,
    height: int,
    delay: int,
    palette: Palette,
) -> None:
    """Write one image block whose pixels are the palette indices in each alpha byte."""
    if width < 0 or height < 0:
        raise ValueError(f"invalid image size {width}x{height}")
    needed = width * height * 4
    if len(image) < needed:
        raise ValueError(f"image holds {len(image)} bytes, {needed} needed")

    header = bytearray([0x21, 0xF9, 0x04, 0x05])
    header += _u16(delay)
    header += bytes([TRANSPARENT_INDEX, 0])
    header.append(0x2C)
    header += _u16(left) + _u16(top) + _u16(width) + _u16(height)
    header.append(0x80 + palette.bit_depth - 1)
    stream.write(bytes(header))
    write_palette(palette, stream)

    min_code_size = palette.bit_depth
    clear_code = 1 << min_code_size
    stream.write(bytes([min_code_size]))

    packer = _BitPacker(stream)
    codes: dict[tuple[int, int], int] = {}
    current = -1
    code_size = min_code_size + 1
    max_code = clear_code + 1

    packer.write_code(clear_code, code_size)

    for offset in range(3, needed, 4):
        value = image[offset]
        if current < 0:
            current = value
            continue
        known = codes.get((current, value))
        if known is not None:
            current = known
            continue
        packer.write_code(current, code_size)
        max_code += 1
        codes[(current, value)] = max_code
        if max_code >= 1 << code_size:
            code_size += 1
        if max_code == _MAX_CODE:
            packer.write_code(clear_code, code_size)
            codes.clear()
            code_size = min_code_size + 1
            max_code = clear_code + 1
        current = value

    packer.write_code(current, code_size)
    packer.write_code(clear_code, code_size)
    packer.write_code(clear_code + 1, min_code_size + 1)
    packer.finish()
    stream.write(b"\x00")


class GifWriter:
    """Writes a GIF of ``width`` x ``height`` frames to a binary stream.

    ``delay`` is the time between frames in hundredths of a second; a
    non-zero delay makes the GIF loop forever.
    """

    def __init__(self, stream: BinaryIO, width: int, height: int, delay: int = 0) -> None:
        if not (0 <= width <= 0xFFFF and 0 <= height <= 0xFFFF):
            raise ValueError(f"invalid GIF size {width}x{height}")
        self._stream = stream
        self.width = width
        self.height = height
        self.delay = delay
        self._previous: Optional[bytearray] = None
        self._closed = False

        header = bytearray(b"GIF89a")
        header += _u16(width) + _u16(height)
        header += bytes([0xF0, 0, 0])
        header += bytes(6)  # two-entry dummy global palette, both black
        if delay != 0:
            header += bytes([0x21, 0xFF, 11])
            header += b"NETSCAPE2.0"
            header += bytes([3, 1, 0, 0, 0])
        stream.write(bytes(header))

    @property
    def closed(self) -> bool:
        return self._closed

    def write_frame(
        self,
        image: Sequence[int],
        width: Optional[int] = None,
        height: Optional[int] = None,
        delay: Optional[int] = None,
        bit_depth: int = 8,
        dither: bool = False,
    ) -> None:
        """Quantise and append an RGBA frame of ``width * height * 4`` bytes."""
        if self._closed:
            raise ValueError("write to a closed GIF writer")
        width = self.width if width is None else width
        height = self.height if height is None else height
        delay = self.delay if delay is None else delay

        previous = self._previous
        palette = make_palette(
            None if dither else previous, image, width, height, bit_depth, dither
        )
        quantise = dither_image if dither else threshold_image
        frame = quantise(previous, image, width, height, palette)
        self._previous = frame
        write_lzw_image(self._stream, frame, 0, 0, width, height, delay, palette)

    def close(self) -> None:
        """Write the trailer. The stream itself is left open."""
        if self._closed:
            return
        self._stream.write(b"\x3b")
        self._closed = True

    def __enter__(self) -> GifWriter:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()