import io
import random
import struct

import pytest

from puzzlekit.gif_palette import Palette, dither_image, make_palette, threshold_image
from puzzlekit.gif_writer import GifWriter, write_lzw_image, write_palette


def _lzw_decode(data, min_code_size):
    clear = 1 << min_code_size
    end = clear + 1
    value = int.from_bytes(data, "little")
    total_bits = len(data) * 8
    pos = 0

    def reset():
        return [[i] for i in range(clear)] + [None, None]

    table = reset()
    size = min_code_size + 1
    prev = None
    out = []
    while pos + size <= total_bits:
        code = (value >> pos) & ((1 << size) - 1)
        pos += size
        if code == clear:
            table = reset()
            size = min_code_size + 1
            prev = None
            continue
        if code == end:
            break
        if prev is None:
            entry = table[code]
        else:
            if code < len(table):
                entry = table[code]
                table.append(table[prev] + [entry[0]])
            else:
                entry = table[prev] + [table[prev][0]]
                table.append(entry)
            if len(table) == (1 << size) and size < 12:
                size += 1
        out.extend(entry)
        prev = code
    return out


def _read_blocks(data, pos):
    buf = bytearray()
    while data[pos]:
        n = data[pos]
        buf += data[pos + 1 : pos + 1 + n]
        pos += 1 + n
    return bytes(buf), pos + 1


def _parse_image(data, pos):
    assert data[pos : pos + 4] == bytes([0x21, 0xF9, 0x04, 0x05])
    (delay,) = struct.unpack("<H", data[pos + 4 : pos + 6])
    pos += 8
    assert data[pos] == 0x2C
    left, top, width, height = struct.unpack("<HHHH", data[pos + 1 : pos + 9])
    depth = (data[pos + 9] & 0x07) + 1
    pos += 10
    palette = data[pos : pos + 3 * (1 << depth)]
    pos += 3 * (1 << depth)
    min_code_size = data[pos]
    pos += 1
    blocks, pos = _read_blocks(data, pos)
    frame = {
        "delay": delay,
        "left": left,
        "top": top,
        "width": width,
        "height": height,
        "depth": depth,
        "palette": palette,
        "indices": _lzw_decode(blocks, min_code_size),
    }
    return frame, pos


def _parse_gif(data):
    assert data[:6] == b"GIF89a"
    width, height = struct.unpack("<HH", data[6:10])
    pos = 13 + 6
    looping = False
    if data[pos] == 0x21 and data[pos + 1] == 0xFF:
        assert data[pos + 3 : pos + 14] == b"NETSCAPE2.0"
        looping = True
        pos += 19
    frames = []
    while data[pos] != 0x3B:
        frame, pos = _parse_image(data, pos)
        frames.append(frame)
    assert pos == len(data) - 1
    return width, height, looping, frames


def _rgba(pixels):
    return bytes(b for p in pixels for b in (*p, 255))


def _index_image(indices):
    return bytes(b for i in indices for b in (0, 0, 0, i))


def test_header_with_delay_has_loop_block():
    stream = io.BytesIO()
    GifWriter(stream, 3, 2, delay=10)
    data = stream.getvalue()
    assert data[:6] == b"GIF89a"
    assert data[6:10] == struct.pack("<HH", 3, 2)
    assert data[10:13] == bytes([0xF0, 0, 0])
    assert data[13:19] == bytes(6)
    assert data[19:22] == bytes([0x21, 0xFF, 11])
    assert data[22:33] == b"NETSCAPE2.0"
    assert data[33:] == bytes([3, 1, 0, 0, 0])


def test_header_without_delay_has_no_loop_block():
    stream = io.BytesIO()
    GifWriter(stream, 4, 4, delay=0)
    assert len(stream.getvalue()) == 19


def test_close_writes_trailer_once():
    stream = io.BytesIO()
    writer = GifWriter(stream, 1, 1)
    writer.close()
    writer.close()
    assert stream.getvalue()[-1:] == b"\x3b"
    assert stream.getvalue().count(b"\x3b") == 1
    assert writer.closed


def test_context_manager_closes():
    stream = io.BytesIO()
    with GifWriter(stream, 1, 1) as writer:
        writer.write_frame(_rgba([(10, 20, 30)]))
    assert writer.closed
    _, _, _, frames = _parse_gif(stream.getvalue())
    assert len(frames) == 1


def test_write_after_close_raises():
    writer = GifWriter(io.BytesIO(), 1, 1)
    writer.close()
    with pytest.raises(ValueError):
        writer.write_frame(_rgba([(1, 2, 3)]))


def test_invalid_size_raises():
    with pytest.raises(ValueError):
        GifWriter(io.BytesIO(), -1, 2)


def test_write_palette_layout():
    palette = Palette(2)
    palette.red[1], palette.green[1], palette.blue[1] = 9, 8, 7
    palette.red[0] = 99
    stream = io.BytesIO()
    write_palette(palette, stream)
    data = stream.getvalue()
    assert len(data) == 3 * palette.size
    assert data[:3] == bytes(3)
    assert data[3:6] == bytes([9, 8, 7])


def test_lzw_image_header_fields():
    palette = Palette(8)
    stream = io.BytesIO()
    write_lzw_image(stream, _index_image([1, 2, 3, 4]), 5, 6, 2, 2, 300, palette)
    frame, pos = _parse_image(stream.getvalue(), 0)
    assert pos == len(stream.getvalue())
    assert (frame["left"], frame["top"]) == (5, 6)
    assert (frame["width"], frame["height"]) == (2, 2)
    assert frame["delay"] == 300
    assert frame["depth"] == 8
    assert frame["indices"] == [1, 2, 3, 4]


@pytest.mark.parametrize(
    "indices",
    [
        [7],
        [1, 1, 1, 1, 1, 1, 1, 1, 1],
        [1, 2, 1, 2, 1, 2, 1, 2, 1, 2, 1, 2],
        list(range(1, 256)) * 3,
    ],
)
def test_lzw_round_trip(indices):
    stream = io.BytesIO()
    write_lzw_image(stream, _index_image(indices), 0, 0, len(indices), 1, 0, Palette(8))
    frame, _ = _parse_image(stream.getvalue(), 0)
    assert frame["indices"] == indices


def test_lzw_round_trip_with_dictionary_reset():
    rng = random.Random(1234)
    indices = [rng.randint(1, 255) for _ in range(100 * 100)]
    stream = io.BytesIO()
    write_lzw_image(stream, _index_image(indices), 0, 0, 100, 100, 0, Palette(8))
    frame, _ = _parse_image(stream.getvalue(), 0)
    assert frame["indices"] == indices


def test_lzw_round_trip_small_bit_depth():
    indices = [1, 2, 3, 1, 2, 3, 3, 3, 2, 1] * 20
    stream = io.BytesIO()
    write_lzw_image(stream, _index_image(indices), 0, 0, 20, 10, 0, Palette(2))
    frame, _ = _parse_image(stream.getvalue(), 0)
    assert frame["depth"] == 2
    assert frame["indices"] == indices


def test_lzw_short_image_raises():
    with pytest.raises(ValueError):
        write_lzw_image(io.BytesIO(), bytes(4), 0, 0, 2, 2, 0, Palette(8))


def test_frame_indices_match_thresholded_image():
    pixels = [(255, 255, 255), (238, 142, 139), (0, 0, 0), (238, 142, 139)]
    image = _rgba(pixels)
    stream = io.BytesIO()
    with GifWriter(stream, 2, 2, delay=100) as writer:
        writer.write_frame(image)
    width, height, looping, frames = _parse_gif(stream.getvalue())
    assert (width, height, looping) == (2, 2, True)
    palette = make_palette(None, image, 2, 2, 8, False)
    expected = threshold_image(None, image, 2, 2, palette)
    assert frames[0]["indices"] == list(expected[3::4])
    assert frames[0]["delay"] == 100
    assert all(i != 0 for i in frames[0]["indices"])


def test_unchanged_second_frame_is_transparent():
    image = _rgba([(10, 20, 30), (40, 50, 60), (70, 80, 90)])
    stream = io.BytesIO()
    with GifWriter(stream, 3, 1, delay=5) as writer:
        writer.write_frame(image)
        writer.write_frame(image)
    _, _, _, frames = _parse_gif(stream.getvalue())
    assert len(frames) == 2
    assert frames[1]["indices"] == [0, 0, 0]


def test_dithered_frame_matches_dither_image():
    pixels = [(i * 16, 255 - i * 16, (i * 40) % 256) for i in range(16)]
    image = _rgba(pixels)
    stream = io.BytesIO()
    with GifWriter(stream, 4, 4) as writer:
        writer.write_frame(image, dither=True)
    _, _, looping, frames = _parse_gif(stream.getvalue())
    assert looping is False
    palette = make_palette(None, image, 4, 4, 8, True)
    expected = dither_image(None, image, 4, 4, palette)
    assert frames[0]["indices"] == list(expected[3::4])


def test_frame_palette_matches_indexed_colours():
    pixels = [(200, 10, 10), (10, 200, 10), (10, 10, 200), (200, 10, 10)]
    image = _rgba(pixels)
    stream = io.BytesIO()
    with GifWriter(stream, 2, 2) as writer:
        writer.write_frame(image)
    _, _, _, frames = _parse_gif(stream.getvalue())
    frame = frames[0]
    palette = make_palette(None, image, 2, 2, 8, False)
    for index in frame["indices"]:
        start = index * 3
        assert tuple(frame["palette"][start : start + 3]) == palette.color(index)
    assert frame["indices"][0] == frame["indices"][3]


def test_short_frame_raises():
    writer = GifWriter(io.BytesIO(), 2, 2)
    with pytest.raises(ValueError):
        writer.write_frame(bytes(8))