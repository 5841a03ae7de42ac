import struct

import pytest

from epsonraster.geometry import Color, Size, make_rect
from epsonraster.watermark import BlendSourceType, Watermark, create_blender
from epsonraster.wbf import WbfFormatError


def make_wbf(width, height, pixel_data):
    info = struct.pack("<IIIHHIIIIII", 40, width, height, 1, 4, 2, len(pixel_data), 0, 0, 0, 0)
    offset = 14 + len(info)
    header = b"BM" + struct.pack("<IHHI", offset + len(pixel_data), 0, 0, offset)
    return header + info + pixel_data


@pytest.fixture
def wbf_path(tmp_path):
    # top row (y=0): black at x1, x3; bottom row (y=1): black at x0, x2
    data = bytes([4, 0x01, 0, 0, 4, 0x10, 0, 1])
    path = tmp_path / "mark.wbf"
    path.write_bytes(make_wbf(4, 2, data))
    return path


BLACK_OPAQUE = Color(0.0, 0.0, 0.0, 1.0)


def test_fit_bounds_same_size(wbf_path):
    mark = Watermark(wbf_path, Size(4, 2), BLACK_OPAQUE)
    assert mark.scale_ratio == 1.0
    assert mark.fit_bounds == make_rect(0, 0, 4, 2)


def test_fit_bounds_centred(wbf_path):
    mark = Watermark(wbf_path, Size(8, 2), BLACK_OPAQUE)
    assert mark.scale_ratio == 1.0
    assert mark.fit_bounds == make_rect(2, 0, 4, 2)


def test_blend_grayscale_lines(wbf_path):
    mark = Watermark(wbf_path, Size(4, 2), BLACK_OPAQUE)
    line0 = bytearray(b"\xff" * 4)
    line1 = bytearray(b"\xff" * 4)
    line2 = bytearray(b"\xff" * 4)
    line3 = bytearray(b"\xff" * 4)
    mark.blend_pixels(line0, 4)
    mark.blend_pixels(line1, 4)
    mark.blend_pixels(line2, 4)
    mark.blend_pixels(line3, 4)
    assert line0 == bytearray([255, 0, 255, 0])
    assert line1 == bytearray([0, 255, 0, 255])
    assert line2 == bytearray(b"\xff" * 4)
    assert line3 == bytearray(b"\xff" * 4)


def test_blend_scaled(wbf_path):
    mark = Watermark(wbf_path, Size(8, 4), BLACK_OPAQUE)
    first = bytearray(b"\xff" * 8)
    second = bytearray(b"\xff" * 8)
    mark.blend_pixels(first, 8)
    mark.blend_pixels(second, 8)
    expected = bytearray([255, 255, 0, 0, 255, 255, 0, 0])
    assert first == expected
    assert second == expected


def test_blend_rgb_colour(wbf_path):
    mark = Watermark(wbf_path, Size(4, 2), Color(1.0, 0.0, 0.0, 1.0))
    line = bytearray(b"\xff" * 12)
    mark.blend_pixels(line, 4)
    assert line[3:6] == bytearray([255, 0, 0])
    assert line[0:3] == bytearray([255, 255, 255])


def test_zero_alpha_leaves_pixels(wbf_path):
    mark = Watermark(wbf_path, Size(4, 2), Color(0.0, 0.0, 0.0, 0.0))
    line = bytearray(b"\xff" * 4)
    mark.blend_pixels(line, 4)
    assert line == bytearray(b"\xff" * 4)


def test_blend_through_memoryview(wbf_path):
    mark = Watermark(wbf_path, Size(4, 2), BLACK_OPAQUE)
    raster = bytearray(b"\xff" * 6)
    mark.blend_pixels(memoryview(raster)[1:5], 4)
    assert raster == bytearray([255, 255, 0, 255, 0, 255])


def test_closed_watermark_leaves_pixels(wbf_path):
    mark = Watermark(wbf_path, Size(4, 2), BLACK_OPAQUE)
    mark.close()
    line = bytearray(b"\xff" * 4)
    mark.blend_pixels(line, 4)
    assert line == bytearray(b"\xff" * 4)


def test_context_manager_closes(wbf_path):
    with Watermark(wbf_path, Size(4, 2), BLACK_OPAQUE) as mark:
        pass
    line = bytearray(b"\xff" * 4)
    mark.blend_pixels(line, 4)
    assert line == bytearray(b"\xff" * 4)


def test_missing_path_raises():
    with pytest.raises(ValueError):
        Watermark(None, Size(4, 2), BLACK_OPAQUE)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Watermark(tmp_path / "absent.wbf", Size(4, 2), BLACK_OPAQUE)


def test_bad_file_raises(tmp_path):
    path = tmp_path / "bad.wbf"
    path.write_bytes(b"not a bitmap at all, just some bytes of text here")
    with pytest.raises(WbfFormatError):
        Watermark(path, Size(4, 2), BLACK_OPAQUE)


def test_create_blender_watermark(wbf_path):
    blender = create_blender(BlendSourceType.WATERMARK, wbf_path, Size(4, 2), BLACK_OPAQUE)
    assert isinstance(blender, Watermark)
    assert blender.fit_bounds == make_rect(0, 0, 4, 2)


def test_create_blender_unknown_type(wbf_path):
    with pytest.raises(ValueError):
        create_blender(7, wbf_path, Size(4, 2), BLACK_OPAQUE)