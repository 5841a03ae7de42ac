import pytest

from epsonraster.page import RasterError
from epsonraster.reverse import ReverseStage


def _collector():
    received = []

    def output(raster, pixel_count):
        received.append((raster, pixel_count))
        return 1

    return received, output


def test_full_page_comes_out_reversed():
    received, output = _collector()
    stage = ReverseStage(output, 1, 3, 3)
    for line in (b"aaa", b"bbb", b"ccc"):
        assert stage.process(line, 3) == 0
    assert received == []
    assert stage.process(None, 0) == 3
    assert received == [(b"ccc", 3), (b"bbb", 3), (b"aaa", 3), (None, 0)]


def test_partial_page_starts_at_current_slot():
    received, output = _collector()
    stage = ReverseStage(output, 1, 3, 3)
    stage.process(b"aaa", 3)
    assert stage.process(None, 0) == 2
    assert received == [(b"\xff\xff\xff", 3), (b"aaa", 3), (None, 0)]


def test_short_line_is_padded_and_long_line_cut():
    received, output = _collector()
    stage = ReverseStage(output, 1, 3, 2)
    assert stage.process(b"\x01", 1) == 0
    assert stage.process(b"\x02\x02\x02\x02\x02", 5) == 0
    assert stage.process(None, 0) == 2
    assert received[0] == (b"\x02\x02\x02", 3)
    assert received[1] == (b"\x01\xff\xff", 3)


def test_lines_beyond_page_are_dropped():
    received, output = _collector()
    stage = ReverseStage(output, 1, 1, 2)
    results = [stage.process(line, 1) for line in (b"a", b"b", b"c", b"d")]
    assert results == [0, 0, 0, 0]
    assert stage.process(None, 0) == 2
    assert [r for r, _ in received] == [b"b", b"a", None]


def test_pixel_count_uses_bytes_per_pixel():
    received, output = _collector()
    stage = ReverseStage(output, 3, 6, 1)
    assert stage.process(b"abcdef", 2) == 0
    assert stage.process(None, 0) == 1
    assert received[0] == (b"abcdef", 2)


def test_second_flush_does_nothing():
    received, output = _collector()
    stage = ReverseStage(output, 1, 1, 1)
    stage.process(b"x", 1)
    stage.process(None, 0)
    count = len(received)
    assert stage.process(None, 0) == 0
    assert len(received) == count


def test_output_error_stops_lines_but_still_signals_flush():
    calls = []

    def output(raster, pixel_count):
        calls.append(raster)
        if raster is not None:
            raise RasterError("printer refused")
        return 0

    stage = ReverseStage(output, 1, 1, 2)
    stage.process(b"a", 1)
    stage.process(b"b", 1)
    assert stage.process(None, 0) == 0
    assert calls == [b"b", None]


def test_closed_stage_raises():
    _, output = _collector()
    stage = ReverseStage(output, 1, 1, 1)
    stage.close()
    with pytest.raises(RasterError):
        stage.process(b"a", 1)


def test_invalid_bytes_per_pixel():
    _, output = _collector()
    with pytest.raises(ValueError):
        ReverseStage(output, 0, 1, 1)