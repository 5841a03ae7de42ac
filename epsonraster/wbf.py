"""Reader for watermark bitmaps: 4-bit run-length encoded BMP files."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator

_FILE_HEADER = struct.Struct("<HIHHI")
_INFO_HEADER = struct.Struct("<IIIHHIIIIII")
_RGBQUAD_SIZE = 4
_BMP_SIGNATURE = 19778


class WbfFormatError(ValueError):
    """Raised when a watermark bitmap cannot be read."""


@dataclass
class WbfImage:
    """A decoded watermark: one flag per pixel, set where the pixel is black."""

    width: int
    height: int
    rows: list[bytearray]

    def is_black(self, x: int, y: int) -> bool:
        """Tell whether the pixel at (x, y) is black; pixels outside are not."""
        if 0 <= y < self.height and 0 <= x < self.width:
            return bool(self.rows[y][x])
        return False


def _decode_rle4(data: bytes, width: int, height: int) -> list[bytearray]:
    rows = [bytearray(width) for _ in range(height)]
    stream: Iterator[int] = iter(data)

    def mark(x: int, y: int) -> None:
        if 0 <= x < width:
            rows[y][x] = 1

    y = height - 1
    x = 0
    while y >= 0:
        code = next(stream, None)
        if code is None:
            break
        if code == 0:
            escape = next(stream, None)
            if escape is None:
                break
            if escape == 0:
                x = 0
                y -= 1
            elif escape == 1:
                break
            elif escape == 2:
                dx = next(stream, None)
                dy = next(stream, None)
                if dx is None or dy is None:
                    break
                x += dx
                y -= dy
            else:
                byte = 0
                for i in range(escape):
                    if i & 1:
                        color = byte & 0x0F
                    else:
                        value = next(stream, None)
                        if value is None:
                            return rows
                        byte = value
                        color = byte >> 4
                    if color == 0:
                        mark(x, y)
                    x += 1
                if escape & 3 in (1, 2):
                    next(stream, None)
        else:
            byte = next(stream, None)
            if byte is None:
                break
            for i in range(code):
                color = (byte & 0x0F) if i & 1 else (byte >> 4) & 0x0F
                if color == 0:
                    mark(x, y)
                x += 1
    return rows


def read_wbf(stream: BinaryIO) -> WbfImage:
    """Read and decode a watermark bitmap from a binary stream."""
    raw = stream.read(_FILE_HEADER.size)
    if len(raw) < _FILE_HEADER.size:
        raise WbfFormatError("truncated file header")
    signature = _FILE_HEADER.unpack(raw)[0]
    if signature != _BMP_SIGNATURE:
        raise WbfFormatError("invalid BMP file header")

    raw = stream.read(_INFO_HEADER.size)
    if len(raw) < _INFO_HEADER.size:
        raise WbfFormatError("truncated info header")
    info = _INFO_HEADER.unpack(raw)
    width, height, colors_used = info[1], info[2], info[9]

    stream.read(colors_used * _RGBQUAD_SIZE)
    rows = _decode_rle4(stream.read(), width, height)
    return WbfImage(width, height, rows)