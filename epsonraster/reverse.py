"""Reverse stage: collects a page and sends its raster lines out bottom first."""

from __future__ import annotations

from typing import Callable, Optional

from epsonraster.page import RasterError

_Output = Callable[[Optional[bytes], int], int]


class ReverseStage:
    """Buffers the raster lines of a page and emits them in reverse order on flush.

    Lines are stored from the last slot upwards. Lines past ``num_raster`` are
    dropped, and each stored line is cut or padded with 0xFF to
    ``bytes_per_raster`` bytes.
    """

    def __init__(
        self,
        output: _Output,
        bytes_per_pixel: int,
        bytes_per_raster: int,
        num_raster: int,
        top_margin: int = 0,
    ) -> None:
        if bytes_per_pixel <= 0:
            raise ValueError("bytes per pixel must be positive")
        if bytes_per_raster < 0 or num_raster < 0:
            raise ValueError("raster size and count must not be negative")
        self.output = output
        self.bytes_per_pixel = bytes_per_pixel
        self.bytes_per_raster = bytes_per_raster
        self.num_raster = num_raster
        self.top_margin = top_margin
        self._rasters = [bytearray(b"\xff" * bytes_per_raster) for _ in range(num_raster)]
        self._current = num_raster - 1
        self._flushed = False
        self._closed = False

    def process(self, raster: Optional[bytes], pixel_count: int) -> int:
        """Store one raster line, or with ``None`` send the whole page out.

        Returns the number of raster lines the following stages reported.
        """
        if self._closed:
            raise RasterError("reverse stage is closed")
        if raster is not None:
            if self._current >= 0:
                size = min(len(raster), self.bytes_per_raster)
                self._rasters[self._current][:size] = raster[:size]
            self._current -= 1
            return 0
        return self._flush()

    def _flush(self) -> int:
        if self._flushed:
            return 0
        self._flushed = True
        pixels = self.bytes_per_raster // self.bytes_per_pixel
        margin = max(self._current, 0)
        total = 0
        for line in self._rasters[margin:]:
            try:
                total += self.output(bytes(line), pixels)
            except RasterError:
                break
        try:
            self.output(None, 0)
        except RasterError:
            pass
        return total

    def close(self) -> None:
        """Release the buffered page; further processing raises RasterError."""
        self._rasters = []
        self._closed = True