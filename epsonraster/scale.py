"""Scaling stage: resizes raster lines by nearest-neighbour interpolation."""

from __future__ import annotations

from typing import Callable, Optional

from epsonraster.page import RasterError

_Output = Callable[[Optional[bytes], int], int]


class ScaleStage:
    """Scales each raster line from the source area to the printable area.

    The same factor, the smaller of the horizontal and vertical ones, is used in
    both directions. Without scaling, lines are passed through unchanged.
    """

    def __init__(
        self,
        output: _Output,
        bytes_per_pixel: int,
        src_width: int,
        src_height: int,
        prt_width: int,
        prt_height: int,
        do_scaling: bool,
    ) -> None:
        self.output = output
        self.bytes_per_pixel = bytes_per_pixel
        self.do_scaling = bool(do_scaling)
        self._closed = False
        self._line_carry = 0.0
        self.scale = 1.0
        self.scaled_pixels = 0
        self.scaled_bytes = 0
        if self.do_scaling:
            if src_width <= 0 or src_height <= 0:
                raise ValueError("source area must be positive to scale")
            x_scale = prt_width / src_width
            y_scale = prt_height / src_height
            self.scale = min(x_scale, y_scale)
            self.scaled_pixels = int(src_width * self.scale)
            self.scaled_bytes = self.scaled_pixels * bytes_per_pixel

    def process(self, raster: Optional[bytes], pixel_count: int) -> int:
        """Scale one raster line and pass it on; ``None`` flushes the page.

        Returns the number of raster lines the following stages reported.
        """
        if self._closed:
            raise RasterError("scale stage is closed")
        if raster is None:
            try:
                self.output(None, 0)
            except RasterError:
                pass
            return 0
        if not self.do_scaling:
            return self.output(bytes(raster), pixel_count)
        return self._scale_nearest(bytes(raster), pixel_count)

    def _scale_nearest(self, raster: bytes, pixel_count: int) -> int:
        whole = int(self.scale)
        fraction = self.scale - whole

        lines = whole
        self._line_carry += fraction
        if self._line_carry >= 1.0:
            lines += 1
            self._line_carry -= 1.0
        if lines <= 0:
            return 0

        bpp = self.bytes_per_pixel
        scaled = bytearray()
        pixel_carry = 0.0
        for i in range(pixel_count):
            copies = whole
            pixel_carry += fraction
            if pixel_carry >= 1.0:
                copies += 1
                pixel_carry -= 1.0
            if copies > 0:
                scaled += raster[i * bpp:(i + 1) * bpp] * copies
        scaled = scaled[:self.scaled_bytes]
        scaled += b"\xff" * (self.scaled_bytes - len(scaled))
        line = bytes(scaled)

        total = 0
        for _ in range(lines):
            total += self.output(line, self.scaled_pixels)
        return total

    def close(self) -> None:
        """Release the stage; further processing raises RasterError."""
        self._closed = True