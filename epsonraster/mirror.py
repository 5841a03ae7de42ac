"""Mirror stage: flips raster lines horizontally."""

from __future__ import annotations

from typing import Callable, Optional

from epsonraster.page import RasterError

_Output = Callable[[Optional[bytes], int], int]


class MirrorStage:
    """Reverses the order of the pixels in each raster line."""

    def __init__(self, output: _Output, bytes_per_pixel: int) -> None:
        if bytes_per_pixel <= 0:
            raise ValueError("bytes per pixel must be positive")
        self.output = output
        self.bytes_per_pixel = bytes_per_pixel
        self._closed = False

    def process(self, raster: Optional[bytes], pixel_count: int) -> int:
        """Mirror one raster line and pass it on; ``None`` flushes the page.

        Returns 1 when a line was passed on, 0 for a flush.
        """
        if self._closed:
            raise RasterError("mirror stage is closed")
        if raster is None:
            try:
                self.output(None, 0)
            except RasterError:
                pass
            return 0

        bpp = self.bytes_per_pixel
        if pixel_count * bpp > len(raster):
            raise RasterError(
                f"raster of {len(raster)} bytes is too short for {pixel_count} pixels"
            )
        mirrored = bytearray(b"\xff" * len(raster))
        for i in range(pixel_count):
            target = (pixel_count - 1 - i) * bpp
            mirrored[target:target + bpp] = raster[i * bpp:(i + 1) * bpp]
        self.output(bytes(mirrored), pixel_count)
        return 1

    def close(self) -> None:
        """Release the stage; further processing raises RasterError."""
        self._closed = True