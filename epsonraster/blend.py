"""Blend stage: draws a blend source such as a watermark into raster lines."""

from __future__ import annotations

from typing import Callable, Optional

from epsonraster.geometry import Color, Rect, in_blending_bounds
from epsonraster.page import RasterError
from epsonraster.watermark import BlendSourceType, PathType, Watermark, create_blender

_Output = Callable[[Optional[bytes], int], int]


class BlendStage:
    """Blends an image into the part of each raster line that lies in ``bounds``."""

    def __init__(
        self,
        output: _Output,
        source_path: PathType | None,
        bounds: Rect,
        color: Color,
        source_type: BlendSourceType = BlendSourceType.WATERMARK,
        frame: Optional[Rect] = None,
    ) -> None:
        try:
            self._blender: Optional[Watermark] = create_blender(
                source_type, source_path, bounds.size, color
            )
        except (OSError, ValueError) as exc:
            raise RasterError(f"cannot open blend source: {exc}") from exc
        self.output = output
        self.bounds = bounds
        self.frame = frame
        self.color = color
        self.source_type = source_type
        self._raster_index = 0

    def process(self, raster: Optional[bytes], pixel_count: int) -> int:
        """Blend one raster line and pass it on; ``None`` flushes the page.

        Returns 1 when a line was passed on, 0 for a flush.
        """
        blender = self._blender
        if blender is None:
            raise RasterError("blend stage is closed")
        if raster is None:
            try:
                self.output(None, 0)
            except RasterError:
                pass
            return 0

        line = bytearray(raster)
        index = self._raster_index
        self._raster_index += 1
        if pixel_count > 0 and in_blending_bounds(index, self.bounds):
            bpp = len(line) // pixel_count
            if bpp > 0:
                start = self.bounds.origin.x * bpp
                end = start + self.bounds.size.width * bpp
                region = memoryview(line)[start:end]
                count = len(region) // bpp
                if count > 0:
                    blender.blend_pixels(region[:count * bpp], count)
                region.release()
        self.output(bytes(line), pixel_count)
        return 1

    def close(self) -> None:
        """Close the blend source; further processing raises RasterError."""
        if self._blender is not None:
            self._blender.close()
            self._blender = None