"""Watermark blend source: draws a bitmap over raster lines."""

from __future__ import annotations

import enum
from os import PathLike
from typing import Union

from epsonraster.geometry import Color, Rect, Size, in_blending_bounds, make_rect
from epsonraster.wbf import WbfFormatError, WbfImage, read_wbf

PathType = Union[str, "PathLike[str]"]


class BlendSourceType(enum.IntEnum):
    """Kinds of image that can be blended into a page."""

    WATERMARK = 0


class Watermark:
    """Blends a watermark bitmap, fitted and centred in a given size, into rasters."""

    def __init__(self, source_path: PathType | None, size: Size, color: Color) -> None:
        if source_path is None:
            raise ValueError("no watermark source path given")
        with open(source_path, "rb") as stream:
            image = read_wbf(stream)
        if image.width == 0 or image.height == 0:
            raise WbfFormatError("watermark image is empty")

        x_scale = size.width / image.width
        y_scale = size.height / image.height
        self.scale_ratio = min(x_scale, y_scale)
        if self.scale_ratio <= 0:
            raise ValueError("watermark size must be positive")

        fit_width = int(image.width * self.scale_ratio)
        fit_height = int(image.height * self.scale_ratio)
        self.fit_bounds: Rect = make_rect(
            int((size.width - fit_width) / 2),
            int((size.height - fit_height) / 2),
            fit_width,
            fit_height,
        )
        self.color = color
        self._image: WbfImage | None = image
        self._raster_line = 0
        self._blending_line = 0

    def blend_pixels(self, pixels: bytearray | memoryview, pixel_count: int) -> None:
        """Blend the next raster line into ``pixels`` in place."""
        line = self._raster_line
        self._raster_line += 1
        if pixel_count <= 0 or not in_blending_bounds(line, self.fit_bounds):
            return

        y = int(self._blending_line / self.scale_ratio)
        self._blending_line += 1
        image = self._image
        if image is None:
            return

        bytes_per_pixel = len(pixels) // pixel_count
        channels = (self.color.red, self.color.green, self.color.blue)[:bytes_per_pixel]
        alpha = self.color.alpha
        for i in range(pixel_count):
            if not image.is_black(int(i / self.scale_ratio), y):
                continue
            offset = i * bytes_per_pixel
            for k, target in enumerate(channels):
                source = pixels[offset + k] / 255.0
                value = (1.0 - alpha) * source + alpha * target
                pixels[offset + k] = int(value * 255.0)

    def close(self) -> None:
        """Release the decoded bitmap; later lines are left unchanged."""
        self._image = None

    def __enter__(self) -> Watermark:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def create_blender(
    source_type: BlendSourceType, source_path: PathType | None, size: Size, color: Color
) -> Watermark:
    """Create the blend source for the given type, opened on ``source_path``."""
    if source_type == BlendSourceType.WATERMARK:
        return Watermark(source_path, size, color)
    raise ValueError(f"unknown blend source type: {source_type!r}")