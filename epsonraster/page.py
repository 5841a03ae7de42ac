"""Page description, watermark options and the enumerations used by the raster pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from os import PathLike
from typing import Optional, Union


class RasterError(Exception):
    """Raised when a raster stage cannot process or pass on a raster line."""


class WatermarkPosition(enum.IntEnum):
    """Where the watermark sits on the printable area."""

    CENTER = 0
    TOPLEFT = 1
    TOP = 2
    TOPRIGHT = 3
    LEFT = 4
    RIGHT = 5
    BOTTOMLEFT = 6
    BOTTOM = 7
    BOTTOMRIGHT = 8


class WatermarkDensity(enum.IntEnum):
    """How dark the watermark is drawn, from LEVEL1 (light) to LEVEL6 (dark)."""

    LEVEL1 = 0
    LEVEL2 = 1
    LEVEL3 = 2
    LEVEL4 = 3
    LEVEL5 = 4
    LEVEL6 = 5


class WatermarkColor(enum.IntEnum):
    """Colours a watermark can be drawn in."""

    BLACK = 0
    BLUE = 1
    LIME = 2
    AQUA = 3
    RED = 4
    FUCHSIA = 5
    YELLOW = 6


class WatermarkSize(enum.IntEnum):
    """Watermark size steps, in tens of percent of the printable area."""

    SIZE_10 = 1
    SIZE_20 = 2
    SIZE_30 = 3
    SIZE_40 = 4
    SIZE_50 = 5
    SIZE_60 = 6
    SIZE_70 = 7
    SIZE_80 = 8
    SIZE_90 = 9
    SIZE_100 = 10


class ProcessMode(enum.IntEnum):
    """Whether processed rasters go straight to the printer or into a fetch pool."""

    PRINTING = 0
    FETCHING = 1


class FetchStatus(enum.IntEnum):
    """State of the fetch pool as seen by a reader."""

    HAS_RASTER = 0
    NEED_RASTER = 1
    COMPLETED = 2
    ERROR = 3


@dataclass
class WatermarkOption:
    """Settings of the watermark drawn on each page."""

    use: bool = False
    filepath: Optional[Union[str, "PathLike[str]"]] = None
    size_ratio: float = 0.0
    position: WatermarkPosition = WatermarkPosition.CENTER
    density: WatermarkDensity = WatermarkDensity.LEVEL1
    color: WatermarkColor = WatermarkColor.BLACK


@dataclass
class PageInfo:
    """Geometry of a page as received (source) and as printed (printer)."""

    bytes_per_pixel: int
    src_width: int
    src_height: int
    prt_width: int
    prt_height: int
    scale: bool = False
    mirror: bool = False
    reverse: bool = False
    watermark: WatermarkOption = field(default_factory=WatermarkOption)

    @property
    def src_raster_bytes(self) -> int:
        """Number of bytes in one source raster line."""
        return self.src_width * self.bytes_per_pixel

    @property
    def prt_raster_bytes(self) -> int:
        """Number of bytes in one printed raster line."""
        return self.prt_width * self.bytes_per_pixel