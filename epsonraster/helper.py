"""Builds the chain of raster stages that a page needs."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Optional, Protocol

from epsonraster.blend import BlendStage
from epsonraster.geometry import Color, Point, Rect, Size, make_rect
from epsonraster.mirror import MirrorStage
from epsonraster.page import PageInfo, ProcessMode, WatermarkPosition
from epsonraster.reverse import ReverseStage
from epsonraster.scale import ScaleStage
from epsonraster.watermark import BlendSourceType

Output = Callable[[Optional[bytes], int], int]


class Stage(Protocol):
    """A raster stage: takes raster lines and passes them on."""

    def process(self, raster: Optional[bytes], pixel_count: int) -> int:
        ...

    def close(self) -> None:
        ...


StageFactory = Callable[[Output], Stage]

# Watermark densities from level 1 (light) to level 6 (dark).
_DENSITIES = (0.95, 0.9, 0.8, 0.75, 0.3, 0.25)

_COLORS = (
    Color(0, 0, 0, 0),  # black
    Color(0, 0, 1, 0),  # blue
    Color(0, 1, 0, 0),  # lime
    Color(0, 1, 1, 0),  # aqua
    Color(1, 0, 0, 0),  # red
    Color(1, 0, 1, 0),  # fuchsia
    Color(1, 1, 0, 0),  # yellow
)


class _Anchor(enum.Enum):
    START = 0
    MIDDLE = 1
    END = 2


_ANCHORS = {
    WatermarkPosition.CENTER: (_Anchor.MIDDLE, _Anchor.MIDDLE),
    WatermarkPosition.TOPLEFT: (_Anchor.START, _Anchor.START),
    WatermarkPosition.TOP: (_Anchor.MIDDLE, _Anchor.START),
    WatermarkPosition.TOPRIGHT: (_Anchor.END, _Anchor.START),
    WatermarkPosition.LEFT: (_Anchor.START, _Anchor.MIDDLE),
    WatermarkPosition.RIGHT: (_Anchor.END, _Anchor.MIDDLE),
    WatermarkPosition.BOTTOMLEFT: (_Anchor.START, _Anchor.END),
    WatermarkPosition.BOTTOM: (_Anchor.MIDDLE, _Anchor.END),
    WatermarkPosition.BOTTOMRIGHT: (_Anchor.END, _Anchor.END),
}


@dataclass
class Pipeline:
    """The stages to run for a page, in order, each as a named factory.

    A factory takes the output callable of the following stage and returns
    the stage. ``duplicate`` tells a fetch pool whether to copy raster lines.
    """

    page: PageInfo
    process_mode: ProcessMode
    duplicate: bool = True
    stages: list[tuple[str, StageFactory]] = field(default_factory=list)


def _clamp(value, low, high):
    return max(low, min(value, high))


def _offset(anchor: _Anchor, extra: int) -> int:
    if anchor is _Anchor.START:
        return 0
    if anchor is _Anchor.MIDDLE:
        return extra // 2
    return extra


def watermark_bounds(frame: Rect, ratio: float, position: WatermarkPosition) -> Rect:
    """Place a watermark of ``ratio`` times the frame size at ``position``."""
    ratio = _clamp(ratio, 0.0, 1.0)
    horizontal, vertical = _ANCHORS[WatermarkPosition(position)]
    width = int(frame.size.width * ratio)
    height = int(frame.size.height * ratio)
    x = _offset(horizontal, frame.size.width - width)
    y = _offset(vertical, frame.size.height - height)
    return Rect(Point(x, y), Size(width, height))


def _watermark_color(page: PageInfo) -> Color:
    option = page.watermark
    density = _DENSITIES[_clamp(int(option.density), 0, len(_DENSITIES) - 1)]
    if page.bytes_per_pixel == 3:
        base = _COLORS[_clamp(int(option.color), 0, len(_COLORS) - 1)]
    else:
        base = Color(0, 0, 0, 0)
    return Color(base.red, base.green, base.blue, 1.0 - density)


def build_pipeline(page: PageInfo, process_mode: ProcessMode) -> Pipeline:
    """Choose the stages a page needs: scale, watermark, mirror and reverse."""
    pipeline = Pipeline(page, ProcessMode(process_mode))
    bpp = page.bytes_per_pixel

    if page.scale:
        pipeline.stages.append((
            "scale",
            partial(
                ScaleStage,
                bytes_per_pixel=bpp,
                src_width=page.src_width,
                src_height=page.src_height,
                prt_width=page.prt_width,
                prt_height=page.prt_height,
                do_scaling=page.scale,
            ),
        ))

    if page.watermark.use:
        frame = make_rect(0, 0, page.prt_width, page.prt_height)
        bounds = watermark_bounds(frame, page.watermark.size_ratio, page.watermark.position)
        pipeline.stages.append((
            "watermark",
            partial(
                BlendStage,
                source_path=page.watermark.filepath,
                bounds=bounds,
                color=_watermark_color(page),
                source_type=BlendSourceType.WATERMARK,
                frame=frame,
            ),
        ))

    if page.mirror:
        pipeline.stages.append(("mirror", partial(MirrorStage, bytes_per_pixel=bpp)))

    if page.reverse:
        pipeline.stages.append((
            "reverse",
            partial(
                ReverseStage,
                bytes_per_pixel=bpp,
                bytes_per_raster=page.prt_raster_bytes,
                num_raster=page.prt_height,
                top_margin=page.src_height - page.prt_height,
            ),
        ))
        pipeline.duplicate = False

    return pipeline