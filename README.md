# epsonraster

A small library that pushes the raster lines of a printed page through a
chain of processing stages before they reach the printer:

- **scale** (`epsonraster.scale.ScaleStage`): nearest-neighbour scaling
  from the source area to the printable area, using the smaller of the
  horizontal and vertical factors in both directions,
- **watermark** (`epsonraster.blend.BlendStage`): blending a run-length
  encoded monochrome bitmap into part of the page in a chosen colour and
  density,
- **mirror** (`epsonraster.mirror.MirrorStage`): horizontal flipping of
  every line,
- **reverse** (`epsonraster.reverse.ReverseStage`): vertical flipping of
  the page; lines are buffered and sent out, bottom first, on flush.

Lines leave the chain either through an output callable (printing mode)
or into a fetch pool from which they can be read back in order (fetching
mode). The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

## Usage

Describe the page with `PageInfo`, choose the stages with
`build_pipeline`, and feed lines to a `RasterProcessor`:

```python
from epsonraster.page import PageInfo, ProcessMode
from epsonraster.helper import build_pipeline
from epsonraster.raster import RasterProcessor

printed = []

def send_to_printer(data, pixel_count):
    printed.append(data)

page = PageInfo(
    bytes_per_pixel=3,
    src_width=100,
    src_height=50,
    prt_width=100,
    prt_height=50,
    mirror=True,
)
pipeline = build_pipeline(page, ProcessMode.PRINTING)

with RasterProcessor(pipeline, send_to_printer) as processor:
    for _ in range(page.src_height):
        processor.print_raster(b"\x00" * page.src_raster_bytes)
    processor.flush()
```

`print_raster` cuts or pads each line with white (`0xFF`) to the source
width. In printing mode every finished line is likewise cut or padded to
the printable width before it is passed to the output callable as
`(data, prt_width)`; lines beyond the printable height are dropped.
`flush` finishes the page, which is when a reverse stage sends its lines.
After `close` (or leaving the `with` block) further calls raise
`RasterError`.

Stages are chosen in this order: scale when `PageInfo.scale` is set,
watermark when `PageInfo.watermark.use` is set, mirror when
`PageInfo.mirror` is set, and reverse when `PageInfo.reverse` is set.

### Fetching mode

Build the pipeline with `ProcessMode.FETCHING` and create the processor
without an output. Finished lines are kept in a `FetchPool`
(`epsonraster.fetchpool`); `RasterProcessor.status()` returns a
`FetchStatus` (`HAS_RASTER`, `NEED_RASTER`, `COMPLETED` or `ERROR`) and
`RasterProcessor.fetch(fetch_bytes=None)` returns the next line, cut to
`fetch_bytes` if given, or raises `RasterError` if no line is ready. The
pool counts as complete once as many lines as the printable height have
been fetched.

### Watermarks

A watermark is set through the page's `WatermarkOption`: `filepath`,
`size_ratio` (clamped to 0.0–1.0 of the printable area),
`position` (`WatermarkPosition`), `density` (`WatermarkDensity`, `LEVEL1`
light to `LEVEL6` dark) and `color` (`WatermarkColor`). The colour is
used for 3-byte (RGB) pixels only; other pages get a black watermark.
`epsonraster.helper.watermark_bounds` computes where the watermark sits on
the page, and the bitmap is fitted and centred inside those bounds by
`epsonraster.watermark.Watermark`.

The bitmap is a BMP file with 4-bit run-length encoding; pixels of
palette index 0 are drawn. It is read with `epsonraster.wbf.read_wbf`,
which returns a `WbfImage` and raises `WbfFormatError` for files it cannot
read. A missing or unreadable file makes the watermark stage raise
`RasterError` when the processor is created.

Basic value types (`Point`, `Size`, `Rect`, `Color`, `make_rect`) live in
`epsonraster.geometry`.

## What it does not do

This is a library only. It provides no command, does not read raster
data from a print system, and does not produce printer commands: the
caller supplies the raster lines and decides what to do with the lines
that come out of the output callable or the fetch pool.

## Running the tests

```
pip install .[test]
pytest
```