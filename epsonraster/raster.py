"""Runs raster lines of a page through a pipeline to a printer or a fetch pool."""

from __future__ import annotations

from typing import Callable, Optional, Union

from epsonraster.fetchpool import FetchData, FetchPool
from epsonraster.helper import Pipeline, Stage
from epsonraster.page import FetchStatus, ProcessMode, RasterError

RasterOutput = Callable[[bytes, int], object]
_Raster = Union[bytes, bytearray, memoryview]


def _fit(raster: _Raster, size: int) -> bytes:
    data = bytes(raster)
    if len(data) >= size:
        return data[:size]
    return data + b"\xff" * (size - len(data))


class RasterProcessor:
    """Feeds raster lines through the stages of a pipeline.

    In printing mode each finished line, cut or padded with 0xFF to the printable
    width, goes to ``output``; lines past the printable height are dropped. In
    fetching mode finished lines are kept in a pool for :meth:`fetch`.
    """

    def __init__(self, pipeline: Pipeline, output: Optional[RasterOutput] = None) -> None:
        self.pipeline = pipeline
        self.page = pipeline.page
        fetching = pipeline.process_mode == ProcessMode.FETCHING
        if not fetching and output is None:
            raise ValueError("printing mode needs an output")
        self._output = output
        self._pool: Optional[FetchPool] = FetchPool(self.page.prt_height) if fetching else None
        self._output_index = 0
        self._closed = False

        downstream = self._to_fetchpool if fetching else self._to_printer
        stages: list[Stage] = []
        try:
            for _name, factory in reversed(pipeline.stages):
                stage = factory(downstream)
                stages.append(stage)
                downstream = stage.process
        except Exception:
            for stage in stages:
                stage.close()
            raise
        stages.reverse()
        self._stages = stages
        self._entry = downstream

    def _to_printer(self, raster: Optional[bytes], pixel_count: int) -> int:
        if raster is None:
            return 0
        self._output_index += 1
        if self._output_index <= self.page.prt_height:
            self._output(_fit(raster, self.page.prt_raster_bytes), self.page.prt_width)
        return 1

    def _to_fetchpool(self, raster: Optional[bytes], pixel_count: int) -> int:
        if raster is None:
            return 0
        self._pool.add(FetchData(raster, pixel_count, self.pipeline.duplicate))
        return 1

    def _check_open(self) -> None:
        if self._closed:
            raise RasterError("raster processor is closed")

    def print_raster(self, raster: _Raster) -> int:
        """Send one source line, cut or padded with 0xFF to the source width.

        Returns the number of lines the pipeline reported as passed on.
        """
        self._check_open()
        line = _fit(raster, self.page.src_raster_bytes)
        return self._entry(line, self.page.src_width)

    def flush(self) -> int:
        """Finish the page, letting buffering stages send what they hold."""
        self._check_open()
        return self._entry(None, 0)

    def _pool_or_raise(self) -> FetchPool:
        self._check_open()
        if self._pool is None:
            raise RasterError("no fetch pool in printing mode")
        return self._pool

    def fetch(self, fetch_bytes: Optional[int] = None) -> bytes:
        """Return the next finished line, at most ``fetch_bytes`` bytes of it."""
        data = self._pool_or_raise().fetch()
        if data is None or data.raster is None:
            raise RasterError("no raster line ready to fetch")
        raster = bytes(data.raster)
        if fetch_bytes is not None:
            raster = raster[:max(fetch_bytes, 0)]
        return raster

    def status(self) -> FetchStatus:
        """Report the state of the fetch pool."""
        return self._pool_or_raise().status()

    def close(self) -> None:
        """Close every stage; further use raises RasterError."""
        if self._closed:
            return
        self._closed = True
        for stage in self._stages:
            stage.close()
        self._stages = []
        self._pool = None

    def __enter__(self) -> RasterProcessor:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()