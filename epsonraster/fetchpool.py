"""Pool that keeps processed raster lines until a reader fetches them in order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from epsonraster.page import FetchStatus

_Raster = Union[bytes, bytearray]


@dataclass
class FetchData:
    """One raster line held in the pool.

    With ``duplicate`` set the pool keeps its own copy of the line; otherwise it
    keeps the object it was given.
    """

    raster: Optional[_Raster]
    pixel_count: int = 0
    duplicate: bool = True

    @property
    def raster_bytes(self) -> int:
        """Number of bytes in the raster line."""
        return 0 if self.raster is None else len(self.raster)


@dataclass
class _Node:
    id: int
    data: FetchData
    fetched: bool = False


def _retain(data: FetchData) -> FetchData:
    if data.duplicate and data.raster is not None:
        return FetchData(bytes(data.raster), data.pixel_count, True)
    return FetchData(data.raster, data.pixel_count, data.duplicate)


class FetchPool:
    """Holds raster lines numbered in arrival order and hands them out in that order."""

    def __init__(self, required_count: int) -> None:
        self.required_count = required_count
        self.retained_count = 0
        self.fetched_count = 0
        self.serial_number = 0
        self._nodes: list[_Node] = []

    def add(self, data: FetchData) -> None:
        """Keep a raster line, reusing the slot of one already fetched."""
        retained = _retain(data)
        node = next((n for n in self._nodes if n.fetched), None)
        if node is None:
            self._nodes.append(_Node(self.serial_number, retained))
        else:
            node.fetched = False
            node.id = self.serial_number
            node.data = retained
        if data.raster is not None:
            self.serial_number += 1
            self.retained_count += 1

    def fetch(self) -> Optional[FetchData]:
        """Return the next raster line in order, or ``None`` if it has not arrived."""
        node = next(
            (n for n in self._nodes if not n.fetched and n.id == self.fetched_count),
            None,
        )
        if node is None:
            return None
        node.fetched = True
        self.fetched_count += 1
        self.retained_count -= 1
        return node.data

    def status(self) -> FetchStatus:
        """Tell whether the pool is complete, holds lines, or waits for more."""
        if self.fetched_count == self.required_count:
            return FetchStatus.COMPLETED
        if self.retained_count == 0:
            return FetchStatus.NEED_RASTER
        if self.retained_count > 0:
            return FetchStatus.HAS_RASTER
        return FetchStatus.ERROR