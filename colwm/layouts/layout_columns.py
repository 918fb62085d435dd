"""
Column Layout

Side-by-side columns, each a vertical stack of windows.
"""

from __future__ import annotations
from typing import Dict, List, Sequence, Tuple

from .layout_base import Column, Layout, LayoutGeometry
from ..protocol import Area


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def partition(start: int, length: int, deltas: Sequence[int]) -> List[Tuple[int, int]]:
    """
    Split LENGTH pixels starting at START into one cell per delta.

    Every cell gets the equal share of what is left after all deltas, plus
    its own delta. The last cell also takes the truncation remainder, so the
    cells always sum to LENGTH. Cells may come out zero or negative when the
    deltas are large; callers decide how to present those.

    Returns:
        List of (offset, size) pairs
    """
    count = len(deltas)
    if count == 0:
        return []

    available = length - sum(deltas)
    share = _trunc_div(available, count)
    remainder = available - share * count

    cells = []
    offset = start
    for i, delta in enumerate(deltas):
        size = share + delta
        if i == count - 1:
            size += remainder
        cells.append((offset, size))
        offset += size
    return cells


class ColumnLayout(Layout):
    """
    Column tiling layout.

    Columns split the screen width, windows split their column's height.
    """

    @property
    def name(self) -> str:
        return "columns"

    def calculate(
        self, columns: List[Column], area: Area
    ) -> Dict[int, LayoutGeometry]:
        result: Dict[int, LayoutGeometry] = {}
        if not columns:
            return result

        column_cells = partition(area.x, area.width, [c.size_delta for c in columns])
        for column, (x, width) in zip(columns, column_cells):
            if not column.windows:
                continue
            window_cells = partition(
                area.y, area.height, [w.size_delta for w in column.windows]
            )
            for managed, (y, height) in zip(column.windows, window_cells):
                result[managed.window] = LayoutGeometry(x, y, width, height)

        return result
