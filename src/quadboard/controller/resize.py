"""
Resize Controller
=================
Interactive redistribution of the boundary between two adjacent columns or
two adjacent rows.

A gesture snapshots the pair's fractions when it starts. Every pointer
sample recomputes the pair from that snapshot and the total pixel delta, so
samples never compound rounding error and any intermediate board is valid.
The pair's combined fraction is conserved exactly; nothing else changes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Optional

import numpy as np

from quadboard.config import FRAC_TOLERANCE, MIN_COL_PX, MIN_ROW_PX
from quadboard.model.board import Board

logger = logging.getLogger(__name__)


class ResizeAxis(StrEnum):
    COLUMNS = "columns"
    ROWS = "rows"


@dataclass(frozen=True)
class ResizeHandle:
    """Which divider is being dragged; the divider sits after element `index`."""
    axis: ResizeAxis
    index: int


def _fractions(board: Board, axis: ResizeAxis) -> list[float]:
    if axis == ResizeAxis.COLUMNS:
        return [column.frac for column in board.columns]
    return list(board.row_fracs)


def _pair_ids(board: Board, axis: ResizeAxis, index: int) -> Optional[tuple[str, str]]:
    if axis == ResizeAxis.COLUMNS:
        return board.columns[index].id, board.columns[index + 1].id
    return None


@dataclass(frozen=True)
class ResizeGesture:
    handle: ResizeHandle
    start_pointer: float
    container_size: float
    min_frac: float
    first: float
    second: float
    pair_ids: Optional[tuple[str, str]] = None

    @classmethod
    def begin(
        cls,
        board: Board,
        axis: ResizeAxis,
        index: int,
        pointer: float,
        container_size: float,
        min_px: Optional[float] = None,
    ) -> Optional[ResizeGesture]:
        """
        Start dragging the divider between element `index` and `index + 1`.

        Args:
            board: Board at gesture start.
            axis: Columns (horizontal drag) or rows (vertical drag).
            index: Element left of / above the divider.
            pointer: Pointer coordinate along the axis, in pixels.
            container_size: Measured board width or height in pixels.
            min_px: Pixel floor for either element; defaults to MIN_COL_PX or
                MIN_ROW_PX.

        Returns:
            The gesture, or None when the container is unmeasured or the
            divider does not exist.
        """
        if not container_size or container_size <= 0:
            logger.debug("Resize ignored: container size not measured yet.")
            return None
        fracs = _fractions(board, axis)
        if index < 0 or index + 1 >= len(fracs):
            logger.debug(f"Resize ignored: no {axis} divider after index {index}.")
            return None

        if min_px is None:
            min_px = MIN_COL_PX if axis == ResizeAxis.COLUMNS else MIN_ROW_PX

        return cls(
            handle=ResizeHandle(axis=axis, index=index),
            start_pointer=pointer,
            container_size=container_size,
            min_frac=min(0.5, min_px / container_size),
            first=fracs[index],
            second=fracs[index + 1],
            pair_ids=_pair_ids(board, axis, index),
        )

    @property
    def combined(self) -> float:
        return self.first + self.second

    @property
    def effective_min(self) -> float:
        # Two small neighbours must stay resizable
        return min(self.min_frac, self.combined / 2)

    def pair_at(self, pointer: float) -> tuple[float, float]:
        """The pair's fractions for a pointer position."""
        delta = (pointer - self.start_pointer) / self.container_size
        combined = self.combined
        low = self.effective_min
        first = float(np.clip(self.first + delta, low, combined - low))
        return first, combined - first

    def matches(self, board: Board) -> bool:
        """
        Whether the board still holds the pair this gesture started on.

        The same two elements must sit at `index` and `index + 1` and still
        share the combined fraction captured at gesture start; adding or
        removing a column rescales every frac and breaks the match.
        """
        index = self.handle.index
        fracs = _fractions(board, self.handle.axis)
        if index + 1 >= len(fracs):
            return False
        if _pair_ids(board, self.handle.axis, index) != self.pair_ids:
            return False
        return bool(np.isclose(fracs[index] + fracs[index + 1], self.combined, rtol=0.0, atol=FRAC_TOLERANCE))

    def apply(self, board: Board, pointer: float) -> Board:
        if not self.matches(board):
            logger.debug(f"Resize sample ignored: {self.handle.axis} pair at {self.handle.index} changed.")
            return board

        index = self.handle.index
        fracs = _fractions(board, self.handle.axis)
        first, second = self.pair_at(pointer)
        if fracs[index] == first and fracs[index + 1] == second:
            return board

        if self.handle.axis == ResizeAxis.COLUMNS:
            columns = list(board.columns)
            columns[index] = columns[index].with_frac(first)
            columns[index + 1] = columns[index + 1].with_frac(second)
            return board.evolve(columns=tuple(columns))

        row_fracs = list(board.row_fracs)
        row_fracs[index] = first
        row_fracs[index + 1] = second
        return board.evolve(row_fracs=tuple(row_fracs))
