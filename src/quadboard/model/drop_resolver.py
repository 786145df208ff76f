"""Quadrant drop resolution: turn a drop target into (column, insert index)."""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, Sequence

from quadboard.model.board import Column
from quadboard.model.locators import QuadrantDirection, QuadrantTarget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Destination:
    column_index: int
    insert_index: int


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def _correct_for_source(
    column_index: int,
    insert_index: int,
    source_column_index: int,
    source_index: int,
) -> Destination:
    # Indices were computed before the source cell is taken out of its column
    if column_index == source_column_index and insert_index > source_index:
        insert_index -= 1
    return Destination(column_index=column_index, insert_index=insert_index)


def resolve_destination(
    columns: Sequence[Column],
    target: QuadrantTarget,
    source_column_index: int,
    source_index: int,
) -> Optional[Destination]:
    """
    Decode a quadrant drop into a concrete destination.

    top/bottom insert before/after the target cell in its own column.
    left/right move into the neighbouring column at the same offset, and fall
    back to the target column when there is no neighbour on that side.

    Returns None if the target column no longer exists.
    """
    if not 0 <= target.column_index < len(columns):
        logger.debug(f"Drop target column {target.column_index} does not exist.")
        return None

    target_column = columns[target.column_index]
    column_index = target.column_index
    insert_index = target.cell_index

    match target.direction:
        case QuadrantDirection.TOP:
            insert_index = target.cell_index
        case QuadrantDirection.BOTTOM:
            insert_index = target.cell_index + 1
        case QuadrantDirection.LEFT:
            column_index = target.column_index - 1
            if column_index < 0:
                column_index = target.column_index
                insert_index = target.cell_index
            else:
                insert_index = _clamp(target.cell_index, 0, len(columns[column_index].cells))
        case QuadrantDirection.RIGHT:
            column_index = target.column_index + 1
            if column_index >= len(columns):
                column_index = target.column_index
                insert_index = _clamp(target.cell_index + 1, 0, len(target_column.cells))
            else:
                insert_index = _clamp(target.cell_index, 0, len(columns[column_index].cells))

    return _correct_for_source(column_index, insert_index, source_column_index, source_index)


def resolve_column_drop(
    columns: Sequence[Column],
    column_index: int,
    source_column_index: int,
    source_index: int,
) -> Optional[Destination]:
    """A plain column drop appends the cell at the bottom of that column."""
    if not 0 <= column_index < len(columns):
        logger.debug(f"Drop column {column_index} does not exist.")
        return None
    insert_index = len(columns[column_index].cells)
    return _correct_for_source(column_index, insert_index, source_column_index, source_index)
