"""
Layout Invariant Maintainer
===========================
Pure functions that keep a board's numeric layout consistent after
structural edits.

The invariants maintained here:
    I1  column fracs sum to 1 (whenever there is at least one column)
    I2  row fracs sum to 1
    I3  the spans of every column sum to the number of rows
    I4  every span is at least 1
    I5  no column is empty

Nothing in this module mutates its input; lists of cells come back as new
lists with replaced Cell instances.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from quadboard.config import FRAC_TOLERANCE
from quadboard.model.board import Board, Cell, Column

logger = logging.getLogger(__name__)


class LayoutInvariantError(AssertionError):
    """A board left the layout maintainer in an inconsistent state."""


def normalize_fracs(columns: Sequence[Column]) -> list[Column]:
    """
    Rescale every column frac by 1/total so they sum to 1.

    A zero total is returned unchanged, there is nothing to scale against.
    """
    fracs = np.asarray([column.frac for column in columns], dtype=float)
    total = float(fracs.sum())
    if total == 0:
        return list(columns)
    return [column.with_frac(float(frac)) for column, frac in zip(columns, fracs / total)]


def sum_spans(cells: Sequence[Cell]) -> int:
    return sum(cell.span for cell in cells)


def _target_index(count: int, preserve_index: Optional[int]) -> int:
    """Cell that receives a deficit: the preserved one bounded to [0, count - 1], else the last."""
    if preserve_index is None:
        return count - 1
    return min(count - 1, max(0, preserve_index))


def clamp_spans_to_rows(
    cells: Sequence[Cell],
    rows: int,
    preserve_index: Optional[int] = None,
) -> list[Cell]:
    """
    Reconcile the span total of a column's cells to exactly `rows`.

    Spans are first rounded to integers, halves upwards (minimum 1). A
    deficit goes entirely to the preserved cell (or the last one). An
    overflow is taken from the cells in order, with the preserved cell
    reduced last and no cell going below span 1.

    Args:
        cells: Cells of one column, top to bottom.
        rows: Row count of the board.
        preserve_index: Cell that should gain space first and lose it last,
            usually the one just inserted. Out-of-range values are bounded
            when placing a deficit, so a negative index gives it to the first
            cell and a too-large one to the last; they protect no cell from
            an overflow reduction.

    Returns:
        A new list of cells. Its span total equals `rows` whenever
        `rows >= len(cells)`; otherwise every span is 1 and the total exceeds
        `rows`.
    """
    if not cells:
        return list(cells)

    # Halves round up
    normalized = [cell.with_span(max(1, int(np.floor(cell.span + 0.5)))) for cell in cells]
    total = sum_spans(normalized)

    if total == rows:
        return normalized

    if total < rows:
        index = _target_index(len(normalized), preserve_index)
        normalized[index] = normalized[index].with_span(normalized[index].span + rows - total)
        return normalized

    overflow = total - rows

    reduction_order = list(range(len(normalized)))
    if preserve_index is not None and preserve_index in reduction_order:
        reduction_order.remove(preserve_index)
        reduction_order.append(preserve_index)

    for index in reduction_order:
        if overflow <= 0:
            break
        cell = normalized[index]
        max_reduction = max(cell.span - 1, 0)
        if max_reduction == 0:
            continue
        reduction = min(max_reduction, overflow)
        overflow -= reduction
        normalized[index] = cell.with_span(cell.span - reduction)

    if overflow > 0:
        last = normalized[-1]
        normalized[-1] = last.with_span(max(1, last.span - overflow))

    final_total = sum_spans(normalized)
    if final_total < rows:
        index = _target_index(len(normalized), preserve_index)
        normalized[index] = normalized[index].with_span(normalized[index].span + rows - final_total)

    return normalized


def absorb_span_after_removal(
    cells: Sequence[Cell],
    removed_index: int,
    removed_span: int,
) -> list[Cell]:
    """Give a removed cell's span to its upper neighbour (or the first cell)."""
    if not cells:
        return list(cells)
    target = removed_index - 1 if removed_index > 0 else 0
    return [
        cell.with_span(cell.span + removed_span) if index == target else cell
        for index, cell in enumerate(cells)
    ]


def insert_cell_with_clamp(
    cells: Sequence[Cell],
    insert_index: int,
    new_cell: Cell,
    rows: int,
) -> list[Cell]:
    """Insert a cell at a bounded index and re-clamp, the new cell absorbing first."""
    next_cells = list(cells)
    bounded = max(0, min(insert_index, len(next_cells)))
    next_cells.insert(bounded, new_cell)
    return clamp_spans_to_rows(next_cells, rows, preserve_index=bounded)


def can_accept_cell(column: Column, rows: int) -> bool:
    """A column can only take another cell while every cell can keep span >= 1."""
    return len(column.cells) < rows


def check_invariants(board: Board, tolerance: float = FRAC_TOLERANCE) -> list[str]:
    """Return a description of every layout invariant the board violates."""
    problems: list[str] = []

    if board.columns:
        col_total = float(np.sum([column.frac for column in board.columns]))
        if not np.isclose(col_total, 1.0, rtol=0.0, atol=tolerance):
            problems.append(f"column fracs sum to {col_total:.9f}, expected 1")

    row_total = float(np.sum(board.row_fracs))
    if not np.isclose(row_total, 1.0, rtol=0.0, atol=tolerance):
        problems.append(f"row fracs sum to {row_total:.9f}, expected 1")

    for index, column in enumerate(board.columns):
        if not column.cells:
            problems.append(f"column {index} ({column.id}) has no cells")
            continue
        spans = sum_spans(column.cells)
        if spans != board.rows:
            problems.append(f"column {index} spans sum to {spans}, expected {board.rows}")
        for cell in column.cells:
            if cell.span < 1:
                problems.append(f"cell {cell.id} in column {index} has span {cell.span}")

    return problems


def assert_invariants(board: Board, tolerance: float = FRAC_TOLERANCE) -> None:
    problems = check_invariants(board, tolerance)
    if problems:
        raise LayoutInvariantError("; ".join(problems))
