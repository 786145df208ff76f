from __future__ import annotations

import numpy as np

from quadboard.model.board import Board


def column_widths(board: Board, width: float) -> list[float]:
    """Pixel width of every column for a container `width` pixels wide."""
    return [column.frac * width for column in board.columns]


def cell_heights(board: Board, column_index: int, height: float) -> list[float]:
    """
    Pixel height of every cell in one column.

    A cell covering rows [start, start + span) gets the sum of those rows'
    fractions times `height`.

    Args:
        board: Board snapshot.
        column_index: Column to project.
        height: Container height in pixels.

    Returns:
        One height per cell, top to bottom. Empty if the column does not exist.
    """
    if not 0 <= column_index < len(board.columns):
        return []
    edges = np.concatenate(([0.0], np.cumsum(board.row_fracs)))
    heights: list[float] = []
    start = 0
    for cell in board.columns[column_index].cells:
        end = min(start + cell.span, board.rows)
        heights.append(float(edges[end] - edges[start]) * height)
        start = end
    return heights


def column_offsets(board: Board) -> list[float]:
    """Positions of the dividers between columns, as fractions of the width."""
    fracs = [column.frac for column in board.columns]
    return [float(v) for v in np.cumsum(fracs)[:-1]]


def row_offsets(board: Board) -> list[float]:
    """Positions of the dividers between rows, as fractions of the height."""
    return [float(v) for v in np.cumsum(board.row_fracs)[:-1]]
