from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from quadboard.controller.commands import (
    AddCard,
    AddCell,
    AddColumn,
    Command,
    DeleteCell,
    DeleteColumn,
    MoveCard,
    MoveCell,
    RemoveCard,
    UpdateCellTitle,
    apply_command,
)
from quadboard.controller.resize import ResizeAxis, ResizeGesture, ResizeHandle
from quadboard.model.board import Board, create_initial_board
from quadboard.model.layout import check_invariants

logger = logging.getLogger(__name__)


class BoardStore(QObject):
    """Owns the current board snapshot and publishes every new one to the views."""
    board_changed = Signal(object)
    resize_changed = Signal(object)
    invariants_violated = Signal(list)

    def __init__(self, board: Optional[Board] = None) -> None:
        super().__init__()
        self._board = board if board is not None else create_initial_board()
        self._gesture: Optional[ResizeGesture] = None

    @property
    def board(self) -> Board:
        return self._board

    @property
    def active_resize(self) -> Optional[ResizeHandle]:
        return self._gesture.handle if self._gesture else None

    def _publish(self, board: Board) -> bool:
        if board is self._board:
            return False
        self._board = board
        problems = check_invariants(board)
        if problems:
            logger.error(f"Board v{board.version} violates layout invariants: {problems}")
            self.invariants_violated.emit(problems)
        self.board_changed.emit(board)
        return True

    def dispatch(self, command: Command) -> bool:
        """Apply a command. Returns True if the board changed."""
        changed = self._publish(apply_command(self._board, command))
        if changed and self._gesture is not None and not self._gesture.matches(self._board):
            logger.debug(f"Cancelling {self._gesture.handle.axis} resize: layout changed under the gesture.")
            self.end_resize()
        return changed

    # --- Commands ---
    def add_column(self, title: Optional[str] = None) -> bool:
        return self.dispatch(AddColumn(title))

    def add_cell(self, column_index: int, title: Optional[str] = None, index: Optional[int] = None) -> bool:
        return self.dispatch(AddCell(column_index, title, index))

    def delete_cell(self, column_index: int, cell_index: int) -> bool:
        return self.dispatch(DeleteCell(column_index, cell_index))

    def delete_column(self, column_index: int) -> bool:
        return self.dispatch(DeleteColumn(column_index))

    def update_cell_title(self, cell_id: str, title: str) -> bool:
        return self.dispatch(UpdateCellTitle(cell_id, title))

    def add_card(self, cell_id: str, title: str = "") -> bool:
        return self.dispatch(AddCard(cell_id, title))

    def remove_card(self, cell_id: str, card_id: str) -> bool:
        return self.dispatch(RemoveCard(cell_id, card_id))

    def move_card(self, source_cell_id: str, card_id: str, destination_cell_id: str, index: int) -> bool:
        return self.dispatch(MoveCard(source_cell_id, card_id, destination_cell_id, index))

    def drag_end(self, source_droppable_id: str, source_index: int, destination_droppable_id: Optional[str]) -> bool:
        return self.dispatch(MoveCell(source_droppable_id, source_index, destination_droppable_id))

    # --- Resize gestures ---
    def begin_column_resize(self, index: int, pointer_x: float, width: float) -> bool:
        return self._begin_resize(ResizeAxis.COLUMNS, index, pointer_x, width)

    def begin_row_resize(self, index: int, pointer_y: float, height: float) -> bool:
        return self._begin_resize(ResizeAxis.ROWS, index, pointer_y, height)

    def _begin_resize(self, axis: ResizeAxis, index: int, pointer: float, size: float) -> bool:
        gesture = ResizeGesture.begin(self._board, axis, index, pointer, size)
        if gesture is None:
            return False
        self._gesture = gesture
        self.resize_changed.emit(gesture.handle)
        return True

    def update_resize(self, pointer: float) -> bool:
        if self._gesture is None:
            return False
        return self._publish(self._gesture.apply(self._board, pointer))

    def end_resize(self) -> None:
        if self._gesture is None:
            return
        self._gesture = None
        self.resize_changed.emit(None)
