"""
Board Commands (Drag Transaction Coordinator)
=============================================
Every user action on the board is a small frozen dataclass. `apply_command`
turns a Board snapshot and a command into the next snapshot.

Why is this file needed?
------------------------
1. Atomicity: A drop, an add or a delete is one pure transform. There is no
   half-applied state for the rendering layer to observe.
2. Invariants: Structural edits route through `quadboard.model.layout`, so
   every snapshot that leaves here satisfies I1-I5.
3. Robustness: Stale or malformed input (a drop on a column that was just
   removed, a garbled locator) returns the very same Board object. Callers
   can detect the no-op with `is`.

Classes:
    MoveCell, AddColumn, AddCell, DeleteCell, DeleteColumn, UpdateCellTitle:
        Structural commands.
    AddCard, RemoveCard, MoveCard: Leaf content commands.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, Union

from quadboard.config import DEFAULT_CARD_TITLE, DEFAULT_CELL_TITLE, NEW_CELL_TITLE
from quadboard.model.board import Board, Card, Cell, Column, new_id
from quadboard.model.drop_resolver import Destination, resolve_column_drop, resolve_destination
from quadboard.model.layout import (
    absorb_span_after_removal,
    can_accept_cell,
    insert_cell_with_clamp,
    normalize_fracs,
)
from quadboard.model.locators import (
    ColumnTarget,
    QuadrantTarget,
    parse_drop_target,
    parse_source,
)

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class MoveCell:
    """Drag-end of a cell. `destination_droppable_id` is None for a drop outside any zone."""
    source_droppable_id: str
    source_index: int
    destination_droppable_id: Optional[str]


@dataclass(frozen=True)
class AddColumn:
    title: Optional[str] = None


@dataclass(frozen=True)
class AddCell:
    column_index: int
    title: Optional[str] = None
    index: Optional[int] = None


@dataclass(frozen=True)
class DeleteCell:
    column_index: int
    cell_index: int


@dataclass(frozen=True)
class DeleteColumn:
    column_index: int


@dataclass(frozen=True)
class UpdateCellTitle:
    cell_id: str
    title: str


@dataclass(frozen=True)
class AddCard:
    cell_id: str
    title: str = ""


@dataclass(frozen=True)
class RemoveCard:
    cell_id: str
    card_id: str


@dataclass(frozen=True)
class MoveCard:
    source_cell_id: str
    card_id: str
    destination_cell_id: str
    index: int


Command = Union[
    MoveCell, AddColumn, AddCell, DeleteCell, DeleteColumn, UpdateCellTitle,
    AddCard, RemoveCard, MoveCard,
]


def apply_command(board: Board, command: Command) -> Board:
    """Apply one command. Returns `board` itself when nothing changes."""
    match command:
        case MoveCell():
            return move_cell(board, command)
        case AddColumn():
            return add_column(board, command.title)
        case AddCell():
            return add_cell(board, command.column_index, command.title, command.index)
        case DeleteCell():
            return delete_cell(board, command.column_index, command.cell_index)
        case DeleteColumn():
            return delete_column(board, command.column_index)
        case UpdateCellTitle():
            return update_cell_title(board, command.cell_id, command.title)
        case AddCard():
            return add_card(board, command.cell_id, command.title)
        case RemoveCard():
            return remove_card(board, command.cell_id, command.card_id)
        case MoveCard():
            return move_card(
                board, command.source_cell_id, command.card_id,
                command.destination_cell_id, command.index,
            )
        case _:
            logger.warning(f"Ignoring unknown command: {command!r}")
            return board


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def _clean_title(title: Optional[str], default: str) -> str:
    return (title or "").strip() or default


# ------------------------------------------------------------------------------
# Cell relocation
# ------------------------------------------------------------------------------
def move_cell(board: Board, command: MoveCell) -> Board:
    """
    Relocate a dragged cell.

    Within one column only the order changes. Across columns the source gives
    up the cell (absorbing its span, or disappearing when emptied) and the
    destination re-clamps its spans around the newcomer.
    """
    if command.destination_droppable_id is None:
        return board

    target = parse_drop_target(command.destination_droppable_id)
    source = parse_source(command.source_droppable_id, command.source_index)
    if target is None or source is None:
        logger.debug(
            f"Ignoring drop with unparseable locators: "
            f"{command.source_droppable_id!r} -> {command.destination_droppable_id!r}"
        )
        return board

    if not 0 <= source.column_index < len(board.columns):
        return board
    source_column = board.columns[source.column_index]
    if source.index >= len(source_column.cells):
        return board

    destination: Optional[Destination]
    match target:
        case QuadrantTarget():
            destination = resolve_destination(board.columns, target, source.column_index, source.index)
        case ColumnTarget():
            destination = resolve_column_drop(
                board.columns, target.column_index, source.column_index, source.index
            )
        case _:
            destination = None
    if destination is None:
        return board

    if destination.column_index == source.column_index:
        return _reorder_within_column(board, source.column_index, source.index, destination.insert_index)

    if not can_accept_cell(board.columns[destination.column_index], board.rows):
        logger.info(
            f"Column {destination.column_index} already holds {board.rows} cells; drop refused."
        )
        return board

    columns = list(board.columns)
    remaining = list(source_column.cells)
    moved = remaining.pop(source.index)

    removed_column = False
    if not remaining:
        del columns[source.column_index]
        removed_column = True
    else:
        columns[source.column_index] = source_column.with_cells(
            absorb_span_after_removal(remaining, source.index, moved.span)
        )

    column_index = destination.column_index
    if removed_column and column_index > source.column_index:
        column_index -= 1
    column_index = _clamp(column_index, 0, max(len(columns) - 1, 0))

    target_column = columns[column_index]
    columns[column_index] = target_column.with_cells(
        insert_cell_with_clamp(target_column.cells, destination.insert_index, moved, board.rows)
    )

    if removed_column:
        columns = normalize_fracs(columns)

    logger.debug(
        f"Moved cell {moved.id} from column {source.column_index} "
        f"to column {column_index} at {destination.insert_index}."
    )
    return board.evolve(columns=tuple(columns))


def _reorder_within_column(board: Board, column_index: int, source_index: int, insert_index: int) -> Board:
    column = board.columns[column_index]
    cells = list(column.cells)
    moved = cells.pop(source_index)
    cells.insert(_clamp(insert_index, 0, len(cells)), moved)
    if tuple(cells) == column.cells:
        return board

    columns = list(board.columns)
    columns[column_index] = column.with_cells(cells)
    return board.evolve(columns=tuple(columns))


# ------------------------------------------------------------------------------
# Structural edits
# ------------------------------------------------------------------------------
def add_column(board: Board, title: Optional[str] = None) -> Board:
    """Append a column holding one full-height cell, shrinking the others to make room."""
    cell = Cell(id=new_id(), title=_clean_title(title, NEW_CELL_TITLE), span=board.rows)
    count = len(board.columns)
    new_frac = 1.0 if count == 0 else 1.0 / (count + 1)
    column = Column(id=new_id(), frac=new_frac, cells=(cell,))

    if count == 0:
        columns = [column]
    else:
        shrink = 1.0 - new_frac
        columns = normalize_fracs([c.with_frac(c.frac * shrink) for c in board.columns] + [column])

    logger.debug(f"Added column {column.id} (now {len(columns)} columns).")
    return board.evolve(
        columns=tuple(columns),
        cards_by_cell={**board.cards_by_cell, cell.id: ()},
    )


def add_cell(
    board: Board,
    column_index: int,
    title: Optional[str] = None,
    index: Optional[int] = None,
) -> Board:
    """Insert a span-1 cell into a column (at the bottom unless `index` is given)."""
    if not 0 <= column_index < len(board.columns):
        return board
    column = board.columns[column_index]
    if not can_accept_cell(column, board.rows):
        logger.info(f"Column {column_index} already holds {board.rows} cells; add refused.")
        return board

    cell = Cell(id=new_id(), title=_clean_title(title, NEW_CELL_TITLE), span=1)
    insert_index = len(column.cells) if index is None else index
    columns = list(board.columns)
    columns[column_index] = column.with_cells(
        insert_cell_with_clamp(column.cells, insert_index, cell, board.rows)
    )
    return board.evolve(
        columns=tuple(columns),
        cards_by_cell={**board.cards_by_cell, cell.id: ()},
    )


def delete_cell(board: Board, column_index: int, cell_index: int) -> Board:
    """Remove a cell and its cards; an emptied column goes with it."""
    if not 0 <= column_index < len(board.columns):
        return board
    column = board.columns[column_index]
    if not 0 <= cell_index < len(column.cells):
        return board

    cells = list(column.cells)
    removed = cells.pop(cell_index)
    cards = {cell_id: items for cell_id, items in board.cards_by_cell.items() if cell_id != removed.id}

    columns = list(board.columns)
    if not cells:
        del columns[column_index]
        columns = normalize_fracs(columns)
    else:
        columns[column_index] = column.with_cells(
            absorb_span_after_removal(cells, cell_index, removed.span)
        )

    logger.debug(f"Deleted cell {removed.id} from column {column_index}.")
    return board.evolve(columns=tuple(columns), cards_by_cell=cards)


def delete_column(board: Board, column_index: int) -> Board:
    """Remove a whole column, cascading to the cards of all its cells."""
    if not 0 <= column_index < len(board.columns):
        return board

    removed = board.columns[column_index]
    removed_ids = {cell.id for cell in removed.cells}
    cards = {cell_id: items for cell_id, items in board.cards_by_cell.items() if cell_id not in removed_ids}
    columns = normalize_fracs([c for i, c in enumerate(board.columns) if i != column_index])

    logger.debug(f"Deleted column {removed.id} with {len(removed.cells)} cells.")
    return board.evolve(columns=tuple(columns), cards_by_cell=cards)


def update_cell_title(board: Board, cell_id: str, title: str) -> Board:
    location = board.cell_location(cell_id)
    if location is None:
        return board
    column_index, cell_index = location
    column = board.columns[column_index]
    cell = column.cells[cell_index]

    next_title = _clean_title(title, DEFAULT_CELL_TITLE)
    if next_title == cell.title:
        return board

    cells = list(column.cells)
    cells[cell_index] = Cell(id=cell.id, title=next_title, span=cell.span)
    columns = list(board.columns)
    columns[column_index] = column.with_cells(cells)
    return board.evolve(columns=tuple(columns))


# ------------------------------------------------------------------------------
# Leaf content (cards)
# ------------------------------------------------------------------------------
def add_card(board: Board, cell_id: str, title: str = "") -> Board:
    if board.cell_location(cell_id) is None:
        return board
    card = Card(id=new_id(), title=_clean_title(title, DEFAULT_CARD_TITLE))
    return board.evolve(cards_by_cell={**board.cards_by_cell, cell_id: board.cards_for(cell_id) + (card,)})


def remove_card(board: Board, cell_id: str, card_id: str) -> Board:
    cards = board.cards_for(cell_id)
    remaining = tuple(card for card in cards if card.id != card_id)
    if len(remaining) == len(cards):
        return board
    return board.evolve(cards_by_cell={**board.cards_by_cell, cell_id: remaining})


def move_card(
    board: Board,
    source_cell_id: str,
    card_id: str,
    destination_cell_id: str,
    index: int,
) -> Board:
    """Move a card within or across cells, inserting at a clamped index."""
    if board.cell_location(destination_cell_id) is None:
        return board

    source_cards = list(board.cards_for(source_cell_id))
    position = next((i for i, card in enumerate(source_cards) if card.id == card_id), None)
    if position is None:
        return board
    card = source_cards.pop(position)

    cards_by_cell = dict(board.cards_by_cell)
    if source_cell_id == destination_cell_id:
        destination_cards = source_cards
    else:
        cards_by_cell[source_cell_id] = tuple(source_cards)
        destination_cards = list(board.cards_for(destination_cell_id))

    destination_cards.insert(_clamp(index, 0, len(destination_cards)), card)
    if source_cell_id == destination_cell_id and position == destination_cards.index(card):
        return board
    cards_by_cell[destination_cell_id] = tuple(destination_cards)
    return board.evolve(cards_by_cell=cards_by_cell)
