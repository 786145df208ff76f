"""
Board State (Data Model)
========================
This module defines the immutable snapshot the whole engine operates on.

Why is this file needed?
------------------------
1. State Management: A Board holds columns, row ratios and the card lists of
   every cell in one place. Commands never mutate it, they return a new one.
2. Identity: Cells and columns carry stable ids, so card lists and the
   rendering layer's keys survive reorders and resizes.
3. Decoupling: Views read snapshots; controllers produce new snapshots.

Classes:
    Card: Leaf content item attached to a cell.
    Cell: One draggable tile occupying `span` row-units of its column.
    Column: Vertical strip with a width fraction and ordered cells.
    Board: The root aggregate.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
from types import MappingProxyType
import uuid
from typing import Mapping, Optional

from quadboard.config import INITIAL_ROW_FRACS

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Card:
    id: str
    title: str


@dataclass(frozen=True)
class Cell:
    id: str
    title: str
    span: int = 1

    def with_span(self, span: int) -> Cell:
        return replace(self, span=span)


@dataclass(frozen=True)
class Column:
    id: str
    frac: float
    cells: tuple[Cell, ...] = ()

    def with_frac(self, frac: float) -> Column:
        return replace(self, frac=frac)

    def with_cells(self, cells: tuple[Cell, ...] | list[Cell]) -> Column:
        return replace(self, cells=tuple(cells))


@dataclass(frozen=True)
class Board:
    """
    Snapshot of the whole board.

    `row_fracs` defines the row height ratios; its length is the number of
    row-units every column's spans must add up to. `version` grows by one with
    each command that actually changed something.

    `cards_by_cell` is stored as a read-only mapping and is left out of the
    hash, so boards can be hashed and their card lists cannot be edited in
    place.
    """
    columns: tuple[Column, ...] = ()
    row_fracs: tuple[float, ...] = INITIAL_ROW_FRACS
    cards_by_cell: Mapping[str, tuple[Card, ...]] = field(default_factory=dict, hash=False)
    version: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "cards_by_cell", MappingProxyType(dict(self.cards_by_cell)))

    @property
    def rows(self) -> int:
        return len(self.row_fracs)

    def cards_for(self, cell_id: str) -> tuple[Card, ...]:
        return self.cards_by_cell.get(cell_id, ())

    def cell_location(self, cell_id: str) -> Optional[tuple[int, int]]:
        """Return (column_index, cell_index) of a cell, or None if it is gone."""
        for column_index, column in enumerate(self.columns):
            for cell_index, cell in enumerate(column.cells):
                if cell.id == cell_id:
                    return column_index, cell_index
        return None

    def evolve(self, **changes) -> Board:
        """Copy with changes applied and the version bumped."""
        return replace(self, version=self.version + 1, **changes)


def create_initial_board() -> Board:
    """Build the seed board shown on first load: three columns over three rows."""

    def make_cell(title: str, span: int) -> Cell:
        return Cell(id=new_id(), title=title, span=span)

    column_a = Column(id=new_id(), frac=0.34, cells=(
        make_cell("Ideas", 1),
        make_cell("Requirements", 2),
    ))
    column_b = Column(id=new_id(), frac=0.33, cells=(
        make_cell("Design", 1),
        make_cell("In progress", 1),
        make_cell("Review", 1),
    ))
    column_c = Column(id=new_id(), frac=0.33, cells=(
        make_cell("Release prep", 2),
        make_cell("Done", 1),
    ))

    seed_titles = [
        (column_a.cells[0], ["Design research", "User interviews"]),
        (column_a.cells[1], ["Lock MVP scope"]),
        (column_b.cells[0], ["Information architecture"]),
        (column_b.cells[1], ["Frontend", "Backend"]),
        (column_b.cells[2], ["QA checklist"]),
        (column_c.cells[0], ["Runbook", "Market announcement"]),
        (column_c.cells[1], ["Deployed"]),
    ]
    cards_by_cell = {
        cell.id: tuple(Card(id=new_id(), title=title) for title in titles)
        for cell, titles in seed_titles
    }

    logger.debug("Created initial board with 3 columns.")
    return Board(
        columns=(column_a, column_b, column_c),
        row_fracs=INITIAL_ROW_FRACS,
        cards_by_cell=cards_by_cell,
    )
