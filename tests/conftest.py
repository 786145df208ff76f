import pytest
from PySide6.QtCore import QCoreApplication

from quadboard.model.board import Board, Card, Cell, Column


@pytest.fixture(scope="session")
def qt_core_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def make_column(column_id: str, frac: float, spans: list[int]) -> Column:
    cells = tuple(Cell(id=f"{column_id}-{i}", title=f"{column_id}{i}", span=span) for i, span in enumerate(spans))
    return Column(id=column_id, frac=frac, cells=cells)


@pytest.fixture
def board() -> Board:
    """Three rows; columns a [1, 2], b [1, 1, 1], c [2, 1]."""
    columns = (
        make_column("a", 0.34, [1, 2]),
        make_column("b", 0.33, [1, 1, 1]),
        make_column("c", 0.33, [2, 1]),
    )
    cards = {cell.id: (Card(id=f"card-{cell.id}", title=cell.title),) for column in columns for cell in column.cells}
    return Board(columns=columns, row_fracs=(0.34, 0.33, 0.33), cards_by_cell=cards)
