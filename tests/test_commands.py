import random
from collections import Counter

import pytest

from quadboard.controller.commands import (
    AddCard,
    AddCell,
    AddColumn,
    DeleteCell,
    DeleteColumn,
    MoveCard,
    MoveCell,
    RemoveCard,
    UpdateCellTitle,
    apply_command,
)
from quadboard.model.board import Board, create_initial_board
from quadboard.model.layout import assert_invariants, sum_spans

from conftest import make_column


def ids(column):
    return [cell.id for cell in column.cells]


def spans(column):
    return [cell.span for cell in column.cells]


class TestAddColumn:
    def test_scenario_a_shrinks_existing_proportionally(self, board):
        before = [c.frac for c in board.columns]
        out = apply_command(board, AddColumn())

        assert len(out.columns) == 4
        assert sum(c.frac for c in out.columns) == pytest.approx(1.0, abs=1e-9)
        for old, new in zip(before, out.columns[:3]):
            assert new.frac == pytest.approx(old * 0.75)
            assert new.frac < old
        assert out.columns[3].frac == pytest.approx(0.25)
        assert all(c.frac >= 0 for c in out.columns)
        assert_invariants(out)

    def test_new_column_has_full_height_cell_and_card_list(self, board):
        out = apply_command(board, AddColumn("Backlog"))
        column = out.columns[-1]
        assert len(column.cells) == 1
        assert column.cells[0].span == board.rows
        assert column.cells[0].title == "Backlog"
        assert out.cards_for(column.cells[0].id) == ()
        assert column.cells[0].id in out.cards_by_cell

    def test_first_column_on_empty_board(self):
        out = apply_command(Board(columns=(), row_fracs=(0.5, 0.5)), AddColumn())
        assert len(out.columns) == 1
        assert out.columns[0].frac == 1.0
        assert out.columns[0].cells[0].title == "New cell"
        assert_invariants(out)

    def test_version_bumped(self, board):
        assert apply_command(board, AddColumn()).version == board.version + 1


class TestAddCell:
    def test_add_to_column_with_room(self, board):
        out = apply_command(board, AddCell(0, "Extra"))
        column = out.columns[0]
        assert len(column.cells) == 3
        assert column.cells[-1].title == "Extra"
        assert sum_spans(column.cells) == 3
        assert_invariants(out)

    def test_add_at_index(self, board):
        out = apply_command(board, AddCell(2, index=0))
        assert out.columns[2].cells[0].title == "New cell"
        assert ids(out.columns[2])[1:] == ids(board.columns[2])
        assert_invariants(out)

    def test_full_column_refused(self, board):
        assert apply_command(board, AddCell(1)) is board

    def test_missing_column(self, board):
        assert apply_command(board, AddCell(7)) is board


class TestDeleteCell:
    def test_scenario_b_remaining_cell_absorbs(self, board):
        out = apply_command(board, DeleteCell(0, 0))
        assert spans(out.columns[0]) == [3]
        assert "a-0" not in out.cards_by_cell
        assert_invariants(out)

    def test_last_cell_deletes_column_and_renormalizes(self, board):
        single = apply_command(board, DeleteCell(0, 0))
        out = apply_command(single, DeleteCell(0, 0))
        assert len(out.columns) == 2
        assert [c.id for c in out.columns] == ["b", "c"]
        assert sum(c.frac for c in out.columns) == pytest.approx(1.0)
        assert_invariants(out)

    def test_stale_indices_are_noops(self, board):
        assert apply_command(board, DeleteCell(5, 0)) is board
        assert apply_command(board, DeleteCell(0, 5)) is board


class TestDeleteColumn:
    def test_cascades_cards(self, board):
        out = apply_command(board, DeleteColumn(1))
        assert [c.id for c in out.columns] == ["a", "c"]
        assert not any(key.startswith("b-") for key in out.cards_by_cell)
        assert "a-0" in out.cards_by_cell
        assert_invariants(out)

    def test_deleting_every_column(self, board):
        out = board
        for _ in range(3):
            out = apply_command(out, DeleteColumn(0))
        assert out.columns == ()
        assert out.cards_by_cell == {}
        assert_invariants(out)

    def test_missing(self, board):
        assert apply_command(board, DeleteColumn(3)) is board


class TestUpdateCellTitle:
    def test_updates(self, board):
        out = apply_command(board, UpdateCellTitle("b-1", "  Doing  "))
        assert out.columns[1].cells[1].title == "Doing"
        assert out.columns[1].cells[1].span == 1

    def test_blank_gets_default(self, board):
        out = apply_command(board, UpdateCellTitle("b-1", "   "))
        assert out.columns[1].cells[1].title == "Untitled cell"

    def test_unknown_cell(self, board):
        assert apply_command(board, UpdateCellTitle("nope", "x")) is board

    def test_same_title_is_noop(self, board):
        assert apply_command(board, UpdateCellTitle("b-1", "b1")) is board


class TestMoveCellWithinColumn:
    def test_reorder_preserves_set(self, board):
        out = apply_command(board, MoveCell("col-1", 0, "quad:1:2:bottom"))
        assert ids(out.columns[1]) == ["b-1", "b-2", "b-0"]
        before = Counter((c.id, c.span) for c in board.columns[1].cells)
        after = Counter((c.id, c.span) for c in out.columns[1].cells)
        assert before == after
        assert out.columns[0] == board.columns[0]
        assert_invariants(out)

    def test_drop_on_itself_is_noop(self, board):
        assert apply_command(board, MoveCell("col-1", 1, "quad:1:1:top")) is board
        assert apply_command(board, MoveCell("col-1", 1, "quad:1:1:bottom")) is board

    def test_left_of_first_column_stays_in_column(self, board):
        out = apply_command(board, MoveCell("col-0", 1, "quad:0:0:left"))
        assert ids(out.columns[0]) == ["a-1", "a-0"]
        assert spans(out.columns[0]) == [2, 1]
        assert len(out.columns) == 3


class TestMoveCellAcrossColumns:
    def test_scenario_c_absorbs_and_reclamps(self, board):
        # c has room for a third cell
        out = apply_command(board, MoveCell("col-0", 0, "quad:2:0:bottom"))
        assert ids(out.columns[0]) == ["a-1"]
        assert spans(out.columns[0]) == [3]
        assert ids(out.columns[2]) == ["c-0", "a-0", "c-1"]
        assert sum_spans(out.columns[2].cells) == board.rows
        assert [c.frac for c in out.columns] == [c.frac for c in board.columns]
        assert_invariants(out)

    def test_span_conservation(self, board):
        before = sum_spans(board.columns[0].cells) + sum_spans(board.columns[2].cells)
        out = apply_command(board, MoveCell("col-2", 1, "quad:0:0:top"))
        after = sum_spans(out.columns[0].cells) + sum_spans(out.columns[2].cells)
        assert after == before

    def test_emptied_source_column_is_deleted(self, board):
        single = apply_command(board, DeleteCell(0, 0))
        out = apply_command(single, MoveCell("col-0", 0, "quad:2:1:bottom"))
        assert [c.id for c in out.columns] == ["b", "c"]
        assert ids(out.columns[1]) == ["c-0", "c-1", "a-1"]
        assert sum(c.frac for c in out.columns) == pytest.approx(1.0)
        assert_invariants(out)

    def test_deleted_column_before_destination_shifts_index(self):
        board = Board(
            columns=(
                make_column("a", 0.25, [3]),
                make_column("b", 0.25, [3]),
                make_column("c", 0.5, [1, 2]),
            ),
            row_fracs=(0.3, 0.3, 0.4),
        )
        out = apply_command(board, MoveCell("col-0", 0, "quad:2:0:top"))
        assert [c.id for c in out.columns] == ["b", "c"]
        assert ids(out.columns[1]) == ["a-0", "c-0", "c-1"]
        assert [c.frac for c in out.columns] == pytest.approx([1 / 3, 2 / 3])
        assert_invariants(out)

    def test_right_quadrant_moves_into_next_column(self, board):
        out = apply_command(board, MoveCell("col-1", 2, "quad:1:0:right"))
        assert ids(out.columns[2]) == ["b-2", "c-0", "c-1"]
        assert spans(out.columns[1]) == [1, 2]
        assert_invariants(out)

    def test_full_destination_refused(self, board):
        assert apply_command(board, MoveCell("col-0", 0, "quad:1:0:top")) is board

    def test_column_drop_appends(self, board):
        out = apply_command(board, MoveCell("col-0", 0, "col-2"))
        assert ids(out.columns[2]) == ["c-0", "c-1", "a-0"]
        assert_invariants(out)

    def test_cards_follow_the_cell(self, board):
        out = apply_command(board, MoveCell("col-0", 0, "quad:2:0:top"))
        assert out.cards_for("a-0") == board.cards_for("a-0")


class TestMoveCellNoops:
    @pytest.mark.parametrize("source,index,destination", [
        ("col-0", 0, None),
        ("col-0", 0, "garbage"),
        ("garbage", 0, "quad:1:0:top"),
        ("col-9", 0, "quad:1:0:top"),
        ("col-0", 9, "quad:1:0:top"),
        ("col-0", 0, "quad:9:0:top"),
        ("col-0", 0, "col-9"),
    ])
    def test_stale_or_malformed(self, board, source, index, destination):
        assert apply_command(board, MoveCell(source, index, destination)) is board


class TestCards:
    def test_add_and_remove(self, board):
        out = apply_command(board, AddCard("b-0", "Draft"))
        cards = out.cards_for("b-0")
        assert [c.title for c in cards] == ["b0", "Draft"]
        out = apply_command(out, RemoveCard("b-0", cards[0].id))
        assert [c.title for c in out.cards_for("b-0")] == ["Draft"]

    def test_blank_card_title(self, board):
        out = apply_command(board, AddCard("b-0", " "))
        assert out.cards_for("b-0")[-1].title == "New card"

    def test_add_to_unknown_cell(self, board):
        assert apply_command(board, AddCard("nope", "x")) is board

    def test_remove_unknown_card(self, board):
        assert apply_command(board, RemoveCard("b-0", "nope")) is board

    def test_move_across_cells(self, board):
        out = apply_command(board, MoveCard("a-0", "card-a-0", "c-1", 0))
        assert out.cards_for("a-0") == ()
        assert [c.id for c in out.cards_for("c-1")] == ["card-a-0", "card-c-1"]

    def test_move_within_cell_clamps_index(self, board):
        board = apply_command(board, AddCard("a-0", "second"))
        out = apply_command(board, MoveCard("a-0", "card-a-0", "a-0", 99))
        assert [c.title for c in out.cards_for("a-0")] == ["second", "a0"]

    def test_move_in_place_is_noop(self, board):
        assert apply_command(board, MoveCard("a-0", "card-a-0", "a-0", 0)) is board

    def test_move_to_unknown_cell(self, board):
        assert apply_command(board, MoveCard("a-0", "card-a-0", "zzz", 0)) is board


class TestRandomSequences:
    def random_command(self, rng, board):
        rows = board.rows
        n = len(board.columns)
        kind = rng.choice(["add_column", "add_cell", "delete_cell", "delete_column", "quad", "col"])
        if kind == "add_column":
            return AddColumn()
        if kind == "delete_column":
            return DeleteColumn(rng.randrange(n + 1))
        column = rng.randrange(n + 1)
        cell = rng.randrange(rows + 1)
        if kind == "add_cell":
            return AddCell(column, index=rng.randrange(rows + 1))
        if kind == "delete_cell":
            return DeleteCell(column, cell)
        source = f"col-{rng.randrange(n + 1)}"
        if kind == "col":
            return MoveCell(source, cell, f"col-{column}")
        direction = rng.choice(["top", "bottom", "left", "right"])
        return MoveCell(source, rng.randrange(rows), f"quad:{column}:{cell}:{direction}")

    @pytest.mark.parametrize("seed", range(20))
    def test_invariants_hold(self, seed):
        rng = random.Random(seed)
        board = create_initial_board()
        for _ in range(60):
            command = self.random_command(rng, board)
            board = apply_command(board, command)
            assert_invariants(board)
            live = {cell.id for column in board.columns for cell in column.cells}
            assert set(board.cards_by_cell) <= live
