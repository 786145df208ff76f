import pytest

from quadboard.model.drop_resolver import Destination, resolve_column_drop, resolve_destination
from quadboard.model.locators import (
    ColumnTarget,
    QuadrantDirection,
    QuadrantTarget,
    SourceLocator,
    column_id,
    parse_column_id,
    parse_drop_target,
    parse_quadrant_id,
    parse_source,
    quadrant_id,
)


class TestLocators:
    def test_quadrant_token(self):
        token = quadrant_id(1, 2, "left")
        assert token == "quad:1:2:left"
        assert parse_quadrant_id(token) == QuadrantTarget(1, 2, QuadrantDirection.LEFT)

    def test_column_token(self):
        assert column_id(3) == "col-3"
        assert parse_column_id("col-3") == 3

    @pytest.mark.parametrize("token", [
        "quad:1:2:diagonal",
        "quad:a:2:top",
        "quad:-1:0:top",
        "quad:1:2",
        "col-x",
        "col--1",
        "",
        None,
        42,
    ])
    def test_malformed_tokens_parse_to_none(self, token):
        assert parse_drop_target(token) is None

    def test_drop_target_kinds(self):
        assert parse_drop_target("col-0") == ColumnTarget(0)
        assert isinstance(parse_drop_target("quad:0:0:top"), QuadrantTarget)

    def test_source(self):
        assert parse_source("col-1", 2) == SourceLocator(1, 2)
        assert parse_source("quad:1:2:top", 2) is None
        assert parse_source("col-1", -1) is None
        assert parse_source("col-1", True) is None


class TestResolveDestination:
    def resolve(self, board, column, cell, direction, source=(9, 9)):
        target = QuadrantTarget(column, cell, QuadrantDirection(direction))
        return resolve_destination(board.columns, target, *source)

    def test_top_and_bottom(self, board):
        assert self.resolve(board, 1, 1, "top") == Destination(1, 1)
        assert self.resolve(board, 1, 1, "bottom") == Destination(1, 2)

    def test_left_goes_to_previous_column_clamped(self, board):
        assert self.resolve(board, 1, 2, "left") == Destination(0, 2)
        assert self.resolve(board, 2, 1, "left") == Destination(1, 1)

    def test_left_of_first_column_falls_back_to_top(self, board):
        assert self.resolve(board, 0, 1, "left") == Destination(0, 1)

    def test_right_goes_to_next_column_clamped(self, board):
        assert self.resolve(board, 1, 2, "right") == Destination(2, 2)
        assert self.resolve(board, 0, 0, "right") == Destination(1, 0)

    def test_right_of_last_column_falls_back_to_bottom(self, board):
        assert self.resolve(board, 2, 0, "right") == Destination(2, 1)
        assert self.resolve(board, 2, 1, "right") == Destination(2, 2)

    def test_same_column_index_correction(self, board):
        # dragging b0 below b1: after b0 leaves, "after b1" is index 1
        assert self.resolve(board, 1, 1, "bottom", source=(1, 0)) == Destination(1, 1)
        # dropping above the source itself is not shifted
        assert self.resolve(board, 1, 2, "top", source=(1, 2)) == Destination(1, 2)

    def test_missing_column_returns_none(self, board):
        assert self.resolve(board, 5, 0, "top") is None


class TestResolveColumnDrop:
    def test_appends(self, board):
        assert resolve_column_drop(board.columns, 2, 0, 0) == Destination(2, 2)

    def test_same_column_append_is_corrected(self, board):
        assert resolve_column_drop(board.columns, 1, 1, 0) == Destination(1, 2)

    def test_missing_column(self, board):
        assert resolve_column_drop(board.columns, 3, 0, 0) is None
