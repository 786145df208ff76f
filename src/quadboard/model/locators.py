"""
Drop Locators
=============
The rendering layer identifies drop zones with opaque string tokens. This
module encodes and decodes them.

Formats:
    "quad:<column>:<cell>:<direction>"   quadrant of a cell
    "col-<column>"                       whole column (also the drag source)

Parsing never raises: anything malformed comes back as None and the caller
treats the drop as a no-op.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import re
from typing import Optional, Union


class QuadrantDirection(StrEnum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class QuadrantTarget:
    column_index: int
    cell_index: int
    direction: QuadrantDirection


@dataclass(frozen=True)
class ColumnTarget:
    column_index: int


@dataclass(frozen=True)
class SourceLocator:
    column_index: int
    index: int


DropTarget = Union[QuadrantTarget, ColumnTarget]

_QUADRANT_RE = re.compile(r"^quad:(\d+):(\d+):(top|bottom|left|right)$")
_COLUMN_RE = re.compile(r"^col-(\d+)$")


def quadrant_id(column_index: int, cell_index: int, direction: QuadrantDirection | str) -> str:
    return f"quad:{column_index}:{cell_index}:{QuadrantDirection(direction)}"


def column_id(column_index: int) -> str:
    return f"col-{column_index}"


def parse_quadrant_id(token: object) -> Optional[QuadrantTarget]:
    if not isinstance(token, str):
        return None
    match = _QUADRANT_RE.match(token)
    if match is None:
        return None
    return QuadrantTarget(
        column_index=int(match.group(1)),
        cell_index=int(match.group(2)),
        direction=QuadrantDirection(match.group(3)),
    )


def parse_column_id(token: object) -> Optional[int]:
    if not isinstance(token, str):
        return None
    match = _COLUMN_RE.match(token)
    return int(match.group(1)) if match else None


def parse_drop_target(token: object) -> Optional[DropTarget]:
    """Decode either kind of destination token."""
    quadrant = parse_quadrant_id(token)
    if quadrant is not None:
        return quadrant
    column_index = parse_column_id(token)
    if column_index is not None:
        return ColumnTarget(column_index)
    return None


def parse_source(droppable_id: object, index: object) -> Optional[SourceLocator]:
    column_index = parse_column_id(droppable_id)
    if column_index is None:
        return None
    # bool is an int subclass; a stray True must not become index 1
    if not isinstance(index, int) or isinstance(index, bool) or index < 0:
        return None
    return SourceLocator(column_index=column_index, index=index)
