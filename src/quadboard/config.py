"""
Configuration & Layout Constants
================================
This module serves as the central registry for the board's global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (pixel floors, tolerances, default
   titles) scattered throughout the model and controller layers.
2. Tuning: The rendering layer reads the same pixel floors when it draws the
   resize handles, so both sides agree on what "too small" means.

Exports:
    MIN_COL_PX (int): Smallest column width a resize gesture may produce.
    MIN_ROW_PX (int): Smallest row height a resize gesture may produce.
    INITIAL_ROW_FRACS (tuple[float, ...]): Row ratios of a fresh board.
    FRAC_TOLERANCE (float): Allowed drift when checking fraction sums.
"""

MIN_COL_PX: int = 140
MIN_ROW_PX: int = 80

INITIAL_ROW_FRACS: tuple[float, ...] = (0.34, 0.33, 0.33)

FRAC_TOLERANCE: float = 1e-6

DEFAULT_CELL_TITLE: str = "Untitled cell"
NEW_CELL_TITLE: str = "New cell"
DEFAULT_CARD_TITLE: str = "New card"
