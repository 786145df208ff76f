"""
Command-line interface.

Builds the seed board, runs the layout self-check and logs the pixel
projection for a given container size.

Usage:
    $ python -m quadboard --width 1200 --height 720 --log-level debug
"""
import argparse
import logging
from typing import Optional, Sequence

from quadboard.logging_config import setup_logging
from quadboard.model.board import create_initial_board
from quadboard.model.geometry import cell_heights, column_widths
from quadboard.model.layout import check_invariants

logger = logging.getLogger("quadboard.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quadboard", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--width", type=float, default=1200.0, help="Board width in pixels.")
    parser.add_argument("--height", type=float, default=720.0, help="Board height in pixels.")
    parser.add_argument("--log-level", default="info", help="debug, info, warning or error.")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    board = create_initial_board()
    logger.info(f"Seed board: {len(board.columns)} columns x {board.rows} rows, version {board.version}.")

    widths = column_widths(board, args.width)
    for index, (column, width) in enumerate(zip(board.columns, widths)):
        heights = cell_heights(board, index, args.height)
        cells = ", ".join(f"{cell.title} [{cell.span}] {h:.0f}px" for cell, h in zip(column.cells, heights))
        logger.info(f"Column {index}: {width:.0f}px | {cells}")

    problems = check_invariants(board)
    if problems:
        for problem in problems:
            logger.error(problem)
        return 1
    logger.info("Layout invariants hold.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
