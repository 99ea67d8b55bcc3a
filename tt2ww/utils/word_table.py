"""
Terminal rendering of word loudness records.

Functions:
    - color_txt: Colorizes a string.
    - word_color_hex: Hex form of the loudness color of a record.
    - format_word_rows: Builds the printable cells for each record.
    - print_word_table: Prints the records as an aligned, colored table.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from colored import attr, bg, fg

from tt2ww.domain import MappingConfig, WordRecord
from tt2ww.mapping.visual import db_to_color, db_to_rgb, map_db_to_size
from tt2ww.utils.logger import get_logger

TABLE_COLUMNS: tuple[tuple[str, str], ...] = (
    ("#", "green"),
    ("Word", "yellow"),
    ("Start", "blue"),
    ("End", "blue"),
    ("dB Mean", "magenta"),
    ("dB Max", "magenta"),
    ("Font px", "cyan"),
    ("Color", "red"),
)

logger: logging.Logger = get_logger(__name__)


def color_txt(string: str, fg_color: str, bg_color: str, padding: int = 0) -> str:
    """
    Colorizes a string.

    Arguments:
        string (str): String to be colorized.
        fg_color (str): Foreground color.
        bg_color (str): Background color.
        padding (int): Minimum width, padded on the right.

    Returns:
        str: Colorized string.
    """
    if padding:
        string = string.ljust(padding)

    return f"{fg(fg_color)}{bg(bg_color)}{string}{attr('reset')}"


def word_color_hex(record: WordRecord, config: MappingConfig) -> str:
    """Returns the loudness color of a record as `#rrggbb`."""
    red, green, blue = db_to_rgb(record.db, config.min_db, config.max_db)
    return f"#{red:02x}{green:02x}{blue:02x}"


def format_word_rows(
    records: Sequence[WordRecord], config: MappingConfig
) -> list[tuple[str, ...]]:
    """Formats each record as table cells, sizing with the given mapping."""
    return [
        (
            str(index),
            record.word,
            f"{record.start_seconds:.2f}",
            f"{record.end_seconds:.2f}",
            f"{record.db_mean:.1f}",
            f"{record.db_max:.1f}",
            str(
                map_db_to_size(
                    record.db,
                    config.min_db,
                    config.max_db,
                    config.mode,
                    config.min_px,
                    config.max_px,
                )
            ),
            db_to_color(record.db, config.min_db, config.max_db),
        )
        for index, record in enumerate(records, 1)
    ]


def print_word_table(records: Sequence[WordRecord], config: MappingConfig) -> None:
    """
    Prints word records as an aligned table, each word in its loudness color.

    Arguments:
        records (Sequence[WordRecord]): Records to print.
        config (MappingConfig): Mapping used for the size and color columns.
    """
    logger.info("Printing word table with %s entries.", len(records))
    rows = format_word_rows(records, config)
    widths = [
        max([len(title)] + [len(row[column]) for row in rows]) + 1
        for column, (title, _) in enumerate(TABLE_COLUMNS)
    ]

    print(
        "".join(
            color_txt(title, "black", color, width)
            for (title, color), width in zip(TABLE_COLUMNS, widths)
        )
    )
    for record, row in zip(records, rows):
        cells = [cell.ljust(width) for cell, width in zip(row, widths)]
        cells[1] = f"{fg(word_color_hex(record, config))}{cells[1]}{attr('reset')}"
        print("".join(cells).rstrip())
