"""
CSV projection of word loudness records.

This module renders word records as the flat table consumed by spreadsheets,
saves it to the output folder, and parses it back.

Functions:
    - record_to_row: Projects one record onto the CSV columns.
    - rows_to_csv: Renders records as CSV text.
    - parse_rows_csv: Parses CSV text produced by `rows_to_csv`.
    - save_rows_to_csv: Writes records to a CSV file in the output folder.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

from halo import Halo

from tt2ww.config import get_settings
from tt2ww.domain import MappingConfig, WordRecord
from tt2ww.mapping.visual import map_db_to_size
from tt2ww.utils.logger import get_logger

CSV_HEADER: tuple[str, ...] = (
    "index",
    "word",
    "start",
    "end",
    "dbMean",
    "dbMax",
    "font_px",
)

logger: logging.Logger = get_logger(__name__)


class CsvRow(NamedTuple):
    """One parsed CSV row."""

    index: int
    word: str
    start_seconds: float
    end_seconds: float
    db_mean: float
    db_max: float
    font_px: int


def record_to_row(index: int, record: WordRecord, config: MappingConfig) -> list[str]:
    """Projects a record onto the CSV columns with two-decimal formatting."""
    font_px = map_db_to_size(
        record.db,
        config.min_db,
        config.max_db,
        config.mode,
        config.min_px,
        config.max_px,
    )
    return [
        str(index),
        record.word,
        f"{record.start_seconds:.2f}",
        f"{record.end_seconds:.2f}",
        f"{record.db_mean:.2f}",
        f"{record.db_max:.2f}",
        str(font_px),
    ]


def _write_rows(
    handle: io.TextIOBase, records: Sequence[WordRecord], config: MappingConfig
) -> None:
    writer = csv.writer(handle, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for index, record in enumerate(records, 1):
        writer.writerow(record_to_row(index, record, config))


def rows_to_csv(records: Sequence[WordRecord], config: MappingConfig) -> str:
    """Renders records as CSV text with a header row."""
    buffer = io.StringIO()
    _write_rows(buffer, records, config)
    return buffer.getvalue()


def parse_rows_csv(text: str) -> list[CsvRow]:
    """Parses CSV text produced by `rows_to_csv`.

    Raises:
        ValueError: If the header does not match or a row is malformed.
    """
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None:
        return []
    if tuple(header) != CSV_HEADER:
        raise ValueError(f"Unexpected CSV header: {','.join(header)}")

    rows: list[CsvRow] = []
    for line_number, fields in enumerate(reader, 2):
        if not fields:
            continue
        if len(fields) != len(CSV_HEADER):
            raise ValueError(f"Row {line_number} has {len(fields)} fields.")
        index, word, start, end, db_mean, db_max, font_px = fields
        rows.append(
            CsvRow(
                index=int(index),
                word=word,
                start_seconds=float(start),
                end_seconds=float(end),
                db_mean=float(db_mean),
                db_max=float(db_max),
                font_px=int(font_px),
            )
        )
    return rows


def save_rows_to_csv(
    records: Sequence[WordRecord],
    config: MappingConfig,
    file_name: str | None = None,
) -> Path:
    """
    Saves word records to a CSV file in the configured output folder.

    Arguments:
        records (Sequence[WordRecord]): Records to save.
        config (MappingConfig): Mapping used for the `font_px` column.
        file_name (str | None): File name; only its final path component is used.

    Returns:
        Path: The path to the saved CSV file.
    """
    settings = get_settings().output
    name = Path(file_name).name if file_name else settings.csv_file_name
    if not name.lower().endswith(".csv"):
        name = f"{Path(name).stem}.csv"
    output_path = settings.folder / name
    output_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Starting to save %s word rows to CSV.", len(records))
    with Halo(text=f"Saving word table to {output_path}", spinner="dots", text_color="green"):
        with open(output_path, mode="w", newline="", encoding="utf-8") as file:
            _write_rows(file, records, config)

    logger.info("Word table successfully saved to %s", output_path)
    return output_path
