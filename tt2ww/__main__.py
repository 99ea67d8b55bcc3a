"""
Text-to-Word-Weight (tt2ww) Tool

This module serves as the entry point for the tt2ww tool. It sizes and colors
each word of a text according to the loudness of the audio spoken while the
word is said, and prints or exports the resulting word table.

Usage:
    The tool can be operated in three modes:
    1. Audio mode: Measures loudness from an audio file for the given text.
    2. Synthetic mode: Fabricates seeded timings and loudness for a demo.
    3. Replay mode: Prints or exports a previously saved creation.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import time
from pathlib import Path

from dotenv import load_dotenv
from halo import Halo

from tt2ww.config import AppConfig, reload_settings
from tt2ww.domain import AGGREGATION_METHOD_NAMES, SIZE_MODES, MappingConfig, WordRecord
from tt2ww.errors import EmptyInputError, Tt2wwError
from tt2ww.runtime import GenerationSession
from tt2ww.runtime.phase_contract import PHASE_OUTPUT
from tt2ww.runtime.phase_timing import timed_phase
from tt2ww.synthetic import SYNTHETIC_PRESETS, generate_synthetic
from tt2ww.timing import tokenize
from tt2ww.transcript import load_transcript
from tt2ww.utils.creation_io import load_creation, save_creation
from tt2ww.utils.csv_export import save_rows_to_csv
from tt2ww.utils.logger import configure_logging, get_logger
from tt2ww.utils.word_table import print_word_table

logger: logging.Logger = get_logger("tt2ww")


def build_parser(settings: AppConfig) -> argparse.ArgumentParser:
    """Builds the CLI parser with defaults taken from settings."""
    mapping = settings.mapping
    parser = argparse.ArgumentParser(
        prog="tt2ww",
        description="Size and color words by the loudness of the audio they were spoken in",
    )
    parser.add_argument("--file", type=str, help="Path to the audio file")
    parser.add_argument("--text", type=str, help="Words, or alternating m:ss and word lines")
    parser.add_argument("--text-file", type=str, help="Read the text from a file")
    parser.add_argument(
        "--transcript",
        type=str,
        help="JSON or CSV word timings to remap the text onto",
    )
    parser.add_argument("--min-db", type=float, default=mapping.min_db)
    parser.add_argument("--max-db", type=float, default=mapping.max_db)
    parser.add_argument("--mode", choices=SIZE_MODES, default=mapping.mode)
    parser.add_argument(
        "--method",
        choices=AGGREGATION_METHOD_NAMES,
        default=mapping.aggregation_method,
        help="How loudness samples inside a word are combined",
    )
    parser.add_argument("--min-px", type=int, default=mapping.min_px)
    parser.add_argument("--max-px", type=int, default=mapping.max_px)
    parser.add_argument(
        "--pitch",
        action="store_true",
        help="Estimate a coarse pitch for every word",
    )
    parser.add_argument(
        "--save-csv",
        nargs="?",
        const="",
        default=None,
        metavar="NAME",
        help="Save the word table as CSV in the output folder",
    )
    parser.add_argument("--save-json", type=str, help="Save the creation payload as JSON")
    parser.add_argument("--load-json", type=str, help="Print a saved creation")
    parser.add_argument(
        "--synthetic",
        action="store_true",
        help="Fabricate seeded timings and loudness instead of reading audio",
    )
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--preset", choices=tuple(SYNTHETIC_PRESETS), default="conversational")
    parser.add_argument("--duration", type=float, help="Clip duration for synthetic mode")
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (overrides LOG_LEVEL)",
    )
    return parser


def _mapping_from_args(args: argparse.Namespace, settings: AppConfig) -> MappingConfig:
    config = dataclasses.replace(
        settings.mapping,
        min_db=args.min_db,
        max_db=args.max_db,
        mode=args.mode,
        aggregation_method=args.method,
        min_px=args.min_px,
        max_px=args.max_px,
    )
    config.validate()
    return config


def _read_text(args: argparse.Namespace) -> str | None:
    if args.text_file:
        try:
            return Path(args.text_file).read_text(encoding="utf-8")
        except OSError as err:
            raise EmptyInputError(f"Could not read text file: {err}") from err
    return args.text


def _write_outputs(
    args: argparse.Namespace, records: list[WordRecord], config: MappingConfig
) -> None:
    with timed_phase(logger, PHASE_OUTPUT):
        print_word_table(records, config)
        if args.save_csv is not None:
            save_rows_to_csv(records, config, args.save_csv or None)
        if args.save_json:
            save_creation(records, config, args.save_json)


def _run(args: argparse.Namespace, settings: AppConfig) -> None:
    if args.load_json:
        records, config = load_creation(args.load_json)
        _write_outputs(args, records, config)
        return

    config = _mapping_from_args(args, settings)
    text = _read_text(args)

    if args.synthetic:
        if not text or not text.strip():
            raise EmptyInputError("Please enter text.")
        if args.duration is None or not args.duration > 0:
            raise EmptyInputError("Synthetic mode needs a positive --duration.")
        records = generate_synthetic(
            tokenize(text),
            args.duration,
            config.min_db,
            config.max_db,
            seed=args.seed,
            preset=args.preset,
        )
        _write_outputs(args, records, config)
        return

    if not args.file:
        raise EmptyInputError("No audio file provided.")

    session = GenerationSession(settings=settings)
    with Halo(text="Loading audio...", spinner="dots", text_color="green"):
        session.load_audio(args.file)
    if args.transcript:
        bank = load_transcript(args.transcript)
        session.set_timestamp_bank(bank)
        if not text:
            text = " ".join(window.word for window in bank)

    with Halo(text="Measuring dB from audio...", spinner="dots", text_color="green"):
        result = session.generate(text or "", config, estimate_pitch=args.pitch)
    _write_outputs(args, result.records, config)
    logger.info(result.status_message())


def main() -> None:
    """
    Main function to handle the command line interface logic.
    """
    load_dotenv()
    start_time = time.time()
    try:
        settings = reload_settings()
        args: argparse.Namespace = build_parser(settings).parse_args()
        configure_logging(args.log_level)
        _run(args, settings)
    except (Tt2wwError, ValueError) as err:
        logger.error(str(err))
        sys.exit(1)
    logger.debug("Completed in %.2f seconds", time.time() - start_time)


if __name__ == "__main__":
    main()
