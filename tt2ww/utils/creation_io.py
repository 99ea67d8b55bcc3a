"""Serialized "creation" payloads: word records plus the mapping used."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from tt2ww.domain import MappingConfig, WordRecord
from tt2ww.errors import CreationFormatError
from tt2ww.utils.logger import get_logger

PAYLOAD_VERSION = "1.0"

logger: logging.Logger = get_logger(__name__)


def _record_to_dict(record: WordRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "word": record.word,
        "start": record.start_seconds,
        "end": record.end_seconds,
        "db": record.db,
        "dbMean": record.db_mean,
        "dbMax": record.db_max,
    }
    if record.pitch_hz is not None:
        payload["pitchHz"] = record.pitch_hz
    return payload


def records_to_payload(
    records: Sequence[WordRecord], config: MappingConfig
) -> dict[str, Any]:
    """Builds the versioned payload stored by the persistence collaborator."""
    return {
        "version": PAYLOAD_VERSION,
        "data": {
            "words": [_record_to_dict(record) for record in records],
            "mapping": {
                "minDb": config.min_db,
                "maxDb": config.max_db,
                "minPx": config.min_px,
                "maxPx": config.max_px,
                "mode": config.mode,
            },
        },
    }


def _read_float(entry: Mapping[str, Any], key: str, fallback: float | None = None) -> float:
    value = entry.get(key, fallback)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CreationFormatError(f"Word field {key!r} must be a number.")
    if not math.isfinite(value):
        raise CreationFormatError(f"Word field {key!r} must be finite.")
    return float(value)


def _dict_to_record(entry: Any) -> WordRecord:
    if not isinstance(entry, Mapping) or not isinstance(entry.get("word"), str):
        raise CreationFormatError("Each word entry needs a string 'word' field.")
    db = _read_float(entry, "db")
    pitch = entry.get("pitchHz")
    return WordRecord(
        word=entry["word"],
        start_seconds=_read_float(entry, "start"),
        end_seconds=_read_float(entry, "end"),
        db=db,
        db_mean=_read_float(entry, "dbMean", db),
        db_max=_read_float(entry, "dbMax", db),
        pitch_hz=float(pitch) if isinstance(pitch, (int, float)) else None,
    )


def payload_to_records(payload: Any) -> tuple[list[WordRecord], MappingConfig]:
    """Restores records and mapping from a payload built by `records_to_payload`.

    Payloads written before `dbMean`/`dbMax` existed fall back to `db`.

    Raises:
        CreationFormatError: If the payload structure is invalid.
    """
    if not isinstance(payload, Mapping) or not isinstance(payload.get("data"), Mapping):
        raise CreationFormatError("Creation payload must contain a 'data' object.")
    data = payload["data"]
    words = data.get("words")
    mapping = data.get("mapping")
    if not isinstance(words, list) or not isinstance(mapping, Mapping):
        raise CreationFormatError("Creation data needs 'words' and 'mapping'.")

    defaults = MappingConfig()
    try:
        config = MappingConfig(
            min_db=float(mapping.get("minDb", defaults.min_db)),
            max_db=float(mapping.get("maxDb", defaults.max_db)),
            mode=str(mapping.get("mode", defaults.mode)),  # type: ignore[arg-type]
            aggregation_method=defaults.aggregation_method,
            min_px=int(mapping.get("minPx", defaults.min_px)),
            max_px=int(mapping.get("maxPx", defaults.max_px)),
        )
        config.validate()
    except (TypeError, ValueError) as err:
        raise CreationFormatError(f"Invalid creation mapping: {err}") from err
    return [_dict_to_record(entry) for entry in words], config


def save_creation(
    records: Sequence[WordRecord], config: MappingConfig, output_path: str | Path
) -> Path:
    """Writes a creation payload as JSON and returns the path."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(records_to_payload(records, config), indent=2), encoding="utf-8"
    )
    logger.info("Creation with %s words saved to %s", len(records), path)
    return path


def load_creation(input_path: str | Path) -> tuple[list[WordRecord], MappingConfig]:
    """Reads a creation payload written by `save_creation`."""
    path = Path(input_path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as err:
        raise CreationFormatError(f"Could not read creation {path}: {err}") from err
    records, config = payload_to_records(payload)
    logger.info("Loaded creation with %s words from %s", len(records), path)
    return records, config
