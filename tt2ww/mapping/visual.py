"""Deterministic loudness-to-size and loudness-to-color mapping."""

from __future__ import annotations

DEFAULT_MIN_PX = 14
DEFAULT_MAX_PX = 120
PEAK_EXPONENT = 2.5
SILENCE_EXPONENT = 0.4
COLOR_EXPONENT = 0.6

QUIET_RGB: tuple[int, int, int] = (100, 150, 255)
LOUD_RGB: tuple[int, int, int] = (255, 80, 80)
DEFAULT_RGB: tuple[int, int, int] = (100, 100, 255)

_MODE_EXPONENTS: dict[str, float] = {
    "neutral": 1.0,
    "peak": PEAK_EXPONENT,
    "silence": SILENCE_EXPONENT,
}


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _lerp(start: float, end: float, fraction: float) -> float:
    return start + (end - start) * fraction


def normalize_db(db: float, min_db: float, max_db: float) -> float:
    """Maps `db` into [0, 1] across the range. Caller guards `max_db == min_db`."""
    return _clamp((db - min_db) / (max_db - min_db), 0.0, 1.0)


def map_db_to_size(
    db: float,
    min_db: float,
    max_db: float,
    mode: str = "neutral",
    min_px: int = DEFAULT_MIN_PX,
    max_px: int = DEFAULT_MAX_PX,
) -> int:
    """Returns the font size in pixels for a loudness value.

    `peak` exaggerates the loud end and `silence` expands the quiet end.
    Unknown modes fall back to `neutral`. A degenerate range returns `min_px`.
    """
    if max_db == min_db:
        return min_px
    fraction = normalize_db(db, min_db, max_db) ** _MODE_EXPONENTS.get(mode, 1.0)
    return round(_lerp(min_px, max_px, fraction))


def db_to_rgb(db: float, min_db: float, max_db: float) -> tuple[int, int, int]:
    """Returns the gradient color for a loudness value as an RGB triple."""
    if max_db == min_db:
        return DEFAULT_RGB
    fraction = normalize_db(db, min_db, max_db) ** COLOR_EXPONENT
    red, green, blue = (
        round(_lerp(quiet, loud, fraction)) for quiet, loud in zip(QUIET_RGB, LOUD_RGB)
    )
    return red, green, blue


def db_to_color(db: float, min_db: float, max_db: float) -> str:
    """Returns the gradient color for a loudness value as `rgb(r,g,b)`."""
    red, green, blue = db_to_rgb(db, min_db, max_db)
    return f"rgb({red},{green},{blue})"

