"""Visual mapping of loudness to font size and color."""

from .visual import db_to_color, db_to_rgb, map_db_to_size, normalize_db

__all__ = [
    "db_to_color",
    "db_to_rgb",
    "map_db_to_size",
    "normalize_db",
]
