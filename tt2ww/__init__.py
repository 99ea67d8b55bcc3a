from .config import AppConfig, get_settings, reload_settings
from .domain import AudioBuffer, MappingConfig, TimelineSample, WordRecord, WordWindow
from .errors import EmptyInputError, InvalidAudioError, InvalidRangeError, Tt2wwError
from .loudness import aggregate_word_loudness, build_db_timeline
from .mapping import db_to_color, map_db_to_size
from .runtime import GenerationResult, GenerationSession, generate
from .utils.csv_export import rows_to_csv
