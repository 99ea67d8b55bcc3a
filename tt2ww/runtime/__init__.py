"""Generate pipeline orchestration and phase logging."""

from .contracts import GenerationResult
from .pipeline import GenerationSession, generate, resolve_word_windows

__all__ = [
    "GenerationResult",
    "GenerationSession",
    "generate",
    "resolve_word_windows",
]
