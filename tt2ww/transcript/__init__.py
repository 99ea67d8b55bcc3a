from .transcript_loader import format_transcript, load_transcript

__all__ = ["format_transcript", "load_transcript"]
