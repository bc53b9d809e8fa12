"""Translate SRT subtitle files with an LLM, with live progress."""

from .config import Config, HeaderFooter
from .errors import (
    ConfigError,
    EmptyOrInvalidDocument,
    InvalidFileType,
    SubtitleTranslationError,
    TimestampError,
    TranslationFailed,
    UnknownFailure,
)
from .models import PipelineSnapshot, PipelineStatus, ServiceStatus, SubtitleBlock
from .pipeline import TranslationOrchestrator, merge_progress, merge_translations
from .postprocess import apply_header_footer, renumber
from .srt import format_timestamp, parse_srt, parse_timestamp, subtitles_to_srt

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigError",
    "EmptyOrInvalidDocument",
    "HeaderFooter",
    "InvalidFileType",
    "PipelineSnapshot",
    "PipelineStatus",
    "ServiceStatus",
    "SubtitleBlock",
    "SubtitleTranslationError",
    "TimestampError",
    "TranslationFailed",
    "TranslationOrchestrator",
    "UnknownFailure",
    "apply_header_footer",
    "format_timestamp",
    "merge_progress",
    "merge_translations",
    "parse_srt",
    "parse_timestamp",
    "renumber",
    "subtitles_to_srt",
]
