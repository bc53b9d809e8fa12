"""Exceptions raised by the subtitle translation pipeline."""


class SubtitleTranslationError(RuntimeError):
    """Base exception for pipeline errors."""


class InvalidFileType(SubtitleTranslationError):
    """Selected file is not an .srt file."""


class EmptyOrInvalidDocument(SubtitleTranslationError):
    """Parsing produced no subtitle blocks."""


class TranslationFailed(SubtitleTranslationError):
    """The translation service rejected the request or gave up."""


class UnknownFailure(SubtitleTranslationError):
    """Any other failure raised while running the pipeline."""


class TimestampError(SubtitleTranslationError, ValueError):
    """Malformed SRT timestamp."""


class ConfigError(SubtitleTranslationError, ValueError):
    """Invalid configuration value."""
