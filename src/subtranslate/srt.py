"""SRT subtitle file parsing and generation."""

import logging
import re
from pathlib import Path

from .errors import TimestampError
from .models import SubtitleBlock

logger = logging.getLogger(__name__)

TIMESTAMP_SEPARATOR = " --> "

_TIMESTAMP_RE = re.compile(r"(\d{2,}):(\d{2}):(\d{2}),(\d{3})")
_BLOCK_SPLIT_RE = re.compile(r"\n(?:[ \t]*\n)+")
_INDEX_RE = re.compile(r"[0-9]+")


def parse_timestamp(timestamp: str) -> int:
    """Parse SRT timestamp to milliseconds.

    Args:
        timestamp: SRT timestamp format "HH:MM:SS,mmm"

    Returns:
        Offset from the start of the document in milliseconds

    Raises:
        TimestampError: If the text is not a well-formed timestamp
    """
    match = _TIMESTAMP_RE.fullmatch(timestamp.strip())
    if not match:
        raise TimestampError(f"Invalid timestamp format: {timestamp!r}")

    hours, minutes, seconds, millis = (int(part) for part in match.groups())
    return ((hours * 60 + minutes) * 60 + seconds) * 1000 + millis


def format_timestamp(milliseconds: int) -> str:
    """Format milliseconds as SRT timestamp (HH:MM:SS,mmm)."""
    if milliseconds < 0:
        raise ValueError(f"Timestamp offset must be non-negative, got {milliseconds}")

    seconds, millis = divmod(milliseconds, 1000)
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def split_timestamp_range(timestamp_range: str) -> tuple[str, str]:
    """Split "start --> end" into its two timestamps."""
    if "-->" not in timestamp_range:
        raise TimestampError(f"Missing '-->' in timestamp range: {timestamp_range!r}")
    start, end = timestamp_range.split("-->", 1)
    return start.strip(), end.strip()


def format_timestamp_range(start_ms: int, end_ms: int) -> str:
    """Build an SRT timestamp range from two millisecond offsets."""
    return f"{format_timestamp(start_ms)}{TIMESTAMP_SEPARATOR}{format_timestamp(end_ms)}"


def _parse_block(group: str) -> SubtitleBlock | None:
    lines = group.strip().split("\n")
    if len(lines) < 2:
        return None

    index_line = lines[0].strip()
    if not _INDEX_RE.fullmatch(index_line) or int(index_line) < 1:
        return None

    timestamp_line = lines[1].strip()
    if "-->" not in timestamp_line:
        return None

    return SubtitleBlock(
        index=int(index_line),
        timestamp=timestamp_line,
        text="\n".join(lines[2:]),
    )


def parse_srt(content: str) -> list[SubtitleBlock]:
    """Parse SRT content into SubtitleBlock objects.

    Malformed groups are skipped so one corrupt cue does not lose the rest
    of the file. Blocks come back in document order.

    Args:
        content: Raw SRT file content

    Returns:
        List of SubtitleBlock objects
    """
    content = content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    content = content.strip()
    if not content:
        return []

    subtitles = []
    for group in _BLOCK_SPLIT_RE.split(content):
        block = _parse_block(group)
        if block is None:
            logger.debug("Skipping malformed subtitle group: %r", group[:80])
            continue
        subtitles.append(block)

    return subtitles


def read_srt_text(path: str | Path) -> str:
    """Read an SRT file as text, dropping a UTF-8 BOM if present."""
    return Path(path).read_text(encoding="utf-8-sig")


def subtitles_to_srt(subtitles: list[SubtitleBlock]) -> str:
    """Convert subtitles to SRT format string.

    Indices are written as given; callers renumber beforehand if needed.
    """
    return "\n".join(sub.to_srt_block() for sub in subtitles)


def write_srt_text(content: str, path: str | Path) -> Path:
    """Write SRT text to a file, creating parent directories.

    Args:
        content: Reconstructed SRT text
        path: Output file path

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
