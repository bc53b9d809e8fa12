"""Header/footer cue injection for translated subtitles."""

from .config import HeaderFooter
from .models import SubtitleBlock
from .srt import format_timestamp_range, parse_timestamp, split_timestamp_range

HEADER_TIMESTAMP = "00:00:01,000 --> 00:00:06,000"
FOOTER_GAP_MS = 1000
FOOTER_DURATION_MS = 5000


def colorize(text: str, color: str) -> str:
    """Wrap text in an SRT font color tag."""
    return f'<font color="{color}">{text}</font>'


def add_header(subtitles: list[SubtitleBlock], text: str, color: str) -> list[SubtitleBlock]:
    """Prepend a header cue as index 1, shifting every other index by one."""
    header = SubtitleBlock(index=1, timestamp=HEADER_TIMESTAMP, text=colorize(text, color))
    shifted = [sub.model_copy(update={"index": sub.index + 1}) for sub in subtitles]
    return [header, *shifted]


def add_footer(subtitles: list[SubtitleBlock], text: str, color: str) -> list[SubtitleBlock]:
    """Append a footer cue one second after the last cue ends, five seconds long."""
    last = subtitles[-1]
    _, last_end = split_timestamp_range(last.timestamp)
    start_ms = parse_timestamp(last_end) + FOOTER_GAP_MS
    end_ms = start_ms + FOOTER_DURATION_MS

    footer = SubtitleBlock(
        index=last.index + 1,
        timestamp=format_timestamp_range(start_ms, end_ms),
        text=colorize(text, color),
    )
    return [*subtitles, footer]


def apply_header_footer(
    subtitles: list[SubtitleBlock], settings: HeaderFooter
) -> list[SubtitleBlock]:
    """Add the configured header and footer cues.

    Either cue is skipped when its text is blank. The footer is placed after
    the header has been applied, so it reads the re-indexed last cue.

    Args:
        subtitles: Translated subtitles in output order
        settings: Header/footer text and colors

    Returns:
        New list of SubtitleBlock objects; the input is not modified
    """
    processed = list(subtitles)

    header_text = settings.header_text.strip()
    if header_text:
        processed = add_header(processed, header_text, settings.header_color)

    footer_text = settings.footer_text.strip()
    if footer_text and processed:
        processed = add_footer(processed, footer_text, settings.footer_color)

    return processed


def renumber(subtitles: list[SubtitleBlock]) -> list[SubtitleBlock]:
    """Renumber cues contiguously from 1 in their current order."""
    return [
        sub if sub.index == i else sub.model_copy(update={"index": i})
        for i, sub in enumerate(subtitles, start=1)
    ]
