import pytest

from subtranslate.errors import TimestampError
from subtranslate.models import SubtitleBlock
from subtranslate.srt import (
    format_timestamp,
    format_timestamp_range,
    parse_srt,
    parse_timestamp,
    read_srt_text,
    split_timestamp_range,
    subtitles_to_srt,
    write_srt_text,
)


def test_parse_timestamp() -> None:
    assert parse_timestamp("00:00:00,000") == 0
    assert parse_timestamp("00:00:01,500") == 1500
    assert parse_timestamp("01:02:03,004") == 3723004
    assert parse_timestamp(" 00:10:00,000 ") == 600000
    assert parse_timestamp("123:00:00,000") == 123 * 3600 * 1000


@pytest.mark.parametrize(
    "text",
    ["", "00:00:01.000", "0:00:01,000", "00:00:01", "00:00:01,00", "aa:bb:cc,ddd", "00:00:01,000 junk"],
)
def test_parse_timestamp_rejects_malformed(text: str) -> None:
    with pytest.raises(TimestampError):
        parse_timestamp(text)


def test_timestamp_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_timestamp("nope")


def test_format_timestamp() -> None:
    assert format_timestamp(0) == "00:00:00,000"
    assert format_timestamp(1500) == "00:00:01,500"
    assert format_timestamp(3723004) == "01:02:03,004"
    assert format_timestamp(359999999) == "99:59:59,999"
    assert format_timestamp(360000000) == "100:00:00,000"


def test_format_timestamp_rejects_negative() -> None:
    with pytest.raises(ValueError):
        format_timestamp(-1)


@pytest.mark.parametrize("ms", [0, 1, 999, 1000, 59999, 60000, 3599999, 3600000, 86399999, 359999999])
def test_timestamp_inverse(ms: int) -> None:
    assert parse_timestamp(format_timestamp(ms)) == ms


def test_split_and_format_range() -> None:
    assert split_timestamp_range("00:00:01,000 --> 00:00:02,000") == ("00:00:01,000", "00:00:02,000")
    assert format_timestamp_range(1000, 6000) == "00:00:01,000 --> 00:00:06,000"
    with pytest.raises(TimestampError):
        split_timestamp_range("00:00:01,000 00:00:02,000")


def test_parse_srt(sample_srt: str) -> None:
    subtitles = parse_srt(sample_srt)

    assert [s.index for s in subtitles] == [1, 2, 3]
    assert subtitles[0].timestamp == "00:00:01,000 --> 00:00:02,000"
    assert subtitles[1].text == "How are you?\nFine, thanks."
    assert subtitles[2].text == "<i>Goodbye</i>"
    assert subtitles[2].end == "00:10:00,000"


def test_parse_srt_empty() -> None:
    assert parse_srt("") == []
    assert parse_srt("\n\n  \n") == []
    assert parse_srt("just some text\nwithout cues\n") == []


def test_parse_srt_skips_malformed_groups() -> None:
    content = (
        "1\n00:00:01,000 --> 00:00:02,000\nFirst\n\n"
        "x\n00:00:02,000 --> 00:00:03,000\nBad index\n\n"
        "3\n00:00:03,000 00:00:04,000\nNo arrow\n\n"
        "0\n00:00:04,000 --> 00:00:05,000\nZero index\n\n"
        "5\n\n"
        "6\n00:00:06,000 --> 00:00:07,000\nLast\n"
    )
    subtitles = parse_srt(content)

    assert [(s.index, s.text) for s in subtitles] == [(1, "First"), (6, "Last")]


def test_parse_srt_keeps_document_order() -> None:
    content = (
        "3\n00:00:05,000 --> 00:00:06,000\nThird\n\n"
        "1\n00:00:01,000 --> 00:00:02,000\nFirst\n"
    )
    assert [s.index for s in parse_srt(content)] == [3, 1]


def test_parse_srt_handles_crlf_bom_and_extra_blank_lines() -> None:
    content = (
        "\ufeff1\r\n00:00:01,000 --> 00:00:02,000\r\nHello\r\nthere\r\n\r\n\r\n \r\n"
        "2\r\n00:00:03,000 --> 00:00:04,000\r\nBye\r\n"
    )
    subtitles = parse_srt(content)

    assert [s.index for s in subtitles] == [1, 2]
    assert subtitles[0].text == "Hello\nthere"


def test_parse_srt_cue_without_text() -> None:
    subtitles = parse_srt("1\n00:00:01,000 --> 00:00:02,000\n")
    assert subtitles == [SubtitleBlock(index=1, timestamp="00:00:01,000 --> 00:00:02,000", text="")]


def test_subtitles_to_srt() -> None:
    subtitles = [
        SubtitleBlock(index=1, timestamp="00:00:01,000 --> 00:00:02,000", text="Hello"),
        SubtitleBlock(index=7, timestamp="00:00:03,000 --> 00:00:04,000", text="Two\nlines"),
    ]
    assert subtitles_to_srt(subtitles) == (
        "1\n00:00:01,000 --> 00:00:02,000\nHello\n\n"
        "7\n00:00:03,000 --> 00:00:04,000\nTwo\nlines\n"
    )


def test_round_trip(sample_srt: str) -> None:
    subtitles = parse_srt(sample_srt)
    rebuilt = subtitles_to_srt(subtitles)

    assert rebuilt == sample_srt
    assert parse_srt(rebuilt) == subtitles


def test_read_and_write_srt_text(tmp_path, sample_srt: str) -> None:
    source = tmp_path / "in.srt"
    source.write_text("\ufeff" + sample_srt, encoding="utf-8")
    content = read_srt_text(source)
    assert content == sample_srt

    target = write_srt_text(subtitles_to_srt(parse_srt(content)), tmp_path / "out" / "result.srt")
    assert target.read_text(encoding="utf-8") == sample_srt
