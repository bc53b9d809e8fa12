from subtranslate.config import HeaderFooter
from subtranslate.models import SubtitleBlock
from subtranslate.postprocess import apply_header_footer, colorize, renumber


def _blocks() -> list[SubtitleBlock]:
    return [
        SubtitleBlock(index=1, timestamp="00:00:02,000 --> 00:00:03,000", text="one"),
        SubtitleBlock(index=2, timestamp="00:05:00,000 --> 00:05:02,000", text="two"),
        SubtitleBlock(index=3, timestamp="00:09:58,000 --> 00:10:00,000", text="three"),
    ]


def test_colorize() -> None:
    assert colorize("hi", "#fff") == '<font color="#fff">hi</font>'


def test_no_header_or_footer_returns_same_blocks() -> None:
    blocks = _blocks()
    assert apply_header_footer(blocks, HeaderFooter()) == blocks
    assert apply_header_footer(blocks, HeaderFooter(header_text="   ", footer_text="\n")) == blocks


def test_header_reindexes() -> None:
    blocks = _blocks()
    result = apply_header_footer(blocks, HeaderFooter(header_text="  Translated by us  ", header_color="#33b3b3"))

    assert [b.index for b in result] == [1, 2, 3, 4]
    assert result[0].timestamp == "00:00:01,000 --> 00:00:06,000"
    assert result[0].text == '<font color="#33b3b3">Translated by us</font>'
    assert [b.text for b in result[1:]] == ["one", "two", "three"]
    assert [b.index for b in blocks] == [1, 2, 3]


def test_footer_timing() -> None:
    result = apply_header_footer(_blocks(), HeaderFooter(footer_text="The end", footer_color="#808080"))

    footer = result[-1]
    assert len(result) == 4
    assert footer.index == 4
    assert footer.timestamp == "00:10:01,000 --> 00:10:06,000"
    assert footer.text == '<font color="#808080">The end</font>'


def test_footer_after_header_uses_shifted_index() -> None:
    result = apply_header_footer(_blocks(), HeaderFooter(header_text="Hi", footer_text="Bye"))

    assert [b.index for b in result] == [1, 2, 3, 4, 5]
    assert result[-1].timestamp == "00:10:01,000 --> 00:10:06,000"


def test_footer_follows_gapped_indices() -> None:
    blocks = [SubtitleBlock(index=10, timestamp="01:59:59,500 --> 02:00:00,000", text="last")]
    result = apply_header_footer(blocks, HeaderFooter(footer_text="Bye"))

    assert result[-1].index == 11
    assert result[-1].timestamp == "02:00:01,000 --> 02:00:06,000"


def test_footer_skipped_for_empty_document() -> None:
    assert apply_header_footer([], HeaderFooter(footer_text="Bye")) == []


def test_header_only_document_gets_footer_after_header() -> None:
    result = apply_header_footer([], HeaderFooter(header_text="Hi", footer_text="Bye"))

    assert [b.index for b in result] == [1, 2]
    assert result[1].timestamp == "00:00:07,000 --> 00:00:12,000"


def test_renumber() -> None:
    blocks = [
        SubtitleBlock(index=4, timestamp="00:00:01,000 --> 00:00:02,000", text="a"),
        SubtitleBlock(index=9, timestamp="00:00:03,000 --> 00:00:04,000", text="b"),
    ]
    assert [b.index for b in renumber(blocks)] == [1, 2]
    assert [b.text for b in renumber(blocks)] == ["a", "b"]
