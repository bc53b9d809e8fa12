import pytest

SAMPLE_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:02,000\n"
    "Hello\n"
    "\n"
    "2\n"
    "00:00:03,000 --> 00:00:04,500\n"
    "How are you?\n"
    "Fine, thanks.\n"
    "\n"
    "3\n"
    "00:09:55,000 --> 00:10:00,000\n"
    "<i>Goodbye</i>\n"
)


@pytest.fixture
def sample_srt() -> str:
    return SAMPLE_SRT


@pytest.fixture
def srt_file(tmp_path, sample_srt):
    path = tmp_path / "movie.srt"
    path.write_text(sample_srt, encoding="utf-8")
    return path
