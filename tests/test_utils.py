"""Tests for video link parsing."""

import pytest

from src.playlistgen.utils import extract_video_id, extract_video_ids


@pytest.mark.parametrize(
    "link,expected",
    [
        ("https://youtu.be/abc", "abc"),
        ("https://youtu.be/abc?t=42", "abc"),
        ("  https://youtu.be/abc  ", "abc"),
        ("https://www.youtube.com/watch?v=abc", "abc"),
        ("https://youtube.com/watch?v=abc&list=PL1", "abc"),
        ("https://www.youtube.com/watch?list=PL1&v=abc", "abc"),
    ],
)
def test_extract_video_id(link, expected):
    """Test both the short and the long link forms."""
    assert extract_video_id(link) == expected


@pytest.mark.parametrize(
    "link",
    [
        "not-a-url",
        "https://youtu.be/",
        "https://www.youtube.com/watch",
        "https://www.youtube.com/playlist?list=PL1",
        "https://vimeo.com/watch?v=abc",
        "",
    ],
)
def test_extract_video_id_invalid(link):
    """Test links without a video ID give None."""
    assert extract_video_id(link) is None


def test_extract_video_ids_dedup():
    """Test the same video in both forms is kept once and junk is dropped."""
    links = ["https://youtu.be/abc", "https://www.youtube.com/watch?v=abc", "not-a-url"]

    assert extract_video_ids(links) == ["abc"]


def test_extract_video_ids_keeps_order():
    """Test first-seen order is preserved."""
    links = [
        "https://youtu.be/b",
        "",
        "https://youtu.be/a",
        "https://www.youtube.com/watch?v=b",
        "https://youtu.be/c",
    ]

    assert extract_video_ids(links) == ["b", "a", "c"]
