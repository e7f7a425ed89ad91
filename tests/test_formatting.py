"""Tests for tool output formatting."""

import pytest

from src.youtubemcp.api import PlaylistItemSummary, PlaylistSummary, VideoSummary
from src.youtubemcp.bulk import OutcomeEntry
from src.youtubemcp.formatting import (
    format_bulk_outcome,
    format_date,
    format_outcome_entry,
    format_playlist_items,
    format_playlists,
    format_videos,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2009-10-25T06:57:33Z", "2009-10-25"),
        ("2024-01-01T23:30:00-05:00", "2024-01-02"),
        ("2024-03-05", "2024-03-05"),
        (None, "Unknown"),
        ("", "Unknown"),
        ("last tuesday", "last tuesday"),
    ],
)
def test_format_date(value, expected):
    assert format_date(value) == expected


def test_format_videos():
    videos = [
        VideoSummary(
            id="dQw4w9WgXcQ",
            title="Never Gonna Give You Up",
            url="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            channel_title="Rick Astley",
            published_at="2009-10-25T06:57:33Z",
            thumbnail_url="https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        ),
        VideoSummary(id="abc12345678", title="Untitled", url="https://youtu.be/abc12345678"),
    ]

    assert format_videos(videos) == (
        "1. Never Gonna Give You Up - Rick Astley (2009-10-25)\n"
        "   videoId: dQw4w9WgXcQ\n"
        "   https://www.youtube.com/watch?v=dQw4w9WgXcQ\n"
        "   Thumbnail: https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg\n"
        "2. Untitled - Unknown creator (Unknown)\n"
        "   videoId: abc12345678\n"
        "   https://youtu.be/abc12345678"
    )


def test_format_empty_results():
    assert format_videos([]) == "No videos found."
    assert format_playlists([]) == "No playlists found."
    assert format_playlist_items([]) == "No videos found in playlist."


def test_format_playlists():
    playlists = [
        PlaylistSummary(id="PL1", title="Road Trip", item_count=12, privacy_status="public"),
        PlaylistSummary(id="PL2", title="Drafts"),
    ]

    assert format_playlists(playlists) == (
        "1. Road Trip [public] - 12 items (ID: PL1)\n" "2. Drafts - 0 items (ID: PL2)"
    )


def test_format_playlist_items():
    items = [
        PlaylistItemSummary(
            id="item1",
            playlist_id="PL1",
            position=0,
            video_id="dQw4w9WgXcQ",
            title="Never Gonna Give You Up",
            channel_title="Rick Astley",
            published_at="2009-10-25T06:57:33Z",
        )
    ]

    assert format_playlist_items(items) == (
        "1. Never Gonna Give You Up - Rick Astley (2009-10-25) [videoId=dQw4w9WgXcQ]"
    )


def test_format_outcome_entry_success():
    entry = OutcomeEntry(
        video_ref="https://youtu.be/dQw4w9WgXcQ",
        success=True,
        video_id="dQw4w9WgXcQ",
        title="Never Gonna Give You Up",
        position=3,
    )

    assert format_outcome_entry(entry) == (
        "✅ Added Never Gonna Give You Up (videoId=dQw4w9WgXcQ) at position 3."
    )


def test_format_outcome_entry_success_without_title():
    entry = OutcomeEntry(video_ref="dQw4w9WgXcQ", success=True, video_id="dQw4w9WgXcQ", position=0)

    assert format_outcome_entry(entry) == "✅ Added dQw4w9WgXcQ (videoId=dQw4w9WgXcQ) at position 0."


def test_format_outcome_entry_failure_stays_on_one_line():
    entry = OutcomeEntry(
        video_ref="bbbbbbbbbbb",
        success=False,
        video_id="bbbbbbbbbbb",
        error="Video not found.\n  Check the ID.",
    )

    assert format_outcome_entry(entry) == (
        "❌ Failed to add bbbbbbbbbbb: Video not found. Check the ID."
    )


def test_format_bulk_outcome_one_line_per_reference():
    outcome = [
        OutcomeEntry(video_ref="aaaaaaaaaaa", success=True, video_id="aaaaaaaaaaa", title="A", position=0),
        OutcomeEntry(video_ref="garbage", success=False, error="Provide a valid YouTube video ID or URL."),
    ]

    lines = format_bulk_outcome(outcome).split("\n")

    assert lines == [
        "✅ Added A (videoId=aaaaaaaaaaa) at position 0.",
        "❌ Failed to add garbage: Provide a valid YouTube video ID or URL.",
    ]
