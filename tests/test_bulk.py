"""Tests for ordered bulk insertion into a playlist."""

import asyncio
from typing import List, Optional
from unittest.mock import MagicMock

import pytest
from google.auth.exceptions import RefreshError

from src.youtubemcp.api import PlaylistItemSummary, YouTubeAPI
from src.youtubemcp.bulk import BulkPlaylistMutator, Pacer
from src.youtubemcp.errors import (
    AuthenticationError,
    PlaylistNotFoundError,
    VideoNotFoundError,
    YouTubeError,
)


class StubAPI:
    """Records inserts and fails on selected video IDs."""

    def __init__(self, failures=None, end_position: int = 10):
        self.failures = failures or {}
        self.calls = []
        self.end_position = end_position

    def add_video_to_playlist(
        self, playlist_id: str, video_id: str, position: Optional[int] = None
    ) -> PlaylistItemSummary:
        self.calls.append((playlist_id, video_id, position))
        if video_id in self.failures:
            raise self.failures[video_id]
        if position is None:
            position = self.end_position
            self.end_position += 1
        return PlaylistItemSummary(
            id=f"item-{video_id}",
            playlist_id=playlist_id,
            position=position,
            video_id=video_id,
            title=f"Title {video_id}",
        )


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleep():
    return RecordingSleep()


def run_batch(api, refs, start_position=None, sleep=None, delay=0.25):
    mutator = BulkPlaylistMutator(api, delay=delay, sleep=sleep or RecordingSleep())
    return asyncio.run(mutator.add_videos("PL123", refs, start_position))


def test_mixed_batch_reports_every_reference(sleep):
    """Valid IDs and URLs are added, garbage is rejected without a provider call."""
    api = StubAPI()
    refs = ["dQw4w9WgXcQ", "https://youtu.be/abc12345678", "not a url at all"]

    outcome = run_batch(api, refs, sleep=sleep)

    assert len(outcome) == 3
    assert [entry.video_ref for entry in outcome] == refs
    assert outcome[0].success and outcome[0].video_id == "dQw4w9WgXcQ"
    assert outcome[1].success and outcome[1].video_id == "abc12345678"
    assert not outcome[2].success
    assert not outcome[2].attempted
    assert outcome[2].error == "Provide a valid YouTube video ID or URL."
    assert [call[1] for call in api.calls] == ["dQw4w9WgXcQ", "abc12345678"]


def test_positions_advance_for_failed_attempts(sleep):
    """A failed insert still consumes its position slot."""
    api = StubAPI(failures={"bbbbbbbbbbb": VideoNotFoundError("Video not found")})
    refs = ["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"]

    outcome = run_batch(api, refs, start_position=5, sleep=sleep)

    assert [call[2] for call in api.calls] == [5, 6, 7]
    assert [entry.requested_position for entry in outcome] == [5, 6, 7]
    assert outcome[0].position == 5
    assert outcome[2].position == 7


def test_failure_is_isolated_to_its_item(sleep):
    """Items before and after a failure still succeed."""
    api = StubAPI(failures={"bbbbbbbbbbb": YouTubeError("Forbidden")})

    outcome = run_batch(api, ["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"], sleep=sleep)

    assert [entry.success for entry in outcome] == [True, False, True]
    assert outcome[1].error == "Forbidden"
    assert outcome[1].video_id == "bbbbbbbbbbb"
    assert outcome[1].attempted


def test_without_start_position_inserts_append(sleep):
    api = StubAPI(end_position=3)

    outcome = run_batch(api, ["aaaaaaaaaaa", "bbbbbbbbbbb"], sleep=sleep)

    assert [call[2] for call in api.calls] == [None, None]
    assert [entry.position for entry in outcome] == [3, 4]
    assert [entry.requested_position for entry in outcome] == [None, None]


def test_unrecognized_reference_consumes_no_position(sleep):
    api = StubAPI()

    run_batch(api, ["aaaaaaaaaaa", "garbage", "bbbbbbbbbbb"], start_position=0, sleep=sleep)

    assert [call[2] for call in api.calls] == [0, 1]


def test_delay_only_between_consecutive_attempts(sleep):
    """Three inserts wait twice, never before the first or after the last."""
    api = StubAPI()

    run_batch(api, ["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"], sleep=sleep, delay=0.25)

    assert sleep.delays == [0.25, 0.25]


def test_single_reference_never_waits(sleep):
    run_batch(StubAPI(), ["aaaaaaaaaaa"], sleep=sleep)

    assert sleep.delays == []


def test_delay_does_not_change_after_failures(sleep):
    api = StubAPI(failures={"aaaaaaaaaaa": YouTubeError("boom"), "bbbbbbbbbbb": YouTubeError("boom")})

    run_batch(api, ["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"], sleep=sleep, delay=0.5)

    assert sleep.delays == [0.5, 0.5]


def test_missing_playlist_aborts_batch(sleep):
    """A missing playlist fails the whole call."""
    api = StubAPI(failures={"aaaaaaaaaaa": PlaylistNotFoundError("Playlist PL123 not found")})

    with pytest.raises(PlaylistNotFoundError):
        run_batch(api, ["aaaaaaaaaaa", "bbbbbbbbbbb"], sleep=sleep)

    assert len(api.calls) == 1


def test_authentication_failure_aborts_batch(sleep):
    api = StubAPI(failures={"bbbbbbbbbbb": AuthenticationError("token revoked")})

    with pytest.raises(AuthenticationError):
        run_batch(api, ["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"], sleep=sleep)

    assert len(api.calls) == 2


def test_revoked_token_aborts_batch(sleep):
    """A token refresh failure from the client library stops the batch."""
    youtube = MagicMock()
    insert = youtube.playlistItems.return_value.insert
    insert.return_value.execute.side_effect = RefreshError(
        "invalid_grant: Token has been expired or revoked."
    )

    with pytest.raises(AuthenticationError):
        run_batch(YouTubeAPI(youtube), ["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"], sleep=sleep)

    assert insert.call_count == 1


def test_all_invalid_batch_makes_no_calls(sleep):
    api = StubAPI()

    outcome = run_batch(api, ["nope", "https://example.com/not-a-video"], sleep=sleep)

    assert len(outcome) == 2
    assert not any(entry.success for entry in outcome)
    assert api.calls == []
    assert sleep.delays == []


def test_negative_start_position_rejected(sleep):
    with pytest.raises(ValueError):
        run_batch(StubAPI(), ["aaaaaaaaaaa"], start_position=-1, sleep=sleep)


def test_default_delay_comes_from_config(mocker):
    mocker.patch("src.youtubemcp.bulk.config.INSERT_DELAY_SECONDS", 1.5)

    mutator = BulkPlaylistMutator(StubAPI())

    assert mutator.delay == 1.5


def test_pacer_runs_calls_in_order(sleep):
    pacer = Pacer(0.1, sleep)
    seen = []

    async def run():
        for value in range(3):
            await pacer.run(seen.append, value)

    asyncio.run(run())

    assert seen == [0, 1, 2]
    assert sleep.delays == [0.1, 0.1]
