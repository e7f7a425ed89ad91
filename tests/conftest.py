"""Common test fixtures and utilities."""

from typing import Generator
from unittest.mock import MagicMock

import pytest

OAUTH_ENV_VARS = [
    "YOUTUBE_CLIENT_ID",
    "YOUTUBE_CLIENT_SECRET",
    "YOUTUBE_REDIRECT_URIS",
    "YOUTUBE_CREDENTIALS_JSON",
    "YOUTUBE_ACCESS_TOKEN",
    "YOUTUBE_REFRESH_TOKEN",
    "YOUTUBE_TOKEN_TYPE",
    "YOUTUBE_SCOPE",
    "YOUTUBE_TOKEN_EXPIRY",
    "YOUTUBE_TOKEN_JSON",
]


@pytest.fixture(autouse=True)
def clean_oauth_env(monkeypatch) -> Generator[None, None, None]:
    """Ensure each test starts without OAuth overrides from the developer's shell.

    Yields:
        None
    """
    for name in OAUTH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def youtube_client() -> MagicMock:
    """Create a mock YouTube API client.

    Returns:
        MagicMock: Mock YouTube API client with common methods configured
    """
    mock = MagicMock()

    mock.playlistItems.return_value.list.return_value.execute.return_value = {
        "items": [
            {
                "id": "item1",
                "snippet": {
                    "playlistId": "PL123",
                    "position": 0,
                    "resourceId": {"videoId": "dQw4w9WgXcQ"},
                    "title": "Video 1",
                    "videoOwnerChannelTitle": "Channel 1",
                    "publishedAt": "2024-01-02T10:00:00Z",
                },
                "contentDetails": {"videoPublishedAt": "2009-10-25T06:57:33Z"},
            },
            {
                "id": "item2",
                "snippet": {
                    "playlistId": "PL123",
                    "position": 1,
                    "resourceId": {"videoId": "abc12345678"},
                    "title": "Video 2",
                },
            },
        ]
    }

    mock.playlistItems.return_value.insert.return_value.execute.return_value = {
        "id": "newitem",
        "snippet": {
            "playlistId": "PL123",
            "position": 2,
            "resourceId": {"kind": "youtube#video", "videoId": "dQw4w9WgXcQ"},
            "title": "Never Gonna Give You Up",
        },
    }

    mock.playlists.return_value.list.return_value.execute.return_value = {
        "items": [
            {
                "id": "PL123",
                "snippet": {"title": "Playlist 1", "description": "Description 1"},
                "status": {"privacyStatus": "private"},
                "contentDetails": {"itemCount": 2},
            }
        ]
    }

    return mock
