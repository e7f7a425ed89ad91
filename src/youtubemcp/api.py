"""YouTube API wrapper."""

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from . import config
from .errors import PlaylistNotFoundError, YouTubeError, translate_http_error
from .logging_config import get_logger

logger = get_logger(__name__)

THUMBNAIL_PREFERENCE = ("maxres", "standard", "high", "medium", "default")


@dataclass
class VideoSummary:
    """Video metadata returned by search."""

    id: str
    title: str
    url: str
    description: Optional[str] = None
    channel_title: Optional[str] = None
    published_at: Optional[str] = None
    thumbnail_url: Optional[str] = None


@dataclass
class PlaylistSummary:
    """Playlist metadata with item count and visibility."""

    id: str
    title: str
    item_count: int = 0
    description: Optional[str] = None
    privacy_status: Optional[str] = None


@dataclass
class PlaylistItemSummary:
    """A single video inside a playlist."""

    id: str
    playlist_id: str
    position: int
    video_id: str
    title: str
    channel_title: Optional[str] = None
    published_at: Optional[str] = None
    thumbnail_url: Optional[str] = None


def clamp_max_results(max_results: Optional[int]) -> int:
    """Clamp a result count to the 1-50 range the API accepts, defaulting to 10."""
    if not max_results:
        return config.DEFAULT_MAX_RESULTS
    return min(max(1, int(max_results)), config.MAX_RESULTS_LIMIT)


def select_thumbnail(thumbnails: Optional[Dict[str, Any]]) -> Optional[str]:
    """Pick the largest available thumbnail URL."""
    if not thumbnails:
        return None
    for size in THUMBNAIL_PREFERENCE:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return None


def video_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def _playlist_summary(item: Dict[str, Any]) -> PlaylistSummary:
    snippet = item.get("snippet") or {}
    return PlaylistSummary(
        id=item["id"],
        title=snippet.get("title", ""),
        description=snippet.get("description") or None,
        item_count=(item.get("contentDetails") or {}).get("itemCount", 0),
        privacy_status=(item.get("status") or {}).get("privacyStatus"),
    )


def _playlist_item_summary(item: Dict[str, Any], playlist_id: str) -> PlaylistItemSummary:
    snippet = item.get("snippet") or {}
    content_details = item.get("contentDetails") or {}
    return PlaylistItemSummary(
        id=item["id"],
        playlist_id=snippet.get("playlistId") or playlist_id,
        position=snippet.get("position") or 0,
        video_id=snippet["resourceId"]["videoId"],
        title=snippet.get("title", ""),
        channel_title=snippet.get("videoOwnerChannelTitle"),
        published_at=content_details.get("videoPublishedAt") or snippet.get("publishedAt"),
        thumbnail_url=select_thumbnail(snippet.get("thumbnails")),
    )


class YouTubeAPI:
    """Wrapper for YouTube Data API v3 operations.

    Every method is a single blocking request (or a short list-then-act
    pair) against the wrapped service object. Requests are serialized
    because the service shares one httplib2 connection, which is not
    thread-safe.
    """

    def __init__(self, youtube):
        """Initialize API wrapper.

        Args:
            youtube: YouTube API client
        """
        self.youtube = youtube
        self._lock = threading.Lock()

    def _execute(self, request, playlist_id: Optional[str] = None) -> Dict[str, Any]:
        try:
            with self._lock:
                return request.execute()
        except Exception as e:
            raise translate_http_error(e, playlist_id) from e

    def search_videos(self, query: str, max_results: Optional[int] = None) -> List[VideoSummary]:
        """Search YouTube for videos.

        Args:
            query: Search terms
            max_results: Number of results to return (1-50, default 10)

        Returns:
            Video summaries ordered by relevance

        Raises:
            YouTubeError: If API request fails
        """
        request = self.youtube.search().list(
            q=query,
            part="snippet",
            maxResults=clamp_max_results(max_results),
            type="video",
            order="relevance",
        )
        response = self._execute(request)

        videos = []
        for item in response.get("items", []):
            video_id = (item.get("id") or {}).get("videoId")
            snippet = item.get("snippet") or {}
            title = snippet.get("title")
            if not video_id or not title:
                continue

            videos.append(
                VideoSummary(
                    id=video_id,
                    title=title,
                    url=video_url(video_id),
                    description=snippet.get("description"),
                    channel_title=snippet.get("channelTitle"),
                    published_at=snippet.get("publishedAt"),
                    thumbnail_url=select_thumbnail(snippet.get("thumbnails")),
                )
            )

        logger.debug("Search for %r returned %d videos", query, len(videos))
        return videos

    def create_playlist(
        self,
        title: str,
        description: Optional[str] = None,
        privacy_status: str = "private",
    ) -> PlaylistSummary:
        """Create a playlist in the authenticated account.

        Args:
            title: Playlist name
            description: Optional playlist description
            privacy_status: private, public or unlisted

        Returns:
            Summary of the created playlist

        Raises:
            YouTubeError: If API request fails
        """
        snippet = {"title": title}
        if description is not None:
            snippet["description"] = description

        request = self.youtube.playlists().insert(
            part="snippet,status",
            body={"snippet": snippet, "status": {"privacyStatus": privacy_status}},
        )
        playlist = self._execute(request)

        if not playlist.get("id") or not playlist.get("snippet"):
            raise YouTubeError("Failed to create playlist")

        summary = _playlist_summary(playlist)
        summary.title = summary.title or title
        summary.description = summary.description or description
        summary.privacy_status = summary.privacy_status or privacy_status
        logger.info("Created playlist %s (%s)", summary.title, summary.id)
        return summary

    def delete_playlist(self, playlist_id: str) -> None:
        """Permanently delete a playlist.

        Raises:
            PlaylistNotFoundError: If playlist is not found
            YouTubeError: If API request fails
        """
        self._execute(self.youtube.playlists().delete(id=playlist_id), playlist_id)
        logger.info("Deleted playlist %s", playlist_id)

    def add_video_to_playlist(
        self,
        playlist_id: str,
        video_id: str,
        position: Optional[int] = None,
    ) -> PlaylistItemSummary:
        """Insert a video into a playlist.

        Args:
            playlist_id: Target playlist ID
            video_id: Video ID to add
            position: 0-based insert position; appended to the end when None

        Returns:
            The created playlist item with its provider-assigned position

        Raises:
            PlaylistNotFoundError: If playlist is not found
            YouTubeError: If API request fails
        """
        snippet = {
            "playlistId": playlist_id,
            "resourceId": {"kind": "youtube#video", "videoId": video_id},
        }
        if position is not None:
            snippet["position"] = position

        request = self.youtube.playlistItems().insert(part="snippet", body={"snippet": snippet})
        item = self._execute(request, playlist_id)

        if (
            not item.get("id")
            or not item.get("snippet")
            or not (item["snippet"].get("resourceId") or {}).get("videoId")
        ):
            raise YouTubeError("Failed to add video to playlist")

        return _playlist_item_summary(item, playlist_id)

    def list_playlist_items(
        self, playlist_id: str, max_results: Optional[int] = None
    ) -> List[PlaylistItemSummary]:
        """List videos in a playlist in playlist order.

        Args:
            playlist_id: Target playlist ID
            max_results: Number of items to return (1-50, default 10)

        Raises:
            PlaylistNotFoundError: If playlist is not found
            YouTubeError: If API request fails
        """
        request = self.youtube.playlistItems().list(
            part="snippet,contentDetails",
            playlistId=playlist_id,
            maxResults=clamp_max_results(max_results),
        )
        response = self._execute(request, playlist_id)

        items = []
        for item in response.get("items", []):
            video_id = ((item.get("snippet") or {}).get("resourceId") or {}).get("videoId")
            if not item.get("id") or not video_id:
                continue
            items.append(_playlist_item_summary(item, playlist_id))

        return items

    def remove_video_from_playlist(
        self, playlist_id: str, video_id: str
    ) -> Optional[PlaylistItemSummary]:
        """Remove a video from a playlist by video ID.

        Only the first page of the playlist is searched.

        Returns:
            The removed item, or None if the video is not in the playlist

        Raises:
            PlaylistNotFoundError: If playlist is not found
            YouTubeError: If API request fails
        """
        items = self.list_playlist_items(playlist_id, config.MAX_RESULTS_LIMIT)
        match = next((item for item in items if item.video_id == video_id), None)
        if match is None:
            return None

        self._execute(self.youtube.playlistItems().delete(id=match.id), playlist_id)
        logger.info("Removed video %s from playlist %s", video_id, playlist_id)
        return match

    def list_my_playlists(self, max_results: Optional[int] = None) -> List[PlaylistSummary]:
        """List playlists owned by the authenticated user.

        Raises:
            YouTubeError: If API request fails
        """
        request = self.youtube.playlists().list(
            part="snippet,status,contentDetails",
            mine=True,
            maxResults=clamp_max_results(max_results),
        )
        response = self._execute(request)

        return [
            _playlist_summary(item)
            for item in response.get("items", [])
            if item.get("id") and (item.get("snippet") or {}).get("title")
        ]

    def get_playlist_metadata(self, playlist_id: str) -> Optional[PlaylistSummary]:
        """Get playlist metadata without fetching its items.

        Returns:
            Playlist summary, or None if the playlist does not exist

        Raises:
            YouTubeError: If API request fails
        """
        request = self.youtube.playlists().list(
            part="snippet,status,contentDetails",
            id=playlist_id,
            maxResults=1,
        )
        try:
            response = self._execute(request, playlist_id)
        except PlaylistNotFoundError:
            return None

        items = response.get("items") or []
        if not items or not items[0].get("id"):
            return None
        return _playlist_summary(items[0])
