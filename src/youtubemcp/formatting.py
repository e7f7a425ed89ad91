"""Plain-text rendering of YouTube results for tool output."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .api import PlaylistItemSummary, PlaylistSummary, VideoSummary
from .bulk import OutcomeEntry

UNKNOWN_CREATOR = "Unknown creator"


def format_date(value: Optional[str]) -> str:
    """Render an ISO 8601 timestamp as YYYY-MM-DD (UTC)."""
    if not value:
        return "Unknown"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def format_videos(videos: Sequence[VideoSummary]) -> str:
    if not videos:
        return "No videos found."

    lines = []
    for index, video in enumerate(videos, 1):
        entry = (
            f"{index}. {video.title} - {video.channel_title or UNKNOWN_CREATOR} "
            f"({format_date(video.published_at)})\n"
            f"   videoId: {video.id}\n"
            f"   {video.url}"
        )
        if video.thumbnail_url:
            entry += f"\n   Thumbnail: {video.thumbnail_url}"
        lines.append(entry)
    return "\n".join(lines)


def format_playlists(playlists: Sequence[PlaylistSummary]) -> str:
    if not playlists:
        return "No playlists found."

    lines = []
    for index, playlist in enumerate(playlists, 1):
        privacy = f" [{playlist.privacy_status}]" if playlist.privacy_status else ""
        lines.append(
            f"{index}. {playlist.title}{privacy} - {playlist.item_count} items "
            f"(ID: {playlist.id})"
        )
    return "\n".join(lines)


def format_playlist_items(items: Sequence[PlaylistItemSummary]) -> str:
    if not items:
        return "No videos found in playlist."

    lines = []
    for index, item in enumerate(items, 1):
        entry = (
            f"{index}. {item.title} - {item.channel_title or UNKNOWN_CREATOR} "
            f"({format_date(item.published_at)}) [videoId={item.video_id}]"
        )
        if item.thumbnail_url:
            entry += f"\n   Thumbnail: {item.thumbnail_url}"
        lines.append(entry)
    return "\n".join(lines)


def format_outcome_entry(entry: OutcomeEntry) -> str:
    """Render one bulk-add result as a single line."""
    if entry.success:
        return (
            f"✅ Added {entry.title or entry.video_id} (videoId={entry.video_id}) "
            f"at position {entry.position}."
        )
    # Keep one line per reference even for multi-line provider messages
    error = " ".join((entry.error or "Unknown error").split())
    return f"❌ Failed to add {entry.video_ref}: {error}"


def format_bulk_outcome(outcome: Sequence[OutcomeEntry]) -> str:
    lines: List[str] = [format_outcome_entry(entry) for entry in outcome]
    return "\n".join(lines)
