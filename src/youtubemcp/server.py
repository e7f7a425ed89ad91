"""MCP server exposing YouTube playlist tools and prompt templates."""

import asyncio
from typing import Annotated, List, Literal, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.prompts import base
from pydantic import Field

from . import config
from .bulk import BulkPlaylistMutator
from .client import ClientProvider
from .errors import PlaylistNotFoundError
from .formatting import (
    format_bulk_outcome,
    format_playlist_items,
    format_playlists,
    format_videos,
)
from .logging_config import get_logger
from .video_ids import require_video_id

logger = get_logger(__name__)

DEFAULT_CURATE_COUNT = 5
MAX_CURATE_COUNT = 25
SUMMARY_ITEM_LIMIT = 25

MaxResults = Annotated[int, Field(ge=1, le=50)]
Position = Annotated[int, Field(ge=0)]
NonEmpty = Annotated[str, Field(min_length=1)]

mcp = FastMCP(config.MCP_SERVER_NAME, host=config.MCP_HOST, port=config.MCP_PORT)
provider = ClientProvider()


@mcp.tool()
async def search_videos(
    query: Annotated[str, Field(min_length=1, description="Text to search on YouTube")],
    max_results: Annotated[
        Optional[MaxResults],
        Field(description="Maximum number of videos to return (default 10)"),
    ] = None,
) -> str:
    """Search YouTube for videos matching a query."""
    async with provider.acquire() as client:
        videos = await asyncio.to_thread(client.search_videos, query, max_results)
    return f'Search results for "{query}":\n{format_videos(videos)}'


@mcp.tool()
async def create_playlist(
    title: Annotated[str, Field(min_length=1, description="Playlist title")],
    description: Annotated[Optional[str], Field(description="Playlist description")] = None,
    privacy_status: Annotated[
        Literal["private", "public", "unlisted"],
        Field(description="Playlist visibility (default private)"),
    ] = "private",
) -> str:
    """Create a new playlist in the authenticated YouTube account."""
    async with provider.acquire() as client:
        playlist = await asyncio.to_thread(
            client.create_playlist, title, description, privacy_status
        )
    return (
        f'Created playlist "{playlist.title}" (ID: {playlist.id}) - '
        f"{playlist.item_count} items, visibility {playlist.privacy_status}."
    )


@mcp.tool()
async def delete_playlist(
    playlist_id: Annotated[str, Field(min_length=1, description="ID of the playlist to delete")],
) -> str:
    """Delete a playlist by ID."""
    async with provider.acquire() as client:
        await asyncio.to_thread(client.delete_playlist, playlist_id)
    return f"Deleted playlist {playlist_id}."


@mcp.tool()
async def add_video_to_playlist(
    playlist_id: Annotated[str, Field(min_length=1, description="Target playlist ID")],
    video_id: Annotated[str, Field(min_length=1, description="YouTube video ID or URL")],
    position: Annotated[Optional[Position], Field(description="Insert position (0-based)")] = None,
) -> str:
    """Add a video to a playlist."""
    normalized = require_video_id(video_id)
    async with provider.acquire() as client:
        item = await asyncio.to_thread(
            client.add_video_to_playlist, playlist_id, normalized, position
        )
    return (
        f"Added video {item.video_id} to playlist {item.playlist_id} "
        f"at position {item.position}. (Item ID: {item.id})"
    )


@mcp.tool()
async def add_videos_to_playlist(
    playlist_id: Annotated[str, Field(min_length=1, description="Target playlist ID")],
    video_ids: Annotated[
        List[NonEmpty],
        Field(min_length=1, description="List of video IDs or URLs to add"),
    ],
    start_position: Annotated[
        Optional[Position],
        Field(description="Optional starting insert position (0-based)"),
    ] = None,
) -> str:
    """Add multiple videos to a playlist in sequence.

    Reports one line per requested video, in request order.
    """
    async with provider.acquire() as client:
        mutator = BulkPlaylistMutator(client)
        outcome = await mutator.add_videos(playlist_id, video_ids, start_position)
    return format_bulk_outcome(outcome)


@mcp.tool()
async def remove_video_from_playlist(
    playlist_id: Annotated[str, Field(min_length=1, description="Playlist ID")],
    video_id: Annotated[str, Field(min_length=1, description="Video ID or URL to remove")],
) -> str:
    """Remove a video from a playlist by video ID."""
    normalized = require_video_id(video_id)
    async with provider.acquire() as client:
        removed = await asyncio.to_thread(
            client.remove_video_from_playlist, playlist_id, normalized
        )
    if removed is None:
        return f"No video with ID {normalized} found in playlist {playlist_id}."
    return f"Removed video {normalized} from playlist {playlist_id}. (Item ID: {removed.id})"


@mcp.tool()
async def get_my_playlists(
    max_results: Annotated[
        Optional[MaxResults],
        Field(description="Maximum number of playlists to return (default 10)"),
    ] = None,
) -> str:
    """List playlists owned by the authenticated user."""
    async with provider.acquire() as client:
        playlists = await asyncio.to_thread(client.list_my_playlists, max_results)
    return format_playlists(playlists)


@mcp.tool()
async def get_playlist_items(
    playlist_id: Annotated[str, Field(min_length=1, description="Target playlist ID")],
    max_results: Annotated[
        Optional[MaxResults],
        Field(description="Maximum number of videos to return (default 10)"),
    ] = None,
) -> str:
    """Get videos inside a playlist."""
    async with provider.acquire() as client:
        items = await asyncio.to_thread(client.list_playlist_items, playlist_id, max_results)
    return format_playlist_items(items)


def parse_count(count: Optional[str]) -> int:
    """Parse the curate prompt's count argument, clamped to 1-25.

    Raises:
        ValueError: If count is not a string of digits
    """
    if count is None or count == "":
        return DEFAULT_CURATE_COUNT
    if not count.isdigit() or not count.isascii():
        raise ValueError("Count must be a positive integer")
    return min(max(int(count), 1), MAX_CURATE_COUNT)


@mcp.prompt()
async def curate_playlist(theme: str, count: Optional[str] = None) -> List[base.Message]:
    """Generate instructions for curating a themed playlist."""
    if not theme:
        raise ValueError("Theme is required")
    target_count = parse_count(count)

    async with provider.acquire() as client:
        candidates = await asyncio.to_thread(
            client.search_videos, theme, min(target_count * 3, MAX_CURATE_COUNT)
        )

    return [
        base.AssistantMessage(
            "You are a creative music and video curator crafting thoughtful YouTube playlists."
        ),
        base.UserMessage(
            f"Create a YouTube playlist with {target_count} videos that celebrates the theme: "
            f'"{theme}".\n'
            "Use the candidate videos below as inspiration "
            "(you may choose others if you know better options).\n"
            f"{format_videos(candidates)}"
        ),
    ]


@mcp.prompt()
async def summarize_playlist(playlist_id: str) -> List[base.Message]:
    """Provide a natural language summary of a playlist's content."""
    if not playlist_id:
        raise ValueError("Playlist ID is required")

    async with provider.acquire() as client:
        metadata = await asyncio.to_thread(client.get_playlist_metadata, playlist_id)
        if metadata is None:
            raise PlaylistNotFoundError(f"Playlist {playlist_id} not found.")
        items = await asyncio.to_thread(
            client.list_playlist_items, playlist_id, SUMMARY_ITEM_LIMIT
        )

    return [
        base.AssistantMessage("You summarize YouTube playlists for quick human digestion."),
        base.UserMessage(
            f'Write a concise yet vivid summary of the playlist "{metadata.title}" '
            f"(ID: {metadata.id}).\n"
            f"Description: {metadata.description or '(no description provided)'}\n"
            f"Total items: {metadata.item_count}\n"
            f"Videos:\n{format_playlist_items(items)}"
        ),
    ]


def run(
    transport: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> None:
    """Run the MCP server until the transport closes.

    Args:
        transport: "stdio" or "streamable-http"
        host: Bind address for streamable HTTP
        port: Bind port for streamable HTTP
    """
    transport = transport or config.MCP_TRANSPORT
    if host:
        mcp.settings.host = host
    if port:
        mcp.settings.port = port

    if transport == "stdio":
        logger.info("Starting %s on stdio", config.MCP_SERVER_NAME)
    else:
        logger.info(
            "Starting %s on http://%s:%d%s",
            config.MCP_SERVER_NAME,
            mcp.settings.host,
            mcp.settings.port,
            mcp.settings.streamable_http_path,
        )
    mcp.run(transport=transport)
