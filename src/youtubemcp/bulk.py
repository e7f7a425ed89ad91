"""Ordered, paced bulk insertion of videos into a playlist."""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from . import config
from .api import YouTubeAPI
from .errors import (
    AuthenticationError,
    ConfigurationError,
    PlaylistNotFoundError,
    YouTubeError,
)
from .logging_config import get_logger
from .video_ids import extract_video_id

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]

# Errors that invalidate the whole batch rather than a single reference
BATCH_FATAL_ERRORS = (PlaylistNotFoundError, AuthenticationError, ConfigurationError)


@dataclass
class OutcomeEntry:
    """Result of adding one video reference."""

    video_ref: str
    success: bool
    video_id: Optional[str] = None
    title: Optional[str] = None
    position: Optional[int] = None
    item_id: Optional[str] = None
    requested_position: Optional[int] = None
    error: Optional[str] = None

    @property
    def attempted(self) -> bool:
        """Whether a provider call was made for this reference."""
        return self.video_id is not None


class Pacer:
    """Runs blocking calls one at a time with a fixed gap between them.

    The gap is only inserted between consecutive calls, never before the
    first or after the last.
    """

    def __init__(self, delay: float, sleep: Sleep = asyncio.sleep):
        self.delay = delay
        self._sleep = sleep
        self._calls = 0

    async def run(self, func: Callable[..., Any], *args: Any) -> Any:
        if self._calls and self.delay > 0:
            await self._sleep(self.delay)
        self._calls += 1
        return await asyncio.to_thread(func, *args)


class BulkPlaylistMutator:
    """Adds an ordered list of video references to one playlist."""

    def __init__(
        self,
        api: YouTubeAPI,
        delay: Optional[float] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize mutator.

        Args:
            api: Client exposing add_video_to_playlist
            delay: Seconds to wait between consecutive inserts
            sleep: Awaitable sleep function
        """
        self.api = api
        self.delay = config.INSERT_DELAY_SECONDS if delay is None else delay
        self._sleep = sleep

    async def add_videos(
        self,
        playlist_id: str,
        video_refs: Sequence[str],
        start_position: Optional[int] = None,
    ) -> List[OutcomeEntry]:
        """Insert each reference in order, isolating per-item failures.

        With a start position, the n-th provider attempt is inserted at
        ``start_position + n``; failed attempts still consume their slot.
        Unrecognized references are reported without a provider call and
        consume no slot.

        Args:
            playlist_id: Target playlist ID
            video_refs: Video IDs or URLs, in insert order
            start_position: Optional 0-based position of the first insert

        Returns:
            One entry per reference, in input order

        Raises:
            PlaylistNotFoundError: If the playlist does not exist
            AuthenticationError: If the client loses authorization mid-batch
        """
        if start_position is not None and start_position < 0:
            raise ValueError("start_position must be non-negative")

        pacer = Pacer(self.delay, self._sleep)
        outcome: List[OutcomeEntry] = []
        position = start_position

        for video_ref in video_refs:
            video_id = extract_video_id(video_ref)
            if video_id is None:
                logger.warning("Skipping unrecognized video reference %r", video_ref)
                outcome.append(
                    OutcomeEntry(
                        video_ref=video_ref,
                        success=False,
                        error="Provide a valid YouTube video ID or URL.",
                    )
                )
                continue

            requested = position
            if position is not None:
                position += 1

            try:
                item = await pacer.run(
                    self.api.add_video_to_playlist, playlist_id, video_id, requested
                )
            except BATCH_FATAL_ERRORS:
                raise
            except YouTubeError as e:
                logger.warning("Failed to add video %s to %s: %s", video_id, playlist_id, e)
                outcome.append(
                    OutcomeEntry(
                        video_ref=video_ref,
                        success=False,
                        video_id=video_id,
                        requested_position=requested,
                        error=str(e),
                    )
                )
                continue

            outcome.append(
                OutcomeEntry(
                    video_ref=video_ref,
                    success=True,
                    video_id=item.video_id,
                    title=item.title,
                    position=item.position,
                    item_id=item.id,
                    requested_position=requested,
                )
            )

        succeeded = sum(1 for entry in outcome if entry.success)
        logger.info(
            "Added %d of %d videos to playlist %s", succeeded, len(outcome), playlist_id
        )
        return outcome
