"""Lazily created, shared YouTube API client."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from . import auth
from .api import YouTubeAPI
from .errors import AuthenticationError, log_error
from .logging_config import get_logger

logger = get_logger(__name__)


def create_youtube_api() -> YouTubeAPI:
    """Build an authenticated YouTubeAPI wrapper."""
    return YouTubeAPI(auth.get_youtube_service())


class ClientProvider:
    """Owns the authenticated YouTubeAPI for the lifetime of a server.

    The first successful acquisition is cached and reused. A failed
    acquisition leaves nothing cached, so the next call starts over, and
    an authentication failure while using the client drops it as well.
    """

    def __init__(self, factory: Optional[Callable[[], YouTubeAPI]] = None):
        """Initialize provider.

        Args:
            factory: Blocking callable creating the client; defaults to
                building one from the configured OAuth credentials
        """
        self._factory = factory or create_youtube_api
        self._client: Optional[YouTubeAPI] = None
        self._lock = asyncio.Lock()

    @property
    def cached(self) -> bool:
        return self._client is not None

    async def get(self) -> YouTubeAPI:
        """Return the cached client, creating it on first use.

        Raises:
            ConfigurationError: If OAuth configuration is unusable
            AuthenticationError: If the client cannot be authenticated
        """
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._client is None:
                try:
                    self._client = await asyncio.to_thread(self._factory)
                except Exception as e:
                    log_error(e, "Failed to create YouTube client")
                    raise
                logger.info("YouTube client initialized")
        return self._client

    def reset(self) -> None:
        """Drop the cached client so the next call re-authenticates."""
        self._client = None

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[YouTubeAPI]:
        """Yield the client, resetting it if its credentials are rejected.

        Raises:
            ConfigurationError: If OAuth configuration is unusable
            AuthenticationError: If the client cannot be authenticated
        """
        client = await self.get()
        try:
            yield client
        except AuthenticationError as e:
            logger.warning("Discarding YouTube client after authentication failure: %s", str(e))
            self.reset()
            raise
