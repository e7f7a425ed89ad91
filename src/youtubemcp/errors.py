"""Error types and error logging."""

from typing import Optional

from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from .logging_config import get_logger

logger = get_logger(__name__)


def log_error(error: Exception, context: Optional[str] = None) -> None:
    """Log an error with optional context.

    Args:
        error: The exception to log
        context: Optional context about where/why the error occurred
    """
    if context:
        logger.error("%s: %s", context, str(error))
    else:
        logger.error(str(error))


class YouTubeError(Exception):
    """Base class for YouTube API errors."""

    pass


class PlaylistNotFoundError(YouTubeError):
    """Error raised when a playlist is not found."""

    pass


class VideoNotFoundError(YouTubeError):
    """Error raised when a video is not found (private/deleted)."""

    pass


class RateLimitError(YouTubeError):
    """Error raised when rate limit or quota is exceeded."""

    def __init__(self, detail: Optional[str] = None):
        """Initialize error.

        Args:
            detail: Provider message describing the limit that was hit
        """
        self.detail = detail
        if detail:
            super().__init__(f"Rate limit exceeded: {detail}")
        else:
            super().__init__("Rate limit exceeded")


class InvalidVideoReferenceError(YouTubeError):
    """Error raised when input cannot be reduced to a YouTube video ID."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__("Provide a valid YouTube video ID or URL.")


class ConfigurationError(YouTubeError):
    """Error raised when OAuth client configuration is missing or malformed."""

    pass


class AuthenticationError(YouTubeError):
    """Error raised when OAuth credentials cannot be loaded, refreshed or used."""

    pass


def _http_error_message(error: HttpError) -> str:
    reason = getattr(error, "reason", None)
    if reason:
        return str(reason)
    return str(error)


def translate_http_error(error: Exception, playlist_id: Optional[str] = None) -> YouTubeError:
    """Map a provider exception onto the YouTubeError hierarchy.

    Args:
        error: Exception raised by the Google API client
        playlist_id: Playlist the request targeted, for the error message

    Returns:
        The matching YouTubeError subclass instance
    """
    if isinstance(error, YouTubeError):
        return error

    text = str(error)
    message = _http_error_message(error) if isinstance(error, HttpError) else text

    if isinstance(error, RefreshError):
        return AuthenticationError(f"Failed to refresh OAuth token: {text}")
    if isinstance(error, HttpError) and (error.resp.status == 401 or "authError" in text):
        return AuthenticationError(message)
    if "playlistNotFound" in text:
        target = playlist_id or "unknown"
        return PlaylistNotFoundError(f"Playlist {target} not found")
    if "videoNotFound" in text:
        return VideoNotFoundError(message)
    if "quotaExceeded" in text or "rateLimitExceeded" in text:
        return RateLimitError(message)
    return YouTubeError(message)
