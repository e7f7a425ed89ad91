"""YouTube playlist MCP server."""

__version__ = "0.1.0"

# Import all public components
from .api import PlaylistItemSummary, PlaylistSummary, VideoSummary, YouTubeAPI
from .auth import get_youtube_service
from .bulk import BulkPlaylistMutator, OutcomeEntry
from .client import ClientProvider
from .errors import (
    InvalidVideoReferenceError,
    PlaylistNotFoundError,
    YouTubeError,
)
from .logging_config import configure_logging, get_logger
from .video_ids import extract_video_id, is_video_id, normalize_video_id, require_video_id

# Import config variables
from .config import (  # noqa: F401
    YOUTUBE_SCOPES,
    YOUTUBE_CREDENTIALS_PATH,
    YOUTUBE_TOKEN_PATH,
    INSERT_DELAY_SECONDS,
)
