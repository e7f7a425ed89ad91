"""YouTube video reference normalization.

Users paste many link shapes: bare IDs, watch URLs, youtu.be short links,
embed and shorts URLs, or text containing a ``v=`` query parameter. Every
shape is reduced to the canonical 11-character video ID by trying a fixed
chain of matchers. Each matcher is total: it returns the ID or ``None`` and
never raises.
"""

import re
from typing import Callable, List, Optional
from urllib.parse import parse_qs, urlsplit

from .errors import InvalidVideoReferenceError

VIDEO_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{11}")
SHORT_LINK_HOST = "youtu.be"

# The trailing lookahead rejects IDs glued to further ID characters.
_QUERY_ID_PATTERN = re.compile(r"[?&]v=([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])")
_EMBED_ID_PATTERN = re.compile(r"embed/([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])")

Matcher = Callable[[str], Optional[str]]


def is_video_id(value: str) -> bool:
    """Check whether a value is exactly an 11-character video ID."""
    return bool(VIDEO_ID_PATTERN.fullmatch(value))


def _match_bare_id(value: str) -> Optional[str]:
    return value if is_video_id(value) else None


def _match_url(value: str) -> Optional[str]:
    """Match the structured parts of an absolute URL."""
    try:
        parsed = urlsplit(value)
        hostname = parsed.hostname or ""
    except ValueError:
        return None

    if not parsed.scheme or not hostname:
        return None

    query_ids = parse_qs(parsed.query).get("v")
    if query_ids and is_video_id(query_ids[0]):
        return query_ids[0]

    if "youtu" not in hostname:
        return None

    segments = [segment for segment in parsed.path.split("/") if segment]
    if not segments:
        return None

    if hostname == SHORT_LINK_HOST and is_video_id(segments[0]):
        return segments[0]

    if len(segments) >= 2 and segments[0] in ("embed", "shorts") and is_video_id(segments[1]):
        return segments[1]

    return None


def _match_query_pattern(value: str) -> Optional[str]:
    match = _QUERY_ID_PATTERN.search(value)
    return match.group(1) if match else None


def _match_embed_pattern(value: str) -> Optional[str]:
    match = _EMBED_ID_PATTERN.search(value)
    return match.group(1) if match else None


MATCHERS: List[Matcher] = [
    _match_bare_id,
    _match_url,
    _match_query_pattern,
    _match_embed_pattern,
]


def extract_video_id(value: str) -> Optional[str]:
    """Extract a video ID from any supported reference.

    Args:
        value: Video ID, YouTube URL or text containing one

    Returns:
        The 11-character video ID, or None if the reference is not recognized
    """
    trimmed = value.strip()
    for matcher in MATCHERS:
        video_id = matcher(trimmed)
        if video_id is not None:
            return video_id
    return None


def normalize_video_id(value: str) -> str:
    """Normalize a video reference, passing unrecognized input through.

    The result is only guaranteed to be a video ID when ``is_video_id``
    holds for it; callers needing a strict ID use ``require_video_id``.

    Args:
        value: Video ID, YouTube URL or text containing one

    Returns:
        The video ID, or the trimmed input if nothing matched
    """
    video_id = extract_video_id(value)
    if video_id is None:
        return value.strip()
    return video_id


def require_video_id(value: str) -> str:
    """Normalize a video reference and reject anything that is not an ID.

    Args:
        value: Video ID, YouTube URL or text containing one

    Returns:
        The 11-character video ID

    Raises:
        InvalidVideoReferenceError: If the reference cannot be normalized
    """
    normalized = normalize_video_id(value)
    if not is_video_id(normalized):
        raise InvalidVideoReferenceError(value)
    return normalized
