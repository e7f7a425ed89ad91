"""YouTube API authentication handling.

Client configuration and tokens are read from the environment first and
from JSON files second. Tokens use the ``access_token`` / ``refresh_token``
/ ``expiry_date`` (milliseconds since epoch) layout so token files can be
shared with other OAuth tooling.
"""

import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from . import config
from .errors import AuthenticationError, ConfigurationError
from .logging_config import get_logger

logger = get_logger(__name__)

TOKEN_WRITE_INDENT = 2


def resolve_path(value: str) -> str:
    """Resolve a possibly relative path against the working directory."""
    if os.path.isabs(value):
        return value
    return os.path.abspath(os.path.join(os.getcwd(), value))


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def _client_config_from_env() -> Optional[Dict[str, Any]]:
    client_id = _env("YOUTUBE_CLIENT_ID")
    client_secret = _env("YOUTUBE_CLIENT_SECRET")
    redirect_uris_raw = _env("YOUTUBE_REDIRECT_URIS")

    if not client_id or not client_secret or not redirect_uris_raw:
        return None

    redirect_uris = [uri.strip() for uri in redirect_uris_raw.split(",") if uri.strip()]
    if not redirect_uris:
        raise ConfigurationError(
            "YOUTUBE_REDIRECT_URIS must contain at least one URI (comma-separated)."
        )

    return {
        "client_id": client_id,
        "client_secret": client_secret,
        "redirect_uris": redirect_uris,
        "token_uri": config.GOOGLE_TOKEN_URI,
    }


def load_client_config() -> Dict[str, Any]:
    """Load OAuth client configuration.

    Precedence: the YOUTUBE_CLIENT_ID / YOUTUBE_CLIENT_SECRET /
    YOUTUBE_REDIRECT_URIS variables, then YOUTUBE_CREDENTIALS_JSON, then the
    credentials file.

    Returns:
        Dictionary with client_id, client_secret, redirect_uris and token_uri

    Raises:
        ConfigurationError: If no usable configuration is found
    """
    env_config = _client_config_from_env()
    if env_config:
        return env_config

    raw = _env("YOUTUBE_CREDENTIALS_JSON")
    if raw is None:
        path = resolve_path(config.YOUTUBE_CREDENTIALS_PATH)
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read OAuth credentials file {path}: {e}") from e

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            "Failed to parse YouTube OAuth credentials JSON. Ensure the value is valid JSON."
        ) from e

    client = parsed.get("installed") or parsed.get("web")
    if not client:
        raise ConfigurationError(
            "Invalid OAuth credentials file: missing 'installed' or 'web' configuration."
        )

    if (
        not client.get("client_id")
        or not client.get("client_secret")
        or not client.get("redirect_uris")
    ):
        raise ConfigurationError(
            "Invalid OAuth credentials file: missing client details or redirect URIs."
        )

    return {
        "client_id": client["client_id"],
        "client_secret": client["client_secret"],
        "redirect_uris": list(client["redirect_uris"]),
        "token_uri": client.get("token_uri", config.GOOGLE_TOKEN_URI),
    }


def load_token() -> Dict[str, Any]:
    """Load the stored OAuth token.

    Precedence: the YOUTUBE_ACCESS_TOKEN / YOUTUBE_REFRESH_TOKEN pair, then
    YOUTUBE_TOKEN_JSON, then the token file.

    Returns:
        Token dictionary

    Raises:
        ConfigurationError: If the token is missing or malformed
    """
    access_token = _env("YOUTUBE_ACCESS_TOKEN")
    refresh_token = _env("YOUTUBE_REFRESH_TOKEN")

    if access_token and refresh_token:
        expiry_raw = _env("YOUTUBE_TOKEN_EXPIRY")
        expiry_date = None
        if expiry_raw:
            try:
                expiry_date = int(expiry_raw)
            except ValueError as e:
                raise ConfigurationError(
                    "YOUTUBE_TOKEN_EXPIRY must be a numeric timestamp "
                    "(milliseconds since epoch)."
                ) from e

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "scope": _env("YOUTUBE_SCOPE"),
            "token_type": _env("YOUTUBE_TOKEN_TYPE"),
            "expiry_date": expiry_date,
        }

    raw = _env("YOUTUBE_TOKEN_JSON")
    if raw is not None:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                "Failed to parse YouTube OAuth token JSON. Ensure the value is valid JSON."
            ) from e

    path = resolve_path(config.YOUTUBE_TOKEN_PATH)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read OAuth token file {path}. Run 'youtubemcp init-token' first."
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"OAuth token file {path} is not valid JSON.") from e


def persist_token(token: Dict[str, Any]) -> None:
    """Merge a refreshed token into the token file.

    Skipped when YOUTUBE_TOKEN_JSON is set, so a deployment secret is never
    shadowed by a local file. Failures are logged, not raised.

    Args:
        token: Token fields to write
    """
    if os.getenv("YOUTUBE_TOKEN_JSON"):
        logger.warning(
            "Detected YOUTUBE_TOKEN_JSON environment variable; skipping token persistence "
            "to avoid diverging from deployment secret."
        )
        return

    path = resolve_path(config.YOUTUBE_TOKEN_PATH)

    merged = dict(token)
    try:
        with open(path, "r", encoding="utf-8") as f:
            existing = json.load(f)
        merged = {**existing, **token}
    except (OSError, json.JSONDecodeError):
        # Missing or unreadable file: write the token as-is
        pass

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(merged, f, indent=TOKEN_WRITE_INDENT)
    except OSError as e:
        logger.warning("Failed to persist refreshed OAuth token: %s", str(e))


def _expiry_from_millis(expiry_date: Optional[int]) -> Optional[datetime]:
    if not expiry_date:
        return None
    # google-auth compares against naive UTC datetimes
    return datetime.fromtimestamp(expiry_date / 1000, tz=timezone.utc).replace(tzinfo=None)


def _expiry_to_millis(expiry: Optional[datetime]) -> Optional[int]:
    if expiry is None:
        return None
    return int(expiry.replace(tzinfo=timezone.utc).timestamp() * 1000)


def credentials_to_token(creds: Credentials) -> Dict[str, Any]:
    """Serialize credentials into the stored token layout."""
    token = {
        "access_token": creds.token,
        "refresh_token": creds.refresh_token,
        "scope": " ".join(creds.scopes) if creds.scopes else None,
        "token_type": "Bearer",
        "expiry_date": _expiry_to_millis(creds.expiry),
    }
    return {key: value for key, value in token.items() if value is not None}


class PersistingCredentials(Credentials):
    """OAuth credentials that write every refreshed token back to storage.

    Refreshes made by the authorized transport after the client is built
    go through here as well.
    """

    def refresh(self, request) -> None:
        super().refresh(request)
        logger.info("Refreshed YouTube OAuth token")
        persist_token(credentials_to_token(self))


def build_credentials(client_config: Dict[str, Any], token: Dict[str, Any]) -> Credentials:
    """Create Google credentials from client configuration and a stored token."""
    scope = token.get("scope")
    return PersistingCredentials(
        token=token.get("access_token"),
        refresh_token=token.get("refresh_token"),
        token_uri=client_config["token_uri"],
        client_id=client_config["client_id"],
        client_secret=client_config["client_secret"],
        scopes=scope.split() if scope else None,
        expiry=_expiry_from_millis(token.get("expiry_date")),
    )


def get_credentials() -> Credentials:
    """Get valid OAuth credentials, refreshing them if expired.

    Every refresh, including those made later by the authorized transport,
    is persisted through ``PersistingCredentials``.

    Raises:
        ConfigurationError: If client configuration or token is unusable
        AuthenticationError: If the token cannot be refreshed
    """
    client_config = load_client_config()
    token = load_token()
    creds = build_credentials(client_config, token)

    if not creds.valid:
        if not creds.refresh_token:
            raise AuthenticationError("OAuth token expired and no refresh token is available")
        try:
            creds.refresh(Request())
        except RefreshError as e:
            raise AuthenticationError(f"Failed to refresh OAuth token: {str(e)}") from e

    return creds


def get_youtube_service():
    """Get an authenticated YouTube Data API v3 service object.

    Raises:
        ConfigurationError: If client configuration or token is unusable
        AuthenticationError: If the service cannot be created
    """
    creds = get_credentials()
    try:
        return build("youtube", "v3", credentials=creds, cache_discovery=False)
    except Exception as e:
        raise AuthenticationError(f"Failed to build YouTube service: {str(e)}") from e


def init_token() -> str:
    """Run the interactive OAuth flow and save the resulting token.

    Returns:
        Path of the written token file
    """
    credentials_path = resolve_path(config.YOUTUBE_CREDENTIALS_PATH)
    token_path = resolve_path(config.YOUTUBE_TOKEN_PATH)

    flow = InstalledAppFlow.from_client_secrets_file(credentials_path, config.YOUTUBE_SCOPES)
    creds = flow.run_local_server(port=0)
    if not creds or not creds.token:
        raise AuthenticationError("Authentication succeeded but no credentials were returned.")

    token_dir = os.path.dirname(token_path)
    if token_dir:
        os.makedirs(token_dir, exist_ok=True)
    with open(token_path, "w", encoding="utf-8") as f:
        json.dump(credentials_to_token(creds), f, indent=TOKEN_WRITE_INDENT)

    logger.info("Saved tokens to %s", token_path)
    return token_path
