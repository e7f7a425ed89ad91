"""Configuration and environment settings."""

import os
from dotenv import load_dotenv

load_dotenv()

# YouTube OAuth Settings
YOUTUBE_SCOPES = [
    "https://www.googleapis.com/auth/youtube",
    "https://www.googleapis.com/auth/youtube.readonly",
    "https://www.googleapis.com/auth/youtube.force-ssl",
    "https://www.googleapis.com/auth/youtubepartner-channel-audit",
]
YOUTUBE_CREDENTIALS_PATH = os.getenv("YOUTUBE_CREDENTIALS_PATH", "credentials.json")
YOUTUBE_TOKEN_PATH = os.getenv("YOUTUBE_TOKEN_PATH", "token.json")
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

# MCP Server Settings
MCP_SERVER_NAME = "youtube-mcp-server"
MCP_TRANSPORT = os.getenv("MCP_TRANSPORT", "stdio")
MCP_HOST = os.getenv("MCP_HOST", "127.0.0.1")
MCP_PORT = int(os.getenv("MCP_PORT", "3000"))

# Playlist Mutation Settings
INSERT_DELAY_SECONDS = float(os.getenv("INSERT_DELAY_SECONDS", "0.25"))
DEFAULT_MAX_RESULTS = 10
MAX_RESULTS_LIMIT = 50  # YouTube API page size ceiling

# Web Chat Settings
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")
MCP_SERVER_URL = os.getenv("MCP_SERVER_URL")
WEB_HOST = os.getenv("WEB_HOST", "127.0.0.1")
WEB_PORT = int(os.getenv("WEB_PORT", "8000"))
CHAT_TEMPERATURE = 0.4
CHAT_MAX_STEPS = 4
