"""Command-line interface for the YouTube MCP server."""

import argparse
import sys

from . import auth, config
from .errors import YouTubeError
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(description="YouTube playlist MCP server")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the MCP server")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http"],
        default=config.MCP_TRANSPORT,
        help="MCP transport (default: %(default)s)",
    )
    serve_parser.add_argument("--host", default=config.MCP_HOST, help="HTTP bind address")
    serve_parser.add_argument("--port", type=int, default=config.MCP_PORT, help="HTTP bind port")

    # Token initialization command
    subparsers.add_parser("init-token", help="Authorize with Google and save an OAuth token")

    # Web chat command
    web_parser = subparsers.add_parser("web", help="Run the web chat front end")
    web_parser.add_argument("--host", default=config.WEB_HOST, help="HTTP bind address")
    web_parser.add_argument("--port", type=int, default=config.WEB_PORT, help="HTTP bind port")

    return parser


def run_web(host: str, port: int) -> None:
    """Serve the chat front end with uvicorn."""
    import uvicorn

    from .chat import app

    uvicorn.run(app, host=host, port=port)


def main() -> int:
    """Main entry point.

    Returns:
        int: Exit code
    """
    parser = create_parser()
    try:
        args = parser.parse_args(args=None if sys.argv[1:] else ["--help"])
    except SystemExit as e:
        return 1 if e.code == 2 else e.code

    configure_logging(debug=args.debug)

    try:
        if args.command == "serve":
            from . import server

            server.run(transport=args.transport, host=args.host, port=args.port)
            return 0
        elif args.command == "init-token":
            auth.init_token()
            return 0
        elif args.command == "web":
            run_web(args.host, args.port)
            return 0
        else:
            parser.print_help()
            return 1
    except YouTubeError as e:
        logger.error("Command failed: %s", str(e))
        return 1
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logger.error("Command failed: %s", str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
