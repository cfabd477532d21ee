#!/usr/bin/env python3
"""
SormBot entrypoint - runs the Telegram bot, the HTTP API, or initializes the database.
"""

import argparse
import sqlite3
import sys
from dataclasses import replace

from .core.config import load_settings, validate_settings
from .core.context import build_context
from .core.errors import SormBotError
from .util.logging import StructuredLogger


def _startup(settings, require_token: bool):
    """Validate settings and open the database. Exits the process on failure."""
    logger = StructuredLogger(level=settings.log_level, log_file=settings.log_file)

    issues = validate_settings(settings, require_token=require_token)
    if issues:
        for issue in issues:
            logger.critical(f"Configuration error: {issue}")
        sys.exit(1)

    try:
        return build_context(settings, logger)
    except (sqlite3.Error, SormBotError, OSError) as e:
        logger.critical(f"Database error: {e}")
        sys.exit(1)


def run_bot(settings) -> int:
    from .bot.telegram_bot import SormBot

    context = _startup(settings, require_token=True)
    try:
        SormBot(context).run()
    finally:
        context.close()
    return 0


def serve_api(settings) -> int:
    import uvicorn

    from .api.main import create_app

    context = _startup(settings, require_token=False)
    try:
        uvicorn.run(create_app(context), host=settings.api_host, port=settings.api_port)
    finally:
        context.close()
    return 0


def init_db(settings) -> int:
    context = _startup(settings, require_token=False)
    healthy = context.database.health_check()
    context.logger.info(f"Database ready at {settings.db_path} (healthy={healthy})")
    context.close()
    return 0 if healthy else 1


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="SormGPT question/answer bot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s run                 # Start the Telegram bot (long polling)
  %(prog)s serve --port 8080   # Serve the HTTP API
  %(prog)s init-db             # Create the database tables and exit

Environment variables:
- TELEGRAM_BOT_TOKEN (required for run)
- DB_PATH=./data/bot.db (database location)
- LOG_LEVEL=INFO, LOG_FILE=bot.log
        """
    )
    parser.add_argument(
        "--db-path",
        help="Override DB_PATH"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("run", help="Run the Telegram bot")
    serve = subparsers.add_parser("serve", help="Serve the HTTP API")
    serve.add_argument("--host", help="Override API_HOST")
    serve.add_argument("--port", type=int, help="Override API_PORT")
    subparsers.add_parser("init-db", help="Create database tables and exit")

    args = parser.parse_args(argv)

    settings = load_settings()
    if args.db_path:
        settings = replace(settings, db_path=args.db_path)
    if args.verbose:
        settings = replace(settings, log_level="DEBUG")

    try:
        if args.command == "run":
            return run_bot(settings)
        if args.command == "serve":
            if args.host:
                settings = replace(settings, api_host=args.host)
            if args.port:
                settings = replace(settings, api_port=args.port)
            return serve_api(settings)
        return init_db(settings)
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
