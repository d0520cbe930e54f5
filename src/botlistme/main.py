"""
Command line interface for the Botlist.me client.

This module provides the ``botlistme`` command: post stats, look up bots
and users, check votes, or run the vote webhook in the foreground.
Configuration (token, bot id, webhook settings) comes from ``BOTLISTME_*``
environment variables or a ``.env`` file and can be overridden by flags.
"""

import argparse
import asyncio
import signal
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console

from botlistme import __version__
from botlistme.client import BotlistMe
from botlistme.config import load_config, AppConfig
from botlistme.http.models import Vote
from botlistme.utils.exceptions import BotlistMeError
from botlistme.utils.logging import setup_logging, get_logger


console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="botlistme",
        description="Talk to the Botlist.me API",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--token", help="Authorization token (default: BOTLISTME_TOKEN)")
    parser.add_argument("--bot-id", help="Bot ID (default: BOTLISTME_BOT_ID)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    stats = subparsers.add_parser("stats", help="Post server and shard count")
    stats.add_argument("server_count", type=int)
    stats.add_argument("--shards", type=int, dest="shard_count", help="Shard count")

    bot = subparsers.add_parser("bot", help="Show bot information")
    bot.add_argument("id", nargs="?", help="Bot ID (default: --bot-id)")

    user = subparsers.add_parser("user", help="Show user information")
    user.add_argument("id")

    voted = subparsers.add_parser("voted", help="Check whether a user voted in the last 24h")
    voted.add_argument("user_id")

    webhook = subparsers.add_parser("webhook", help="Run the vote webhook until interrupted")
    webhook.add_argument("--port", type=int, help="Port (default: BOTLISTME_WEBHOOK_PORT)")
    webhook.add_argument("--path", help="Path (default: BOTLISTME_WEBHOOK_PATH)")
    webhook.add_argument("--auth", help="Authorization secret (default: BOTLISTME_WEBHOOK_AUTH)")

    return parser


def build_client(config: AppConfig, args: argparse.Namespace) -> BotlistMe:
    """Create the client from configuration with command line overrides."""
    overrides: Dict[str, Any] = {
        "token": args.token,
        "bot_id": args.bot_id,
        "webhook_port": getattr(args, "port", None),
        "webhook_path": getattr(args, "path", None),
        "webhook_auth": getattr(args, "auth", None),
    }
    options = config.client.copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    return BotlistMe(options=options)


async def run_webhook(client: BotlistMe) -> None:
    """Serve the webhook and print every vote until SIGINT/SIGTERM."""
    if client.webhook is None:
        raise BotlistMeError("The webhook needs a port (--port or BOTLISTME_WEBHOOK_PORT)")

    @client.webhook.listen("vote")
    def on_vote(vote: Vote) -> None:
        console.print(f"[green]Vote[/green] from user {vote.user} for bot {vote.bot} ({vote.type})")

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, shutdown_event.set)

    async with client:
        console.print(
            f"Listening for votes on port {client.webhook.port}, path {client.webhook.path}"
        )
        await shutdown_event.wait()


async def run_command(config: AppConfig, args: argparse.Namespace) -> None:
    """Run one subcommand."""
    client = build_client(config, args)

    if args.command == "webhook":
        await run_webhook(client)
    elif args.command == "stats":
        console.print_json(data=await client.post_stats(args.server_count, args.shard_count))
    elif args.command == "bot":
        console.print_json(data=await client.get_bot(args.id))
    elif args.command == "user":
        console.print_json(data=await client.get_user(args.id))
    elif args.command == "voted":
        voted = await client.has_voted(args.user_id)
        console.print(f"User {args.user_id} {'has' if voted else 'has not'} voted")


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the ``botlistme`` command.

    Example:
        ```bash
        BOTLISTME_TOKEN=... botlistme --bot-id 1234 stats 1200 --shards 2
        botlistme voted 5678
        ```
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.logging)
    logger = get_logger(__name__)
    logger.debug("botlistme CLI starting", command=args.command, version=__version__)

    try:
        asyncio.run(run_command(config, args))
    except KeyboardInterrupt:
        sys.exit(0)
    except BotlistMeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Fatal error: {type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
