"""
Main entry point for rssd.

Parses the command line, makes sure a configuration file exists, and runs
the requested subcommand. Errors are reported once, here, and mapped to
the process exit code.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import coloredlogs
from rich.console import Console
from rich.table import Table

from rssd import __version__
from rssd.config import default_config_path
from rssd.errors import RssdError
from rssd.store import ConfigStore
from rssd.sync import run_once

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


def setup_logging(verbose: bool = False) -> None:
    """
    Configure application logging.

    Parameters
    ----------
    verbose : bool
        If True, set log level to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO

    coloredlogs.install(
        level=level,
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def cmd_sync(store: ConfigStore, args: argparse.Namespace) -> None:
    """Synchronize all watched feeds once."""
    asyncio.run(run_once(store, deadline=args.deadline))


def cmd_add_feed(store: ConfigStore, args: argparse.Namespace) -> None:
    """Add a feed to the watch-list."""
    config = store.load()
    config.add_feed(args.url)
    store.save(config)
    logger.info("Added feed %s", args.url)


def cmd_remove_feed(store: ConfigStore, args: argparse.Namespace) -> None:
    """Remove a feed from the watch-list."""
    config = store.load()
    config.remove_feed(args.url)
    store.save(config)
    logger.info("Removed feed %s", args.url)


def cmd_list_feed(store: ConfigStore, args: argparse.Namespace) -> None:
    """Print the watch-list with each feed's watermark."""
    config = store.load()

    table = Table()
    table.add_column("Feed", overflow="fold")
    table.add_column("Last", overflow="fold")
    for feed in config.feeds:
        table.add_row(feed.url, feed.last_seen_id)

    Console().print(table)


def cmd_set_exec(store: ConfigStore, args: argparse.Namespace) -> None:
    """Set the command template."""
    config = store.load()
    config.command_template = args.template
    store.save(config)
    logger.info("Command template set")


def cmd_show_exec(store: ConfigStore, args: argparse.Namespace) -> None:
    """Print the command template."""
    config = store.load()
    print(config.command_template)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="rssd",
        description="Run a command whenever a watched RSS/Atom feed publishes a new entry",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: $XDG_CONFIG_HOME/rssd/config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.set_defaults(func=cmd_sync, deadline=60.0)

    subparsers = parser.add_subparsers(title="commands", metavar="COMMAND")

    sync_parser = subparsers.add_parser("sync", help="Check all feeds once (default)")
    sync_parser.add_argument(
        "--deadline",
        type=float,
        default=60.0,
        help="Seconds allowed to fetch each feed",
    )
    sync_parser.set_defaults(func=cmd_sync)

    add_parser = subparsers.add_parser("add-feed", help="Watch a new feed")
    add_parser.add_argument("url", help="Feed URL")
    add_parser.set_defaults(func=cmd_add_feed)

    remove_parser = subparsers.add_parser("remove-feed", help="Stop watching a feed")
    remove_parser.add_argument("url", help="Feed URL")
    remove_parser.set_defaults(func=cmd_remove_feed)

    list_parser = subparsers.add_parser("list-feed", help="List watched feeds")
    list_parser.set_defaults(func=cmd_list_feed)

    set_exec_parser = subparsers.add_parser("set-exec", help="Set the command template")
    set_exec_parser.add_argument("template", help="Shell command template")
    set_exec_parser.set_defaults(func=cmd_set_exec)

    show_exec_parser = subparsers.add_parser("show-exec", help="Print the command template")
    show_exec_parser.set_defaults(func=cmd_show_exec)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        config_path = args.config or default_config_path()
        store = ConfigStore(config_path)
        store.bootstrap()
        args.func(store, args)
    except RssdError as e:
        logger.error("%s", e)
        return e.exit_code
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED

    return 0


if __name__ == "__main__":
    sys.exit(main())
