"""
Command-line front end for Multi Search.

Usage:
  multisearch list
  multisearch search "hello world"
  multisearch add Bing "https://bing.com/search?q=%s"
  multisearch edit 1700000000000 --name "Bing (US)"
  multisearch toggle 2
  multisearch remove 2 3
  multisearch export [PATH]
  multisearch import PATH

Store errors are printed to stderr and exit with status 1.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from multisearch.errors import MultiSearchError
from multisearch.services.engine_store import EngineStore, create_engine_store
from multisearch.utils.helpers import load_settings


def get_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per store operation."""
    parser = argparse.ArgumentParser(
        prog="multisearch",
        description="Search everywhere, all at once.",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Settings file (default: $XDG_CONFIG_HOME/multisearch/settings.toml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="Show all engines")

    search = commands.add_parser("search", help="Open the query in every enabled engine")
    search.add_argument("query", nargs="+", help="Text to search for")

    add = commands.add_parser("add", help="Add a search engine")
    add.add_argument("name")
    add.add_argument("url", help="Search URL, %%s marks the query")
    add.add_argument("--icon", default="", help="Icon URL (optional)")

    edit = commands.add_parser("edit", help="Change an engine's name, URL or icon")
    edit.add_argument("id")
    edit.add_argument("--name")
    edit.add_argument("--url")
    edit.add_argument("--icon")

    toggle = commands.add_parser("toggle", help="Enable or disable an engine")
    toggle.add_argument("id")

    remove = commands.add_parser("remove", help="Delete one or more engines")
    remove.add_argument("ids", nargs="*")

    export = commands.add_parser("export", help="Write engines to a JSON file")
    export.add_argument("path", nargs="?", type=Path)

    import_ = commands.add_parser("import", help="Replace engines from a JSON file")
    import_.add_argument("path", type=Path)

    return parser


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def print_engines(store: EngineStore) -> None:
    engines = store.engines
    if not engines:
        print("No search engines. Add one with: multisearch add NAME URL")
        return

    for engine in engines:
        mark = "x" if engine.enabled else " "
        print(f"[{mark}] {engine.id:<14} {engine.name:<20} {engine.url}")


def run(args: argparse.Namespace, store: EngineStore, settings: dict) -> None:
    """Execute one parsed command against the store."""
    if args.command == "list":
        print_engines(store)

    elif args.command == "search":
        urls = store.dispatch_query(" ".join(args.query))
        for url in urls:
            print(f"Opened {url}")

    elif args.command == "add":
        engine = store.add_engine(args.name, args.url, args.icon)
        print(f"Added {engine.name} ({engine.id})")

    elif args.command == "edit":
        current = store.get(args.id)
        if current is None:
            print(f"No engine with id {args.id}")
            return
        engine = store.edit_engine(
            args.id,
            args.name if args.name is not None else current.name,
            args.url if args.url is not None else current.url,
            args.icon if args.icon is not None else current.icon,
        )
        print(f"Updated {engine.name} ({engine.id})")

    elif args.command == "toggle":
        store.toggle_enabled(args.id)
        engine = store.get(args.id)
        if engine is None:
            print(f"No engine with id {args.id}")
        else:
            print(f"{engine.name} is now {'enabled' if engine.enabled else 'disabled'}")

    elif args.command == "remove":
        removed = store.remove_many(args.ids)
        print(f"Deleted {removed} site(s)")

    elif args.command == "export":
        path = args.path or Path(settings["export"]["filename"])
        store.export_to_file(path)
        print(f"Exported {len(store.engines)} engines to {path}")

    elif args.command == "import":
        engines = store.import_from_file(args.path)
        print(f"Imported {len(engines)} engines from {args.path}")


def main(argv: Optional[list] = None) -> int:
    """Entry point. Returns the process exit status."""
    args = get_parser().parse_args(argv)
    configure_logging(args.verbose)

    settings = load_settings(args.config)
    store = create_engine_store(settings)

    try:
        run(args, store, settings)
    except MultiSearchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0
