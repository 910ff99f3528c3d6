#!/usr/bin/env python3
"""
Quote Sync CLI

Main command-line interface for the quote collection.
"""

import argparse
import logging
import shlex
import sys
from pathlib import Path

from .app import QuoteApp
from .models import KEEP_LOCAL, KEEP_SERVER
from .remote import RemoteQuoteSource
from .storage import PersistentStore
from . import config


def _setup_logging():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s"
    )


def _make_app() -> QuoteApp:
    app = QuoteApp(on_status=lambda message: print(message))
    app.start()
    return app


def _prompt_conflicts(app: QuoteApp, default_choice=None):
    """Ask which side wins for every pending conflict."""
    for record in app.conflicts:
        print(f"\nConflict: \"{record.local.text}\"")
        print(f"  local:  {record.local.category}")
        print(f"  server: {record.server.category}")
        choice = default_choice
        while choice not in (KEEP_LOCAL, KEEP_SERVER):
            answer = input("Keep [l]ocal or [s]erver? ").strip().lower()
            choice = {"l": KEEP_LOCAL, "s": KEEP_SERVER}.get(answer[:1])
        app.resolve(record, choice)


def cmd_show(args):
    """Show a random quote."""
    app = _make_app()
    pick = app.show_quote(args.category)
    if pick.available:
        print(pick.display())
    return 0 if pick.available else 1


def cmd_add(args):
    """Add a quote."""
    app = _make_app()
    return 0 if app.add_quote(args.text, args.category) else 1


def cmd_categories(args):
    """List categories."""
    app = _make_app()
    current = app.get_filter()

    print("\n=== Categories ===\n")
    for category in app.categories():
        marker = "*" if category == current else " "
        print(f" {marker} {category}")
    return 0


def cmd_filter(args):
    """Show or set the category filter."""
    app = _make_app()
    if args.value is not None:
        app.set_filter(args.value)
    print(app.display_status())
    return 0


def cmd_export(args):
    """Export quotes to quotes.json."""
    app = _make_app()
    return 0 if app.export_quotes(args.dir) else 1


def cmd_import(args):
    """Import quotes from a JSON file."""
    app = _make_app()
    return 0 if app.import_quotes(Path(args.file)) is not None else 1


def cmd_sync(args):
    """Run a sync and resolve conflicts."""
    app = _make_app()
    result = app.sync_now()

    default_choice = None
    if args.keep_server:
        default_choice = KEEP_SERVER
    elif args.keep_local:
        default_choice = KEEP_LOCAL
    _prompt_conflicts(app, default_choice)

    return 0 if not result.errors else 1


def cmd_post(args):
    """Post a quote to the server."""
    app = _make_app()
    echo = app.post_quote(args.text, args.category)
    if echo is None:
        return 1
    print(echo)
    return 0


def cmd_status(args):
    """Show collection and sync status."""
    storage = PersistentStore()
    app = QuoteApp(storage=storage)
    app.start()

    print("\n=== Quote Status ===\n")
    print(f"Quotes: {len(app.quotes)}")
    print(f"Categories: {len(app.categories()) - 1}")
    print(app.display_status())
    print()
    print("Sync State:")
    for key, value in storage.get_stats().items():
        print(f"  {key}: {value}")

    logs = storage.get_recent_logs(5)
    if logs:
        print("\nRecent Activity:")
        for log in logs:
            print(f"  [{log['timestamp']}] {log['action']}")

    return 0


def cmd_test(args):
    """Test the connection to the remote."""
    print("\n=== Connection Test ===\n")
    remote = RemoteQuoteSource()
    print(f"Testing {remote.url}...")
    if remote.test_connection():
        print("  ✓ Connected.")
        return 0
    print("  ✗ Connection failed.")
    return 1


SHELL_HELP = """Commands:
  next                    show a random quote
  filter [CATEGORY|all]   show or set the category filter
  categories              list categories
  add TEXT CATEGORY       add a quote (quote multi-word values)
  export [DIR]            write quotes.json
  import FILE             merge a JSON file
  sync                    sync with the server now
  auto on|off             toggle auto-sync
  conflicts               list pending conflicts
  resolve N local|server  settle conflict N
  post TEXT CATEGORY      send a quote to the server
  quit                    leave the shell"""


def cmd_shell(args):
    """Interactive session with optional auto-sync."""
    app = QuoteApp(on_status=lambda message: print(message))
    last = app.start()
    print(last.display() if last else app.show_quote().display())

    if args.auto_sync:
        app.set_auto_sync(True)

    try:
        while True:
            try:
                line = input("quotes> ")
            except EOFError:
                break
            try:
                words = shlex.split(line)
            except ValueError as e:
                print(f"Parse error: {e}")
                continue
            if not words:
                continue
            command, rest = words[0], words[1:]

            if command in ("quit", "exit"):
                break
            elif command == "help":
                print(SHELL_HELP)
            elif command == "next":
                print(app.show_quote().display())
            elif command == "filter":
                if rest:
                    app.set_filter(rest[0])
                print(app.display_status())
            elif command == "categories":
                print(", ".join(app.categories()))
            elif command == "add" and len(rest) == 2:
                app.add_quote(rest[0], rest[1])
            elif command == "export":
                app.export_quotes(Path(rest[0]) if rest else None)
            elif command == "import" and len(rest) == 1:
                app.import_quotes(Path(rest[0]))
            elif command == "sync":
                app.sync_now()
            elif command == "auto" and rest and rest[0] in ("on", "off"):
                app.set_auto_sync(rest[0] == "on")
            elif command == "conflicts":
                conflicts = app.conflicts
                if not conflicts:
                    print("No pending conflicts.")
                for n, record in enumerate(conflicts):
                    print(f"  {n}: {record}")
            elif command == "resolve" and len(rest) == 2 and rest[0].isdigit():
                conflicts = app.conflicts
                n = int(rest[0])
                if n >= len(conflicts):
                    print(f"No conflict {n}.")
                else:
                    app.resolve(conflicts[n], rest[1])
            elif command == "post" and len(rest) == 2:
                echo = app.post_quote(rest[0], rest[1])
                if echo is not None:
                    print(echo)
            else:
                print(SHELL_HELP)
    finally:
        app.shutdown()

    return 0


def cmd_clear_state(args):
    """Clear all stored state (for debugging)."""
    if not args.yes:
        response = input("This will delete all stored quotes. Type 'CLEAR' to confirm: ")
        if response != "CLEAR":
            print("Cancelled.")
            return 1

    PersistentStore().clear_all()
    print("Stored state cleared.")
    return 0


def cmd_config(args):
    """Show current configuration."""
    config.print_config()
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Quote collection with server sync",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show a random quote
  quotesync show

  # Add a quote
  quotesync add "Stay hungry, stay foolish." Motivation

  # Only show quotes from one category
  quotesync filter Life

  # Sync with the server, keeping server versions on conflict
  quotesync sync --keep-server

  # Interactive session with auto-sync every 30 seconds
  quotesync shell --auto-sync
"""
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show", help="Show a random quote")
    show_parser.add_argument(
        "--category", "-c",
        help="Category to pick from (default: the saved filter)"
    )

    add_parser = subparsers.add_parser("add", help="Add a quote")
    add_parser.add_argument("text", help="Quote text")
    add_parser.add_argument("category", help="Quote category")

    subparsers.add_parser("categories", help="List categories")

    filter_parser = subparsers.add_parser("filter", help="Show or set the category filter")
    filter_parser.add_argument("value", nargs="?", help="Category, or 'all'")

    export_parser = subparsers.add_parser("export", help="Export quotes to quotes.json")
    export_parser.add_argument(
        "--dir", "-d",
        type=Path,
        help="Directory for quotes.json (default: QUOTESYNC_EXPORT_DIR)"
    )

    import_parser = subparsers.add_parser("import", help="Import quotes from a JSON file")
    import_parser.add_argument("file", help="Path to a JSON array of quotes")

    sync_parser = subparsers.add_parser("sync", help="Sync with the server")
    choice_group = sync_parser.add_mutually_exclusive_group()
    choice_group.add_argument(
        "--keep-server",
        action="store_true",
        help="Resolve every conflict with the server version"
    )
    choice_group.add_argument(
        "--keep-local",
        action="store_true",
        help="Resolve every conflict with the local version"
    )

    post_parser = subparsers.add_parser("post", help="Post a quote to the server")
    post_parser.add_argument("text", help="Quote text")
    post_parser.add_argument("category", help="Quote category")

    subparsers.add_parser("status", help="Show collection and sync status")

    subparsers.add_parser("test", help="Test the connection to the server")

    shell_parser = subparsers.add_parser("shell", help="Interactive session")
    shell_parser.add_argument(
        "--auto-sync", "-a",
        action="store_true",
        help="Sync periodically (QUOTESYNC_AUTO_SYNC_INTERVAL)"
    )

    clear_parser = subparsers.add_parser("clear-state", help="Clear stored state (debug)")
    clear_parser.add_argument("--yes", "-y", action="store_true")

    subparsers.add_parser("config", help="Show current configuration")

    args = parser.parse_args()
    _setup_logging()

    # Dispatch to command handler
    commands = {
        "show": cmd_show,
        "add": cmd_add,
        "categories": cmd_categories,
        "filter": cmd_filter,
        "export": cmd_export,
        "import": cmd_import,
        "sync": cmd_sync,
        "post": cmd_post,
        "status": cmd_status,
        "test": cmd_test,
        "shell": cmd_shell,
        "clear-state": cmd_clear_state,
        "config": cmd_config,
    }

    handler = commands.get(args.command)
    if handler:
        sys.exit(handler(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
