"""Command line entry point for quotesync.

Configuration comes from ``QUOTESYNC_*`` environment variables (see
:meth:`quotesync.config.SyncConfig.from_env`); ``--storage`` overrides the
storage file.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from quotesync.client import QuoteSyncClient
from quotesync.config import SyncConfig
from quotesync.exceptions import QuoteSyncError
from quotesync.models.report import SyncReport
from quotesync.state.backends import JsonFileBackend
from quotesync.state.store import LocalStore
from quotesync.transfer import export_file, import_file


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quotesync", description="Sync a local quote collection with a remote service.")
    parser.add_argument("--storage", help="Storage file (default: $QUOTESYNC_STORAGE_PATH or quotes.json)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("sync", help="Run one sync cycle")

    list_cmd = sub.add_parser("list", help="Print the local collection")
    list_cmd.add_argument("--category", help="Only quotes in this category ('all' for every quote)")

    add_cmd = sub.add_parser("add", help="Add an unsynced quote")
    add_cmd.add_argument("text")
    add_cmd.add_argument("category")

    import_cmd = sub.add_parser("import", help="Import quotes from a JSON file")
    import_cmd.add_argument("file")

    export_cmd = sub.add_parser("export", help="Export quotes to a JSON file")
    export_cmd.add_argument("file")

    watch_cmd = sub.add_parser("watch", help="Sync periodically until interrupted")
    watch_cmd.add_argument("--interval", type=float, help="Seconds between cycles (default: config poll_interval)")
    return parser


def _print_report(report: SyncReport) -> None:
    print(report.summary())
    for error in report.errors:
        print(f"  {error.kind}: {error.message}")


def _open_store(config: SyncConfig) -> LocalStore:
    store = LocalStore(JsonFileBackend(config.storage_path), key=config.storage_key)
    store.load()
    return store


async def _sync_once(config: SyncConfig) -> int:
    async with QuoteSyncClient(config) as client:
        report = await client.run_cycle()
    _print_report(report)
    return 0 if report.ok else 1


async def _watch(config: SyncConfig) -> int:
    async with QuoteSyncClient(config, on_report=_print_report) as client:
        _print_report(await client.run_cycle())
        await asyncio.Event().wait()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, object] = {"periodic_enabled": args.command == "watch"}
    if args.storage:
        overrides["storage_path"] = args.storage
    if args.command == "watch" and args.interval is not None:
        overrides["poll_interval"] = args.interval

    try:
        config = SyncConfig.from_env(**overrides)
        if args.command == "sync":
            return asyncio.run(_sync_once(config))
        if args.command == "watch":
            return asyncio.run(_watch(config))

        store = _open_store(config)
        if args.command == "list":
            quotes = store.by_category(args.category) if args.category else store.current()
            for quote in quotes:
                marker = "*" if quote.id is None else str(quote.id)
                print(f"[{marker}] {quote.text} ({quote.category})")
        elif args.command == "add":
            quote = store.add(args.text, args.category)
            print(f"Added {quote.text!r} ({quote.category})")
        elif args.command == "import":
            imported = import_file(store, args.file)
            print(f"Imported {len(imported)} quote(s)")
        elif args.command == "export":
            target = export_file(store, args.file)
            print(f"Exported {len(store)} quote(s) to {target}")
    except KeyboardInterrupt:
        return 130
    except (QuoteSyncError, ValidationError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
