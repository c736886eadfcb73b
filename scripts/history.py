#!/usr/bin/env python3
"""Inspect and undo recorded writes. Run with: python scripts/history.py list --budget-id last-used"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from budget_undo.config import resolve_history_path, settings
from budget_undo.core.exceptions import HistoryEntryNotFound, UndoError, YNABAPIError
from budget_undo.core.logging import configure_logging
from budget_undo.schemas.history import is_undoable
from budget_undo.services import history_service
from budget_undo.services.history_store import HistoryStore
from budget_undo.services.ynab_client import YNABClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Budget write history")
    parser.add_argument("--history-file", dest="history_file", type=Path, default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List entries, newest first")
    list_parser.add_argument("--budget-id", dest="budget_id", default=None)
    list_parser.add_argument("--limit", type=int, default=None)

    show_parser = subparsers.add_parser("show", help="Show one entry as JSON")
    show_parser.add_argument("entry_id")

    undo_parser = subparsers.add_parser("undo", help="Undo one entry")
    undo_parser.add_argument("entry_id")

    subparsers.add_parser("clear", help="Remove all entries")
    return parser


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.LOG_LEVEL)

    history_path = args.history_file or resolve_history_path(settings)
    store = HistoryStore(history_path, max_entries=settings.HISTORY_MAX_ENTRIES)
    await store.load()

    if args.command == "list":
        for entry in history_service.list_history(store, budget_id=args.budget_id, limit=args.limit):
            marker = "*" if is_undoable(entry) else " "
            print(f"{marker} {entry.id}  {entry.timestamp.isoformat()}  "
                  f"{entry.budget_id}  {entry.operation}  {entry.status.value}")
        return 0

    if args.command == "show":
        try:
            entry = history_service.get_entry(store, args.entry_id)
        except HistoryEntryNotFound as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(entry.model_dump_json(by_alias=True, indent=2))
        return 0

    if args.command == "clear":
        await store.clear()
        print("History cleared")
        return 0

    client = YNABClient()
    try:
        entry = await history_service.undo_entry(store, client, args.entry_id)
    except (HistoryEntryNotFound, UndoError, YNABAPIError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await client.aclose()
    print(f"Undid {entry.operation} ({entry.id})")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
