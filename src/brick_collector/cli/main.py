"""
Command line interface for the collection manager.

Examples:
    brick-collector search "millennium falcon"
    brick-collector add 75192-1
    brick-collector collections create --name "Star Wars"
    brick-collector export --out exports/
    brick-collector import backup.json --new
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from brick_collector import logging_setup
from brick_collector.exceptions import CollectorError, SearchError
from brick_collector.io import readers
from brick_collector.io.transfer import (
    export_collection,
    export_collection_csv,
    import_as_new_collection,
    import_replace_active,
)
from brick_collector.settings import get_settings
from brick_collector.state.workspace import Workspace
from brick_collector.stats import summarize_collection

logger = logging.getLogger(__name__)


def make_confirm(assume_yes: bool, input_fn: Optional[Callable[[str], str]] = None) -> Callable[[str], bool]:
    """Blocking yes/no gate; --yes answers every question with yes."""
    def confirm(message: str) -> bool:
        if assume_yes:
            return True
        answer = (input_fn or input)(f"{message} [y/N] ")
        return answer.strip().lower() in ("y", "yes")
    return confirm


def _format_set(record: Any, theme_label: Optional[str] = None, owned: bool = False) -> str:
    if not isinstance(record, dict):
        return f"  ? {record!r}"
    marker = "✓" if owned else " "
    line = (f"{marker} #{record.get('set_num')} {record.get('name', '')} "
            f"- {record.get('num_parts', 0)} pieces ({record.get('year', '?')})")
    if theme_label:
        line += f" [{theme_label}]"
    return line


def _find_exact(results: List[Dict[str, Any]], set_num: str) -> Optional[Dict[str, Any]]:
    wanted = {set_num.lower(), f"{set_num}-1".lower()}
    for record in results:
        if str(record.get('set_num', '')).lower() in wanted:
            return record
    return None


def cmd_search(ws: Workspace, a: argparse.Namespace) -> int:
    asyncio.run(ws.search.run(a.query))
    results = ws.annotate_results(ws.search.results)
    if not results:
        print(f'No results found for "{a.query}".')
        return 0
    for record in results:
        print(_format_set(record, owned=record['in_collection']))
    return 0


def cmd_add(ws: Workspace, a: argparse.Namespace) -> int:
    results = ws.search_sets(a.query or a.set_num)
    record = _find_exact(results, a.set_num)
    if record is None:
        print(f"Set {a.set_num} not found on Rebrickable.", file=sys.stderr)
        return 1
    ws.collections.add_set(ws.collections.active_index, record)
    print(f"Added {record['set_num']} {record.get('name', '')} to '{ws.collections.active.name}'.")
    return 0


def cmd_remove(ws: Workspace, a: argparse.Namespace) -> int:
    removed = ws.collections.remove_set(ws.collections.active_index, a.set_num, make_confirm(a.yes))
    print(f"Removed {a.set_num}." if removed else "Nothing removed.")
    return 0


def cmd_list(ws: Workspace, a: argparse.Namespace) -> int:
    collection = ws.collections.active
    asyncio.run(ws.themes.resolve_missing(collection.sets))
    print(f"{collection.name} ({len(collection.sets)} sets, "
          f"{ws.collections.total_parts():,} pieces)")
    if not collection.sets:
        print("Your collection is empty. Search to add your first sets!")
    for record in collection.sets:
        theme_id = record.get('theme_id') if isinstance(record, dict) else None
        label = ws.themes.label(theme_id) if theme_id is not None else None
        print(_format_set(record, theme_label=label))
    return 0


def cmd_collections(ws: Workspace, a: argparse.Namespace) -> int:
    store = ws.collections
    index = store.active_index if a.index is None else a.index
    if a.action == "create":
        store.create_collection(a.name or "")
    elif a.action == "rename":
        if not store.rename_collection(index, a.name or ""):
            print("Name must not be empty; kept the previous name.", file=sys.stderr)
    elif a.action == "delete":
        store.delete_collection(index, make_confirm(a.yes))
    elif a.action == "use":
        store.set_active(index)

    for i, collection in enumerate(store.collections):
        marker = "*" if i == store.active_index else " "
        print(f"{marker} {i}: {collection.name} ({len(collection.sets)} sets)")
    return 0


def cmd_export(ws: Workspace, a: argparse.Namespace) -> int:
    out_dir = Path(a.out) if a.out else get_settings().export_dir
    path = export_collection_csv(ws.collections, out_dir) if a.csv else export_collection(ws.collections, out_dir)
    print(f"Wrote {path}")
    return 0


def cmd_import(ws: Workspace, a: argparse.Namespace) -> int:
    payload = readers.read_bytes(Path(a.file))
    if a.new:
        collection = import_as_new_collection(ws.collections, payload, filename=Path(a.file).name, strict=a.strict)
        print(f"Imported {len(collection.sets)} sets as '{collection.name}'.")
    elif import_replace_active(ws.collections, payload, make_confirm(a.yes), strict=a.strict):
        print(f"Replaced '{ws.collections.active.name}' with {len(ws.collections.active.sets)} sets.")
    else:
        print("Import cancelled.")
    return 0


def cmd_stats(ws: Workspace, a: argparse.Namespace) -> int:
    sets = ws.collections.active_sets
    asyncio.run(ws.themes.resolve_missing(sets))
    summary = summarize_collection(sets, ws.themes)
    print(f"{ws.collections.active.name}: {summary['set_count']} sets, {summary['total_parts']:,} pieces")
    for theme, parts in summary['parts_by_theme'].items():
        print(f"  {theme}: {parts:,} pieces")
    return 0


def cmd_themes(ws: Workspace, a: argparse.Namespace) -> int:
    asyncio.run(ws.themes.resolve_missing(ws.collections.active_sets))
    names = ws.themes.names
    if not names:
        print("No theme names cached yet.")
    for theme_id, name in sorted(names.items(), key=lambda kv: kv[1]):
        print(f"{theme_id}: {name}")
    return 0


def cmd_serve(ws: Workspace, a: argparse.Namespace) -> int:
    import uvicorn

    cfg = get_settings()
    uvicorn.run("api.main:app", host=cfg.api_host, port=cfg.api_port,
                reload=cfg.api_reload, log_level=cfg.log_level.lower())
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="brick-collector", description="Manage local LEGO set collections")
    p.add_argument("--storage", help="Path to the local store file (default from APP_STORAGE_PATH)")
    p.add_argument("--log_level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("search", help="Search the Rebrickable database")
    s.add_argument("query")
    s.set_defaults(func=cmd_search)

    s = sub.add_parser("add", help="Add a set to the active collection")
    s.add_argument("set_num")
    s.add_argument("--query", help="Search text if the set number alone does not find it")
    s.set_defaults(func=cmd_add)

    s = sub.add_parser("remove", help="Remove a set from the active collection")
    s.add_argument("set_num")
    s.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    s.set_defaults(func=cmd_remove)

    s = sub.add_parser("list", help="Show the active collection")
    s.set_defaults(func=cmd_list)

    s = sub.add_parser("collections", help="List or manage collections")
    s.add_argument("action", nargs="?", default="list", choices=["list", "create", "rename", "delete", "use"])
    s.add_argument("index", nargs="?", type=int, default=None,
                   help="Collection position (default: the active collection)")
    s.add_argument("--name")
    s.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    s.set_defaults(func=cmd_collections)

    s = sub.add_parser("export", help="Export the active collection")
    s.add_argument("--out", help="Output directory (default from APP_EXPORT_DIR)")
    s.add_argument("--csv", action="store_true", help="Write CSV instead of JSON")
    s.set_defaults(func=cmd_export)

    s = sub.add_parser("import", help="Import a JSON collection file")
    s.add_argument("file")
    s.add_argument("--new", action="store_true", help="Import as a new collection instead of replacing the active one")
    s.add_argument("--strict", action="store_true", help="Validate every record")
    s.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    s.set_defaults(func=cmd_import)

    s = sub.add_parser("stats", help="Piece totals for the active collection")
    s.set_defaults(func=cmd_stats)

    s = sub.add_parser("themes", help="Resolve and list cached theme names")
    s.set_defaults(func=cmd_themes)

    s = sub.add_parser("serve", help="Run the HTTP API")
    s.set_defaults(func=cmd_serve)
    return p


def main(argv: Optional[List[str]] = None, workspace: Optional[Workspace] = None) -> int:
    a = build_parser().parse_args(argv)
    cfg = get_settings()
    logging_setup.setup_logging(a.log_level or cfg.log_level)

    ws = workspace or Workspace.from_settings(cfg, storage_path=Path(a.storage) if a.storage else None)
    try:
        return a.func(ws, a)
    except SearchError as e:
        logger.error(f"Search failed: {e}")
        print(f"An error occurred while searching: {e}", file=sys.stderr)
        return 1
    except (CollectorError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
