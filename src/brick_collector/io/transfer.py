"""
Import/Export gateway for collections.

Files are JSON arrays of set records. Import only checks that the payload
is an array; individual records pass through untouched unless strict mode
is requested.
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Optional, Union

import pandas as pd
from pydantic import ValidationError

from brick_collector.exceptions import InvalidImportError
from brick_collector.features.set_schema import SET_COLUMNS, LegoSet
from brick_collector.io.writers import atomic_write_csv, atomic_write_text
from brick_collector.state.collection_store import CollectionStore, Collection, Confirm
from brick_collector.utils.text_cleaning import collapse_ws, slugify

logger = logging.getLogger(__name__)


def dumps_collection(sets: List[Any]) -> str:
    return json.dumps(sets, ensure_ascii=False, indent=2)


def export_filename(name: str, today: Optional[date] = None, suffix: str = ".json") -> str:
    """e.g. 'star-wars-2026-10-18.json'"""
    today = today or date.today()
    return f"{slugify(name)}-{today.isoformat()}{suffix}"


def export_collection(store: CollectionStore, out_dir: Path, today: Optional[date] = None) -> Path:
    """Write the active collection to out_dir and return the file path."""
    collection = store.active
    out = Path(out_dir) / export_filename(collection.name, today)
    atomic_write_text(dumps_collection(collection.sets) + "\n", out)
    logger.info(f"Exported {len(collection.sets)} sets from '{collection.name}' to {out}")
    return out


def export_collection_csv(store: CollectionStore, out_dir: Path, today: Optional[date] = None) -> Path:
    """Flat CSV export of the active collection (known columns first, extras after)."""
    collection = store.active
    records = [r for r in collection.sets if isinstance(r, dict)]
    df = pd.DataFrame.from_records(records)
    ordered = [c for c in SET_COLUMNS if c in df.columns] + [c for c in df.columns if c not in SET_COLUMNS]
    df = df.reindex(columns=ordered or SET_COLUMNS)
    out = Path(out_dir) / export_filename(collection.name, today, suffix=".csv")
    atomic_write_csv(df, out)
    logger.info(f"Exported {len(df)} rows from '{collection.name}' to {out}")
    return out


def parse_collection(text: Union[str, bytes], strict: bool = False) -> List[Any]:
    """
    Decode an uploaded collection file.

    Args:
        text: file contents; raw bytes must be valid UTF-8
        strict: also validate every record against LegoSet

    Raises:
        InvalidImportError: unparsable JSON, a non-array payload, or (strict)
            an invalid record
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidImportError(f"Could not read the file, it is not UTF-8 text: {e}") from e

    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as e:
        raise InvalidImportError(f"Could not read the file, make sure it is valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise InvalidImportError(
            f"Invalid file format: expected a JSON array, got {type(payload).__name__}"
        )

    if strict:
        for i, record in enumerate(payload):
            try:
                LegoSet.model_validate(record)
            except ValidationError as e:
                raise InvalidImportError(f"Record {i} is not a valid set: {e}") from e
    return payload


def import_replace_active(store: CollectionStore, text: Union[str, bytes], confirm: Confirm,
                          strict: bool = False) -> bool:
    """
    Replace the active collection with the file contents.

    Returns:
        False if the user declined; the store is untouched in that case
        and whenever parsing fails
    """
    sets = parse_collection(text, strict=strict)
    if not confirm(f"This will replace '{store.active.name}' with {len(sets)} sets. Continue?"):
        return False
    store.replace_collection(store.active_index, sets)
    return True


def collection_name_from_filename(filename: Optional[str], now: Optional[datetime] = None) -> str:
    """Collection name from an uploaded file name, or a timestamped fallback."""
    stem = collapse_ws(Path(filename).stem.replace("_", " ")) if filename else ""
    if stem:
        return stem
    now = now or datetime.now()
    return f"Import {now:%Y-%m-%d %H:%M}"


def import_as_new_collection(store: CollectionStore, text: Union[str, bytes], filename: Optional[str] = None,
                             strict: bool = False) -> Collection:
    """Append the file contents as a new collection and make it active."""
    sets = parse_collection(text, strict=strict)
    return store.append_collection(collection_name_from_filename(filename), sets)
