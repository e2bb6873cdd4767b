"""
Persistence gateway: signals.json / closed_trades.json in and out.

Loads never raise: any failure is logged and yields an empty collection.
Imports replace a whole collection and leave the store untouched on bad input.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, List, Union

import requests

from signal_desk.core.errors import LoadFailure, MalformedImport, OpResult, WriteFailure
from signal_desk.core.schema import Record, record_from_dict, record_to_dict
from signal_desk.core.types import Collection
from signal_desk.store.record_store import RecordStore

logger = logging.getLogger("signal_desk.persistence")

HTTP_TIMEOUT = 10


def parse_collection(data: Any, closed: bool = False) -> List[Record]:
    """Typed records from a decoded JSON array. Non-object entries are skipped."""
    if not isinstance(data, list):
        raise MalformedImport("JSON must be an array")
    records = []
    for i, raw in enumerate(data):
        if not isinstance(raw, dict):
            logger.warning("Skipping entry %d: expected object, got %s", i, type(raw).__name__)
            continue
        records.append(record_from_dict(raw, closed=closed))
    return records


def _read_source(source: Union[str, Path]) -> str:
    src = str(source)
    if src.startswith(("http://", "https://")):
        try:
            r = requests.get(src, timeout=HTTP_TIMEOUT, headers={"Cache-Control": "no-store"})
        except requests.RequestException as e:
            raise LoadFailure(f"GET {src} failed: {e}") from e
        if r.status_code != 200:
            raise LoadFailure(f"GET {src} returned {r.status_code}")
        return r.text
    try:
        return Path(src).read_text(encoding="utf-8")
    except OSError as e:
        raise LoadFailure(f"Cannot read {src}: {e}") from e


def load_collection(source: Union[str, Path], closed: bool = False) -> List[Record]:
    """Load one collection from a path or http(s) URL. Returns [] on any failure."""
    try:
        text = _read_source(source)
        try:
            data = json.loads(text)
        except ValueError as e:
            raise LoadFailure(f"Invalid JSON in {source}: {e}") from e
        if not isinstance(data, list):
            raise LoadFailure(f"{source} is not a JSON array")
        records = parse_collection(data, closed=closed)
    except LoadFailure as e:
        logger.warning("Load failed, using empty collection: %s", e)
        return []
    logger.info("Loaded %d records from %s", len(records), source)
    return records


def load_store(config) -> RecordStore:
    """Build a store from the two collection sources named in config."""
    signals = load_collection(config.resolve(config.signals_path), closed=False)
    closed = load_collection(config.resolve(config.closed_trades_path), closed=True)
    return RecordStore(signals, closed)


def import_collection(store: RecordStore, which: Union[Collection, str], text: str) -> OpResult:
    """Replace a whole collection from JSON text. On any error the store is left as it was."""
    which = Collection(which)
    try:
        data = json.loads(text)
    except ValueError as e:
        return OpResult.failure(MalformedImport(f"Failed to import JSON: {e}"))
    try:
        records = parse_collection(data, closed=which == Collection.CLOSED)
    except MalformedImport as e:
        return OpResult.failure(e)
    store.replace(which, records)
    logger.info("Imported %d %s records", len(records), which.value)
    return OpResult.success(value=len(records))


def export_collection(records: List[Record]) -> str:
    """JSON array, 2-space indent."""
    return json.dumps([record_to_dict(r) for r in records], indent=2, ensure_ascii=False)


def write_collection(path: Union[str, Path], records: List[Record]) -> OpResult:
    """Write the export text to disk, creating parent folders."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(export_collection(records) + "\n", encoding="utf-8")
    except OSError as e:
        logger.exception("Write to %s failed", path)
        return OpResult.failure(WriteFailure(f"Failed to write file: {e}"))
    logger.info("%s written (%d records)", path.name, len(records))
    return OpResult.success(value=str(path))
