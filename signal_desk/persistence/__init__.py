"""Persistence: load, import, export and write the JSON collections."""

from signal_desk.persistence.gateway import (
    parse_collection,
    load_collection,
    load_store,
    import_collection,
    export_collection,
    write_collection,
)

__all__ = [
    "parse_collection",
    "load_collection",
    "load_store",
    "import_collection",
    "export_collection",
    "write_collection",
]
