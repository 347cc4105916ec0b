"""Data layer: models and remote table access."""

from .store import DRIVERS_TABLE, FREIGHTS_TABLE, SupabaseTableStore, TableStore, get_store, set_store

__all__ = [
    "DRIVERS_TABLE",
    "FREIGHTS_TABLE",
    "TableStore",
    "SupabaseTableStore",
    "get_store",
    "set_store",
]
