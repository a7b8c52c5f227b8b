"""
Persistence Adapters - Data Storage

This package contains adapters for persisting data:
- File-based storage of the supported currency catalog (JSON)
"""

from exrate.adapters.persistence.file_store import CatalogSnapshot, load_snapshot, save_snapshot

__all__ = [
    "CatalogSnapshot",
    "load_snapshot",
    "save_snapshot",
]
