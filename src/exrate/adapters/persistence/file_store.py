# src/exrate/adapters/persistence/file_store.py
"""
File Store - Supported Currency Snapshot Persistence

This module keeps a JSON snapshot of the supported currency catalog on disk
so the service can start with a known currency set even when the provider's
symbol endpoint is down at boot. Rates are never persisted: the rate cache
is in-memory only.

Snapshot layout:
    {"saved_at": "2024-01-01T00:00:00+00:00",
     "currencies": {"EUR": "Euro", "USD": "United States Dollar"}}

Files that USE this module:
- exrate.application.currency_catalog (saves after refresh, loads at startup)

Files that this module USES:
- None (pure storage functions, path is passed in)
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

log = logging.getLogger(__name__)


@dataclass
class CatalogSnapshot:
    currencies: Dict[str, str] = field(default_factory=dict)
    saved_at: Optional[datetime] = None  # UTC - set by to_json if not provided

    def to_json(self) -> dict:
        """
        Convert snapshot to JSON-serializable dictionary.

        Returns:
            Dictionary with ISO-formatted timestamp and sorted currencies
        """
        saved_at = self.saved_at or datetime.now(timezone.utc)
        return {
            "saved_at": saved_at.isoformat(),
            "currencies": dict(sorted(self.currencies.items())),
        }

    @staticmethod
    def from_json(data: dict) -> "CatalogSnapshot":
        """
        Create snapshot from JSON dictionary.

        Raises:
            ValueError: If 'currencies' is missing or not an object
        """
        currencies = data.get("currencies")
        if not isinstance(currencies, dict):
            raise ValueError("snapshot missing 'currencies' object")
        ts_raw = data.get("saved_at")
        saved_at = None
        if isinstance(ts_raw, str):
            # Accept both "...Z" and "+00:00"
            saved_at = datetime.fromisoformat(ts_raw.replace("Z", "+00:00")).astimezone(timezone.utc)
        return CatalogSnapshot(
            currencies={str(code).upper(): str(desc) for code, desc in currencies.items()},
            saved_at=saved_at,
        )


def save_snapshot(path: Path, snap: CatalogSnapshot) -> None:
    """
    Save catalog snapshot using an atomic write.

    Writes a temporary file in the same directory, then renames it over the
    target so readers never see a half-written file.

    Raises:
        RuntimeError: If the file could not be written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(suffix=".json.tmp", dir=str(path.parent), text=True)

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(snap.to_json(), f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, str(path))
    except Exception as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise RuntimeError(f"Failed to save catalog snapshot: {e}") from e


def load_snapshot(path: Path) -> Optional[CatalogSnapshot]:
    """
    Load catalog snapshot from disk.

    A corrupt file is moved aside to `<name>.corrupt` and treated as absent.

    Returns:
        CatalogSnapshot if the file exists and is valid, None otherwise
    """
    path = Path(path)
    if not path.exists():
        return None

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("snapshot root is not an object")
        return CatalogSnapshot.from_json(data)
    except (json.JSONDecodeError, ValueError) as e:
        backup_path = path.with_suffix(".json.corrupt")
        try:
            shutil.move(str(path), str(backup_path))
            log.warning("Catalog snapshot corrupted, moved to %s: %s", backup_path, e)
        except OSError as move_error:
            log.error("Failed to move corrupt catalog snapshot: %s", move_error)
        return None
    except OSError as e:
        log.error("Failed to read catalog snapshot %s: %s", path, e)
        return None
