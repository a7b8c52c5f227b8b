# src/exrate/application/currency_catalog.py
"""
Currency Catalog - Locally Maintained Set of Supported Currencies

The resolver only ever asks the catalog two questions ("does code X exist",
"what is the canonical form of X") and may send it a "please refresh" signal
when an upstream response mentions a currency the catalog does not know.

The in-memory implementation is filled from the provider's symbol list:
- at startup (from the JSON snapshot on disk, then from the provider),
- periodically by the bot's job queue,
- on demand, in a background thread, when catalog drift is observed.

A refresh drops currencies the provider no longer lists and adds new ones.
A failed refresh leaves the catalog as it was.

Files that USE this module:
- exrate.application.rate_resolver (validation and refresh signal)
- exrate.adapters.telegram.handlers (/currencies, /refresh_currencies)
- exrate.adapters.telegram.jobs (periodic refresh)
- exrate.app (startup load)

Files that this module USES:
- exrate.adapters.providers.base (RateProvider.fetch_supported_currencies)
- exrate.adapters.persistence.file_store (catalog snapshot on disk)
- exrate.domain.models (Currency, normalize_code)
"""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Set, Tuple

from exrate.adapters.persistence.file_store import CatalogSnapshot, load_snapshot, save_snapshot
from exrate.adapters.providers.base import RateProvider
from exrate.domain.errors import ProviderUnavailableError
from exrate.domain.models import Currency, normalize_code

logger = logging.getLogger(__name__)


class CurrencyCatalog(Protocol):
    """What the rate resolver needs from the catalog."""

    def exists(self, code: str) -> bool:
        ...

    def resolve(self, code: str) -> Optional[str]:
        ...

    def codes(self) -> Set[str]:
        ...

    def request_refresh(self) -> None:
        ...


class InMemoryCurrencyCatalog:
    """Thread-safe catalog backed by a dict of code -> description."""

    def __init__(
        self,
        provider: Optional[RateProvider] = None,
        snapshot_path: Optional[Path] = None,
        currencies: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            provider: Source of the supported symbol list (None disables refresh)
            snapshot_path: JSON file the catalog is saved to after each refresh
            currencies: Initial code -> description mapping
        """
        self._provider = provider
        self._snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._lock = threading.Lock()
        self._currencies: Dict[str, str] = {}
        self._refresh_in_flight = False
        if currencies:
            self.replace(currencies)

    # --- Lookups ---

    def exists(self, code: str) -> bool:
        return self.resolve(code) is not None

    def resolve(self, code: str) -> Optional[str]:
        """Return the canonical code for `code`, or None if unsupported."""
        normalized = normalize_code(code)
        with self._lock:
            return normalized if normalized in self._currencies else None

    def codes(self) -> Set[str]:
        with self._lock:
            return set(self._currencies)

    def list_currencies(self) -> List[Currency]:
        with self._lock:
            return [Currency(code, desc) for code, desc in sorted(self._currencies.items())]

    def __len__(self) -> int:
        with self._lock:
            return len(self._currencies)

    # --- Updates ---

    def replace(self, symbols: Mapping[str, str]) -> Tuple[Set[str], Set[str]]:
        """
        Synchronize the catalog with a fresh symbol list.

        Returns:
            (added codes, removed codes)
        """
        fresh = {normalize_code(code): desc for code, desc in symbols.items() if normalize_code(code)}
        with self._lock:
            current = set(self._currencies)
            added = set(fresh) - current
            removed = current - set(fresh)
            self._currencies = fresh

        if removed:
            logger.info("Removed %d currencies no longer supported: %s", len(removed), ", ".join(sorted(removed)))
        if added:
            logger.info("Added %d newly supported currencies", len(added))
        return added, removed

    def load_snapshot(self) -> bool:
        """Seed the catalog from the JSON snapshot. Returns True if one was loaded."""
        if self._snapshot_path is None:
            return False
        snap = load_snapshot(self._snapshot_path)
        if snap is None or not snap.currencies:
            logger.info("No catalog snapshot found at %s", self._snapshot_path)
            return False
        self.replace(snap.currencies)
        logger.info("Loaded %d currencies from snapshot (saved %s)", len(snap.currencies), snap.saved_at)
        return True

    def refresh(self) -> bool:
        """
        Fetch the provider's symbol list and synchronize.

        Provider failures are logged, not raised: a stale catalog is better
        than none.

        Returns:
            True if the catalog was updated
        """
        if self._provider is None:
            logger.warning("Catalog refresh requested but no provider is configured")
            return False

        logger.info("Fetching list of supported currencies from the provider")
        try:
            symbols = self._provider.fetch_supported_currencies()
        except ProviderUnavailableError as e:
            logger.warning("Could not refresh supported currencies (%s): %s", e.reason.value, e)
            return False

        if not symbols:
            logger.warning("Provider returned an empty symbol list; keeping %d known currencies", len(self))
            return False

        self.replace(symbols)
        if self._snapshot_path is not None:
            try:
                save_snapshot(self._snapshot_path, CatalogSnapshot(currencies=dict(symbols)))
            except RuntimeError as e:
                logger.error("Catalog refreshed but snapshot not saved: %s", e)
        return True

    def request_refresh(self) -> Optional[threading.Thread]:
        """
        Fire-and-forget refresh on a daemon thread.

        Requests arriving while a refresh is running are dropped.

        Returns:
            The started thread, or None if a refresh was already in flight
        """
        with self._lock:
            if self._refresh_in_flight:
                logger.debug("Catalog refresh already in flight; request coalesced")
                return None
            self._refresh_in_flight = True

        thread = threading.Thread(target=self._refresh_in_background, name="catalog-refresh", daemon=True)
        thread.start()
        return thread

    def _refresh_in_background(self) -> None:
        try:
            self.refresh()
        except Exception:
            logger.exception("Background catalog refresh failed")
        finally:
            with self._lock:
                self._refresh_in_flight = False
