# src/exrate/app.py
"""
Application Entry Point - Bot Initialization and Startup

This module serves as the composition root for the exrate Telegram bot.
It wires all dependencies and starts the bot application.

Files that USE this module:
- the `exrate` console script (pyproject.toml)
- python -m exrate.app (module entry point)

Files that this module USES:
- exrate.shared.logging_conf (setup_logging for logging configuration)
- exrate.config (settings for configuration management)
- exrate.adapters.providers.exchangerate_host (ExchangeRateHostProvider)
- exrate.application (RateCache, CacheService, InMemoryCurrencyCatalog, RateResolver)
- exrate.adapters.telegram (build_application, BotServices)
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from pathlib import Path

from telegram.error import Conflict, NetworkError, TimedOut

from exrate.adapters.providers.exchangerate_host import ExchangeRateHostProvider
from exrate.adapters.telegram.bot import build_application
from exrate.adapters.telegram.handlers import BotServices
from exrate.application.cache_service import CacheService
from exrate.application.currency_catalog import InMemoryCurrencyCatalog
from exrate.application.rate_cache import RateCache
from exrate.application.rate_resolver import RateResolver
from exrate.shared.logging_conf import setup_logging


# PID file path for preventing multiple instances
# Can be overridden via EXRATE_PID_FILE environment variable
def _get_pid_file(data_dir: Path) -> Path:
    pid_file = os.environ.get("EXRATE_PID_FILE")
    if pid_file:
        return Path(pid_file)
    return data_dir / "bot.pid"


def _check_existing_instance(pid_file: Path) -> None:
    """
    Check if another bot instance is already running.

    Raises RuntimeError if PID file exists and process is still running.
    """
    if not pid_file.exists():
        return
    try:
        old_pid = int(pid_file.read_text().strip())
    except (ValueError, OSError):
        # Invalid PID file
        pid_file.unlink(missing_ok=True)
        return

    try:
        os.kill(old_pid, 0)  # Signal 0 only checks the process exists
    except ProcessLookupError:
        pid_file.unlink(missing_ok=True)
        return
    except PermissionError:
        pass  # Exists but owned by someone else
    raise RuntimeError(
        f"Another bot instance is already running (PID: {old_pid}).\n"
        f"Please stop it first with: kill {old_pid}"
    )


def _create_pid_file(pid_file: Path) -> None:
    pid_file.parent.mkdir(parents=True, exist_ok=True)
    pid_file.write_text(str(os.getpid()))


def _remove_pid_file(pid_file: Path) -> None:
    try:
        pid_file.unlink(missing_ok=True)
    except OSError:
        logging.getLogger(__name__).warning("Could not remove PID file %s", pid_file)


def build_services(settings) -> BotServices:
    """
    Wire provider, catalog, cache and resolver from settings.

    The catalog is seeded from its snapshot first so the bot can answer even
    when the provider is down at boot, then refreshed from the provider.
    """
    logger = logging.getLogger(__name__)

    provider = ExchangeRateHostProvider(
        base_url=settings.exchange_api_url,
        timeout=settings.http_timeout_seconds,
        max_attempts=settings.http_max_attempts,
        retry_delay=settings.http_retry_delay_seconds,
        access_key=settings.exchange_api_key or None,
    )

    catalog = InMemoryCurrencyCatalog(provider=provider, snapshot_path=settings.catalog_file)
    catalog.load_snapshot()
    if not catalog.refresh() and len(catalog) == 0:
        logger.warning("Starting with an empty currency catalog; every lookup will be rejected until a refresh succeeds")

    cache = RateCache(max_entries=settings.rate_cache_max_entries) if settings.rate_cache_enabled else None
    if cache is None:
        logger.info("Rate cache disabled by configuration")
    else:
        logger.info("Rate cache enabled (max entries: %s)", settings.rate_cache_max_entries or "unbounded")

    return BotServices(
        resolver=RateResolver(cache=cache, provider=provider, catalog=catalog),
        cache_service=CacheService(cache),
        catalog=catalog,
        admin_username=settings.admin_username,
    )


def main() -> None:
    """
    Initialize and start the Telegram bot application.

    This function:
    1. Sets up logging and validates configuration
    2. Wires provider, catalog, cache and resolver
    3. Builds the Telegram application with handlers and the refresh job
    4. Starts the bot polling loop
    """
    # Import settings here so a bad .env is reported after logging is up
    from exrate.config import settings

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger = logging.getLogger(__name__)
    logger.info("Working directory: %s", os.getcwd())

    if not settings.bot_token:
        logger.error("BOT_TOKEN missing; set it in the environment or .env file")
        sys.exit(1)

    pid_file = _get_pid_file(Path(settings.catalog_file).parent)
    try:
        _check_existing_instance(pid_file)
        _create_pid_file(pid_file)
        atexit.register(_remove_pid_file, pid_file)
        logger.info("Bot instance lock acquired (PID: %d)", os.getpid())
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    services = build_services(settings)
    app = build_application(settings.bot_token, services, settings.catalog_refresh_minutes)

    logger.info(
        "Starting bot polling… %d supported currencies, catalog refresh every %d minutes",
        len(services.catalog),
        settings.catalog_refresh_minutes,
    )

    try:
        app.run_polling(close_loop=False, drop_pending_updates=False)
    except Conflict as e:
        logger.error("Telegram Conflict error: %s", e, exc_info=True)
        logger.error(
            "Another bot instance is already polling for updates. "
            "Telegram only allows ONE bot instance to poll at a time."
        )
        raise
    except (TimedOut, NetworkError) as e:
        logger.error("Network error during bot operation: %s (type: %s)", e, type(e).__name__, exc_info=True)
        raise
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (KeyboardInterrupt)")
    finally:
        _remove_pid_file(pid_file)


if __name__ == "__main__":
    main()
