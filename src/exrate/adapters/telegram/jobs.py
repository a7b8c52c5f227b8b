# src/exrate/adapters/telegram/jobs.py
"""
Telegram Jobs - Scheduled Tasks

This module holds the callbacks registered with the bot's job queue. The
only periodic task is keeping the supported currency catalog in sync with
the provider: currencies the provider stopped listing are dropped and new
ones are added.

Files that USE this module:
- exrate.app (refresh_currencies_job is registered as scheduled task)

Files that this module USES:
- exrate.application.currency_catalog (InMemoryCurrencyCatalog.refresh)
"""
from __future__ import annotations

import asyncio
import logging

from telegram.ext import ContextTypes

from exrate.application.currency_catalog import InMemoryCurrencyCatalog

logger = logging.getLogger(__name__)


async def refresh_currencies_job(context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Scheduled job that refreshes the currency catalog.

    The catalog is passed as the job's data when the job is registered.
    A failed refresh keeps the current catalog; the next run tries again.

    Args:
        context: Telegram bot context; context.job.data is the catalog
    """
    catalog: InMemoryCurrencyCatalog = context.job.data
    try:
        refreshed = await asyncio.to_thread(catalog.refresh)
    except Exception as e:
        logger.error("Scheduled currency refresh failed: %s", e, exc_info=True)
        return

    if refreshed:
        logger.info("Scheduled currency refresh done: %d currencies supported", len(catalog))
    else:
        logger.warning("Scheduled currency refresh skipped; keeping %d known currencies", len(catalog))
