# src/exrate/adapters/telegram/bot.py
"""
Telegram Bot - Application Builder

This module builds the python-telegram-bot Application: command handlers,
the global error handler, and the periodic catalog refresh job.

Files that USE this module:
- exrate.app (composition root)

Files that this module USES:
- exrate.adapters.telegram.handlers (build_handlers, error_handler, BotServices)
- exrate.adapters.telegram.jobs (refresh_currencies_job)
"""

from __future__ import annotations

from datetime import timedelta

from telegram.ext import Application

from exrate.adapters.telegram.handlers import BotServices, build_handlers, error_handler
from exrate.adapters.telegram.jobs import refresh_currencies_job


def build_application(bot_token: str, services: BotServices, refresh_minutes: int) -> Application:
    """
    Build Telegram bot application with handlers and scheduled jobs.

    Args:
        bot_token: Telegram bot token
        services: Shared services injected into the handlers
        refresh_minutes: Interval of the currency catalog refresh job

    Returns:
        Configured Application instance
    """
    app = Application.builder().token(bot_token).build()

    for h in build_handlers(services):
        app.add_handler(h)
    app.add_error_handler(error_handler)

    # Startup already refreshed the catalog, so the first run waits one interval
    interval = timedelta(minutes=refresh_minutes)
    app.job_queue.run_repeating(
        callback=refresh_currencies_job,
        interval=interval,
        first=interval,
        data=services.catalog,
        name="currency_catalog_refresh",
    )
    return app
