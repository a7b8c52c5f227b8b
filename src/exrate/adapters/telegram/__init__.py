# src/exrate/adapters/telegram/__init__.py
"""
Telegram Adapters - Bot Interface

This package contains Telegram bot adapters:
- Bot application builder
- Command handlers
- Scheduled jobs
"""

from exrate.adapters.telegram.bot import build_application
from exrate.adapters.telegram.handlers import BotServices, build_handlers, error_handler
from exrate.adapters.telegram.jobs import refresh_currencies_job

__all__ = [
    "build_application",
    "BotServices",
    "build_handlers",
    "error_handler",
    "refresh_currencies_job",
]
