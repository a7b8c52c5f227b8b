# src/exrate/adapters/telegram/handlers.py
"""
Telegram Handlers - Command Processing and User Interaction

This module contains all Telegram bot command handlers. It handles user
commands (/rate, /rates, /convert, /currencies, /help), admin commands
(/cache*, /refresh_currencies), and implements rate limiting, input parsing,
and error handling for all interactions.

The rate resolver is blocking (HTTP calls with retry sleeps), so lookups run
on the default thread pool through asyncio.to_thread and never stall the
bot's event loop.

Files that USE this module:
- exrate.app (build_handlers function creates handler instances)
- tests.test_handlers (unit tests)

Files that this module USES:
- exrate.application.rate_resolver (RateResolver)
- exrate.application.cache_service (CacheService)
- exrate.application.currency_catalog (InMemoryCurrencyCatalog)
- exrate.adapters.formatting.formatter (all formatter functions)
- exrate.shared.rate_limiter (rate limiting functionality)
- exrate.shared.validators (parse_amount, parse_currency_list, sanitize_for_log)
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from typing import List

from telegram import Update
from telegram.constants import MessageLimit
from telegram.ext import CommandHandler, ContextTypes

from exrate.adapters.formatting.formatter import (
    GENERIC_ERROR,
    format_cache_entries,
    format_cache_keys,
    format_cache_stats,
    format_cache_value,
    format_conversion,
    format_currencies,
    format_error,
    format_rate,
    format_rates,
)
from exrate.application.cache_service import CacheService
from exrate.application.currency_catalog import InMemoryCurrencyCatalog
from exrate.application.rate_resolver import RateResolver
from exrate.domain.errors import DomainError, InvalidAmountError
from exrate.domain.models import normalize_code
from exrate.shared.rate_limiter import rate_limiter, RATE_LIMITS
from exrate.shared.validators import parse_amount, parse_currency_list, sanitize_for_log

logger = logging.getLogger(__name__)

RATE_LIMITED = "⏰ Rate limit exceeded. Please try again later."
ADMIN_ONLY = "⚠️ This command is only available to the bot admin."

USAGE_RATE = "Usage: /rate FROM TO\nExample: /rate EUR USD"
USAGE_RATES = "Usage: /rates FROM [TO,TO,...]\nExample: /rates EUR USD,GBP,JPY"
USAGE_CONVERT = "Usage: /convert AMOUNT FROM TO[,TO,...]\nExample: /convert 100 EUR USD,GBP"
USAGE_CACHE = "Usage: /cache [BASE_QUOTE]\nExample: /cache EUR_USD"
USAGE_CACHE_DELETE = "Usage: /cache_delete BASE_QUOTE\nExample: /cache_delete EUR_USD"

HELP_TEXT = (
    "💱 Exchange rate bot\n\n"
    "/rate FROM TO - exchange rate for one pair\n"
    "/rates FROM [TO,TO,...] - rates for several currencies (all if none given)\n"
    "/convert AMOUNT FROM TO[,TO,...] - convert an amount\n"
    "/currencies - list supported currencies"
)

ADMIN_HELP_TEXT = (
    "\n\nAdmin:\n"
    "/cache [BASE_QUOTE] - show cached rates\n"
    "/cache_keys - list cache keys\n"
    "/cache_stats - cache statistics\n"
    "/cache_clear - empty the cache\n"
    "/cache_delete BASE_QUOTE - remove one cached rate\n"
    "/refresh_currencies - reload the supported currency list"
)


@dataclass
class BotServices:
    """Everything the handlers need, wired once by the composition root."""

    resolver: RateResolver
    cache_service: CacheService
    catalog: InMemoryCurrencyCatalog
    admin_username: str = ""


def _check_rate_limit(update: Update, limit_type: str) -> bool:
    """
    Check if user is within configured rate limits.

    Uses namespaced buckets so admin commands don't share a bucket with
    public lookups:
    - public:user:123 for rate/convert lookups
    - admin:user:123 for admin commands

    Args:
        update: Telegram update object
        limit_type: Key into RATE_LIMITS ("lookup_command" or "admin_command")

    Returns:
        True if allowed, False if rate limit exceeded
    """
    config = RATE_LIMITS.get(limit_type)
    if not config:
        return True  # No rate limit configured

    user_id = str(update.effective_user.id)
    if limit_type == "admin_command":
        identifier = f"admin:user:{user_id}"
    else:
        identifier = f"public:user:{user_id}"

    if not rate_limiter.is_allowed(identifier, config):
        logger.warning(
            "Rate limit exceeded for %s (type=%s, retry_after=%s)",
            identifier,
            limit_type,
            rate_limiter.get_retry_after(identifier),
        )
        return False
    return True


def _is_admin(update: Update, admin_username: str) -> bool:
    """
    Check if the user sending the update is the configured admin.

    Returns:
        True if the username matches ADMIN_USERNAME (case-insensitive).
        Always False when no admin is configured.
    """
    if not admin_username:
        return False
    uname = (update.effective_user.username or "").lstrip("@")
    return uname.lower() == admin_username.lstrip("@").lower()


def _split_message(text: str, limit: int = MessageLimit.MAX_TEXT_LENGTH) -> List[str]:
    """Split text on line boundaries into chunks Telegram will accept; overlong lines are cut."""
    chunks: List[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit and current:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


async def _reply(update: Update, text: str) -> None:
    for chunk in _split_message(text):
        await update.message.reply_text(chunk)


async def _reply_failure(update: Update, command: str, exc: Exception) -> None:
    """Answer a failed command; domain errors get their own message, everything else the generic one."""
    if isinstance(exc, DomainError):
        logger.info("/%s rejected: %s", command, sanitize_for_log(exc))
    else:
        logger.error("/%s failed unexpectedly", command, exc_info=exc)
    await update.message.reply_text(format_error(exc))


async def _admin_allowed(update: Update, services: BotServices) -> bool:
    if not _is_admin(update, services.admin_username):
        await update.message.reply_text(ADMIN_ONLY)
        return False
    if not _check_rate_limit(update, "admin_command"):
        await update.message.reply_text(RATE_LIMITED)
        return False
    return True


# --- /start, /help ---
async def help_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    text = HELP_TEXT
    if _is_admin(update, services.admin_username):
        text += ADMIN_HELP_TEXT
    await update.message.reply_text(text)


# --- /rate FROM TO ---
async def rate_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    """Handle /rate command - exchange rate for a single currency pair."""
    if not _check_rate_limit(update, "lookup_command"):
        await update.message.reply_text(RATE_LIMITED)
        return

    args = context.args or []
    if len(args) != 2:
        await update.message.reply_text(USAGE_RATE)
        return

    base, quote = args
    try:
        rate = await asyncio.to_thread(services.resolver.resolve_one, base, quote)
    except Exception as e:
        await _reply_failure(update, "rate", e)
        return
    await update.message.reply_text(format_rate(normalize_code(base), normalize_code(quote), rate))


# --- /rates FROM [TO,TO,...] ---
async def rates_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    """
    Handle /rates command - rates from one base to several currencies.

    Targets may be separated by commas or spaces. Without targets, every
    supported currency is returned.
    """
    if not _check_rate_limit(update, "lookup_command"):
        await update.message.reply_text(RATE_LIMITED)
        return

    args = context.args or []
    if not args:
        await update.message.reply_text(USAGE_RATES)
        return

    base = args[0]
    targets = parse_currency_list(",".join(args[1:]))
    try:
        if targets:
            rates = await asyncio.to_thread(services.resolver.resolve_many, base, targets)
        else:
            rates = await asyncio.to_thread(services.resolver.resolve_all, base)
    except Exception as e:
        await _reply_failure(update, "rates", e)
        return
    await _reply(update, format_rates(normalize_code(base), rates))


# --- /convert AMOUNT FROM TO[,TO,...] ---
async def convert_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    """Handle /convert command - convert an amount into one or more currencies."""
    if not _check_rate_limit(update, "lookup_command"):
        await update.message.reply_text(RATE_LIMITED)
        return

    args = context.args or []
    if len(args) < 3:
        await update.message.reply_text(USAGE_CONVERT)
        return

    amount = parse_amount(args[0])
    if amount is None:
        await _reply_failure(update, "convert", InvalidAmountError(args[0]))
        return

    base = args[1]
    targets = parse_currency_list(",".join(args[2:]))
    if not targets:
        await update.message.reply_text(USAGE_CONVERT)
        return

    try:
        converted = await asyncio.to_thread(services.resolver.resolve_many, base, targets, amount)
    except Exception as e:
        await _reply_failure(update, "convert", e)
        return
    await _reply(update, format_conversion(amount, normalize_code(base), converted))


# --- /currencies ---
async def currencies_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    if not _check_rate_limit(update, "lookup_command"):
        await update.message.reply_text(RATE_LIMITED)
        return
    await _reply(update, format_currencies(services.catalog.list_currencies()))


# --- /cache [KEY] (admin only) ---
async def cache_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    """Handle /cache command - show every cached rate, or one entry when a key is given."""
    if not await _admin_allowed(update, services):
        return

    args = context.args or []
    try:
        if args:
            key = args[0].upper()
            rate = services.cache_service.get_value(key)
            text = format_cache_value(key, rate)
        else:
            text = format_cache_entries(services.cache_service.get_all_entries())
    except ValueError:
        await update.message.reply_text(USAGE_CACHE)
        return
    except Exception as e:
        await _reply_failure(update, "cache", e)
        return
    await _reply(update, text)


# --- /cache_keys (admin only) ---
async def cache_keys_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    if not await _admin_allowed(update, services):
        return
    try:
        keys = services.cache_service.get_all_keys()
    except Exception as e:
        await _reply_failure(update, "cache_keys", e)
        return
    await _reply(update, format_cache_keys(keys))


# --- /cache_stats (admin only) ---
async def cache_stats_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    if not await _admin_allowed(update, services):
        return
    try:
        stats = services.cache_service.get_statistics()
    except Exception as e:
        await _reply_failure(update, "cache_stats", e)
        return
    await update.message.reply_text(format_cache_stats(stats))


# --- /cache_clear (admin only) ---
async def cache_clear_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    if not await _admin_allowed(update, services):
        return
    try:
        services.cache_service.clear()
    except Exception as e:
        await _reply_failure(update, "cache_clear", e)
        return
    logger.info("Rate cache cleared by admin")
    await update.message.reply_text("✅ Rate cache cleared.")


# --- /cache_delete KEY (admin only) ---
async def cache_delete_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    if not await _admin_allowed(update, services):
        return

    args = context.args or []
    if len(args) != 1:
        await update.message.reply_text(USAGE_CACHE_DELETE)
        return

    key = args[0].upper()
    try:
        removed = services.cache_service.delete_value(key)
    except ValueError:
        await update.message.reply_text(USAGE_CACHE_DELETE)
        return
    except Exception as e:
        await _reply_failure(update, "cache_delete", e)
        return

    if removed:
        await update.message.reply_text(f"✅ {key} removed from the cache.")
    else:
        await update.message.reply_text(f"🗄 {key} is not in the cache.")


# --- /refresh_currencies (admin only) ---
async def refresh_currencies_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE, services: BotServices) -> None:
    """Handle /refresh_currencies command - reload the supported list from the provider now."""
    if not await _admin_allowed(update, services):
        return

    try:
        refreshed = await asyncio.to_thread(services.catalog.refresh)
    except Exception as e:
        await _reply_failure(update, "refresh_currencies", e)
        return

    if refreshed:
        await update.message.reply_text(f"✅ Currency list refreshed: {len(services.catalog)} currencies supported.")
    else:
        await update.message.reply_text(
            f"⚠️ Could not refresh the currency list; keeping {len(services.catalog)} known currencies."
        )


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Last-resort handler for exceptions raised outside the command bodies."""
    err = getattr(context, "error", None)
    if err is None:
        return
    logger.error("Unhandled exception while processing an update: %s", err, exc_info=err)
    if isinstance(update, Update) and update.effective_message is not None:
        try:
            await update.effective_message.reply_text(GENERIC_ERROR)
        except Exception:
            logger.exception("Failed to notify user about the error")


def build_handlers(services: BotServices):
    """
    Build and return list of Telegram bot handlers.

    Args:
        services: Shared services injected into every handler

    Returns:
        List of handler instances for registration with bot
    """
    return [
        CommandHandler(["start", "help"], partial(help_cmd, services=services)),
        CommandHandler("rate", partial(rate_cmd, services=services)),
        CommandHandler("rates", partial(rates_cmd, services=services)),
        CommandHandler("convert", partial(convert_cmd, services=services)),
        CommandHandler("currencies", partial(currencies_cmd, services=services)),
        CommandHandler("cache", partial(cache_cmd, services=services)),  # Admin only
        CommandHandler("cache_keys", partial(cache_keys_cmd, services=services)),  # Admin only
        CommandHandler("cache_stats", partial(cache_stats_cmd, services=services)),  # Admin only
        CommandHandler("cache_clear", partial(cache_clear_cmd, services=services)),  # Admin only
        CommandHandler("cache_delete", partial(cache_delete_cmd, services=services)),  # Admin only
        CommandHandler("refresh_currencies", partial(refresh_currencies_cmd, services=services)),  # Admin only
    ]
