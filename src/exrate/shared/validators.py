# src/exrate/shared/validators.py
"""
Input Validation Utilities - Security and Data Validation

This module validates configuration values and parses user input from bot
commands: currency codes, comma-separated code lists and conversion amounts.
Whether a well-formed code is actually supported is decided by the currency
catalog, not here.

Files that USE this module:
- exrate.config.settings (uses validation functions in Settings field validators)
- exrate.adapters.telegram.handlers (parses command arguments)
- exrate.application.rate_resolver (sanitizes codes before logging)

Files that this module USES:
- None (pure utility functions)
"""
import math
import re
from typing import List, Optional

_LOG_UNSAFE = re.compile(r"[\r\n]")


def validate_bot_token(token: str) -> bool:
    """
    Validate Telegram bot token format.

    Args:
        token: Bot token to validate

    Returns:
        True if valid, False otherwise
    """
    if not token:
        return False

    # Bot tokens should be in format: 123456789:ABCDEFghijklmnopQRSTUVwxyz
    pattern = r'^\d{8,10}:[A-Za-z0-9_-]{35}$'
    return bool(re.match(pattern, token))


def validate_username(username: str) -> bool:
    """
    Validate Telegram username format.

    Args:
        username: Username to validate (leading @ is allowed)

    Returns:
        True if valid, False otherwise
    """
    if not username:
        return False

    clean_username = username.lstrip('@')
    return bool(re.match(r'^[a-zA-Z0-9_]{5,32}$', clean_username))


def parse_currency_list(raw: str) -> List[str]:
    """
    Split a comma-separated list of codes, dropping blanks and duplicates.

    Order of first appearance is kept so replies follow the user's request.

    Args:
        raw: Text such as "usd, gbp,JPY"

    Returns:
        List of uppercase codes, e.g. ["USD", "GBP", "JPY"]
    """
    codes: List[str] = []
    for part in (raw or "").split(","):
        code = part.strip().upper()
        if code and code not in codes:
            codes.append(code)
    return codes


def parse_amount(value: str) -> Optional[float]:
    """
    Parse a conversion amount typed by a user.

    Accepts thousands separators ("1,250.5"). Rejects negatives, NaN and
    infinities.

    Returns:
        Amount as float, or None if the input is not a usable amount
    """
    if not value:
        return None
    try:
        amount = float(value.replace(",", ""))
    except ValueError:
        return None
    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        return None
    return amount


def sanitize_for_log(text: str) -> str:
    """Replace CR/LF in user-supplied text so it cannot forge log lines."""
    return _LOG_UNSAFE.sub("_", str(text))
