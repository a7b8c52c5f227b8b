# tests/test_validators.py
"""
Validator Tests - Unit Tests for Input Parsing and Validation

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- exrate.shared.validators (functions under test)
- pytest (testing framework)
"""
import pytest

from exrate.shared.validators import (
    parse_amount,
    parse_currency_list,
    sanitize_for_log,
    validate_bot_token,
    validate_username,
)


class TestConfigValidators:
    def test_valid_bot_token(self):
        assert validate_bot_token("123456789:" + "A" * 35)

    @pytest.mark.parametrize("token", ["", "abc", "123:short", "123456789-" + "A" * 35])
    def test_invalid_bot_token(self, token):
        assert not validate_bot_token(token)

    def test_username_with_at(self):
        assert validate_username("@rates_admin")

    @pytest.mark.parametrize("username", ["", "abc", "bad name!"])
    def test_invalid_username(self, username):
        assert not validate_username(username)


class TestParseCurrencyList:
    def test_uppercases_and_strips(self):
        assert parse_currency_list("usd, gbp ,JPY") == ["USD", "GBP", "JPY"]

    def test_drops_blanks_and_duplicates(self):
        assert parse_currency_list("USD,,usd, ,GBP,") == ["USD", "GBP"]

    def test_empty(self):
        assert parse_currency_list("") == []
        assert parse_currency_list(None) == []


class TestParseAmount:
    @pytest.mark.parametrize("raw, expected", [
        ("100", 100.0),
        ("2.5", 2.5),
        ("1,250.75", 1250.75),
        ("0", 0.0),
    ])
    def test_valid(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "-5", "nan", "inf", "1e400"])
    def test_invalid(self, raw):
        assert parse_amount(raw) is None


class TestSanitizeForLog:
    def test_replaces_line_breaks(self):
        assert sanitize_for_log("EUR\r\nFAKE LOG LINE") == "EUR__FAKE LOG LINE"

    def test_non_string(self):
        assert sanitize_for_log(42) == "42"
