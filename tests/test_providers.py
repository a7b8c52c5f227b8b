# tests/test_providers.py
"""
Provider Tests - Unit Tests for the exchangerate.host Client

This module tests the upstream rate provider: request construction, the
retry-on-timeout policy, classification of HTTP and transport failures, and
validation of the /latest and /symbols payloads.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- exrate.adapters.providers.exchangerate_host (ExchangeRateHostProvider for testing)
- exrate.domain.errors (expected exception types)
- unittest.mock (Mock for API mocking)
- pytest (testing framework)
"""
import pytest

from unittest.mock import Mock, patch
import requests

from exrate.adapters.providers.exchangerate_host import ExchangeRateHostProvider
from exrate.domain.errors import UpstreamClientError, UpstreamServerError, UpstreamUnreachableError
from exrate.domain.models import UpstreamFailure

GET = "exrate.adapters.providers.exchangerate_host.requests.get"
SLEEP = "exrate.adapters.providers.exchangerate_host.time.sleep"


def _response(status_code=200, payload=None, json_error=None):
    resp = Mock()
    resp.status_code = status_code
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    return resp


def _provider(**kwargs):
    params = dict(base_url="https://rates.example.com/", timeout=5, max_attempts=3, retry_delay=0.5, access_key="")
    params.update(kwargs)
    return ExchangeRateHostProvider(**params)


class TestProviderInit:
    def test_init_with_explicit_params(self):
        provider = _provider()
        assert provider.base_url == "https://rates.example.com"
        assert provider.timeout == 5
        assert provider.max_attempts == 3
        assert provider.retry_delay == 0.5

    def test_init_rejects_zero_attempts(self):
        with pytest.raises(ValueError, match="max_attempts"):
            _provider(max_attempts=0)


class TestFetchRates:
    @patch(GET)
    def test_success_builds_latest_query(self, mock_get):
        mock_get.return_value = _response(payload={"base": "EUR", "rates": {"USD": 1.09, "GBP": 0.86}})

        rates = _provider().fetch_rates("eur", ["USD", "gbp"])

        assert rates == {"USD": 1.09, "GBP": 0.86}
        mock_get.assert_called_once()
        args, kwargs = mock_get.call_args
        assert args[0] == "https://rates.example.com/latest"
        assert kwargs["params"] == {"base": "EUR", "symbols": "GBP,USD"}
        assert kwargs["timeout"] == 5

    @patch(GET)
    def test_without_quotes_omits_symbols(self, mock_get):
        mock_get.return_value = _response(payload={"rates": {"USD": 1.09}})

        _provider().fetch_rates("EUR")

        assert mock_get.call_args.kwargs["params"] == {"base": "EUR"}

    @patch(GET)
    def test_access_key_is_sent(self, mock_get):
        mock_get.return_value = _response(payload={"rates": {"USD": 1.09}})

        _provider(access_key="secret").fetch_rates("EUR", ["USD"])

        assert mock_get.call_args.kwargs["params"]["access_key"] == "secret"

    @patch(GET)
    def test_codes_are_normalized(self, mock_get):
        mock_get.return_value = _response(payload={"rates": {"usd": 1, " gbp ": 0.86}})

        rates = _provider().fetch_rates("EUR", ["USD", "GBP"])

        assert rates == {"USD": 1.0, "GBP": 0.86}

    @patch(SLEEP)
    @patch(GET)
    def test_timeout_is_retried_then_succeeds(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            requests.exceptions.Timeout("slow"),
            requests.exceptions.Timeout("slow"),
            _response(payload={"rates": {"USD": 1.09}}),
        ]

        rates = _provider().fetch_rates("EUR", ["USD"])

        assert rates == {"USD": 1.09}
        assert mock_get.call_count == 3
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(0.5)

    @patch(SLEEP)
    @patch(GET)
    def test_timeout_on_every_attempt(self, mock_get, mock_sleep):
        mock_get.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(UpstreamUnreachableError, match="timed out after 3 attempts") as exc_info:
            _provider().fetch_rates("EUR", ["USD"])

        assert exc_info.value.reason is UpstreamFailure.TIMEOUT
        assert exc_info.value.status_code is None
        assert mock_get.call_count == 3
        assert mock_sleep.call_count == 2

    @patch(SLEEP)
    @patch(GET)
    def test_single_attempt_policy_does_not_sleep(self, mock_get, mock_sleep):
        mock_get.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(UpstreamUnreachableError):
            _provider(max_attempts=1).fetch_rates("EUR", ["USD"])

        assert mock_get.call_count == 1
        mock_sleep.assert_not_called()

    @patch(SLEEP)
    @patch(GET)
    def test_connection_error_is_not_retried(self, mock_get, mock_sleep):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(UpstreamUnreachableError, match="request failed") as exc_info:
            _provider().fetch_rates("EUR", ["USD"])

        assert exc_info.value.reason is UpstreamFailure.CONNECTION
        assert mock_get.call_count == 1
        mock_sleep.assert_not_called()

    @patch(SLEEP)
    @patch(GET)
    def test_server_error_is_not_retried(self, mock_get, mock_sleep):
        mock_get.return_value = _response(status_code=503)

        with pytest.raises(UpstreamServerError) as exc_info:
            _provider().fetch_rates("EUR", ["USD"])

        assert exc_info.value.status_code == 503
        assert exc_info.value.reason is UpstreamFailure.SERVER_ERROR
        assert mock_get.call_count == 1
        mock_sleep.assert_not_called()

    @patch(GET)
    def test_client_error(self, mock_get):
        mock_get.return_value = _response(status_code=404)

        with pytest.raises(UpstreamClientError) as exc_info:
            _provider().fetch_rates("EUR", ["USD"])

        assert exc_info.value.status_code == 404
        assert exc_info.value.reason is UpstreamFailure.CLIENT_ERROR

    @patch(GET)
    def test_invalid_json(self, mock_get):
        mock_get.return_value = _response(json_error=ValueError("Invalid JSON"))

        with pytest.raises(UpstreamUnreachableError, match="invalid JSON") as exc_info:
            _provider().fetch_rates("EUR", ["USD"])

        assert exc_info.value.reason is UpstreamFailure.MALFORMED

    @patch(GET)
    def test_non_dict_response(self, mock_get):
        mock_get.return_value = _response(payload=["not", "a", "dict"])

        with pytest.raises(UpstreamUnreachableError) as exc_info:
            _provider().fetch_rates("EUR", ["USD"])

        assert exc_info.value.reason is UpstreamFailure.MALFORMED

    @patch(GET)
    def test_unsuccessful_body(self, mock_get):
        mock_get.return_value = _response(payload={"success": False, "error": {"code": 101}})

        with pytest.raises(UpstreamUnreachableError, match="unsuccessful") as exc_info:
            _provider().fetch_rates("EUR", ["USD"])

        assert exc_info.value.reason is UpstreamFailure.MALFORMED

    @patch(GET)
    def test_missing_rates_field(self, mock_get):
        mock_get.return_value = _response(payload={"base": "EUR"})

        with pytest.raises(UpstreamUnreachableError, match="'rates'"):
            _provider().fetch_rates("EUR", ["USD"])

    @pytest.mark.parametrize("bad_value", [-1.0, "1.09", None, True, float("nan"), float("inf")])
    @patch(GET)
    def test_invalid_rate_value(self, mock_get, bad_value):
        mock_get.return_value = _response(payload={"rates": {"USD": bad_value}})

        with pytest.raises(UpstreamUnreachableError, match="invalid rate for USD"):
            _provider().fetch_rates("EUR", ["USD"])


class TestFetchSupportedCurrencies:
    @patch(GET)
    def test_symbols_with_descriptions(self, mock_get):
        mock_get.return_value = _response(payload={
            "symbols": {
                "EUR": {"code": "EUR", "description": "Euro"},
                "usd": {"code": "usd", "description": "United States Dollar"},
            }
        })

        symbols = _provider().fetch_supported_currencies()

        assert symbols == {"EUR": "Euro", "USD": "United States Dollar"}
        assert mock_get.call_args.args[0] == "https://rates.example.com/symbols"

    @patch(GET)
    def test_symbols_as_plain_strings(self, mock_get):
        mock_get.return_value = _response(payload={"symbols": {"GBP": "British Pound Sterling"}})

        assert _provider().fetch_supported_currencies() == {"GBP": "British Pound Sterling"}

    @patch(GET)
    def test_missing_symbols_field(self, mock_get):
        mock_get.return_value = _response(payload={"success": True})

        with pytest.raises(UpstreamUnreachableError, match="'symbols'") as exc_info:
            _provider().fetch_supported_currencies()

        assert exc_info.value.reason is UpstreamFailure.MALFORMED

    @patch(SLEEP)
    @patch(GET)
    def test_symbols_timeout_uses_same_retry_policy(self, mock_get, mock_sleep):
        mock_get.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(UpstreamUnreachableError):
            _provider().fetch_supported_currencies()

        assert mock_get.call_count == 3
