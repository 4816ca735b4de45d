"""
Tests for configuration, logging setup and money helpers.
"""

import json
import logging
import sys
from decimal import Decimal

import pytest

from subtracker.config import Settings
from subtracker.utils.log_config import ConsoleFormatter, JSONFormatter, configure_logging
from subtracker.utils.money import MoneyFormat, format_money, parse_money


class TestSettings:

    def test_defaults(self):
        config = Settings()
        assert config.AUTO_ADD_THRESHOLD == 0.8
        assert config.DEFAULT_CURRENCY == "USD"
        assert config.MAX_AMOUNT == Decimal("10000")
        assert config.TRIAL_WINDOW_CHARS == 100
        assert config.TRIAL_EXPIRY_WARNING_DAYS == 7

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("AUTO_ADD_THRESHOLD", "0.9")
        monkeypatch.setenv("DEFAULT_CURRENCY", "EUR")
        config = Settings()
        assert config.AUTO_ADD_THRESHOLD == 0.9
        assert config.DEFAULT_CURRENCY == "EUR"


def _record(**extra):
    record = logging.LogRecord(
        name="subtracker.services.detector",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Detections produced",
        args=None,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogging:

    def test_json_formatter_inlines_extra(self):
        line = JSONFormatter().format(_record(sender_domain="netflix.com"))
        payload = json.loads(line)
        assert payload["message"] == "Detections produced"
        assert payload["level"] == "INFO"
        assert payload["sender_domain"] == "netflix.com"

    def test_console_formatter(self):
        line = ConsoleFormatter().format(_record(sender_domain="netflix.com"))
        assert "Detections produced" in line
        assert "sender_domain=netflix.com" in line

    def test_console_context_precedes_traceback(self):
        try:
            raise ValueError("bad amount")
        except ValueError:
            record = _record(outcome="detected")
            record.exc_info = sys.exc_info()
        first_line, _, rest = ConsoleFormatter().format(record).partition("\n")
        assert first_line.endswith("outcome=detected")
        assert "ValueError: bad amount" in rest

    def test_json_formatter_includes_traceback(self):
        try:
            raise ValueError("bad amount")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        payload = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad amount" in payload["exc_info"]

    def test_configure_logging_replaces_handlers(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            configure_logging("DEBUG", json_output=True)
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestMoney:

    @pytest.mark.parametrize("text,expected", [
        ("$1,234.56", Decimal("1234.56")),
        ("9.99 USD", Decimal("9.99")),
        ("€9,99", Decimal("9.99")),
        ("1.234,56", Decimal("1234.56")),
        ("", None),
        ("abc", None),
    ])
    def test_parse_money(self, text, expected):
        assert parse_money(text) == expected

    def test_format_hint(self):
        assert parse_money("1,234", format_hint=MoneyFormat.US) == Decimal("1234")

    @pytest.mark.parametrize("amount,currency,expected", [
        (Decimal("1234.56"), "USD", "$1,234.56"),
        (Decimal("9.99"), "EUR", "€9.99"),
        (Decimal("5"), "GBP", "£5.00"),
        (Decimal("12"), "CAD", "CAD 12.00"),
        (None, "USD", "N/A"),
    ])
    def test_format_money(self, amount, currency, expected):
        assert format_money(amount, currency) == expected
