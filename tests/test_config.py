"""
Configuration Tests
"""

import pytest
import pytz

from config import ServiceConfig, resolve_policy, resolve_timezone
from ingestion.models import ResultPolicy


class TestServiceConfig:

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
        monkeypatch.setenv("SUPABASE_KEY", "secret")
        monkeypatch.setenv("REPORT_TIMEZONE", "America/Sao_Paulo")
        monkeypatch.setenv("RESULT_POLICY", "martingale-aware")
        monkeypatch.setenv("TRADES_TABLE", "atenza_trades")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.delenv("WEBHOOK_URL", raising=False)

        config = ServiceConfig.from_env()
        assert config.telegram_bot_token == "123:abc"
        assert config.supabase_url == "https://example.supabase.co"
        assert config.timezone.zone == "America/Sao_Paulo"
        assert config.result_policy == ResultPolicy.MARTINGALE_AWARE
        assert config.trades_table == "atenza_trades"
        assert config.port == 8080
        assert config.webhook_url is None

    def test_defaults(self, monkeypatch):
        for name in ("REPORT_TIMEZONE", "RESULT_POLICY", "TRADES_TABLE", "PORT"):
            monkeypatch.delenv(name, raising=False)
        config = ServiceConfig.from_env()
        assert config.timezone == pytz.utc
        assert config.result_policy == ResultPolicy.STRICT
        assert config.trades_table == "trades"
        assert config.port == 10000

    def test_invalid_timezone(self, monkeypatch):
        monkeypatch.setenv("REPORT_TIMEZONE", "Mars/Olympus_Mons")
        with pytest.raises(ValueError):
            ServiceConfig.from_env()


class TestResolvers:

    @pytest.mark.parametrize("value,expected", [
        ("strict", ResultPolicy.STRICT),
        ("STRICT", ResultPolicy.STRICT),
        (" martingale_aware ", ResultPolicy.MARTINGALE_AWARE),
        ("Martingale-Aware", ResultPolicy.MARTINGALE_AWARE),
    ])
    def test_resolve_policy(self, value, expected):
        assert resolve_policy(value) == expected

    def test_resolve_policy_rejects_unknown(self):
        with pytest.raises(ValueError):
            resolve_policy("lenient")

    def test_resolve_timezone(self):
        assert resolve_timezone("US/Central").zone == "US/Central"
