"""Tests for Settings."""

from decimal import Decimal

import pytest

from laman.config import Settings
from laman.errors import ConfigError


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.api_url == "http://localhost:8080"
        assert settings.search_debounce == 0.3
        assert settings.delivery_fee == Decimal("200")
        assert settings.service_fee_rate == Decimal("0.05")
        assert settings.heavy_weight_kg == Decimal("15")

    def test_overrides(self):
        settings = Settings.from_env(
            {
                "LAMAN_API_URL": "https://api.example.com/",
                "LAMAN_API_TIMEOUT": "2.5",
                "LAMAN_SEARCH_DEBOUNCE_MS": "500",
                "LAMAN_DELIVERY_FEE": "150",
            }
        )

        assert settings.api_url == "https://api.example.com"
        assert settings.api_timeout == 2.5
        assert settings.search_debounce == 0.5
        assert settings.delivery_fee == Decimal("150")

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("LAMAN_HEAVY_WEIGHT_KG", "20")
        assert Settings.from_env().heavy_weight_kg == Decimal("20")

    @pytest.mark.parametrize(
        "name,value",
        [
            ("LAMAN_API_TIMEOUT", "soon"),
            ("LAMAN_API_TIMEOUT", "0"),
            ("LAMAN_SEARCH_DEBOUNCE_MS", "-1"),
            ("LAMAN_SERVICE_FEE_RATE", "five"),
            ("LAMAN_DELIVERY_FEE", "-10"),
        ],
    )
    def test_malformed_values_raise(self, name, value):
        with pytest.raises(ConfigError) as exc_info:
            Settings.from_env({name: value})
        assert exc_info.value.name == name
