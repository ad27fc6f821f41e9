"""Runtime settings for laman."""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping

from .errors import ConfigError

# Defaults; each can be overridden via the LAMAN_* environment variables below
DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_API_TIMEOUT = 10.0
DEFAULT_SEARCH_DEBOUNCE_MS = 300
DEFAULT_DELIVERY_FEE = Decimal("200")
DEFAULT_SERVICE_FEE_RATE = Decimal("0.05")
DEFAULT_HEAVY_WEIGHT_KG = Decimal("15")

ENV_API_URL = "LAMAN_API_URL"
ENV_API_TIMEOUT = "LAMAN_API_TIMEOUT"
ENV_SEARCH_DEBOUNCE_MS = "LAMAN_SEARCH_DEBOUNCE_MS"
ENV_DELIVERY_FEE = "LAMAN_DELIVERY_FEE"
ENV_SERVICE_FEE_RATE = "LAMAN_SERVICE_FEE_RATE"
ENV_HEAVY_WEIGHT_KG = "LAMAN_HEAVY_WEIGHT_KG"


@dataclass(frozen=True)
class Settings:
    """Client and pricing settings shared by every engine in a session."""

    api_url: str = DEFAULT_API_URL
    api_timeout: float = DEFAULT_API_TIMEOUT
    search_debounce_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS
    delivery_fee: Decimal = DEFAULT_DELIVERY_FEE
    service_fee_rate: Decimal = DEFAULT_SERVICE_FEE_RATE
    heavy_weight_kg: Decimal = DEFAULT_HEAVY_WEIGHT_KG

    @property
    def search_debounce(self) -> float:
        """Debounce interval in seconds."""
        return self.search_debounce_ms / 1000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ).

        Raises:
            ConfigError: If a variable is present but malformed.
        """
        env = os.environ if environ is None else environ
        return cls(
            api_url=env.get(ENV_API_URL, DEFAULT_API_URL).rstrip("/"),
            api_timeout=_parse_float(env, ENV_API_TIMEOUT, DEFAULT_API_TIMEOUT),
            search_debounce_ms=_parse_int(env, ENV_SEARCH_DEBOUNCE_MS, DEFAULT_SEARCH_DEBOUNCE_MS),
            delivery_fee=_parse_decimal(env, ENV_DELIVERY_FEE, DEFAULT_DELIVERY_FEE),
            service_fee_rate=_parse_decimal(env, ENV_SERVICE_FEE_RATE, DEFAULT_SERVICE_FEE_RATE),
            heavy_weight_kg=_parse_decimal(env, ENV_HEAVY_WEIGHT_KG, DEFAULT_HEAVY_WEIGHT_KG),
        )


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(name, raw, "expected a number")
    if value <= 0:
        raise ConfigError(name, raw, "must be positive")
    return value


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(name, raw, "expected an integer")
    if value < 0:
        raise ConfigError(name, raw, "must not be negative")
    return value


def _parse_decimal(env: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ConfigError(name, raw, "expected a decimal")
    if not value.is_finite() or value < 0:
        raise ConfigError(name, raw, "must be a non-negative decimal")
    return value
