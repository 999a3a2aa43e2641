"""Service settings, read from environment variables."""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Tuple


def _decimal_setting(name: str, default: Decimal) -> Decimal:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        result = Decimal(value.strip())
    except InvalidOperation as exc:
        raise ValueError(f"Environment variable {name} must be a decimal number, got {value!r}") from exc
    if not result.is_finite() or result < 0:
        raise ValueError(f"Environment variable {name} must be a non-negative number, got {value!r}")
    return result


def _list_setting(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    """Comma separated values. Blank items are dropped."""
    value = os.getenv(name)
    if value is None:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class ServiceSettings:
    default_hourly_rate: Decimal = Decimal("50")
    default_effort_multiplier: Decimal = Decimal("1.0")
    cors_origins: Tuple[str, ...] = ("http://localhost:3000",)
    # Empty means: every LLM in llm_config.json that has a priority, in priority order.
    llm_names: Tuple[str, ...] = ()


def load_settings() -> ServiceSettings:
    defaults = ServiceSettings()
    return ServiceSettings(
        default_hourly_rate=_decimal_setting("CODECRAFT_DEFAULT_HOURLY_RATE", defaults.default_hourly_rate),
        default_effort_multiplier=_decimal_setting("CODECRAFT_DEFAULT_EFFORT_MULTIPLIER", defaults.default_effort_multiplier),
        cors_origins=_list_setting("CODECRAFT_CORS_ORIGINS", defaults.cors_origins),
        llm_names=_list_setting("CODECRAFT_LLM_NAMES", defaults.llm_names),
    )


__all__ = ["ServiceSettings", "load_settings"]
