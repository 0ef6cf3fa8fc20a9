"""
Конфигурация расчёта ордеров и стоп-лосса.

Единицы измерения различаются по параметрам и не смешиваются:
- percentage (аргумент вызова OrderSizer): проценты 0–100, например 50
- stop_percentage / limit_percentage / last_buy_percentage: доли, например 0.98
- commission_rate: доля, например 0.001 (0.1%)
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping

from src.core.math.precision import COMMISSION_RATE


class ConfigurationError(ValueError):
    """Невалидная или неполная конфигурация."""


def _validate_fraction(value: float, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value}")
    if value < 0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")


# =============================================================================
# CONFIGS
# =============================================================================


@dataclass(frozen=True)
class StopLossLimitConfig:
    """Защита прибыли для стоп-лосса.

    Стоп-лосс ставится только если last_close >= last_buy_price * last_buy_percentage.
    """

    last_buy_percentage: float

    def __post_init__(self) -> None:
        _validate_fraction(self.last_buy_percentage, "last_buy_percentage")


@dataclass(frozen=True)
class StopLossLimitInfo:
    """Уровни стоп-лосса в долях от последней цены закрытия."""

    stop_percentage: float
    limit_percentage: float

    def __post_init__(self) -> None:
        _validate_fraction(self.stop_percentage, "stop_percentage")
        _validate_fraction(self.limit_percentage, "limit_percentage")


@dataclass(frozen=True)
class OrderSizingConfig:
    """Комиссия и ключи внешнего кэша."""

    commission_rate: float = COMMISSION_RATE
    symbol_info_key_prefix: str = "symbol-info-"
    last_buy_price_key_prefix: str = "last-buy-price-"

    def __post_init__(self) -> None:
        _validate_fraction(self.commission_rate, "commission_rate")
        if self.commission_rate >= 1.0:
            raise ConfigurationError(f"commission_rate must be < 1, got {self.commission_rate}")

    def symbol_info_key(self, symbol: str) -> str:
        return f"{self.symbol_info_key_prefix}{symbol}"

    def last_buy_price_key(self, symbol: str) -> str:
        return f"{self.last_buy_price_key_prefix}{symbol}"


# =============================================================================
# LOADING
# =============================================================================


def _as_fraction(section: Mapping[str, Any], key: str) -> float:
    if key not in section:
        raise ConfigurationError(f"stopLossLimit.{key} is required")
    try:
        return float(section[key])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"stopLossLimit.{key} must be numeric, got {section[key]!r}") from e


def load_stop_chaser_config(
    mapping: Mapping[str, Any],
) -> tuple[StopLossLimitConfig, StopLossLimitInfo]:
    """
    Чтение секции stopLossLimit из конфигурации задачи.

    Принимает как саму секцию задачи ({"stopLossLimit": {...}}), так и
    полный конфиг с префиксом jobs.macdStopChaser. Значения могут быть
    строками (например, из переменных окружения).

    Args:
        mapping: Конфигурация задачи

    Returns:
        (StopLossLimitConfig, StopLossLimitInfo)

    Raises:
        ConfigurationError: Если секция или обязательный ключ отсутствует
    """
    job = mapping.get("jobs", {}).get("macdStopChaser", mapping)
    section = job.get("stopLossLimit")
    if not isinstance(section, Mapping):
        raise ConfigurationError("stopLossLimit section is required")

    guard = StopLossLimitConfig(
        last_buy_percentage=_as_fraction(section, "lastBuyPercentage"),
    )
    info = StopLossLimitInfo(
        stop_percentage=_as_fraction(section, "stopPercentage"),
        limit_percentage=_as_fraction(section, "limitPercentage"),
    )
    return guard, info
