"""
Precision: округление количеств и цен по шагам биржи

Биржа сообщает точность инструмента строками шага (stepSize / tickSize),
например "0.00100000". Модуль переводит такие строки в число знаков после
запятой и реализует две НЕЗАВИСИМЫЕ политики округления:

- round_half_away_from_zero: для размеров ордера и отображаемых цен
- truncate_down: для stop/limit цен стоп-лосса (никогда не округляет вверх)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. truncate_down(x, d) <= round_half_away_from_zero(x, d) для x >= 0
2. round_half_away_from_zero идемпотентна на уже округлённых значениях
3. Округление работает по точному двоичному значению float, поэтому
   результат совпадает с fixed-point форматированием биржевого клиента
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

# =============================================================================
# CONSTANTS
# =============================================================================

# Комиссия биржи, вычитаемая из количества перед округлением (0.1%)
COMMISSION_RATE: Final[float] = 0.001


# =============================================================================
# EXCEPTIONS
# =============================================================================


class MalformedStepSizeError(ValueError):
    """Строка шага/тика не содержит цифры '1' и не задаёт точность."""

    def __init__(self, step: object):
        self.step = step
        super().__init__(f"Cannot derive precision from step size {step!r}")


# =============================================================================
# PRECISION
# =============================================================================


def precision_of(step: str | None) -> int:
    """
    Число знаков после запятой, заданное строкой шага биржи.

    Точность определяется позицией первой цифры '1' в строке минус один
    (позиция десятичной точки). Для целых шагов ("1", "1.00000000")
    точность равна 0.

    Args:
        step: stepSize или tickSize в строковом виде биржи

    Returns:
        Количество знаков после запятой (>= 0)

    Raises:
        MalformedStepSizeError: Если step отсутствует или не содержит '1'

    Examples:
        >>> precision_of("0.0100")
        2
        >>> precision_of("0.00100000")
        3
        >>> precision_of("1.00000000")
        0
    """
    if not isinstance(step, str):
        raise MalformedStepSizeError(step)

    position = step.find("1")
    if position < 0:
        raise MalformedStepSizeError(step)

    return max(position - 1, 0)


# =============================================================================
# ROUNDING
# =============================================================================


def _validate_rounding_args(value: float, decimals: int) -> None:
    if not math.isfinite(value):
        raise ValueError(f"value must be a finite number, got {value}")
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")


def round_half_away_from_zero(value: float, decimals: int) -> float:
    """
    Fixed-point округление до decimals знаков (половина от нуля).

    Округляется точное двоичное значение float, а не его десятичная запись:
    100.005 хранится как 100.00499999..., поэтому round(100.005, 2) == 100.0.

    Args:
        value: Исходное значение
        decimals: Количество знаков после запятой

    Returns:
        Округлённое значение

    Raises:
        ValueError: Если value NaN/Inf или decimals < 0

    Examples:
        >>> round_half_away_from_zero(4.9956, 3)
        4.996
        >>> round_half_away_from_zero(-0.125, 2)
        -0.13
    """
    _validate_rounding_args(value, decimals)

    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def truncate_down(value: float, decimals: int) -> float:
    """
    Округление вниз: floor(value * 10^decimals) / 10^decimals.

    Используется для защитных цен стоп-лосса: цена никогда не сдвигается
    вверх за задуманный триггер.

    Args:
        value: Исходное значение
        decimals: Количество знаков после запятой

    Returns:
        Значение, усечённое вниз до decimals знаков

    Raises:
        ValueError: Если value NaN/Inf или decimals < 0
    """
    _validate_rounding_args(value, decimals)

    scale = 10**decimals
    return math.floor(value * scale) / scale


def apply_commission(
    quantity: float,
    decimals: int,
    rate: float = COMMISSION_RATE,
) -> float:
    """
    Вычитание комиссии из количества с округлением до шага лота.

    quantity_net = round(quantity - quantity * rate, decimals)

    Args:
        quantity: Количество до комиссии
        decimals: Точность лота (precision_of(stepSize))
        rate: Доля комиссии (default: COMMISSION_RATE = 0.1%)

    Returns:
        Количество после комиссии
    """
    return round_half_away_from_zero(quantity - quantity * rate, decimals)
