"""
Order: Модели ордера, баланса и причин отказа

Immutable Pydantic модели и перечисления, общие для расчёта размера
ордера и постановки стоп-лосса.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class OrderSide(str, Enum):
    """Сторона сделки"""

    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    """Тип биржевого ордера"""

    STOP_LOSS_LIMIT = "STOP_LOSS_LIMIT"


class TimeInForce(str, Enum):
    """Срок действия ордера"""

    GTC = "GTC"


class RejectReason(str, Enum):
    """
    Причина отказа в расчёте ордера.

    Ожидаемые бизнес-отказы: возвращаются в результатах (ok=False),
    никогда не поднимаются как исключения.
    """

    BALANCE_NOT_FOUND = "BALANCE_NOT_FOUND"
    BELOW_MINIMUM_NOTIONAL = "BELOW_MINIMUM_NOTIONAL"
    NON_POSITIVE_QUANTITY = "NON_POSITIVE_QUANTITY"
    BELOW_MINIMUM_LOT_SIZE = "BELOW_MINIMUM_LOT_SIZE"
    PROFIT_GUARD_NOT_MET = "PROFIT_GUARD_NOT_MET"


# =============================================================================
# BALANCE
# =============================================================================


class Balance(BaseModel):
    """Баланс одного актива из accountInfo.balances."""

    asset: str = Field(..., min_length=1, description="Актив (например, 'USDT')")
    free: float = Field(..., ge=0, description="Свободный баланс")
    locked: float = Field(0.0, ge=0, description="Баланс в открытых ордерах")

    model_config = {"frozen": True}


# =============================================================================
# ORDER PARAMS
# =============================================================================


class StopLossLimitOrderParams(BaseModel):
    """
    Параметры STOP_LOSS_LIMIT ордера на продажу.

    Immutable модель. to_request() отдаёт dict в формате запроса биржи.
    """

    symbol: str = Field(..., min_length=1)
    side: OrderSide = Field(OrderSide.SELL)
    type: OrderType = Field(OrderType.STOP_LOSS_LIMIT)
    quantity: float = Field(..., gt=0, description="Количество (после комиссии)")
    price: float = Field(..., ge=0, description="Limit цена")
    time_in_force: TimeInForce = Field(TimeInForce.GTC, alias="timeInForce")
    stop_price: float = Field(..., ge=0, alias="stopPrice", description="Цена срабатывания")

    model_config = {"frozen": True, "populate_by_name": True}

    def to_request(self) -> dict[str, Any]:
        """Параметры запроса биржи (camelCase, enum как строки)."""
        return self.model_dump(by_alias=True, mode="json")
