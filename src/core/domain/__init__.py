"""
Domain models and value objects.

Contains exchange symbol constraints, balances and order parameters.
"""

from src.core.domain.order import (
    Balance,
    OrderSide,
    OrderType,
    RejectReason,
    StopLossLimitOrderParams,
    TimeInForce,
)
from src.core.domain.symbol import (
    LotSizeFilter,
    MinNotionalFilter,
    PercentPriceFilter,
    PriceFilter,
    SymbolConstraints,
)

__all__ = [
    # Symbol constraints
    "SymbolConstraints",
    "LotSizeFilter",
    "PriceFilter",
    "PercentPriceFilter",
    "MinNotionalFilter",
    # Orders
    "OrderSide",
    "OrderType",
    "TimeInForce",
    "RejectReason",
    "Balance",
    "StopLossLimitOrderParams",
]
