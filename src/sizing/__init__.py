"""Sizing: расчёт безопасных параметров ордера под ограничения биржи.

- SymbolConstraintResolver: фильтры инструмента (с внешним кэшем)
- BalanceResolver: свободный баланс актива сделки
- OrderSizer: количество с учётом комиссии и minQty
- OrderPricer: цена с точностью тика и проверка minNotional
- StopLossPlacer: STOP_LOSS_LIMIT с защитой прибыли
- OrderPlanner: цепочка resolve → balance → quantity → price
"""

from .balance import BalanceResolver, BalanceResult
from .order_price import OrderPriceResult, OrderPricer
from .order_quantity import OrderQuantityResult, OrderSizer
from .planner import OrderPlan, OrderPlanner
from .stop_loss import StopLossDecision, StopLossPlacer, StopLossState
from .symbol_constraints import SymbolConstraintResolver

__all__ = [
    "SymbolConstraintResolver",
    "BalanceResolver",
    "BalanceResult",
    "OrderSizer",
    "OrderQuantityResult",
    "OrderPricer",
    "OrderPriceResult",
    "StopLossPlacer",
    "StopLossDecision",
    "StopLossState",
    "OrderPlanner",
    "OrderPlan",
]
