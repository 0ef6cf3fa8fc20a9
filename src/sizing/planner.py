"""OrderPlanner: полный расчёт ордера (ограничения → баланс → количество → цена).

Останавливается на первом отказе и возвращает все промежуточные
результаты для диагностики. Ордер не размещается.
"""

import logging
from dataclasses import dataclass

from src.core.domain.order import OrderSide, RejectReason
from src.core.domain.symbol import SymbolConstraints
from src.sizing.balance import BalanceResolver, BalanceResult
from src.sizing.order_price import OrderPricer, OrderPriceResult
from src.sizing.order_quantity import OrderQuantityResult, OrderSizer
from src.sizing.symbol_constraints import SymbolConstraintResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderPlan:
    """Результат планирования ордера."""

    ok: bool
    reason: RejectReason | None
    rejected_at: str | None  # "balance" | "quantity" | "price"

    constraints: SymbolConstraints
    balance: BalanceResult
    quantity: OrderQuantityResult | None = None
    price: OrderPriceResult | None = None

    @property
    def details(self) -> str:
        for stage in (self.price, self.quantity, self.balance):
            if stage is not None:
                return stage.details
        return ""


class OrderPlanner:
    def __init__(
        self,
        resolver: SymbolConstraintResolver,
        balance_resolver: BalanceResolver,
        sizer: OrderSizer | None = None,
        pricer: OrderPricer | None = None,
    ):
        self.resolver = resolver
        self.balance_resolver = balance_resolver
        self.sizer = sizer or OrderSizer()
        self.pricer = pricer or OrderPricer()

    async def plan_order(
        self,
        symbol: str,
        side: OrderSide,
        percentage: float,
        last_close_price: float,
    ) -> OrderPlan:
        """Расчёт количества и цены ордера.

        Args:
            symbol: инструмент
            side: сторона сделки
            percentage: доля баланса в процентах (0–100)
            last_close_price: цена закрытия последней свечи

        Returns:
            OrderPlan; при ok=True заполнены quantity и price
        """
        constraints = await self.resolver.resolve(symbol)

        balance = await self.balance_resolver.get_balance(constraints, side)
        if not balance.ok:
            return OrderPlan(False, balance.reason, "balance", constraints, balance)

        quantity = self.sizer.compute_quantity(constraints, side, balance, percentage, last_close_price)
        if not quantity.ok:
            return OrderPlan(False, quantity.reason, "quantity", constraints, balance, quantity)

        price = self.pricer.compute_price(constraints, quantity)
        if not price.ok:
            return OrderPlan(False, price.reason, "price", constraints, balance, quantity, price)

        logger.info(f"Planned {side.value} {symbol}: quantity {quantity.quantity} @ {price.price}")
        return OrderPlan(True, None, None, constraints, balance, quantity, price)
