"""OrderPricer: цена ордера и проверка minNotional."""

import logging
from dataclasses import dataclass

from src.core.domain.order import RejectReason
from src.core.domain.symbol import SymbolConstraints
from src.core.math.precision import round_half_away_from_zero
from src.sizing.order_quantity import OrderQuantityResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderPriceResult:
    """Результат расчёта цены.

    При отказе BELOW_MINIMUM_NOTIONAL заполнены order_cost и min_notional.
    """

    ok: bool
    reason: RejectReason | None

    price: float
    quantity: float
    order_cost: float | None
    min_notional: float | None

    details: str


class OrderPricer:
    def compute_price(
        self,
        constraints: SymbolConstraints,
        quantity_result: OrderQuantityResult,
    ) -> OrderPriceResult:
        """Цена = base_price с точностью тика; qty * price >= minNotional.

        Args:
            constraints: ограничения инструмента
            quantity_result: результат OrderSizer

        Returns:
            OrderPriceResult
        """
        price_precision = constraints.price_precision
        price = round_half_away_from_zero(quantity_result.base_price, price_precision)
        logger.info(f"Calculated order price {price} (precision {price_precision})")

        quantity = quantity_result.quantity
        order_cost = quantity * price
        min_notional = constraints.min_notional
        if order_cost < min_notional:
            logger.error(f"Order cost {order_cost} (qty {quantity} * price {price}) is less than minNotional {min_notional}")
            return OrderPriceResult(
                ok=False,
                reason=RejectReason.BELOW_MINIMUM_NOTIONAL,
                price=price,
                quantity=quantity,
                order_cost=order_cost,
                min_notional=min_notional,
                details="Order quantity * Order price is less than minNotional",
            )

        return OrderPriceResult(
            ok=True,
            reason=None,
            price=price,
            quantity=quantity,
            order_cost=None,
            min_notional=None,
            details="Calculated order price",
        )
