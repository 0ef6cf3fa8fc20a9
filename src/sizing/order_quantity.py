"""OrderSizer: количество ордера из баланса и процента.

buy:
    quantity_raw = 1 / (price / free_balance / (percentage / 100))
    (== free_balance * percentage / 100 / price)
sell:
    quantity_raw = free_balance * (percentage / 100)

В обоих случаях вычитается комиссия (0.1%) и результат округляется до
точности лота. percentage: проценты 0–100; диапазон проверяет вызывающий.
"""

import logging
from dataclasses import dataclass

from src.core.config import OrderSizingConfig
from src.core.domain.order import OrderSide, RejectReason
from src.core.domain.symbol import SymbolConstraints
from src.core.math.precision import apply_commission
from src.sizing.balance import BalanceResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderQuantityResult:
    """Результат расчёта количества."""

    ok: bool
    reason: RejectReason | None

    quantity: float
    base_price: float  # Цена закрытия последней свечи
    free_balance: float

    details: str


class OrderSizer:
    def __init__(self, config: OrderSizingConfig | None = None):
        self.config = config or OrderSizingConfig()

    def compute_quantity(
        self,
        constraints: SymbolConstraints,
        side: OrderSide,
        balance_result: BalanceResult,
        percentage: float,
        last_close_price: float,
    ) -> OrderQuantityResult:
        """Расчёт количества ордера.

        Args:
            constraints: ограничения инструмента
            side: сторона сделки
            balance_result: результат BalanceResolver
            percentage: доля баланса в процентах (0–100)
            last_close_price: цена закрытия последней свечи

        Returns:
            OrderQuantityResult (ok=False: NON_POSITIVE_QUANTITY / BELOW_MINIMUM_LOT_SIZE)
        """
        base_price = float(last_close_price)
        free_balance = balance_result.free_balance
        lot_precision = constraints.lot_precision
        logger.info(f"Retrieved latest asset price {base_price}")

        if side == OrderSide.BUY:
            quantity = apply_commission(
                self._buy_quantity_before_commission(base_price, free_balance, percentage),
                lot_precision,
                self.config.commission_rate,
            )
            if quantity <= 0:
                logger.error(f"Order quantity {quantity} is less or equal than 0 (free balance {free_balance})")
                return self._rejected(
                    RejectReason.NON_POSITIVE_QUANTITY,
                    quantity,
                    base_price,
                    free_balance,
                    "Order quantity is less or equal than 0",
                )
        else:
            quantity = apply_commission(
                free_balance * (percentage / 100),
                lot_precision,
                self.config.commission_rate,
            )
            min_qty = constraints.lot_min_qty
            if quantity <= min_qty:
                logger.error(
                    f"Order quantity {quantity} is less or equal than minimum quantity {min_qty} "
                    f"(free balance {free_balance})"
                )
                return self._rejected(
                    RejectReason.BELOW_MINIMUM_LOT_SIZE,
                    quantity,
                    base_price,
                    free_balance,
                    f"Order quantity is less or equal than minimum quantity - {min_qty}",
                )

        logger.info(f"Order quantity {quantity}")
        return OrderQuantityResult(
            ok=True,
            reason=None,
            quantity=quantity,
            base_price=base_price,
            free_balance=free_balance,
            details="Calculated order quantity",
        )

    @staticmethod
    def _buy_quantity_before_commission(price: float, free_balance: float, percentage: float) -> float:
        # 1 / (price / balance / pct) с защитой от деления на ноль
        if price <= 0 or free_balance <= 0 or percentage <= 0:
            return 0.0
        return 1 / (price / free_balance / (percentage / 100))

    @staticmethod
    def _rejected(
        reason: RejectReason,
        quantity: float,
        base_price: float,
        free_balance: float,
        details: str,
    ) -> OrderQuantityResult:
        return OrderQuantityResult(
            ok=False,
            reason=reason,
            quantity=quantity,
            base_price=base_price,
            free_balance=free_balance,
            details=details,
        )
