"""StopLossPlacer: защищённый STOP_LOSS_LIMIT ордер на продажу.

Состояния:
    IDLE → GUARD_CHECK → {ABORTED | SIZING} → {REJECTED | SUBMITTED}

Терминальные: ABORTED, REJECTED, SUBMITTED.

Порядок:
1. last_buy_price из кэша (last-buy-price-{symbol}, по умолчанию 0)
2. Защита прибыли: last_close < last_buy_price * last_buy_percentage → ABORTED
3. stop/limit = truncate_down(last_close * pct, price_precision)
4. quantity = free_balance - комиссия, с точностью лота
5. quantity > minQty и quantity * limit >= minNotional, иначе REJECTED
6. Уведомление (fire-and-forget) → ордер → уведомление с результатом → SUBMITTED

Ордер не повторяется: ошибка биржи пробрасывается вызывающему.
"""

import asyncio
import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.core.config import OrderSizingConfig, StopLossLimitConfig, StopLossLimitInfo
from src.core.domain.order import RejectReason, StopLossLimitOrderParams
from src.core.domain.symbol import SymbolConstraints
from src.core.math.precision import apply_commission, truncate_down
from src.exchange.interfaces import ExchangeClient, KeyValueCache, Notifier
from src.sizing.balance import BalanceResult

logger = logging.getLogger(__name__)


class StopLossState(str, Enum):
    """Состояние постановки стоп-лосса."""

    IDLE = "IDLE"
    GUARD_CHECK = "GUARD_CHECK"
    ABORTED = "ABORTED"
    SIZING = "SIZING"
    REJECTED = "REJECTED"
    SUBMITTED = "SUBMITTED"


@dataclass(frozen=True)
class StopLossDecision:
    """Результат постановки стоп-лосса (всегда в терминальном состоянии)."""

    ok: bool
    state: StopLossState
    reason: RejectReason | None

    last_close_price: float
    last_buy_price: float

    stop_price: float | None = None
    limit_price: float | None = None
    quantity: float | None = None

    # Диагностика BELOW_MINIMUM_NOTIONAL
    order_cost: float | None = None
    min_notional: float | None = None

    # SUBMITTED
    order_params: dict[str, Any] | None = None
    order_result: Any = None

    details: str = ""


def _format_message(title: str, label: str, payload: Any) -> str:
    body = json.dumps(payload, indent=2, default=str)
    return f"{title}: *STOP_LOSS_LIMIT*\n- {label}: ```{body}```"


class StopLossPlacer:
    """Постановка STOP_LOSS_LIMIT ордера с защитой прибыли."""

    def __init__(
        self,
        exchange: ExchangeClient,
        cache: KeyValueCache,
        notifier: Notifier,
        guard_config: StopLossLimitConfig,
        config: OrderSizingConfig | None = None,
    ):
        """
        Args:
            exchange: биржевой клиент (order)
            cache: внешний кэш (last-buy-price)
            notifier: канал уведомлений
            guard_config: порог защиты прибыли (last_buy_percentage)
            config: комиссия и ключи кэша (опционально)
        """
        self.exchange = exchange
        self.cache = cache
        self.notifier = notifier
        self.guard_config = guard_config
        self.config = config or OrderSizingConfig()

        # Fire-and-forget уведомления, удерживаемые до завершения
        self._background_tasks: set[asyncio.Task] = set()

    async def place_stop_loss_limit_order(
        self,
        constraints: SymbolConstraints,
        balance_result: BalanceResult,
        last_close_price: float,
        stop_loss_info: StopLossLimitInfo,
    ) -> StopLossDecision:
        """Постановка стоп-лосса.

        Args:
            constraints: ограничения инструмента
            balance_result: свободный баланс базового актива (sell)
            last_close_price: цена закрытия последней свечи
            stop_loss_info: stop/limit в долях от last_close_price

        Returns:
            StopLossDecision в состоянии ABORTED, REJECTED или SUBMITTED

        Raises:
            MalformedStepSizeError: если у инструмента нет stepSize/tickSize
            Exception: ошибки биржи и уведомления о результате пробрасываются
        """
        symbol = constraints.symbol
        last_close = float(last_close_price)
        logger.info(f"Started place stop loss limit order for {symbol}")

        # GUARD_CHECK
        last_buy_price = await self._get_last_buy_price(symbol)
        threshold = last_buy_price * self.guard_config.last_buy_percentage
        if last_close < threshold:
            logger.error(
                f"Last close {last_close} is below protected price {threshold} "
                f"(last buy {last_buy_price}). Do not place order."
            )
            return StopLossDecision(
                ok=False,
                state=StopLossState.ABORTED,
                reason=RejectReason.PROFIT_GUARD_NOT_MET,
                last_close_price=last_close,
                last_buy_price=last_buy_price,
                details=f"Last close {last_close} < last buy price threshold {threshold}",
            )
        logger.info(f"Last close {last_close} >= protected price {threshold}. Place order.")

        # SIZING
        price_precision = constraints.price_precision
        stop_price = truncate_down(last_close * stop_loss_info.stop_percentage, price_precision)
        limit_price = truncate_down(last_close * stop_loss_info.limit_percentage, price_precision)
        quantity = apply_commission(
            balance_result.free_balance,
            constraints.lot_precision,
            self.config.commission_rate,
        )
        logger.info(f"Prepared stop {stop_price}, limit {limit_price}, quantity {quantity}")

        min_qty = constraints.lot_min_qty
        if quantity <= min_qty:
            logger.error(f"Order quantity {quantity} is less or equal than minimum quantity {min_qty}")
            return StopLossDecision(
                ok=False,
                state=StopLossState.REJECTED,
                reason=RejectReason.BELOW_MINIMUM_LOT_SIZE,
                last_close_price=last_close,
                last_buy_price=last_buy_price,
                stop_price=stop_price,
                limit_price=limit_price,
                quantity=quantity,
                details=f"Order quantity is less or equal than minimum quantity - {min_qty}",
            )

        order_cost = quantity * limit_price
        min_notional = constraints.min_notional
        if order_cost < min_notional:
            logger.error(f"Order cost {order_cost} is less than minNotional {min_notional}")
            return StopLossDecision(
                ok=False,
                state=StopLossState.REJECTED,
                reason=RejectReason.BELOW_MINIMUM_NOTIONAL,
                last_close_price=last_close,
                last_buy_price=last_buy_price,
                stop_price=stop_price,
                limit_price=limit_price,
                quantity=quantity,
                order_cost=order_cost,
                min_notional=min_notional,
                details="Order quantity * Order price is less than minNotional",
            )

        # SUBMITTED
        order_params = StopLossLimitOrderParams(
            symbol=symbol,
            quantity=quantity,
            price=limit_price,
            stop_price=stop_price,
        ).to_request()
        logger.info(f"Order params {order_params}")

        self._notify_in_background(_format_message("Action", "Order Params", order_params))
        order_result = await self.exchange.order(order_params)
        logger.info(f"Order result {order_result}")

        await self.notifier.send_message(_format_message("Action Result", "Order Result", order_result))

        return StopLossDecision(
            ok=True,
            state=StopLossState.SUBMITTED,
            reason=None,
            last_close_price=last_close,
            last_buy_price=last_buy_price,
            stop_price=stop_price,
            limit_price=limit_price,
            quantity=quantity,
            order_params=order_params,
            order_result=order_result,
            details="Placed stop loss limit order",
        )

    async def wait_for_notifications(self) -> None:
        """Ожидание фоновых уведомлений (например, перед остановкой цикла)."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    async def _get_last_buy_price(self, symbol: str) -> float:
        raw = await self.cache.get(self.config.last_buy_price_key(symbol))
        try:
            last_buy_price = float(raw) if raw else 0.0
        except ValueError:
            logger.warning(f"Ignoring non-numeric last buy price {raw!r} for {symbol}")
            return 0.0

        if not math.isfinite(last_buy_price):
            return 0.0
        logger.info(f"Retrieved last buy price {last_buy_price} for {symbol}")
        return last_buy_price

    def _notify_in_background(self, text: str) -> None:
        task = asyncio.create_task(self.notifier.send_message(text))
        self._background_tasks.add(task)
        task.add_done_callback(self._on_notification_done)

    def _on_notification_done(self, task: asyncio.Task) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Failed to send order params notification: {error!r}")
