"""BalanceResolver: свободный баланс торгуемого актива.

Актив зависит от стороны сделки:
- buy: котируемый актив (USDT в BTCUSDT)
- sell: базовый актив (BTC в BTCUSDT)

Баланс округляется до точности лота ДО сравнения с minNotional, чтобы
шум за пределами торгуемого разрешения не давал ложных срабатываний.
"""

import logging
from dataclasses import dataclass

from src.core.contracts import AccountInfoValidator
from src.core.domain.order import Balance, OrderSide, RejectReason
from src.core.domain.symbol import SymbolConstraints
from src.core.math.precision import round_half_away_from_zero
from src.exchange.interfaces import ExchangeClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceResult:
    """Результат определения баланса."""

    ok: bool
    reason: RejectReason | None

    free_balance: float
    asset: str | None

    details: str


class BalanceResolver:
    """Определение свободного баланса для (символ, сторона)."""

    def __init__(self, exchange: ExchangeClient):
        self.exchange = exchange
        self._validator = AccountInfoValidator()

    async def get_balance(
        self,
        constraints: SymbolConstraints,
        side: OrderSide,
    ) -> BalanceResult:
        """Свободный баланс торгуемого актива.

        Баланс не кэшируется: пересчитывается на каждой оценке.

        Args:
            constraints: ограничения инструмента
            side: сторона сделки

        Returns:
            BalanceResult (ok=False: BALANCE_NOT_FOUND / BELOW_MINIMUM_NOTIONAL)

        Raises:
            MalformedStepSizeError: если у инструмента нет stepSize
            jsonschema.ValidationError: если ответ биржи не соответствует контракту
        """
        # 1. Аккаунт
        account_info = await self.exchange.account_info()
        self._validator.validate(account_info)
        logger.info("Retrieved account info")

        # 2. Актив сделки
        trade_asset = constraints.quote_asset if side == OrderSide.BUY else constraints.base_asset
        logger.info(f"Determined trade asset {trade_asset} for {side.value}")

        entry = next(
            (b for b in account_info["balances"] if b["asset"] == trade_asset),
            None,
        )
        if entry is None:
            logger.error(f"Balance for {trade_asset} cannot be found ({constraints.symbol})")
            return BalanceResult(
                ok=False,
                reason=RejectReason.BALANCE_NOT_FOUND,
                free_balance=0.0,
                asset=trade_asset,
                details=f"Balance for {trade_asset} cannot be found",
            )

        balance = Balance.model_validate(entry)
        logger.info(f"Balance found: {balance.asset} free={balance.free} locked={balance.locked}")

        # 3. Свободный баланс с точностью лота
        free_balance = round_half_away_from_zero(balance.free, constraints.lot_precision)

        # 4. Для покупки баланс должен покрывать minNotional
        min_notional = constraints.min_notional
        if side == OrderSide.BUY and free_balance < min_notional:
            logger.error(
                f"Free balance {free_balance} {trade_asset} is less than minimum notional {min_notional}"
            )
            return BalanceResult(
                ok=False,
                reason=RejectReason.BELOW_MINIMUM_NOTIONAL,
                free_balance=free_balance,
                asset=trade_asset,
                details=f"Balance {free_balance} is less than minimum notional {min_notional}",
            )

        return BalanceResult(
            ok=True,
            reason=None,
            free_balance=free_balance,
            asset=trade_asset,
            details=f"Balance found: {free_balance} {trade_asset}",
        )
