"""
Open orders helpers.

cancel_open_orders выполняет best-effort очистку перед чтением баланса. Отсутствие
открытых ордеров и временный сбой биржи одинаково допустимы.
"""

import logging
from typing import Any

from src.exchange.interfaces import ExchangeClient

logger = logging.getLogger(__name__)


async def cancel_open_orders(exchange: ExchangeClient, symbol: str) -> None:
    """Отмена открытых ордеров по символу. Ошибки логируются и игнорируются."""
    logger.info(f"Cancelling open orders for {symbol}")
    try:
        result = await exchange.cancel_open_orders(symbol)
    except Exception as e:
        logger.info(f"Cancel open orders for {symbol} failed, ignoring: {e!r}")
        return

    logger.info(f"Cancelled open orders for {symbol}: {result}")


async def get_open_orders(exchange: ExchangeClient, symbol: str) -> list[dict[str, Any]]:
    """Открытые ордера по символу. Ошибки биржи пробрасываются."""
    open_orders = await exchange.open_orders(symbol)
    logger.info(f"Retrieved {len(open_orders)} open orders for {symbol}")
    return open_orders
