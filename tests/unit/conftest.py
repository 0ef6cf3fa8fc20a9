"""Общие фикстуры: метаданные биржи, фейковые коллабораторы."""

from unittest.mock import AsyncMock

import pytest

from src.core.domain.symbol import SymbolConstraints


class InMemoryCache:
    """Фейковый KeyValueCache на dict."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data = dict(data or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True


# =============================================================================
# EXCHANGE PAYLOADS
# =============================================================================


@pytest.fixture
def btcusdt_symbol():
    """Элемент exchangeInfo.symbols для BTCUSDT."""
    return {
        "symbol": "BTCUSDT",
        "status": "TRADING",
        "baseAsset": "BTC",
        "quoteAsset": "USDT",
        "filters": [
            {
                "filterType": "PRICE_FILTER",
                "minPrice": "0.01000000",
                "maxPrice": "1000000.00000000",
                "tickSize": "0.01000000",
            },
            {
                "filterType": "PERCENT_PRICE",
                "multiplierUp": "5",
                "multiplierDown": "0.2",
                "avgPriceMins": 5,
            },
            {
                "filterType": "LOT_SIZE",
                "minQty": "0.00100000",
                "maxQty": "9000.00000000",
                "stepSize": "0.00100000",
            },
            {
                "filterType": "MIN_NOTIONAL",
                "minNotional": "10.00000000",
                "applyToMarket": True,
                "avgPriceMins": 5,
            },
            {"filterType": "MAX_NUM_ORDERS", "maxNumOrders": 200},
        ],
    }


@pytest.fixture
def account_info():
    return {
        "balances": [
            {"asset": "BTC", "free": "1.00000000", "locked": "0.00000000"},
            {"asset": "USDT", "free": "50.00000000", "locked": "0.00000000"},
        ]
    }


@pytest.fixture
def exchange(btcusdt_symbol, account_info):
    """AsyncMock ExchangeClient с exchangeInfo и accountInfo."""
    client = AsyncMock()
    client.exchange_info.return_value = {"symbols": [btcusdt_symbol]}
    client.account_info.return_value = account_info
    client.order.return_value = {"orderId": 42, "status": "NEW"}
    client.open_orders.return_value = []
    return client


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest.fixture
def notifier():
    return AsyncMock()


# =============================================================================
# CONSTRAINTS
# =============================================================================


@pytest.fixture
def btcusdt(btcusdt_symbol):
    return SymbolConstraints.from_exchange_symbol(btcusdt_symbol)


@pytest.fixture
def make_constraints():
    """Фабрика SymbolConstraints с заданными шагами и минимумами."""

    def _make(
        step_size: str = "0.001",
        tick_size: str = "0.01",
        min_qty: str = "0.001",
        min_notional: str = "10",
        symbol: str = "BTCUSDT",
    ) -> SymbolConstraints:
        return SymbolConstraints.model_validate(
            {
                "symbol": symbol,
                "baseAsset": "BTC",
                "quoteAsset": "USDT",
                "filterLotSize": {"stepSize": step_size, "minQty": min_qty},
                "filterPrice": {"tickSize": tick_size},
                "filterPercent": {},
                "filterMinNotional": {"minNotional": min_notional},
            }
        )

    return _make
