"""Тесты для SymbolConstraintResolver

Покрытие:
- Cache miss → exchangeInfo → запись в кэш
- Cache hit → без запроса к бирже
- Некорректная запись в кэше → повторный запрос
- Символ не найден → пустые ограничения
- Best-effort запись в кэш
- Пробрасывание ошибок транспорта
"""

import json
from unittest.mock import AsyncMock

import pytest

from src.core.config import OrderSizingConfig
from src.core.domain import SymbolConstraints
from src.sizing import SymbolConstraintResolver


@pytest.fixture
def resolver(exchange, cache):
    return SymbolConstraintResolver(exchange, cache)


# =============================================================================
# CACHE MISS / HIT
# =============================================================================


class TestResolveFromExchange:
    @pytest.mark.asyncio
    async def test_cache_miss_queries_exchange(self, resolver, exchange, btcusdt) -> None:
        constraints = await resolver.resolve("BTCUSDT")

        assert constraints == btcusdt
        exchange.exchange_info.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_result_is_cached(self, resolver, cache, btcusdt) -> None:
        await resolver.resolve("BTCUSDT")

        assert json.loads(cache.data["symbol-info-BTCUSDT"]) == btcusdt.to_cache_dict()

    @pytest.mark.asyncio
    async def test_custom_key_prefix(self, exchange, cache) -> None:
        resolver = SymbolConstraintResolver(
            exchange, cache, OrderSizingConfig(symbol_info_key_prefix="constraints:")
        )

        await resolver.resolve("BTCUSDT")

        assert "constraints:BTCUSDT" in cache.data

    @pytest.mark.asyncio
    async def test_symbol_not_found_returns_empty(self, resolver, cache) -> None:
        """Отсутствующий символ: деградированный режим, не ошибка"""
        constraints = await resolver.resolve("DOGEBTC")

        assert constraints == SymbolConstraints.empty("DOGEBTC")
        assert "symbol-info-DOGEBTC" in cache.data

    @pytest.mark.asyncio
    async def test_exact_symbol_match(self, resolver, exchange, btcusdt_symbol) -> None:
        exchange.exchange_info.return_value = {
            "symbols": [dict(btcusdt_symbol, symbol="BTCUSDTX"), btcusdt_symbol]
        }

        constraints = await resolver.resolve("BTCUSDT")

        assert constraints.symbol == "BTCUSDT"


class TestResolveFromCache:
    @pytest.mark.asyncio
    async def test_cache_hit_skips_exchange(self, resolver, exchange, cache, btcusdt) -> None:
        cache.data["symbol-info-BTCUSDT"] = json.dumps(btcusdt.to_cache_dict())

        constraints = await resolver.resolve("BTCUSDT")

        assert constraints == btcusdt
        exchange.exchange_info.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_second_resolve_uses_cache(self, resolver, exchange) -> None:
        first = await resolver.resolve("BTCUSDT")
        second = await resolver.resolve("BTCUSDT")

        assert first == second
        assert exchange.exchange_info.await_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "cached",
        [
            "not json",
            json.dumps({"symbol": "BTCUSDT"}),
            json.dumps({"symbol": "BTCUSDT", "filterLotSize": {"stepSize": "0.005"},
                        "filterPrice": {}, "filterPercent": {}, "filterMinNotional": {}}),
        ],
    )
    async def test_malformed_cache_entry_is_refetched(
        self, resolver, exchange, cache, btcusdt, cached
    ) -> None:
        cache.data["symbol-info-BTCUSDT"] = cached

        constraints = await resolver.resolve("BTCUSDT")

        assert constraints == btcusdt
        exchange.exchange_info.assert_awaited_once()


# =============================================================================
# ERRORS
# =============================================================================


class TestResolveErrors:
    @pytest.mark.asyncio
    async def test_cache_write_failure_is_ignored(self, exchange, btcusdt) -> None:
        cache = AsyncMock()
        cache.get.return_value = None
        cache.set.side_effect = ConnectionError("cache down")

        constraints = await SymbolConstraintResolver(exchange, cache).resolve("BTCUSDT")

        assert constraints == btcusdt

    @pytest.mark.asyncio
    async def test_cache_write_rejected_is_ignored(self, exchange, btcusdt) -> None:
        cache = AsyncMock()
        cache.get.return_value = None
        cache.set.return_value = False

        constraints = await SymbolConstraintResolver(exchange, cache).resolve("BTCUSDT")

        assert constraints == btcusdt

    @pytest.mark.asyncio
    async def test_cache_read_failure_propagates(self, exchange) -> None:
        cache = AsyncMock()
        cache.get.side_effect = ConnectionError("cache down")

        with pytest.raises(ConnectionError):
            await SymbolConstraintResolver(exchange, cache).resolve("BTCUSDT")

    @pytest.mark.asyncio
    async def test_exchange_failure_propagates(self, resolver, exchange) -> None:
        exchange.exchange_info.side_effect = TimeoutError("exchange timeout")

        with pytest.raises(TimeoutError):
            await resolver.resolve("BTCUSDT")
