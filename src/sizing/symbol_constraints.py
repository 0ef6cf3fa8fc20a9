"""SymbolConstraintResolver: ограничения инструмента с внешним кэшем.

Порядок:
1. Кэш (symbol-info-{symbol}): если запись есть и соответствует
   контракту symbol_constraints, она возвращается без запроса к бирже
2. Иначе exchangeInfo → элемент с точным совпадением symbol → фильтры
   LOT_SIZE / PRICE_FILTER / PERCENT_PRICE / MIN_NOTIONAL
3. Запись результата в кэш (best-effort)

Символ, отсутствующий на бирже, не является ошибкой: возвращаются пустые
ограничения (деградированный режим).
"""

import json
import logging

from jsonschema import ValidationError
from pydantic import ValidationError as ModelValidationError

from src.core.config import OrderSizingConfig
from src.core.contracts import SymbolConstraintsValidator
from src.core.domain.symbol import SymbolConstraints
from src.exchange.interfaces import ExchangeClient, KeyValueCache

logger = logging.getLogger(__name__)


class SymbolConstraintResolver:
    """Резолвер ограничений инструмента.

    Сам не хранит состояние между вызовами: свежесть обеспечивает кэш.
    """

    def __init__(
        self,
        exchange: ExchangeClient,
        cache: KeyValueCache,
        config: OrderSizingConfig | None = None,
    ):
        """
        Args:
            exchange: биржевой клиент (exchange_info)
            cache: внешний key-value кэш
            config: ключи кэша (опционально, используется default)
        """
        self.exchange = exchange
        self.cache = cache
        self.config = config or OrderSizingConfig()
        self._validator = SymbolConstraintsValidator()

    async def resolve(self, symbol: str) -> SymbolConstraints:
        """Ограничения инструмента: из кэша либо из exchangeInfo.

        Args:
            symbol: инструмент (например, 'BTCUSDT')

        Returns:
            SymbolConstraints (пустые, если символ не найден)
        """
        key = self.config.symbol_info_key(symbol)

        cached = await self.cache.get(key)
        if cached:
            constraints = self._deserialize(symbol, cached)
            if constraints is not None:
                logger.info(f"Retrieved symbol info for {symbol} from cache")
                return constraints

        logger.info("Request exchange info")
        exchange_info = await self.exchange.exchange_info()
        logger.info("Retrieved exchange info")

        entry = next(
            (s for s in exchange_info.get("symbols") or [] if s.get("symbol") == symbol),
            None,
        )
        if entry is None:
            logger.warning(f"Symbol {symbol} not found in exchange info, using empty constraints")
            constraints = SymbolConstraints.empty(symbol)
        else:
            constraints = SymbolConstraints.from_exchange_symbol(entry)

        await self._store(key, constraints)
        logger.info(f"Retrieved symbol info for {symbol} from exchange: {constraints.to_cache_dict()}")
        return constraints

    def _deserialize(self, symbol: str, cached: str) -> SymbolConstraints | None:
        try:
            payload = json.loads(cached)
            self._validator.validate(payload)
            return SymbolConstraints.model_validate(payload)
        except (json.JSONDecodeError, ValidationError, ModelValidationError) as e:
            logger.warning(f"Ignoring malformed cached symbol info for {symbol}: {e}")
            return None

    async def _store(self, key: str, constraints: SymbolConstraints) -> None:
        try:
            success = await self.cache.set(key, json.dumps(constraints.to_cache_dict()))
        except Exception as e:
            logger.warning(f"Failed to cache symbol info under {key}: {e!r}")
            return

        if not success:
            logger.warning(f"Cache rejected symbol info under {key}")
