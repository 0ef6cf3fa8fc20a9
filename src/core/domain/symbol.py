"""
SymbolConstraints: Биржевые ограничения торгового инструмента

Immutable Pydantic модели фильтров инструмента (LOT_SIZE, PRICE_FILTER,
PERCENT_PRICE, MIN_NOTIONAL) в формате биржевых метаданных exchangeInfo.

Поля фильтров хранят wire-имена биржи как alias (stepSize, tickSize, ...),
поэтому модель сериализуется обратно в тот же формат для кэша.

Все поля фильтров опциональны: пустой фильтр {} допустим и означает
"ограничение не сообщено биржей" (деградированный режим).
"""

from typing import Any, Final

from pydantic import BaseModel, Field

from src.core.math.precision import precision_of

# =============================================================================
# FILTER TYPES
# =============================================================================

FILTER_LOT_SIZE: Final[str] = "LOT_SIZE"
FILTER_PRICE: Final[str] = "PRICE_FILTER"
FILTER_PERCENT_PRICE: Final[str] = "PERCENT_PRICE"
FILTER_MIN_NOTIONAL: Final[str] = "MIN_NOTIONAL"

# Новый формат биржи: тот же minNotional, другое имя фильтра
FILTER_NOTIONAL: Final[str] = "NOTIONAL"

_FILTER_MODEL_CONFIG: Final[dict[str, Any]] = {
    "frozen": True,
    "populate_by_name": True,
    "extra": "ignore",
}


# =============================================================================
# FILTER MODELS
# =============================================================================


class LotSizeFilter(BaseModel):
    """Фильтр LOT_SIZE: шаг и границы количества."""

    step_size: str | None = Field(None, alias="stepSize", description="Шаг количества, например '0.00100000'")
    min_qty: float | None = Field(None, alias="minQty", ge=0, description="Минимальное количество")
    max_qty: float | None = Field(None, alias="maxQty", ge=0, description="Максимальное количество")

    model_config = _FILTER_MODEL_CONFIG


class PriceFilter(BaseModel):
    """Фильтр PRICE_FILTER: тик и границы цены."""

    tick_size: str | None = Field(None, alias="tickSize", description="Тик цены, например '0.01000000'")
    min_price: float | None = Field(None, alias="minPrice", ge=0)
    max_price: float | None = Field(None, alias="maxPrice", ge=0)

    model_config = _FILTER_MODEL_CONFIG


class PercentPriceFilter(BaseModel):
    """Фильтр PERCENT_PRICE: допустимый коридор цены относительно средней."""

    multiplier_up: float | None = Field(None, alias="multiplierUp", ge=0)
    multiplier_down: float | None = Field(None, alias="multiplierDown", ge=0)
    avg_price_mins: int | None = Field(None, alias="avgPriceMins", ge=0)

    model_config = _FILTER_MODEL_CONFIG


class MinNotionalFilter(BaseModel):
    """Фильтр MIN_NOTIONAL: минимальная стоимость ордера (qty * price)."""

    min_notional: float | None = Field(None, alias="minNotional", ge=0)
    apply_to_market: bool | None = Field(None, alias="applyToMarket")
    avg_price_mins: int | None = Field(None, alias="avgPriceMins", ge=0)

    model_config = _FILTER_MODEL_CONFIG


# =============================================================================
# SYMBOL CONSTRAINTS
# =============================================================================


def _find_filter(filters: list[dict[str, Any]], filter_type: str) -> dict[str, Any] | None:
    for exchange_filter in filters:
        if exchange_filter.get("filterType") == filter_type:
            return exchange_filter
    return None


class SymbolConstraints(BaseModel):
    """
    Ограничения инструмента, извлечённые из метаданных биржи.

    Immutable модель (frozen=True). Вычисляется один раз на символ и
    кэшируется снаружи; пересчёт только после истечения кэша.
    """

    symbol: str = Field(..., description="Инструмент (например, 'BTCUSDT')")
    base_asset: str | None = Field(None, alias="baseAsset", description="Базовый актив (BTC)")
    quote_asset: str | None = Field(None, alias="quoteAsset", description="Котируемый актив (USDT)")

    filter_lot_size: LotSizeFilter = Field(default_factory=LotSizeFilter, alias="filterLotSize")
    filter_price: PriceFilter = Field(default_factory=PriceFilter, alias="filterPrice")
    filter_percent: PercentPriceFilter = Field(default_factory=PercentPriceFilter, alias="filterPercent")
    filter_min_notional: MinNotionalFilter = Field(
        default_factory=MinNotionalFilter, alias="filterMinNotional"
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def empty(cls, symbol: str) -> "SymbolConstraints":
        """Ограничения без единого фильтра (символ не найден на бирже)."""
        return cls(symbol=symbol)

    @classmethod
    def from_exchange_symbol(cls, entry: dict[str, Any]) -> "SymbolConstraints":
        """
        Построение из элемента exchangeInfo.symbols.

        Отсутствующий фильтр становится пустым. Если MIN_NOTIONAL не
        сообщён, используется NOTIONAL (тот же ключ minNotional).

        Args:
            entry: Элемент списка symbols из ответа exchangeInfo

        Returns:
            SymbolConstraints
        """
        filters = entry.get("filters") or []
        min_notional = _find_filter(filters, FILTER_MIN_NOTIONAL) or _find_filter(
            filters, FILTER_NOTIONAL
        )

        return cls.model_validate(
            {
                "symbol": entry.get("symbol", ""),
                "baseAsset": entry.get("baseAsset"),
                "quoteAsset": entry.get("quoteAsset"),
                "filterLotSize": _find_filter(filters, FILTER_LOT_SIZE) or {},
                "filterPrice": _find_filter(filters, FILTER_PRICE) or {},
                "filterPercent": _find_filter(filters, FILTER_PERCENT_PRICE) or {},
                "filterMinNotional": min_notional or {},
            }
        )

    def to_cache_dict(self) -> dict[str, Any]:
        """Сериализация в wire-формат (camelCase, без пустых полей)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def lot_step(self) -> str | None:
        return self.filter_lot_size.step_size

    @property
    def price_tick(self) -> str | None:
        return self.filter_price.tick_size

    @property
    def lot_precision(self) -> int:
        """Точность количества. Raises MalformedStepSizeError без stepSize."""
        return precision_of(self.filter_lot_size.step_size)

    @property
    def price_precision(self) -> int:
        """Точность цены. Raises MalformedStepSizeError без tickSize."""
        return precision_of(self.filter_price.tick_size)

    @property
    def lot_min_qty(self) -> float:
        """Минимальное количество (0.0, если биржа не сообщила)."""
        return self.filter_lot_size.min_qty or 0.0

    @property
    def min_notional(self) -> float:
        """Минимальная стоимость ордера (0.0, если биржа не сообщила)."""
        return self.filter_min_notional.min_notional or 0.0
