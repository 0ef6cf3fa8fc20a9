"""
Внешние коллабораторы: биржевой клиент, кэш, уведомления.

Контракты в виде typing.Protocol: ядро не зависит от конкретного
транспорта (REST клиент, Redis, Slack). Любой вызов может завершиться
исключением; ядро не перехватывает их, кроме cancel_open_orders.
"""

from typing import Any, Protocol


class ExchangeClient(Protocol):
    """Асинхронный клиент спотовой биржи."""

    async def cancel_open_orders(self, symbol: str) -> Any: ...

    async def exchange_info(self) -> dict[str, Any]:
        """Метаданные биржи: {"symbols": [{"symbol", "baseAsset", "quoteAsset", "filters"}]}."""
        ...

    async def account_info(self) -> dict[str, Any]:
        """Аккаунт: {"balances": [{"asset", "free", "locked"}]}."""
        ...

    async def open_orders(self, symbol: str) -> list[dict[str, Any]]: ...

    async def order(self, params: dict[str, Any]) -> dict[str, Any]:
        """Размещение ордера; возвращает ответ биржи как есть."""
        ...


class KeyValueCache(Protocol):
    """Внешнее key-value хранилище строк."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> bool: ...


class Notifier(Protocol):
    """Канал уведомлений (Slack markdown)."""

    async def send_message(self, text: str) -> None: ...
