"""Exchange collaborators: протоколы клиента, кэша, уведомлений и open orders helpers."""

from .interfaces import ExchangeClient, KeyValueCache, Notifier
from .orders import cancel_open_orders, get_open_orders

__all__ = [
    "ExchangeClient",
    "KeyValueCache",
    "Notifier",
    "cancel_open_orders",
    "get_open_orders",
]
