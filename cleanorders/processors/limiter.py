"""Cap on concurrently active orders per client."""

import logging
from typing import Iterable

from ..exceptions import ClientLimitExceeded
from ..orders.order import ACTIVE_STATUSES, Order, normalize_status
from ..utils.normalization import client_key

DEFAULT_MAX_ACTIVE_PER_CLIENT = 1


class ClientActivityLimiter:
    """Count and limit active orders per composite client key.

    A client is identified by folded name plus digits-only phone. Delivered
    orders are inactive; the no-show flag does not matter here.
    """

    def __init__(self, max_active: int = DEFAULT_MAX_ACTIVE_PER_CLIENT, fold_strategy: str = 'unicode'):
        self.max_active = max_active
        self.fold_strategy = fold_strategy
        self.logger = logging.getLogger(self.__class__.__name__)

    def active_count_for(self, orders: Iterable[Order], name: str, phone: str) -> int:
        """Count active orders held by the client."""
        key = client_key(name, phone, self.fold_strategy)
        return sum(
            1 for order in orders
            if normalize_status(order.status) in ACTIVE_STATUSES
            and client_key(order.client_name, order.client_phone, self.fold_strategy) == key
        )

    def enforce_limit(self, orders: Iterable[Order], name: str, phone: str) -> None:
        """Fail if the client may not open another order.

        No check is made when either name or phone is empty.

        Raises:
            ClientLimitExceeded: If the client is at or above the limit
        """
        if not (name or '').strip() or not (phone or '').strip():
            self.logger.debug("Client name or phone missing, limit not enforced")
            return

        count = self.active_count_for(orders, name, phone)
        if count >= self.max_active:
            key = client_key(name, phone, self.fold_strategy)
            self.logger.warning(f"Client {key} has {count} active orders (limit {self.max_active})")
            raise ClientLimitExceeded(count, self.max_active, key)
