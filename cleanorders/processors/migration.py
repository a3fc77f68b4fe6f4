"""One-time normalization of orders read from storage."""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List

from ..orders.order import Order, OrderStatus, normalize_status
from ..orders.schema import encode_order
from ..utils.clock import now_ms

DEFAULT_READY_GRACE_MS = 5000


@dataclass
class MigrationResult:
    """Outcome of a migration run."""
    orders: List[Order] = field(default_factory=list)
    changed: bool = False
    migrated_ids: List[str] = field(default_factory=list)


class MigrationPass:
    """Normalize stored orders before first use.

    For every order:
    1. Lower-case the status
    2. Backfill a missing ``updated_at`` from ``created_at`` or now
    3. Stamp 'ready' orders older than the grace window with now, so orders
       marked ready before timestamps were tracked do not look stale next to
       fresh writes
    """

    def __init__(self, clock: Callable[[], int] = now_ms, grace_ms: int = DEFAULT_READY_GRACE_MS):
        self.clock = clock
        self.grace_ms = grace_ms
        self.logger = logging.getLogger(self.__class__.__name__)

    def migrate_order(self, order: Order, now: int) -> Order:
        """Return the migrated copy of a single order."""
        migrated = replace(order)
        migrated.status = normalize_status(order.status)

        if migrated.updated_at is None:
            migrated.updated_at = order.created_at if order.created_at is not None else now

        if migrated.status == OrderStatus.READY.value and migrated.updated_at < now - self.grace_ms:
            migrated.updated_at = now

        return migrated

    def run(self, orders: List[Order]) -> MigrationResult:
        """Migrate a collection.

        Args:
            orders: Orders as loaded from the store

        Returns:
            MigrationResult; ``changed`` is False when nothing needs writing
        """
        now = self.clock()
        result = MigrationResult()
        for order in orders:
            migrated = self.migrate_order(order, now)
            if encode_order(migrated) != encode_order(order):
                result.changed = True
                result.migrated_ids.append(order.id)
            result.orders.append(migrated)

        if result.changed:
            self.logger.info(f"Migrated {len(result.migrated_ids)} of {len(orders)} orders")
        else:
            self.logger.debug(f"No migration needed for {len(orders)} orders")
        return result
