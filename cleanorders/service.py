"""Order service: the operations offered to the UI and collaborators."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .db.session import SessionManager
from .orders.order import Order, OrderFlags, OrderStatus, normalize_status, rank_of
from .orders.schema import SCHEMA_VERSION, decode_order, encode_order, upgrade_keys
from .processors.code_allocator import CodeAllocator
from .processors.error_tracker import ErrorTracker
from .processors.limiter import ClientActivityLimiter
from .processors.merge import MergeEngine
from .processors.migration import MigrationPass, MigrationResult
from .processors.search import SearchEngine
from .store.record_store import RecordStore
from .utils.clock import now_ms
from .utils.normalization import round2, to_number
from .utils.uuid import generate_order_id

RemoteOrder = Union[Order, Mapping[str, Any]]
FetchRemote = Callable[[], Awaitable[Sequence[RemoteOrder]]]
PushRemote = Callable[[List[Order]], Awaitable[None]]


async def fetch_nothing() -> List[Order]:
    """Default remote fetch: no remote orders."""
    return []


async def push_nothing(orders: List[Order]) -> None:
    """Default remote push: nothing to do."""
    return None


class OrderService:
    """Create, update, query and synchronize orders.

    Constructed once per process with its configuration. Every write goes
    through the record store, which merges it with the stored collection.
    """

    def __init__(
        self,
        config,
        session_manager: Optional[SessionManager] = None,
        clock: Callable[[], int] = now_ms,
        fetch_remote: FetchRemote = fetch_nothing,
        push_remote: PushRemote = push_nothing,
        error_tracker: Optional[ErrorTracker] = None
    ):
        """Initialize the service.

        Args:
            config: Config instance (database, limits, rank table, folding)
            session_manager: Optional session manager (built from config if omitted)
            clock: Returns the current time in epoch milliseconds
            fetch_remote: Coroutine function returning remote orders
            push_remote: Coroutine function receiving the merged collection
            error_tracker: Tracker for absorbed anomalies
        """
        self.config = config
        self.clock = clock
        self.fetch_remote = fetch_remote
        self.push_remote = push_remote
        self.error_tracker = error_tracker or ErrorTracker()
        self.logger = logging.getLogger(self.__class__.__name__)

        self.session_manager = session_manager or SessionManager(config.database_url)
        self.session_manager.create_tables()

        self.merge_engine = MergeEngine(config.status_ranks, clock)
        self.store = RecordStore(
            self.session_manager,
            self.merge_engine,
            storage_key=config.storage_key,
            error_tracker=self.error_tracker
        )
        self.migration = MigrationPass(clock, config.ready_grace_ms)
        self.limiter = ClientActivityLimiter(config.max_active_per_client, config.fold_strategy)
        self.allocator = CodeAllocator()
        self.search_engine = SearchEngine(config.fold_strategy)
        self._migrated = False

    def open(self) -> Optional[MigrationResult]:
        """Run the migration pass once for this service instance.

        Returns:
            The migration result on the first call, None afterwards
        """
        if self._migrated:
            return None
        self._migrated = True

        orders = self.store.load()
        result = self.migration.run(orders)
        if result.changed or (orders and self.store.stored_version < SCHEMA_VERSION):
            self.store.write(result.orders)
        return result

    # Reads

    def orders(self) -> List[Order]:
        """Snapshot of the full collection."""
        return self.store.load()

    def get_by_id(self, order_id: str) -> Optional[Order]:
        return self.store.get_by_id(order_id)

    def search(self, query: str) -> List[Order]:
        """Search orders by client name, phone or code."""
        return self.search_engine.search(self.orders(), query)

    def list_by_status(self, status: Union[str, OrderStatus]) -> List[Order]:
        """Orders in a status, excluding no-shows."""
        return [
            order for order in self.orders()
            if order.has_status(status) and not order.flags.no_show
        ]

    def list_ready_today(self) -> List[Order]:
        """Ready orders flagged for pickup today, excluding no-shows."""
        return [order for order in self.list_by_status(OrderStatus.READY) if order.flags.ready_today]

    def active_count_for(self, name: str, phone: str) -> int:
        return self.limiter.active_count_for(self.orders(), name, phone)

    def next_code(self) -> str:
        """Code the next order would get, without reserving it."""
        return self.allocator.next_code(self.orders())

    # Writes

    def put(self, order: Order) -> Order:
        """Insert an order or reconcile it with the stored copy.

        Returns:
            The order as persisted
        """
        merged = self.store.write([order])
        for stored in merged:
            if stored.id == order.id:
                return stored
        return order

    def create_order(
        self,
        client_name: str = '',
        client_phone: str = '',
        client_code: str = '',
        pay_rate: Any = 0,
        pay_area: Any = 0,
        pieces: Optional[List[Any]] = None,
        notes: str = ''
    ) -> Order:
        """Create a new received order.

        Raises:
            ClientLimitExceeded: If the client already holds the maximum of
                active orders; nothing is written in that case
        """
        self.limiter.enforce_limit(self.orders(), client_name, client_phone)

        code = self.allocator.reserve(self.store)
        now = self.clock()
        rate = to_number(pay_rate)
        area = to_number(pay_area)
        order = Order(
            id=generate_order_id(),
            code=code,
            status=OrderStatus.RECEIVED.value,
            created_at=now,
            updated_at=now,
            client_name=client_name or '',
            client_phone=client_phone or '',
            client_code=client_code or '',
            pay_rate=rate,
            pay_area=area,
            pay_total=round2(rate * area),
            pieces=list(pieces) if isinstance(pieces, list) else [],
            notes=notes or '',
            flags=OrderFlags()
        )
        stored = self.put(order)
        self.logger.info(f"Created order {stored.code} ({stored.id}) for {stored.client_name!r}")
        return stored

    def set_status(self, order_id: str, status: Union[str, OrderStatus]) -> None:
        """Move an order to a new status.

        Ignored for unknown ids and when the status is unchanged. A move to a
        lower-ranked status is refused, the same outcome a merge would give.
        """
        order = self.get_by_id(order_id)
        if order is None:
            self.logger.debug(f"set_status ignored, unknown order {order_id}")
            return

        new_status = normalize_status(status)
        if order.has_status(new_status):
            return

        ranks = self.merge_engine.ranks
        if rank_of(new_status, ranks) < rank_of(order.status, ranks):
            self.logger.warning(
                f"Order {order.code}: refusing status change {order.status} -> {new_status}"
            )
            return

        order.status = new_status
        order.updated_at = self.clock()
        self.put(order)
        self.logger.info(f"Order {order.code} is now {new_status}")

    def apply_edits(self, order_id: str, partial_fields: Mapping[str, Any]) -> None:
        """Apply form edits without touching status.

        Args:
            order_id: Order to edit
            partial_fields: Persisted-key mapping (e.g. {'notes': ..., 'payRate': ...});
                legacy snake_case keys are accepted, any 'status' or 'id'
                key is ignored
        """
        order = self.get_by_id(order_id)
        if order is None:
            self.logger.debug(f"apply_edits ignored, unknown order {order_id}")
            return

        data: Dict[str, Any] = encode_order(order)
        data.update(upgrade_keys(partial_fields))
        data['id'] = order.id
        data['status'] = order.status
        data['updatedAt'] = self.clock()

        updated = decode_order(data, self.error_tracker)
        self.put(updated)
        self.logger.info(f"Order {order.code}: edited {', '.join(sorted(partial_fields)) or 'nothing'}")

    # Sync

    def _as_orders(self, items: Sequence[RemoteOrder]) -> List[Order]:
        orders = []
        for item in items or []:
            order = item if isinstance(item, Order) else decode_order(item, self.error_tracker)
            if order is not None:
                orders.append(order)
        return orders

    async def sync(self) -> List[Order]:
        """Merge remote orders into the local collection and push the result.

        Returns:
            The collection as persisted after the merge
        """
        local = self.orders()
        remote = self._as_orders(await self.fetch_remote())
        merged = self.merge_engine.merge_all(local, remote)
        persisted = self.store.write(merged)
        self.logger.info(f"Synced {len(local)} local and {len(remote)} remote orders into {len(persisted)}")
        await self.push_remote(persisted)
        return persisted

    def sync_now(self) -> List[Order]:
        """Run ``sync`` to completion from synchronous code."""
        return asyncio.run(self.sync())
