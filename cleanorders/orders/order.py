"""Order record definition."""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


class OrderStatus(enum.Enum):
    """Order status enum, in workflow order."""
    RECEIVED = 'received'
    CLEANING = 'cleaning'
    READY = 'ready'
    DELIVERED = 'delivered'


DEFAULT_STATUS_RANKS: Dict[str, int] = {
    OrderStatus.RECEIVED.value: 1,
    OrderStatus.CLEANING.value: 2,
    OrderStatus.READY.value: 3,
    OrderStatus.DELIVERED.value: 4,
}

ACTIVE_STATUSES = frozenset({
    OrderStatus.RECEIVED.value,
    OrderStatus.CLEANING.value,
    OrderStatus.READY.value,
})


def normalize_status(status: Any) -> str:
    """Lower-case a status value for comparison ('' when absent)."""
    if isinstance(status, OrderStatus):
        return status.value
    if status is None:
        return ''
    return str(status).strip().lower()


def rank_of(status: Any, ranks: Optional[Mapping[str, int]] = None) -> int:
    """Return the rank of a status; unknown statuses rank 0."""
    ranks = DEFAULT_STATUS_RANKS if ranks is None else ranks
    return ranks.get(normalize_status(status), 0)


@dataclass
class OrderFlags:
    """Display flags attached to an order."""
    ready_today: bool = False
    no_show: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Order:
    """A service order, the only persisted entity.

    Timestamps are epoch milliseconds. ``extra`` holds persisted keys this
    package does not own so they survive merges untouched.
    """
    id: str
    code: str = ''
    status: str = OrderStatus.RECEIVED.value
    created_at: Optional[int] = None
    updated_at: Optional[int] = None
    client_name: str = ''
    client_phone: str = ''
    client_code: str = ''
    pay_rate: float = 0.0
    pay_area: float = 0.0
    pay_total: float = 0.0
    pieces: List[Any] = field(default_factory=list)
    notes: str = ''
    flags: OrderFlags = field(default_factory=OrderFlags)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def timestamp(self) -> int:
        """``updated_at`` for last-write-wins comparisons, 0 when absent."""
        return self.updated_at or 0

    def has_status(self, status: Any) -> bool:
        """Case-insensitive status comparison."""
        return normalize_status(self.status) == normalize_status(status)

    def __repr__(self):
        """Return string representation."""
        return f'<Order(id="{self.id}", code="{self.code}", status="{self.status}", updated_at={self.updated_at})>'
