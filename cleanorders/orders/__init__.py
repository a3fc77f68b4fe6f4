"""Order record type and its persisted schema."""

from .order import (
    ACTIVE_STATUSES,
    DEFAULT_STATUS_RANKS,
    Order,
    OrderFlags,
    OrderStatus,
    normalize_status,
    rank_of,
)
from .schema import SCHEMA_VERSION, decode_order, encode_order

__all__ = [
    'ACTIVE_STATUSES',
    'DEFAULT_STATUS_RANKS',
    'Order',
    'OrderFlags',
    'OrderStatus',
    'normalize_status',
    'rank_of',
    'SCHEMA_VERSION',
    'decode_order',
    'encode_order'
]
