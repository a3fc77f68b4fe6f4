"""Order tracking for walk-in cleaning jobs: merge, limits and search."""

from .exceptions import ClientLimitExceeded, CodeAllocationError, OrderError
from .orders import Order, OrderFlags, OrderStatus
from .service import OrderService

__all__ = [
    'ClientLimitExceeded',
    'CodeAllocationError',
    'OrderError',
    'Order',
    'OrderFlags',
    'OrderStatus',
    'OrderService'
]
