"""Exceptions surfaced to callers of the order service."""


class OrderError(Exception):
    """Base class for order service failures."""


class ClientLimitExceeded(OrderError):
    """Creation blocked: the client already holds the maximum active orders."""

    def __init__(self, count: int, maximum: int, client: str = ''):
        self.count = count
        self.maximum = maximum
        self.client = client
        super().__init__(
            f"Client already has {count} active order(s); at most {maximum} allowed"
        )


class CodeAllocationError(OrderError):
    """No order code could be reserved."""
