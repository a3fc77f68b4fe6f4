"""Sequential human-facing order codes (X001, X002, ...)."""

import logging
from typing import Iterable

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from ..db.models import SequenceCounter
from ..exceptions import CodeAllocationError
from ..orders.order import Order
from ..utils.normalization import code_number, format_code

ORDER_CODE_SEQUENCE = 'order_code'
MAX_RESERVE_ATTEMPTS = 5


class _LostRace(Exception):
    """The counter changed between read and update."""


class CodeAllocator:
    """Derive and reserve order codes."""

    def __init__(self, sequence_name: str = ORDER_CODE_SEQUENCE, max_attempts: int = MAX_RESERVE_ATTEMPTS):
        self.sequence_name = sequence_name
        self.max_attempts = max_attempts
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def max_code(orders: Iterable[Order]) -> int:
        """Highest numeric code in the collection, 0 if none."""
        return max((code_number(order.code) for order in orders), default=0)

    def next_code(self, orders: Iterable[Order]) -> str:
        """Compute the code following the highest existing one.

        This is a pure read: two calls before either order is written return
        the same code. Use ``reserve`` when creating orders.
        """
        return format_code(self.max_code(orders) + 1)

    def reserve(self, store) -> str:
        """Atomically reserve the next code.

        The next value is ``max(counter, highest stored code) + 1``. It is
        written to the sequence counter with a compare-and-set, retried when
        another writer moved the counter first.

        Args:
            store: RecordStore whose collection and database are used

        Returns:
            The reserved code

        Raises:
            CodeAllocationError: If every attempt lost the race
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                with store.session_manager as session:
                    orders = store.read_with(session)
                    counter = session.query(SequenceCounter).filter_by(name=self.sequence_name).first()
                    current = counter.value if counter is not None else None
                    number = max(current or 0, self.max_code(orders)) + 1

                    if counter is None:
                        session.add(SequenceCounter(name=self.sequence_name, value=number))
                        session.flush()
                    else:
                        result = session.execute(
                            update(SequenceCounter)
                            .where(SequenceCounter.name == self.sequence_name)
                            .where(SequenceCounter.value == current)
                            .values(value=number)
                        )
                        if result.rowcount != 1:
                            raise _LostRace()
            except (IntegrityError, _LostRace):
                self.logger.debug(f"Code reservation attempt {attempt} lost a race, retrying")
                continue

            code = format_code(number)
            self.logger.debug(f"Reserved order code {code}")
            return code

        raise CodeAllocationError(
            f"Could not reserve an order code after {self.max_attempts} attempts"
        )
