"""Merge engine: last-write-wins reconciliation with a status rank guard.

Every write to the durable collection goes through ``merge_all``, so the two
invariants below hold whichever writer lands last:

- the record with the newest ``updated_at`` wins,
- a record's status never drops to a lower rank than either input held.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from ..orders.order import DEFAULT_STATUS_RANKS, Order, normalize_status, rank_of
from ..utils.clock import now_ms

logger = logging.getLogger(__name__)


class MergeEngine:
    """Reconcile divergent copies of the same orders."""

    def __init__(
        self,
        ranks: Optional[Mapping[str, int]] = None,
        clock: Callable[[], int] = now_ms
    ):
        """Initialize the engine.

        Args:
            ranks: Status rank table (defaults to DEFAULT_STATUS_RANKS)
            clock: Returns the current time in epoch milliseconds
        """
        self.ranks = dict(DEFAULT_STATUS_RANKS if ranks is None else ranks)
        self.clock = clock

    def rank(self, order: Order) -> int:
        return rank_of(order.status, self.ranks)

    def reconcile(self, a: Order, b: Order) -> Order:
        """Merge two copies of the same order.

        The newer copy is the candidate; on equal timestamps the higher rank
        wins, then the status later in alphabetical order, then ``b``. If
        the candidate's status ranks below the other's, the higher status is
        kept and the correction is stamped with the newest time seen, so an
        older pending write cannot undo it.

        Args:
            a: Existing copy
            b: Incoming copy

        Returns:
            A new Order; neither input is modified
        """
        if a.id != b.id:
            raise ValueError(f"Cannot reconcile different orders: {a.id} != {b.id}")

        if b.timestamp > a.timestamp:
            candidate, other = b, a
        elif a.timestamp > b.timestamp:
            candidate, other = a, b
        elif self.rank(a) != self.rank(b):
            candidate, other = (a, b) if self.rank(a) > self.rank(b) else (b, a)
        elif (normalize_status(a.status), a.status) > (normalize_status(b.status), b.status):
            # unranked statuses tie; order them by name
            candidate, other = a, b
        else:
            candidate, other = b, a

        merged = replace(candidate)
        if self.rank(candidate) < self.rank(other):
            merged.status = other.status
            merged.updated_at = max(a.timestamp, b.timestamp, self.clock())
            logger.debug(
                f"Order {merged.id}: blocked status regression "
                f"{candidate.status} -> kept {other.status}"
            )
        return merged

    def merge_all(self, list_a: Iterable[Order], list_b: Iterable[Order]) -> List[Order]:
        """Merge two collections by id.

        Records are visited from ``list_a`` then ``list_b``; the result keeps
        first-seen order.
        """
        by_id: Dict[str, Order] = {}
        for source in (list_a, list_b):
            for order in source:
                existing = by_id.get(order.id)
                by_id[order.id] = order if existing is None else self.reconcile(existing, order)
        return list(by_id.values())
