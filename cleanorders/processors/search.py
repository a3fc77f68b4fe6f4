"""Multi-field order search by client name, phone and order code."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from ..orders.order import Order
from ..utils.normalization import fold_name, normalize_code, normalize_phone


@dataclass
class SearchQuery:
    """A tokenized query.

    Attributes:
        name_tokens: Folded non-numeric tokens, all must match the name
        phone_tokens: Non-empty digit strings, any may match the phone
        code_tokens: Normalized code suffixes, any may prefix the code
    """
    raw: str
    name_tokens: List[str] = field(default_factory=list)
    phone_tokens: List[str] = field(default_factory=list)
    code_tokens: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.name_tokens or self.phone_tokens or self.code_tokens)


class SearchEngine:
    """Case and accent insensitive lookup over the order collection.

    Fields are ORed: an order matches if its name, phone or code matches.
    Within the name field every word of the query must appear, so
    "age kras" finds "Agë Krasniqi" but "age berisha" does not.
    """

    def __init__(self, fold_strategy: str = 'unicode'):
        self.fold_strategy = fold_strategy
        self.logger = logging.getLogger(self.__class__.__name__)

    def parse(self, query: str) -> SearchQuery:
        """Split a raw query into per-field tokens."""
        parsed = SearchQuery(raw=query or '')
        for token in parsed.raw.split():
            folded = fold_name(token, self.fold_strategy)
            if not folded:
                # nothing but combining marks
                continue
            if not token.isdigit():
                parsed.name_tokens.append(folded)
            digits = normalize_phone(token)
            if digits:
                parsed.phone_tokens.append(digits)
            parsed.code_tokens.append(normalize_code(token))
        return parsed

    def matches(self, order: Order, query: SearchQuery) -> bool:
        """Check whether an order matches a parsed query."""
        if query.name_tokens:
            name = fold_name(order.client_name, self.fold_strategy)
            if all(token in name for token in query.name_tokens):
                return True

        if query.phone_tokens:
            phone = normalize_phone(order.client_phone)
            if any(token in phone for token in query.phone_tokens):
                return True

        code = normalize_code(order.code)
        return any(code.startswith(token) for token in query.code_tokens)

    def search(self, orders: Iterable[Order], query: str) -> List[Order]:
        """Find orders matching a free-text query.

        Args:
            orders: Collection to search
            query: Free-text query

        Returns:
            Matching orders, newest ``updated_at`` first, one per id
        """
        parsed = self.parse(query)
        if parsed.is_empty:
            return []

        seen = set()
        results = []
        for order in orders:
            if order.id in seen or not self.matches(order, parsed):
                continue
            seen.add(order.id)
            results.append(order)

        results.sort(key=lambda o: o.timestamp, reverse=True)
        self.logger.debug(f"Query {query!r} matched {len(results)} orders")
        return results
