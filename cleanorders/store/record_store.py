"""Durable storage for the order collection."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.models import StorageSlot
from ..db.session import SessionManager
from ..orders.order import Order
from ..orders.schema import SCHEMA_VERSION, SchemaError, decode_payload, encode_payload
from ..processors.error_tracker import ErrorTracker
from ..processors.merge import MergeEngine

DEFAULT_STORAGE_KEY = 'orders_v1'


class RecordStore:
    """Read and write the order collection kept in a single storage slot.

    ``load`` never fails: a missing, corrupt or oddly shaped slot reads as an
    empty collection. ``write`` never replaces the collection; it merges the
    incoming orders into what is stored, inside one transaction, so the merge
    invariants hold for every writer.
    """

    def __init__(
        self,
        session_manager: SessionManager,
        merge_engine: MergeEngine,
        storage_key: str = DEFAULT_STORAGE_KEY,
        error_tracker: Optional[ErrorTracker] = None
    ):
        """Initialize the store.

        Args:
            session_manager: Database session manager
            merge_engine: Engine used to merge every write
            storage_key: Name of the slot holding the collection
            error_tracker: Tracker for absorbed anomalies
        """
        self.session_manager = session_manager
        self.merge_engine = merge_engine
        self.storage_key = storage_key
        self.error_tracker = error_tracker or ErrorTracker()
        self.stored_version = SCHEMA_VERSION
        self.logger = logging.getLogger(self.__class__.__name__)

    def read_with(self, session: Session) -> List[Order]:
        """Read the collection inside an existing session.

        Args:
            session: Open database session

        Returns:
            The decoded orders; empty if the slot is missing or corrupt
        """
        slot = session.query(StorageSlot).filter_by(key=self.storage_key).first()
        if slot is None:
            self.stored_version = SCHEMA_VERSION
            return []

        try:
            orders, version = decode_payload(slot.value, self.error_tracker)
        except SchemaError as e:
            self.logger.warning(f"Treating slot '{self.storage_key}' as empty: {e}")
            self.error_tracker.add_error('STORAGE_CORRUPT', str(e), {'key': self.storage_key})
            self.stored_version = SCHEMA_VERSION
            return []

        self.stored_version = version
        return orders

    def load(self) -> List[Order]:
        """Load the full collection."""
        try:
            with self.session_manager as session:
                orders = self.read_with(session)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to read slot '{self.storage_key}': {e}")
            self.error_tracker.add_error('STORAGE_CORRUPT', f"Read failed: {e}", {'key': self.storage_key})
            return []
        self.logger.debug(f"Loaded {len(orders)} orders from '{self.storage_key}'")
        return orders

    def get_by_id(self, order_id: str) -> Optional[Order]:
        """Find an order by id."""
        for order in self.load():
            if order.id == order_id:
                return order
        return None

    def write(self, orders: Iterable[Order]) -> List[Order]:
        """Merge orders into the stored collection and persist the result.

        Args:
            orders: Incoming orders (a full collection or a single record)

        Returns:
            The collection as persisted
        """
        incoming = list(orders)
        with self.session_manager as session:
            current = self.read_with(session)
            merged = self.merge_engine.merge_all(current, incoming)

            slot = session.query(StorageSlot).filter_by(key=self.storage_key).first()
            if slot is None:
                slot = StorageSlot(key=self.storage_key)
                session.add(slot)
            slot.value = encode_payload(merged)
            slot.schemaVersion = SCHEMA_VERSION
            slot.modifiedAt = datetime.now()

        self.stored_version = SCHEMA_VERSION
        self.logger.debug(
            f"Wrote {len(incoming)} incoming orders, {len(merged)} stored in '{self.storage_key}'"
        )
        return merged
