"""Shared test fixtures and utilities."""

import pytest
from datetime import datetime

from ..cli.config import Config
from ..db.models import StorageSlot
from ..db.session import SessionManager
from ..orders.order import Order, OrderFlags
from ..processors.error_tracker import ErrorTracker
from ..processors.merge import MergeEngine
from ..service import OrderService
from ..store.record_store import RecordStore

START_MS = 1_700_000_000_000

class FakeClock:
    """Controllable millisecond clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1000) -> int:
        self.now += ms
        return self.now

def make_order(order_id: str = 'ord_1', status: str = 'received', updated_at=1000, **fields) -> Order:
    """Create an order with sensible defaults for tests."""
    flags = fields.pop('flags', None) or OrderFlags()
    return Order(id=order_id, status=status, updated_at=updated_at, flags=flags, **fields)

def write_slot(session_manager: SessionManager, value: str, key: str = 'orders_v1') -> None:
    """Put raw content in a storage slot, bypassing the record store."""
    with session_manager as session:
        slot = session.query(StorageSlot).filter_by(key=key).first()
        if slot is None:
            slot = StorageSlot(key=key)
            session.add(slot)
        slot.value = value
        slot.schemaVersion = 1
        slot.modifiedAt = datetime.now()

def read_slot(session_manager: SessionManager, key: str = 'orders_v1'):
    """Read raw slot content."""
    with session_manager as session:
        slot = session.query(StorageSlot).filter_by(key=key).first()
        return None if slot is None else slot.value

@pytest.fixture
def clock():
    """Fake clock starting at a fixed instant."""
    return FakeClock()

@pytest.fixture
def config(tmp_path):
    """Configuration backed by a temporary SQLite file."""
    return Config(database_url=f"sqlite:///{tmp_path / 'orders.db'}")

@pytest.fixture
def session_manager(config):
    """Session manager with tables created."""
    manager = SessionManager(config.database_url)
    manager.create_tables()
    yield manager
    manager.dispose()

@pytest.fixture
def tracker():
    return ErrorTracker()

@pytest.fixture
def store(session_manager, clock, tracker):
    """Record store over the temporary database."""
    return RecordStore(session_manager, MergeEngine(clock=clock), error_tracker=tracker)

@pytest.fixture
def service(config, session_manager, clock):
    """Opened order service using the fake clock."""
    service = OrderService(config, session_manager=session_manager, clock=clock)
    service.open()
    return service
