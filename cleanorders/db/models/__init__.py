"""SQLAlchemy models for database tables."""

from .base import Base
from .storage_slot import StorageSlot
from .sequence_counter import SequenceCounter

__all__ = [
    'Base',
    'StorageSlot',
    'SequenceCounter'
]
