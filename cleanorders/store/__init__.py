"""Persistence of the order collection."""

from .record_store import DEFAULT_STORAGE_KEY, RecordStore

__all__ = ['DEFAULT_STORAGE_KEY', 'RecordStore']
