"""Storage slot model holding a serialized collection."""
from datetime import datetime
from sqlalchemy import Column, String, Text, Integer, DateTime
from .base import Base

class StorageSlot(Base):
    """A named durable slot; the order collection lives in one of these."""
    
    __tablename__ = 'StorageSlot'
    
    key = Column(String, primary_key=True)
    value = Column(Text)
    schemaVersion = Column(Integer, nullable=False, default=1)
    modifiedAt = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self):
        """String representation."""
        size = len(self.value) if self.value else 0
        return f"<StorageSlot(key='{self.key}', version={self.schemaVersion}, size={size})>"
