"""Sequence counter model for order code reservation."""
from sqlalchemy import Column, String, Integer
from .base import Base

class SequenceCounter(Base):
    """Last reserved value of a named sequence."""
    
    __tablename__ = 'SequenceCounter'
    
    name = Column(String, primary_key=True)
    value = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        """String representation."""
        return f"<SequenceCounter(name='{self.name}', value={self.value})>"
