"""
Storage entry model: one row per durable storage key
"""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime

from campus_pulse.core.db import Base

class StorageEntry(Base):
    __tablename__ = "storage_entries"
    
    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)  # JSON-serialized collection
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
