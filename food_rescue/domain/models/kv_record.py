"""Key-value record — maps to the 'kv_store' table, one row per namespace."""

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from food_rescue.infrastructure.database import Base


class KeyValueRecord(Base):
    __tablename__ = "kv_store"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)  # serialized JSON blob
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<KeyValueRecord {self.key}>"
