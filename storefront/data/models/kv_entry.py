# storefront/data/models/kv_entry.py
from sqlalchemy import Column, DateTime, String, Text

from storefront.data.database import Base


class KeyValueEntryModel(Base):
    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
