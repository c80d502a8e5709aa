from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, JSON, String

from invoicepro.core.database import Base


class Record(Base):
    """One entity record of any collection, stored as a JSON document."""

    __tablename__ = "records"

    id = Column(String(36), primary_key=True, index=True)
    collection = Column(String, nullable=False, index=True)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)

    __table_args__ = (Index("ix_records_collection_created", "collection", "created_at"),)
