from sqlalchemy import Column, String, DateTime, JSON, Index
from sqlalchemy.sql import func
from src.core.db import Base


class Record(Base):
    """One stored document of any resource collection."""

    __tablename__ = "records"

    id = Column(String, primary_key=True)
    resource = Column(String, nullable=False)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), nullable=False, onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_records_resource", "resource"),
        Index("idx_records_resource_created_at", "resource", "created_at"),
    )
