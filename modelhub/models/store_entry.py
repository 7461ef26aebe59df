"""Key-value row backing the SQL durable store."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel


class StoreEntry(SQLModel, table=True):
    """One persisted bucket, stored as its serialized JSON text."""

    __tablename__ = "store_entries"

    key: str = Field(primary_key=True, max_length=255)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
