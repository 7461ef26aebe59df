"""Audit log entry (WORM - Write Once Read Many)."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import ConfigDict, Field, field_validator

from modelhub.models.base import CamelModel, ensure_utc


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class AuditLogEntry(CamelModel):
    """Immutable record of a single create/update/delete event.

    WORM (Write Once Read Many) - entries are only ever appended to the
    ``audit_logs`` bucket and survive deletion of the model they reference.
    ``field``, ``old_value`` and ``new_value`` are set for updates only.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    model_id: str
    model_name: str  # snapshot of the name at log time
    timestamp: datetime
    action: AuditAction
    field: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    modified_by: str

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)
