"""Models module - record types and the SQLModel table used by the SQL store."""

from modelhub.models.audit_log import AuditAction, AuditLogEntry
from modelhub.models.model import (
    DataLineage,
    GovernanceDocumentation,
    MaterialityScores,
    Model,
    ModelStatus,
    ModelTier,
)
from modelhub.models.store_entry import StoreEntry

__all__ = [
    "AuditAction",
    "AuditLogEntry",
    "DataLineage",
    "GovernanceDocumentation",
    "MaterialityScores",
    "Model",
    "ModelStatus",
    "ModelTier",
    "StoreEntry",
]
