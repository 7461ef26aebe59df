"""Audit trail endpoints."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from modelhub.models.audit_log import AuditLogEntry
from modelhub.services.governance import sort_audit_logs
from modelhub.services.registry import ModelRegistry, get_registry
from modelhub.utils.responses import SuccessResponse, success_response

router = APIRouter(prefix="/v1/audit-logs", tags=["audit"])


@router.get("", response_model=SuccessResponse[List[AuditLogEntry]])
async def list_audit_logs(
    order: Literal["asc", "desc"] = Query(default="desc", description="Timestamp ordering"),
    model_id: Optional[str] = Query(default=None, description="Only entries for this model"),
    registry: ModelRegistry = Depends(get_registry),
):
    """Return the audit trail, newest first by default."""
    entries = (
        registry.get_audit_logs_for_model(model_id)
        if model_id
        else registry.get_audit_logs()
    )
    entries = sort_audit_logs(entries, descending=order == "desc")
    return success_response(data=entries, message=f"{len(entries)} audit entries retrieved")
