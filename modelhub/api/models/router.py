"""Model inventory endpoints: the registry's read/write contract over HTTP.

Endpoints must stay ``async def``: the registry is single-writer and relies
on the event loop thread to keep saves and deletes from interleaving.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from modelhub.api.models.schemas import DeleteModelResponse, SaveModelResponse
from modelhub.config.logger import app_logger
from modelhub.models.audit_log import AuditLogEntry
from modelhub.models.model import Model
from modelhub.services.registry import ModelRegistry, get_registry
from modelhub.utils.actor import get_actor
from modelhub.utils.responses import SuccessResponse, success_response

router = APIRouter(prefix="/v1/models", tags=["models"])


def _save(registry: ModelRegistry, model: Model, actor: str, response: Response) -> SuccessResponse[SaveModelResponse]:
    created = registry.get_by_id(model.id) is None
    saved = registry.save(model, actor)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return success_response(
        data=SaveModelResponse(model=saved, created=created),
        message="Model created" if created else "Model updated",
    )


@router.get("", response_model=SuccessResponse[List[Model]])
async def list_models(registry: ModelRegistry = Depends(get_registry)):
    """Return the whole model inventory."""
    models = registry.get_all()
    return success_response(data=models, message=f"{len(models)} models retrieved")


@router.post("", response_model=SuccessResponse[SaveModelResponse])
async def save_model(
    model: Model,
    response: Response,
    registry: ModelRegistry = Depends(get_registry),
    actor: str = Depends(get_actor),
):
    """Create or update a model (full record replacement), matched by ``id``."""
    return _save(registry, model, actor, response)


@router.get("/{model_id}", response_model=SuccessResponse[Model])
async def get_model(model_id: str, registry: ModelRegistry = Depends(get_registry)):
    model = registry.get_by_id(model_id)
    if model is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Model {model_id} not found",
        )
    return success_response(data=model)


@router.put("/{model_id}", response_model=SuccessResponse[SaveModelResponse])
async def replace_model(
    model_id: str,
    model: Model,
    response: Response,
    registry: ModelRegistry = Depends(get_registry),
    actor: str = Depends(get_actor),
):
    """Save the full record for ``model_id``; the body id must match the path."""
    if model.id != model_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Body id {model.id} does not match path id {model_id}",
        )
    return _save(registry, model, actor, response)


@router.delete("/{model_id}", response_model=SuccessResponse[DeleteModelResponse])
async def delete_model(
    model_id: str,
    registry: ModelRegistry = Depends(get_registry),
    actor: str = Depends(get_actor),
):
    """Delete a model. Its audit history is kept."""
    if not registry.delete(model_id, actor):
        app_logger.info(f"Delete of unknown model {model_id} requested by {actor}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Model {model_id} not found",
        )
    return success_response(
        data=DeleteModelResponse(id=model_id, deleted=True),
        message="Model deleted",
    )


@router.get("/{model_id}/audit-logs", response_model=SuccessResponse[List[AuditLogEntry]])
async def get_model_audit_logs(model_id: str, registry: ModelRegistry = Depends(get_registry)):
    """Audit history for one model, including models that were since deleted."""
    entries = registry.get_audit_logs_for_model(model_id)
    return success_response(data=entries, message=f"{len(entries)} audit entries retrieved")
