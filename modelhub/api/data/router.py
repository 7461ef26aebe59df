"""Bulk import/export endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from modelhub.services.data_transfer import ImportResult, export_filename, export_models, import_models
from modelhub.services.registry import ModelRegistry, get_registry
from modelhub.utils.actor import get_actor
from modelhub.utils.responses import SuccessResponse, error_response, success_response

router = APIRouter(prefix="/v1/data", tags=["data"])


@router.get("/export")
async def export_inventory(registry: ModelRegistry = Depends(get_registry)):
    """Download every model as a JSON array, for backup or transfer."""
    return Response(
        content=export_models(registry),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.post("/import", response_model=SuccessResponse[ImportResult])
async def import_inventory(
    request: Request,
    registry: ModelRegistry = Depends(get_registry),
    actor: str = Depends(get_actor),
):
    """Merge a previously exported JSON array into the inventory.

    The batch is rejected as a whole if any entry is invalid.
    """
    result = import_models(registry, await request.body(), actor)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_response("Import rejected", detail=result.errors).model_dump(mode="json"),
        )
    return success_response(data=result, message=f"{result.imported} models imported successfully")
