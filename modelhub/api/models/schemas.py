"""Response schemas for the model inventory endpoints."""

from pydantic import BaseModel, Field

from modelhub.models.model import Model


class SaveModelResponse(BaseModel):
    """Result of POST/PUT on a model."""

    model: Model
    created: bool = Field(..., description="True when the save created a new record")

    model_config = {"protected_namespaces": ()}


class DeleteModelResponse(BaseModel):
    id: str
    deleted: bool
