"""Schemas for review reminders and tier calculation."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from modelhub.models.model import Model, ModelTier
from modelhub.services.governance import ReviewStatus


class ReviewReminder(BaseModel):
    """A model with its review status."""

    model: Model
    status: ReviewStatus

    model_config = {"protected_namespaces": ()}


class TierRequest(BaseModel):
    """Materiality scores to turn into a tier, with an optional manual override."""

    complexity: int = Field(..., ge=1, le=5)
    exposure: int = Field(..., ge=1, le=5)
    criticality: int = Field(..., ge=1, le=5)
    overridden: bool = False
    manual_tier: Optional[ModelTier] = None
    justification: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "complexity": 4,
                "exposure": 5,
                "criticality": 3,
                "overridden": True,
                "manual_tier": 2,
                "justification": "Exposure capped by a hard limit in the origination system.",
            }
        }
    }

    @model_validator(mode="after")
    def _check_override(self) -> "TierRequest":
        if self.overridden:
            if self.manual_tier is None:
                raise ValueError("manual_tier is required when overridden is set")
            if not (self.justification or "").strip():
                raise ValueError("justification is required when overridden is set")
        else:
            self.manual_tier = None
            self.justification = None
        return self


class TierResponse(BaseModel):
    tier: ModelTier
    calculated_tier: ModelTier
    label: str
    total_score: int
    overridden: bool = False
    justification: Optional[str] = None
