"""Governed model record."""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from modelhub.models.base import CamelModel, ensure_utc

ModelTier = Literal[1, 2, 3]


class ModelStatus(str, Enum):
    """Lifecycle status of a governed model."""

    DRAFT = "Draft"
    APPROVED = "Approved"
    RETIRED = "Retired"


class MaterialityScores(CamelModel):
    """Risk-factor ratings used to derive the tier.

    ``justification`` is only meaningful when ``overridden`` is set.
    """

    complexity: int = Field(ge=1, le=5)
    exposure: int = Field(ge=1, le=5)
    criticality: int = Field(ge=1, le=5)
    overridden: Optional[bool] = None
    justification: Optional[str] = None

    @model_validator(mode="after")
    def _drop_unused_justification(self) -> "MaterialityScores":
        if not self.overridden:
            self.justification = None
        return self


class GovernanceDocumentation(CamelModel):
    assumptions: Optional[str] = None
    limitations: Optional[str] = None
    validation_summary: Optional[str] = None
    monitoring_plan: Optional[str] = None


class DataLineage(CamelModel):
    upstream: Optional[List[str]] = None
    downstream: Optional[List[str]] = None


class Model(CamelModel):
    """A tracked analytic/ML asset under governance.

    ``last_updated`` is assigned by the registry on every write and
    ``review_date`` is defaulted on creation, so callers may leave both unset.
    """

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    business_unit: str = ""
    owner: str = ""
    description: str = ""
    domain: str = ""
    status: ModelStatus = ModelStatus.DRAFT
    tier: ModelTier = 3
    git_repo_link: Optional[str] = None
    last_updated: Optional[datetime] = None
    review_date: Optional[datetime] = None
    materiality_scores: Optional[MaterialityScores] = None
    documentation: Optional[GovernanceDocumentation] = None
    data_lineage: Optional[DataLineage] = None

    @field_validator("last_updated", "review_date")
    @classmethod
    def _normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)
