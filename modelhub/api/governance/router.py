"""Governance endpoints: review reminders and the materiality tier rule."""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from modelhub.api.governance.schemas import ReviewReminder, TierRequest, TierResponse
from modelhub.models.model import MaterialityScores
from modelhub.services.governance import (
    TIER_LABELS,
    ReviewStatus,
    calculate_tier,
    models_needing_review,
    resolve_tier,
    review_schedule,
    review_status,
)
from modelhub.services.registry import ModelRegistry, get_registry
from modelhub.utils.responses import SuccessResponse, success_response

router = APIRouter(prefix="/v1/governance", tags=["governance"])

ReviewFilter = Literal["all", "current", "due", "overdue"]


@router.get("/reviews", response_model=SuccessResponse[List[ReviewReminder]])
async def list_review_reminders(
    review: Optional[ReviewFilter] = Query(
        default=None,
        alias="status",
        description="Omit for due and overdue models; 'all' lists every model",
    ),
    registry: ModelRegistry = Depends(get_registry),
):
    """Models with their review status, due and overdue ones by default."""
    now = datetime.now(timezone.utc)
    if review == "all":
        schedule = review_schedule(registry.get_all(), now=now)
    else:
        wanted = ReviewStatus(review) if review else None
        schedule = [
            (model, review_status(model, now))
            for model in models_needing_review(registry.get_all(), now=now, status=wanted)
        ]
    reminders = [ReviewReminder(model=model, status=status) for model, status in schedule]
    return success_response(data=reminders, message=f"{len(reminders)} models listed")


@router.post("/tier", response_model=SuccessResponse[TierResponse])
async def calculate_model_tier(request: TierRequest):
    scores = MaterialityScores(
        complexity=request.complexity,
        exposure=request.exposure,
        criticality=request.criticality,
        overridden=request.overridden,
        justification=request.justification,
    )
    tier = resolve_tier(scores, manual_tier=request.manual_tier)
    return success_response(
        data=TierResponse(
            tier=tier,
            calculated_tier=calculate_tier(request.complexity, request.exposure, request.criticality),
            label=TIER_LABELS[tier],
            total_score=request.complexity + request.exposure + request.criticality,
            overridden=request.overridden,
            justification=scores.justification,
        )
    )
