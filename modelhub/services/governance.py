"""Governance helpers: materiality tiering, review reminders, audit ordering."""

import calendar
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from modelhub.config.settings import settings
from modelhub.models.audit_log import AuditLogEntry
from modelhub.models.base import ensure_utc
from modelhub.models.model import MaterialityScores, Model, ModelTier

TIER_1_MIN_SCORE = 12
TIER_2_MIN_SCORE = 8

TIER_LABELS = {1: "Critical", 2: "High Impact", 3: "Standard"}


class ReviewStatus(str, Enum):
    CURRENT = "current"
    DUE = "due"
    OVERDUE = "overdue"


def calculate_tier(complexity: int, exposure: int, criticality: int) -> ModelTier:
    """Derive the risk tier from the three 1-5 materiality scores.

    A total of 12 or more is Tier 1, 8 or more is Tier 2, anything lower
    is Tier 3.

    Raises:
        ValueError: If any score is outside 1-5.
    """
    for label, score in (("complexity", complexity), ("exposure", exposure), ("criticality", criticality)):
        if not 1 <= score <= 5:
            raise ValueError(f"{label} must be between 1 and 5, got {score}")

    total = complexity + exposure + criticality
    if total >= TIER_1_MIN_SCORE:
        return 1
    if total >= TIER_2_MIN_SCORE:
        return 2
    return 3


def resolve_tier(
    scores: MaterialityScores,
    manual_tier: Optional[ModelTier] = None,
) -> ModelTier:
    """Tier implied by a materiality block.

    An overridden block takes ``manual_tier``; otherwise the tier is
    calculated from the scores.

    Raises:
        ValueError: If the block is overridden and no manual tier is given.
    """
    if scores.overridden:
        if manual_tier is None:
            raise ValueError("An overridden tier requires a manual tier")
        return manual_tier
    return calculate_tier(scores.complexity, scores.exposure, scores.criticality)


def effective_tier(model: Model) -> ModelTier:
    """Tier that governs ``model``: its manual tier when overridden, else the calculated one."""
    if model.materiality_scores is None:
        return model.tier
    return resolve_tier(model.materiality_scores, manual_tier=model.tier)


def months_before(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` back by whole calendar months, clamping the day."""
    year_offset, month_index = divmod(moment.month - 1 - months, 12)
    year = moment.year + year_offset
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def review_status(model: Model, now: Optional[datetime] = None) -> ReviewStatus:
    """Classify a model for review reminders.

    The reference date is ``review_date``, falling back to ``last_updated``.
    """
    reference = model.review_date or model.last_updated
    if reference is None:
        return ReviewStatus.CURRENT

    now = ensure_utc(now) if now else datetime.now(timezone.utc)
    if reference <= months_before(now, settings.REVIEW_OVERDUE_MONTHS):
        return ReviewStatus.OVERDUE
    if reference <= months_before(now, settings.REVIEW_DUE_MONTHS):
        return ReviewStatus.DUE
    return ReviewStatus.CURRENT


def models_needing_review(
    models: Iterable[Model],
    now: Optional[datetime] = None,
    status: Optional[ReviewStatus] = None,
) -> List[Model]:
    """Return due or overdue models, optionally restricted to one status."""
    now = ensure_utc(now) if now else datetime.now(timezone.utc)
    wanted = {status} if status is not None else {ReviewStatus.DUE, ReviewStatus.OVERDUE}
    return [model for model in models if review_status(model, now) in wanted]


def review_schedule(
    models: Iterable[Model],
    now: Optional[datetime] = None,
) -> List[Tuple[Model, ReviewStatus]]:
    """Every model paired with its review status, in inventory order."""
    now = ensure_utc(now) if now else datetime.now(timezone.utc)
    return [(model, review_status(model, now)) for model in models]


def sort_audit_logs(entries: Iterable[AuditLogEntry], descending: bool = True) -> List[AuditLogEntry]:
    return sorted(entries, key=lambda entry: entry.timestamp, reverse=descending)
