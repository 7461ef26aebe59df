"""Seed data for a fresh durable store."""

from datetime import datetime, timezone
from typing import List

from modelhub.config.logger import app_logger
from modelhub.db.store import AUDIT_LOGS_BUCKET, INITIALIZED_FLAG, MODELS_BUCKET, DurableStore
from modelhub.models.audit_log import AuditAction, AuditLogEntry
from modelhub.models.model import (
    DataLineage,
    GovernanceDocumentation,
    MaterialityScores,
    Model,
    ModelStatus,
)

SEED_ACTOR = "System"
SEED_TIMESTAMP = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


def seed_models() -> List[Model]:
    """Return the fixed sample inventory written on first start."""
    return [
        Model(
            id="model-001",
            name="Credit Risk Scorecard",
            business_unit="Retail Banking",
            owner="Jane Smith",
            description="Probability-of-default scorecard for unsecured consumer lending.",
            domain="Credit Risk",
            status=ModelStatus.APPROVED,
            tier=1,
            git_repo_link="https://git.example.com/risk/credit-scorecard",
            last_updated=SEED_TIMESTAMP,
            review_date=datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc),
            materiality_scores=MaterialityScores(complexity=4, exposure=5, criticality=4),
            documentation=GovernanceDocumentation(
                assumptions="Applicant behaviour is stable across the observation window.",
                limitations="Not calibrated for thin-file applicants.",
                validation_summary="Independent validation completed with no material findings.",
                monitoring_plan="Quarterly PSI and Gini tracking.",
            ),
            data_lineage=DataLineage(
                upstream=["Core Banking System", "Credit Bureau Feed"],
                downstream=["Loan Origination Platform"],
            ),
        ),
        Model(
            id="model-002",
            name="Customer Churn Predictor",
            business_unit="Marketing",
            owner="Raj Patel",
            description="Gradient-boosted model flagging customers likely to close accounts.",
            domain="Customer Analytics",
            status=ModelStatus.DRAFT,
            tier=2,
            last_updated=SEED_TIMESTAMP,
            review_date=datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc),
            materiality_scores=MaterialityScores(complexity=3, exposure=3, criticality=3),
            data_lineage=DataLineage(upstream=["CRM Warehouse"], downstream=["Campaign Manager"]),
        ),
        Model(
            id="model-003",
            name="Branch Cash Forecast",
            business_unit="Operations",
            owner="Maria Lopez",
            description="Daily cash demand forecast for branch replenishment.",
            domain="Forecasting",
            status=ModelStatus.RETIRED,
            tier=3,
            last_updated=SEED_TIMESTAMP,
            review_date=datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc),
            materiality_scores=MaterialityScores(complexity=2, exposure=2, criticality=2),
        ),
    ]


def seed_audit_logs(models: List[Model]) -> List[AuditLogEntry]:
    """One ``create`` entry per seed model."""
    return [
        AuditLogEntry(
            id=f"log-{model.id}",
            model_id=model.id,
            model_name=model.name,
            timestamp=SEED_TIMESTAMP,
            action=AuditAction.CREATE,
            modified_by=SEED_ACTOR,
        )
        for model in models
    ]


def initialize_if_empty(store: DurableStore) -> bool:
    """Populate ``store`` with the seed data on the first-ever call.

    The persisted ``initialized`` flag makes this a no-op afterwards, so it
    is safe to call at every process start. A store that already holds
    models or audit entries is never overwritten: it is only marked as
    initialized.

    Returns:
        True if seed data was written by this call.
    """
    if store.read_flag(INITIALIZED_FLAG):
        app_logger.debug("Store already initialized; skipping seed data")
        return False

    if store.read_bucket(MODELS_BUCKET) or store.read_bucket(AUDIT_LOGS_BUCKET):
        app_logger.info("Store already holds data; marking initialized without seeding")
        store.write_flag(INITIALIZED_FLAG, True)
        return False

    models = seed_models()
    model_records = [model.to_record() for model in models]
    log_records = [entry.to_record() for entry in seed_audit_logs(models)]
    if not (store.write_bucket(MODELS_BUCKET, model_records) and store.write_bucket(AUDIT_LOGS_BUCKET, log_records)):
        # Leave the store empty so the next start retries the seed
        store.write_bucket(MODELS_BUCKET, [])
        app_logger.error("Seeding failed; store left uninitialized")
        return False

    if not store.write_flag(INITIALIZED_FLAG, True):
        # The populated buckets still stop a later call from re-seeding
        app_logger.warning("Seed data written but the initialized flag could not be saved")

    app_logger.info(f"Seeded store with {len(models)} sample models")
    return True
