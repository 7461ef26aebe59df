"""Model registry and audit engine.

The registry is the only write path for models. Every mutation is paired with
audit entries appended to the ``audit_logs`` bucket:

- create: one ``create`` entry, ``reviewDate`` defaulted to one year out
- update: one ``update`` entry per changed field (composites diffed whole)
- delete: one terminal ``delete`` entry; earlier entries are kept

Storage failures never raise out of the registry; the store logs them.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union
from uuid import uuid4

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from modelhub.config.logger import app_logger
from modelhub.config.settings import settings
from modelhub.db.store import AUDIT_LOGS_BUCKET, MODELS_BUCKET, DurableStore, get_store
from modelhub.models.audit_log import AuditAction, AuditLogEntry
from modelhub.models.base import ensure_utc
from modelhub.models.model import Model


def canonical_json(value: Any) -> str:
    """Serialize so that structurally-equal values give identical strings."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return canonical_json(value)


def _as_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return canonical_json(value)


# Persisted field name -> serializer for the audit trail, in diff order.
# lastUpdated is excluded: it changes on every write.
AUDITED_FIELDS: Dict[str, Callable[[Any], Optional[str]]] = {
    "id": _as_text,
    "name": _as_text,
    "businessUnit": _as_text,
    "owner": _as_text,
    "description": _as_text,
    "domain": _as_text,
    "status": _as_text,
    "tier": _as_json,
    "gitRepoLink": _as_text,
    "reviewDate": _as_text,
    "materialityScores": _as_json,
    "documentation": _as_json,
    "dataLineage": _as_json,
}


def _record_defaults() -> Dict[str, Any]:
    """Persisted form of every non-null ``Model`` default (``businessUnit: ""``)."""
    defaults = {}
    for name, info in Model.model_fields.items():
        if info.is_required() or info.default is None:
            continue
        default = info.default
        defaults[info.alias or to_camel(name)] = default.value if isinstance(default, Enum) else default
    return defaults


RECORD_DEFAULTS = _record_defaults()


@dataclass(frozen=True)
class Found:
    """Lookup hit: position in the collection and the normalized stored record."""

    index: int
    record: Dict[str, Any]


@dataclass(frozen=True)
class NotFound:
    model_id: str


Lookup = Union[Found, NotFound]


def add_one_year(moment: datetime) -> datetime:
    """Same calendar date next year; 29 February maps to 28 February."""
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        return moment.replace(year=moment.year + 1, day=28)


def diff_records(old: Dict[str, Any], new: Dict[str, Any]) -> List[tuple]:
    """Return ``(field, old_value, new_value)`` for every audited field that changed."""
    changes = []
    for field_name, serialize in AUDITED_FIELDS.items():
        old_value = old.get(field_name)
        new_value = new.get(field_name)
        if canonical_json(old_value) != canonical_json(new_value):
            changes.append((field_name, serialize(old_value), serialize(new_value)))
    return changes


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ModelRegistry:
    """Owns the model and audit-log collections of a durable store.

    Args:
        store: Backend holding the ``models`` and ``audit_logs`` buckets.
        clock: Returns the current time; one reading is taken per mutation.
        id_factory: Generates audit entry ids.
    """

    def __init__(
        self,
        store: DurableStore,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self._store = store
        self._clock = clock
        self._id_factory = id_factory

    @property
    def store(self) -> DurableStore:
        return self._store

    # ============================================
    # Read accessors
    # ============================================

    def _read_records(self) -> List[Any]:
        return self._store.read_bucket(MODELS_BUCKET)

    def get_all(self) -> List[Model]:
        """Return every stored model; unreadable records are skipped."""
        models = []
        for record in self._read_records():
            try:
                models.append(Model.model_validate(record))
            except ValidationError as e:
                app_logger.warning(f"Skipping invalid model record in storage: {e.error_count()} error(s)")
        return models

    def get_by_id(self, model_id: str) -> Optional[Model]:
        for model in self.get_all():
            if model.id == model_id:
                return model
        return None

    def get_audit_logs(self) -> List[AuditLogEntry]:
        """Return every audit entry in stored (append) order."""
        entries = []
        for record in self._store.read_bucket(AUDIT_LOGS_BUCKET):
            try:
                entries.append(AuditLogEntry.model_validate(record))
            except ValidationError as e:
                app_logger.warning(f"Skipping invalid audit record in storage: {e.error_count()} error(s)")
        return entries

    def get_audit_logs_for_model(self, model_id: str) -> List[AuditLogEntry]:
        return [entry for entry in self.get_audit_logs() if entry.model_id == model_id]

    # ============================================
    # Write operations
    # ============================================

    @staticmethod
    def _normalize(record: Dict[str, Any]) -> Dict[str, Any]:
        """Round-trip a stored record through the schema so both diff sides match.

        Records that no longer validate get the schema defaults for the
        fields they lack, so only real differences reach the audit trail.
        """
        try:
            return Model.model_validate(record).to_record()
        except ValidationError:
            return {**RECORD_DEFAULTS, **record}

    def _lookup(self, records: List[Any], model_id: str) -> Lookup:
        for index, record in enumerate(records):
            if isinstance(record, dict) and record.get("id") == model_id:
                return Found(index=index, record=self._normalize(record))
        return NotFound(model_id=model_id)

    def _append_logs(self, entries: List[AuditLogEntry]) -> None:
        if not entries:
            return
        logs = self._store.read_bucket(AUDIT_LOGS_BUCKET)
        logs.extend(entry.to_record() for entry in entries)
        self._store.write_bucket(AUDIT_LOGS_BUCKET, logs)

    def _entry(
        self,
        action: AuditAction,
        model_id: str,
        model_name: str,
        timestamp: datetime,
        actor: str,
        field: Optional[str] = None,
        old_value: Optional[str] = None,
        new_value: Optional[str] = None,
    ) -> AuditLogEntry:
        return AuditLogEntry(
            id=self._id_factory(),
            model_id=model_id,
            model_name=model_name,
            timestamp=timestamp,
            action=action,
            field=field,
            old_value=old_value,
            new_value=new_value,
            modified_by=actor,
        )

    def save(self, model: Model, actor: Optional[str] = None) -> Model:
        """Create or update ``model`` (full replacement) and audit the change.

        An unknown ``id`` means create; a known one means update.

        Returns:
            The record as stored, with ``last_updated`` (and on create,
            ``review_date``) filled in.
        """
        actor = actor or settings.DEFAULT_ACTOR
        now = ensure_utc(self._clock())
        records = self._read_records()
        lookup = self._lookup(records, model.id)

        if isinstance(lookup, Found):
            saved = model.model_copy(update={"last_updated": now})
            new_record = saved.to_record()
            entries = [
                self._entry(
                    AuditAction.UPDATE,
                    saved.id,
                    saved.name,
                    now,
                    actor,
                    field=field_name,
                    old_value=old_value,
                    new_value=new_value,
                )
                for field_name, old_value, new_value in diff_records(lookup.record, new_record)
            ]
            records[lookup.index] = new_record
            app_logger.info(f"Model {saved.id} updated by {actor}: {len(entries)} field(s) changed")
        else:
            update = {"last_updated": now}
            if model.review_date is None:
                update["review_date"] = add_one_year(now)
            saved = model.model_copy(update=update)
            entries = [self._entry(AuditAction.CREATE, saved.id, saved.name, now, actor)]
            records.append(saved.to_record())
            app_logger.info(f"Model {saved.id} created by {actor}")

        self._store.write_bucket(MODELS_BUCKET, records)
        self._append_logs(entries)
        return saved

    def delete(self, model_id: str, actor: Optional[str] = None) -> bool:
        """Remove a model, appending a ``delete`` entry if it existed.

        Returns:
            True if a record was removed. Unknown ids are a no-op.
        """
        actor = actor or settings.DEFAULT_ACTOR
        records = self._read_records()
        lookup = self._lookup(records, model_id)

        if isinstance(lookup, Found):
            entry = self._entry(
                AuditAction.DELETE,
                model_id,
                str(lookup.record.get("name", "")),
                ensure_utc(self._clock()),
                actor,
            )
            self._append_logs([entry])
            app_logger.info(f"Model {model_id} deleted by {actor}")
        else:
            app_logger.debug(f"Delete requested for unknown model {model_id}")

        remaining = [r for r in records if not (isinstance(r, dict) and r.get("id") == model_id)]
        self._store.write_bucket(MODELS_BUCKET, remaining)
        return len(remaining) != len(records)


_registry: Optional[ModelRegistry] = None


def get_registry() -> ModelRegistry:
    """Return the registry bound to the process-wide store."""
    global _registry
    if _registry is None or _registry.store is not get_store():
        _registry = ModelRegistry(get_store())
    return _registry
