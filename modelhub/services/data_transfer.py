"""Bulk export and import of the model inventory.

Imports are all-or-nothing: every entry is validated first and a single bad
entry rejects the batch. Accepted entries go through ``ModelRegistry.save``
one by one, so imported changes land in the audit trail like any other edit.
"""

import json
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError

from modelhub.config.logger import app_logger
from modelhub.models.model import Model
from modelhub.services.registry import ModelRegistry

INVALID_JSON_ERROR = "Invalid JSON format in import file"
NOT_AN_ARRAY_ERROR = "Invalid import file: Expected an array of models"


class ImportResult(BaseModel):
    """Outcome of an import; ``errors`` is non-empty when the batch was rejected."""

    imported: int = 0
    created: int = 0
    updated: int = 0
    errors: List[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


def export_filename(today: Optional[date] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return f"modelhub_export_{today.isoformat()}.json"


def export_models(registry: ModelRegistry) -> str:
    """Serialize the whole inventory as a pretty-printed JSON array."""
    models = registry.get_all()
    app_logger.info(f"Exporting {len(models)} models")
    return json.dumps([model.to_record() for model in models], indent=2, ensure_ascii=False)


def validate_import(data: Any) -> tuple[List[Model], List[str]]:
    """Check an already-parsed import document.

    Returns:
        (valid models, human-readable error messages)
    """
    if not isinstance(data, list):
        return [], [NOT_AN_ARRAY_ERROR]

    models: List[Model] = []
    errors: List[str] = []
    for position, item in enumerate(data, start=1):
        if not isinstance(item, dict) or not item.get("id") or not item.get("name"):
            errors.append(f"Model at position {position} is missing required fields (id, name)")
            continue
        try:
            models.append(Model.model_validate(item))
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            errors.append(f"Model at position {position} is invalid: {location}: {first['msg']}")
    return models, errors


def import_models(
    registry: ModelRegistry,
    payload: str | bytes | list,
    actor: Optional[str] = None,
) -> ImportResult:
    """Merge an exported document into the registry, matching records by ``id``."""
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except ValueError:
            app_logger.warning("Import rejected: payload is not valid JSON")
            return ImportResult(errors=[INVALID_JSON_ERROR])
    else:
        data = payload

    models, errors = validate_import(data)
    if errors:
        app_logger.warning(f"Import rejected with {len(errors)} error(s)")
        return ImportResult(errors=errors)

    result = ImportResult()
    for model in models:
        if registry.get_by_id(model.id) is None:
            result.created += 1
        else:
            result.updated += 1
        registry.save(model, actor)
        result.imported += 1

    app_logger.info(
        f"Imported {result.imported} models ({result.created} created, {result.updated} updated)"
    )
    return result
