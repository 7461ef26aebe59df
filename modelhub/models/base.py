"""Shared pydantic base for persisted records."""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC so stored values always compare."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CamelModel(BaseModel):
    """Record whose persisted form uses camelCase keys (``businessUnit``)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    def to_record(self) -> Dict[str, Any]:
        """Return the JSON-ready dict written to the durable store."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
