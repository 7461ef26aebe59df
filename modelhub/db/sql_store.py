"""SQL-backed durable store using SQLModel.

Each bucket is a single row in ``store_entries`` holding the serialized JSON,
so the bucket semantics are identical to the file and memory backends. Works
with any SQLAlchemy URL; SQLite is the default.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from modelhub.config.logger import app_logger
from modelhub.db.store import DurableStore
from modelhub.models.store_entry import StoreEntry


class SqlStore(DurableStore):
    """Durable store persisting buckets as rows of ``StoreEntry``."""

    def __init__(
        self,
        database_url: str,
        key_prefix: Optional[str] = None,
        engine: Optional[Engine] = None,
    ) -> None:
        super().__init__(key_prefix)
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}
        self.engine = engine or create_engine(database_url, echo=False, connect_args=connect_args)
        SQLModel.metadata.create_all(self.engine, tables=[StoreEntry.__table__])
        app_logger.debug(f"SQL store ready at {self.engine.url.render_as_string(hide_password=True)}")

    def get_item(self, key: str) -> Optional[str]:
        with Session(self.engine) as session:
            entry = session.get(StoreEntry, key)
            return entry.value if entry is not None else None

    def set_item(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            entry = session.get(StoreEntry, key)
            if entry is None:
                entry = StoreEntry(key=key, value=value)
            else:
                entry.value = value
                entry.updated_at = datetime.now(timezone.utc)
            session.add(entry)
            session.commit()

    def dispose(self) -> None:
        self.engine.dispose()
