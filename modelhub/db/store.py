"""Durable key-value store for the registry's named buckets.

Every backend exposes the same two raw primitives, ``get_item`` and
``set_item`` (string in, string out, like browser local storage). The bucket
operations built on top of them never raise: read failures degrade to an
empty collection and write failures are logged and reported as ``False``.

All I/O here is synchronous. The API calls it from ``async def`` endpoints,
so each file fsync or SQL commit blocks the event loop until it finishes;
that is what keeps registry writes from interleaving.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from modelhub.config.logger import app_logger
from modelhub.config.settings import settings

MODELS_BUCKET = "models"
AUDIT_LOGS_BUCKET = "audit_logs"
INITIALIZED_FLAG = "initialized"


class DurableStore:
    """Base class for bucket persistence.

    Args:
        key_prefix: Namespace prepended to every bucket name
            (``modelhub_`` gives ``modelhub_models``).
    """

    def __init__(self, key_prefix: Optional[str] = None) -> None:
        self.key_prefix = settings.STORAGE_KEY_PREFIX if key_prefix is None else key_prefix

    def key_for(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    # ============================================
    # Raw primitives (implemented by backends)
    # ============================================

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    # ============================================
    # Bucket operations
    # ============================================

    def _load(self, name: str) -> Any:
        """Read and decode one key; ``None`` when absent or unreadable."""
        try:
            raw = self.get_item(self.key_for(name))
        except Exception as e:
            app_logger.warning(f"Failed to read '{name}' from storage: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            app_logger.warning(f"Failed to deserialize '{name}' from storage: {e}")
            return None

    def _dump(self, name: str, value: Any) -> bool:
        try:
            self.set_item(self.key_for(name), json.dumps(value))
        except Exception as e:
            app_logger.error(f"Failed to save '{name}' to storage: {e}")
            return False
        return True

    def read_bucket(self, name: str) -> List[Any]:
        """Return the stored collection, or an empty list if absent or corrupt."""
        items = self._load(name)
        if items is None:
            return []
        if not isinstance(items, list):
            app_logger.warning(
                f"Ignoring '{name}' in storage: expected a JSON array, got {type(items).__name__}"
            )
            return []
        return items

    def write_bucket(self, name: str, items: Iterable[Any]) -> bool:
        """Persist ``items`` as the whole bucket, replacing any prior value.

        Returns:
            True on success, False if the write failed (already logged).
        """
        return self._dump(name, list(items))

    def read_flag(self, name: str) -> bool:
        return self._load(name) is True

    def write_flag(self, name: str, value: bool = True) -> bool:
        return self._dump(name, bool(value))


class MemoryStore(DurableStore):
    """Process-local store; used by tests and throwaway sessions."""

    def __init__(self, key_prefix: Optional[str] = None) -> None:
        super().__init__(key_prefix)
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def clear(self) -> None:
        self._items.clear()


class JsonFileStore(DurableStore):
    """One ``<key>.json`` file per bucket inside ``data_dir``.

    Writes go to a temp file that is fsynced and renamed over the target, so
    a crash mid-write leaves the previous value intact.
    """

    def __init__(self, data_dir: str | Path, key_prefix: Optional[str] = None) -> None:
        super().__init__(key_prefix)
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(".tmp")

        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(value)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, path)


_store: Optional[DurableStore] = None


def create_store(backend: Optional[str] = None) -> DurableStore:
    """Build a store for the given backend name (defaults to settings)."""
    backend = backend or settings.effective_store_backend
    if backend == "memory":
        return MemoryStore()
    if backend == "sql":
        # Imported lazily so the JSON/memory backends never touch SQLAlchemy
        from modelhub.db.sql_store import SqlStore

        return SqlStore(settings.DATABASE_URL)
    return JsonFileStore(settings.DATA_DIR)


def get_store() -> DurableStore:
    """Return the process-wide store, creating it on first use."""
    global _store
    if _store is None:
        _store = create_store()
        app_logger.info(f"Durable store initialized: {type(_store).__name__}")
    return _store


def reset_store() -> None:
    """Forget the cached store (tests and reconfiguration)."""
    global _store
    _store = None
