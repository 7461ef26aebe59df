"""Unit tests for the durable store backends."""

import json

import pytest

from modelhub.db.sql_store import SqlStore
from modelhub.db.store import (
    AUDIT_LOGS_BUCKET,
    INITIALIZED_FLAG,
    MODELS_BUCKET,
    JsonFileStore,
    MemoryStore,
    create_store,
    get_store,
    reset_store,
)
from modelhub.services.registry import get_registry

from conftest import FailingStore

SAMPLE = [
    {"id": "m1", "name": "A", "tier": 3, "dataLineage": {"upstream": ["Warehouse"]}},
    {"id": "m2", "name": "B", "tier": 1, "reviewDate": None},
]


class TestMemoryStore:
    """Bucket semantics shared by every backend, exercised on the memory store."""

    def test_absent_bucket_reads_empty(self, store):
        """A bucket that was never written reads as an empty list."""
        assert store.read_bucket(MODELS_BUCKET) == []

    def test_round_trip(self, store):
        """write_bucket followed by read_bucket returns an equal collection."""
        assert store.write_bucket(MODELS_BUCKET, SAMPLE) is True
        assert store.read_bucket(MODELS_BUCKET) == SAMPLE

    def test_write_replaces_prior_value(self, store):
        store.write_bucket(MODELS_BUCKET, SAMPLE)
        store.write_bucket(MODELS_BUCKET, SAMPLE[:1])
        assert store.read_bucket(MODELS_BUCKET) == SAMPLE[:1]

    def test_buckets_are_independent(self, store):
        store.write_bucket(MODELS_BUCKET, SAMPLE)
        assert store.read_bucket(AUDIT_LOGS_BUCKET) == []

    def test_keys_use_prefix(self):
        """Bucket names are namespaced by the configured prefix."""
        store = MemoryStore(key_prefix="modelhub_")
        store.write_bucket(MODELS_BUCKET, [])
        assert store.get_item("modelhub_models") == "[]"

    def test_corrupt_bucket_reads_empty_and_logs(self, store, log_messages):
        """Deserialization failure degrades to an empty collection."""
        store.set_item(store.key_for(MODELS_BUCKET), "{not json")
        assert store.read_bucket(MODELS_BUCKET) == []
        assert any("Failed to deserialize" in m for m in log_messages)

    def test_non_array_bucket_reads_empty(self, store, log_messages):
        store.set_item(store.key_for(MODELS_BUCKET), json.dumps({"id": "m1"}))
        assert store.read_bucket(MODELS_BUCKET) == []
        assert any("expected a JSON array" in m for m in log_messages)

    def test_unserializable_items_fail_without_raising(self, store, log_messages):
        """Values json cannot encode are a write failure, not an exception."""
        assert store.write_bucket(MODELS_BUCKET, [object()]) is False
        assert store.read_bucket(MODELS_BUCKET) == []
        assert any("Failed to save" in m for m in log_messages)

    def test_flags(self, store):
        assert store.read_flag(INITIALIZED_FLAG) is False
        assert store.write_flag(INITIALIZED_FLAG, True) is True
        assert store.read_flag(INITIALIZED_FLAG) is True

    def test_clear(self, store):
        store.write_bucket(MODELS_BUCKET, SAMPLE)
        store.clear()
        assert store.read_bucket(MODELS_BUCKET) == []


class TestWriteFailures:
    """Rejected writes are logged and reported, never raised."""

    def test_write_failure_returns_false(self, log_messages):
        store = FailingStore()
        assert store.write_bucket(MODELS_BUCKET, SAMPLE) is False
        errors = [m for m in log_messages if m.startswith("ERROR")]
        assert errors and "storage quota exceeded" in errors[0]

    def test_flag_write_failure_returns_false(self):
        store = FailingStore()
        assert store.write_flag(INITIALIZED_FLAG) is False
        assert store.read_flag(INITIALIZED_FLAG) is False

    def test_read_failure_reads_empty(self, log_messages):
        class BrokenReads(MemoryStore):
            def get_item(self, key):
                raise OSError("disk unavailable")

        assert BrokenReads().read_bucket(MODELS_BUCKET) == []
        assert any("disk unavailable" in m for m in log_messages)


class TestJsonFileStore:
    """File-per-bucket backend."""

    def test_round_trip(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.write_bucket(MODELS_BUCKET, SAMPLE)
        assert store.read_bucket(MODELS_BUCKET) == SAMPLE

    def test_writes_one_file_per_key(self, tmp_path):
        store = JsonFileStore(tmp_path, key_prefix="modelhub_")
        store.write_bucket(MODELS_BUCKET, SAMPLE)
        assert (tmp_path / "modelhub_models.json").exists()
        assert not list(tmp_path.glob("*.tmp"))

    def test_persists_across_instances(self, tmp_path):
        JsonFileStore(tmp_path).write_bucket(AUDIT_LOGS_BUCKET, SAMPLE)
        assert JsonFileStore(tmp_path).read_bucket(AUDIT_LOGS_BUCKET) == SAMPLE

    def test_creates_missing_directory(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "data")
        assert store.write_bucket(MODELS_BUCKET, SAMPLE) is True

    def test_corrupt_file_reads_empty(self, tmp_path):
        store = JsonFileStore(tmp_path)
        (tmp_path / f"{store.key_for(MODELS_BUCKET)}.json").write_text("[{", encoding="utf-8")
        assert store.read_bucket(MODELS_BUCKET) == []


class TestSqlStore:
    """SQLModel-backed backend on a temporary SQLite file."""

    @pytest.fixture()
    def database_url(self, tmp_path):
        return f"sqlite:///{tmp_path / 'store.db'}"

    def test_round_trip(self, database_url):
        store = SqlStore(database_url)
        store.write_bucket(MODELS_BUCKET, SAMPLE)
        assert store.read_bucket(MODELS_BUCKET) == SAMPLE
        store.dispose()

    def test_overwrite_keeps_single_row(self, database_url):
        store = SqlStore(database_url)
        store.write_bucket(MODELS_BUCKET, SAMPLE)
        store.write_bucket(MODELS_BUCKET, [])
        assert store.read_bucket(MODELS_BUCKET) == []
        store.dispose()

    def test_persists_across_instances(self, database_url):
        first = SqlStore(database_url)
        first.write_flag(INITIALIZED_FLAG, True)
        first.dispose()

        second = SqlStore(database_url)
        assert second.read_flag(INITIALIZED_FLAG) is True
        second.dispose()


class TestCreateStore:
    @pytest.mark.parametrize(
        "backend, expected",
        [("memory", MemoryStore), ("json", JsonFileStore)],
    )
    def test_backend_selection(self, backend, expected):
        assert isinstance(create_store(backend), expected)

    def test_process_store_is_cached(self):
        """get_store returns one shared instance until reset_store is called."""
        reset_store()
        try:
            first = get_store()
            assert get_store() is first
            assert get_registry().store is first

            reset_store()
            second = get_store()
            assert second is not first
            assert get_registry().store is second
        finally:
            reset_store()

    def test_sql_backend(self, tmp_path, monkeypatch):
        from modelhub.config.settings import settings

        monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite:///{tmp_path / 'factory.db'}")
        store = create_store("sql")
        assert isinstance(store, SqlStore)
        store.dispose()
