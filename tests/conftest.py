"""Shared fixtures for the ModelHub test suite."""

import os

# Keep tests off the filesystem: no log files, no JSON data directory.
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone

import pytest

from modelhub.config.logger import app_logger
from modelhub.db.store import MemoryStore
from modelhub.services.registry import ModelRegistry


class FakeClock:
    """Controllable clock passed to the registry."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FailingStore(MemoryStore):
    """Store whose writes are rejected, like a full browser quota."""

    def set_item(self, key: str, value: str) -> None:
        raise OSError("storage quota exceeded")


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def clock():
    return FakeClock(datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def registry(store, clock):
    return ModelRegistry(store, clock=clock)


@pytest.fixture()
def log_messages():
    """Capture loguru output emitted during a test."""
    messages = []
    handler_id = app_logger.add(messages.append, level="DEBUG", format="{level} | {message}")
    yield messages
    app_logger.remove(handler_id)
