"""Shared fixtures: an in-memory backend and a store with a fixed clock."""

import pytest

from storage import MemoryStorage
from transaction_store import TransactionStore


class FixedClock:
    """Returns the same instant every call unless advanced."""

    def __init__(self, now: float = 1_704_067_200.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    # load_settings() must not pick up a developer's S3/DB configuration.
    for var in ("S3_BUCKET", "DATABASE_URL", "TRACKER_STORAGE_KEY", "TRACKER_DATA_DIR"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, clock):
    return TransactionStore(storage, clock=clock)


@pytest.fixture
def expense_draft():
    return {"type": "expense", "amount": "50", "category": "Food", "date": "2024-01-01"}


@pytest.fixture
def income_draft():
    return {"type": "income", "amount": "200", "category": "Salary", "date": "2024-01-02"}
