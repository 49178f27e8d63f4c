"""Fixtures for F2 tests - Progress storage and streak tracking."""

from datetime import date, timedelta

import pytest

from companion.core.progress_store import MemoryProgressStorage, ProgressStorageError

TODAY = date(2026, 3, 15)


class FailingStorage:
    """Storage whose selected operations fail; otherwise holds one value."""

    def __init__(
        self,
        fail_read: bool = True,
        fail_write: bool = True,
        fail_delete: bool = True,
        value: str | None = None,
    ):
        self.fail_read = fail_read
        self.fail_write = fail_write
        self.fail_delete = fail_delete
        self.value = value
        self.writes: list[str] = []

    def read(self) -> str | None:
        if self.fail_read:
            raise ProgressStorageError("storage unavailable")
        return self.value

    def write(self, value: str) -> None:
        if self.fail_write:
            raise ProgressStorageError("quota exceeded")
        self.value = value
        self.writes.append(value)

    def delete(self) -> None:
        if self.fail_delete:
            raise ProgressStorageError("storage unavailable")
        self.value = None


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def days_ago(today):
    """Return the ISO stamp for ``n`` days before today."""

    def _days_ago(n: int) -> str:
        return (today - timedelta(days=n)).isoformat()

    return _days_ago


@pytest.fixture
def memory_storage() -> MemoryProgressStorage:
    return MemoryProgressStorage()


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()


@pytest.fixture
def make_failing_storage():
    """Factory for storages failing on selected operations."""
    return FailingStorage
