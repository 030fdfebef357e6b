"""Shared fixtures for glucose ledger tests."""

from typing import Any

import pytest

from glucose_ledger.domain.glucose import GlucoseRecord, ImportedRecord
from glucose_ledger.infrastructure.store.memory_store import MemoryGlucoseStore
from glucose_ledger.utils.exceptions import RecordPersistenceError


class FailingStore(MemoryGlucoseStore):
    """Memory store that fails every lookup for the given dates."""

    def __init__(self, failing_dates: set[str]) -> None:
        super().__init__()
        self.failing_dates = failing_dates

    def find(self, user_id: str, date: str, time_of_day: str) -> list[str]:
        if date in self.failing_dates:
            self.calls.append("find")
            raise RecordPersistenceError("Error checking for existing record: connection reset")
        return super().find(user_id, date, time_of_day)


@pytest.fixture
def memory_store() -> MemoryGlucoseStore:
    return MemoryGlucoseStore()


@pytest.fixture
def make_record() -> Any:
    def _make(
        date: str = "2024-01-15",
        time_of_day: str = "Breakfast",
        glucose_level: float = 120.0,
        food_description: str = "Oatmeal",
    ) -> ImportedRecord:
        return ImportedRecord(
            date=date,
            time_of_day=time_of_day,
            glucose_level=glucose_level,
            food_description=food_description,
        )

    return _make


@pytest.fixture
def stored_records() -> list[GlucoseRecord]:
    return [
        GlucoseRecord(id="1", user_id="u1", date="2024-01-14", time_of_day="Breakfast", glucose_level=100),
        GlucoseRecord(id="2", user_id="u1", date="2024-01-14", time_of_day="Dinner", glucose_level=150),
        GlucoseRecord(id="3", user_id="u1", date="2024-01-15", time_of_day="Breakfast", glucose_level=110),
        GlucoseRecord(id="4", user_id="u1", date="2024-01-15", time_of_day="Lunch", glucose_level=131),
        GlucoseRecord(id="5", user_id="u2", date="2024-01-15", time_of_day="Lunch", glucose_level=90),
    ]


@pytest.fixture
def failing_store() -> Any:
    def _make(failing_dates: set[str]) -> FailingStore:
        return FailingStore(failing_dates)

    return _make
