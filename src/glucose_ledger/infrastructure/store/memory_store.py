"""In-memory record store for tests and dry-run imports."""

import uuid
from datetime import datetime, timezone
from typing import Any

from glucose_ledger.domain.glucose import GlucoseRecord
from glucose_ledger.utils.exceptions import RecordPersistenceError


class MemoryGlucoseStore:
    """Dict-backed GlucoseRecordStore."""

    def __init__(self, records: list[GlucoseRecord] | None = None) -> None:
        self._records: dict[str, GlucoseRecord] = {r.id: r for r in records or []}
        self.calls: list[str] = []

    def find(self, user_id: str, date: str, time_of_day: str) -> list[str]:
        self.calls.append("find")
        return [
            r.id
            for r in self._records.values()
            if r.user_id == user_id and r.date == date and r.time_of_day == time_of_day
        ]

    def update(self, record_id: str, fields: dict[str, Any]) -> None:
        self.calls.append("update")
        if record_id not in self._records:
            raise RecordPersistenceError(f"Error updating record: {record_id} not found")
        current = self._records[record_id].model_dump()
        self._records[record_id] = GlucoseRecord.model_validate({**current, **fields})

    def insert(self, fields: dict[str, Any]) -> GlucoseRecord:
        self.calls.append("insert")
        record = GlucoseRecord(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            **fields,
        )
        self._records[record.id] = record
        return record

    def list_records(self, user_id: str, since: str | None = None) -> list[GlucoseRecord]:
        self.calls.append("list_records")
        records = [
            r
            for r in self._records.values()
            if r.user_id == user_id and (since is None or r.date >= since)
        ]
        return sorted(records, key=lambda r: r.date, reverse=True)
