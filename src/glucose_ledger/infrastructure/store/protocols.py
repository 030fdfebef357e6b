"""Record store interface consumed by the import reconciler."""

from typing import Any, Protocol

from glucose_ledger.domain.glucose import GlucoseRecord


class GlucoseRecordStore(Protocol):
    """
    Remote store of glucose records.

    Records are looked up by the (user_id, date, time_of_day) convention;
    the store itself does not enforce uniqueness. Every method may raise
    RecordPersistenceError.
    """

    def find(self, user_id: str, date: str, time_of_day: str) -> list[str]:
        """Return ids of records matching the user, date and meal."""
        ...

    def update(self, record_id: str, fields: dict[str, Any]) -> None:
        """Overwrite the given fields of an existing record."""
        ...

    def insert(self, fields: dict[str, Any]) -> GlucoseRecord:
        """Create a record and return it as stored."""
        ...

    def list_records(self, user_id: str, since: str | None = None) -> list[GlucoseRecord]:
        """Return records of a user, most recent date first, optionally from `since` on."""
        ...
