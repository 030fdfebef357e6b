"""
Manual entry of single glucose records.
"""

import logging
from typing import Any

from pydantic import ValidationError

from glucose_ledger.domain.glucose import GlucoseRecord, ImportedRecord, TimeOfDay
from glucose_ledger.infrastructure.store.protocols import GlucoseRecordStore
from glucose_ledger.utils.date_utils import format_date
from glucose_ledger.utils.exceptions import RowValidationError

logger = logging.getLogger(__name__)


class RecordService:
    """Adds individual readings to the record store."""

    def __init__(self, store: GlucoseRecordStore) -> None:
        self.store = store

    def add_record(
        self,
        user_id: str,
        record_date: Any,
        time_of_day: TimeOfDay | str,
        glucose_level: float,
        food_description: str = "",
    ) -> GlucoseRecord:
        """
        Validate one reading and insert it as a new record.

        Unlike an import, an existing reading for the same date and meal is
        not looked up; the store gets a plain insert.

        Args:
            user_id: Owner of the record.
            record_date: Date string or date object.
            time_of_day: Breakfast, Lunch or Dinner.
            glucose_level: Positive reading in mg/dL.
            food_description: Optional free text.

        Returns:
            The record as stored.

        Raises:
            RowValidationError: If the user id or any field is invalid.
            RecordPersistenceError: If the store rejects the insert.
        """
        if not user_id:
            raise RowValidationError("You must provide a user id to add records")

        try:
            formatted_date = format_date(record_date)
        except ValueError as e:
            raise RowValidationError("Invalid date format") from e

        try:
            record = ImportedRecord(
                date=formatted_date,
                time_of_day=time_of_day,
                glucose_level=glucose_level,
                food_description=food_description.strip(),
            )
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            raise RowValidationError(f"Invalid {field}: {error['msg']}") from e

        stored = self.store.insert({"user_id": user_id, **record.model_dump()})
        logger.info(f"Added {stored.time_of_day} record on {stored.date} for user {user_id}")
        return stored
