"""
Glucose domain models.

This module defines the records produced by spreadsheet normalization,
the stored glucose record schema, and the import result summary.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TimeOfDay(str, Enum):
    """Meal a glucose reading is tied to."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"


class ImportedRecord(BaseModel):
    """
    Validated glucose record produced from a spreadsheet row.

    Transient: it only lives between normalization and reconciliation.
    """

    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$", description="Date in YYYY-MM-DD format")
    time_of_day: TimeOfDay = Field(description="Meal the reading is tied to")
    glucose_level: float = Field(gt=0, description="Glucose level (mg/dL)")
    food_description: str = Field("", description="Free-text food description")

    model_config = ConfigDict(use_enum_values=True, frozen=True)


class GlucoseRecord(BaseModel):
    """Glucose record as persisted in the remote record store."""

    id: str
    user_id: str
    date: str
    time_of_day: TimeOfDay
    glucose_level: float
    food_description: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(use_enum_values=True, coerce_numbers_to_str=True)


class RowError(BaseModel):
    """Validation failure for a single spreadsheet row (1-based index)."""

    row: int
    message: str

    def __str__(self) -> str:
        return f"Row {self.row}: {self.message}"


class NormalizationResult(BaseModel):
    """Valid records and rejected rows collected from one spreadsheet."""

    records: list[ImportedRecord] = Field(default_factory=list)
    errors: list[RowError] = Field(default_factory=list)

    def error_messages(self) -> list[str]:
        """Row errors formatted as 'Row <n>: <message>'."""
        return [str(error) for error in self.errors]


class ImportResult(BaseModel):
    """
    Summary of one import invocation.

    `records` holds every record that was attempted, successful or not, in
    input order. `errors` holds human-readable failure descriptions.
    """

    success: bool = True
    total_records: int = 0
    imported_records: int = 0
    updated_records: int = 0
    errors: list[str] = Field(default_factory=list)
    records: list[ImportedRecord] = Field(default_factory=list)

    def determine_success(self) -> bool:
        """
        Recompute `success` from the counters and errors.

        An import is successful when nothing failed, or when at least one
        record was imported or updated despite failures.
        """
        self.success = not self.errors or (self.imported_records + self.updated_records) > 0
        return self.success
