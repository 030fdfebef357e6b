"""
Import service for reconciling glucose records with the record store.

Applies normalized spreadsheet records with insert-or-update semantics,
keyed by (user_id, date, time_of_day), isolating failures per record.
"""

import logging
from collections.abc import Iterator, Sequence
from datetime import datetime, timezone

from glucose_ledger.domain.glucose import ImportedRecord, ImportResult, NormalizationResult
from glucose_ledger.infrastructure.parsers.spreadsheet_parser import ImportFile, SpreadsheetParser
from glucose_ledger.infrastructure.store.protocols import GlucoseRecordStore

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
NO_RECORDS_MESSAGE = "No valid records found to import"
MISSING_USER_MESSAGE = "A user id is required to import records"


def batched(records: Sequence[ImportedRecord], size: int) -> Iterator[Sequence[ImportedRecord]]:
    """Yield consecutive slices of at most `size` records."""
    for start in range(0, len(records), size):
        yield records[start : start + size]


class ImportReconciler:
    """
    Upserts imported records into a record store.

    Records are processed strictly in input order. Batching only bounds the
    load placed on the store; it is not a transaction boundary, so records
    written before a failure stay written.
    """

    def __init__(self, store: GlucoseRecordStore, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        """
        Initialize import reconciler.

        Args:
            store: Record store to query and write.
            batch_size: Number of records per batch.
        """
        self.store = store
        self.batch_size = batch_size

    def import_records(self, user_id: str, records: Sequence[ImportedRecord]) -> ImportResult:
        """
        Insert or update each record for the given user.

        Never raises: store failures become entries in `errors`.

        Args:
            user_id: Owner of the records.
            records: Normalized records, in spreadsheet order.

        Returns:
            Import summary with counters, errors and every attempted record.
        """
        result = ImportResult(total_records=len(records))

        if not user_id:
            result.errors.append(MISSING_USER_MESSAGE)
            result.determine_success()
            return result

        if not records:
            result.errors.append(NO_RECORDS_MESSAGE)
            result.determine_success()
            return result

        for batch_number, batch in enumerate(batched(records, self.batch_size), start=1):
            logger.debug(f"Processing batch {batch_number} ({len(batch)} records)")
            for record in batch:
                self._import_record(user_id, record, result)

        result.determine_success()

        logger.info(
            f"Imported {result.imported_records}, updated {result.updated_records} "
            f"of {result.total_records} records ({len(result.errors)} errors)"
        )
        return result

    def _import_record(self, user_id: str, record: ImportedRecord, result: ImportResult) -> None:
        try:
            existing_ids = self.store.find(user_id, record.date, record.time_of_day)

            if existing_ids:
                self.store.update(
                    existing_ids[0],
                    {
                        "glucose_level": record.glucose_level,
                        "food_description": record.food_description,
                        "updated_at": datetime.now(timezone.utc).isoformat(),
                    },
                )
                result.updated_records += 1
            else:
                self.store.insert(
                    {
                        "user_id": user_id,
                        "date": record.date,
                        "time_of_day": record.time_of_day,
                        "glucose_level": record.glucose_level,
                        "food_description": record.food_description,
                    }
                )
                result.imported_records += 1

        except Exception as e:
            message = f"Error processing record ({record.date}, {record.time_of_day}): {e}"
            logger.error(message)
            result.errors.append(message)

        result.records.append(record)


class ImportService:
    """
    End-to-end spreadsheet import.

    Parses a file, reconciles its valid rows with the store, and reports
    rejected rows alongside store failures.
    """

    def __init__(self, parser: SpreadsheetParser, reconciler: ImportReconciler) -> None:
        self.parser = parser
        self.reconciler = reconciler

    def preview(self, file: ImportFile, filename: str | None = None) -> NormalizationResult:
        """
        Parse a file without touching the store.

        Raises:
            ParseError: If the file cannot be decoded.
        """
        return self.parser.load_file(file, filename)

    def import_file(
        self, user_id: str, file: ImportFile, filename: str | None = None
    ) -> ImportResult:
        """
        Parse a file and import its valid records for a user.

        Row validation errors are listed first in `errors`, followed by
        store errors.

        Raises:
            ParseError: If the file cannot be decoded. Raised before any
                store call.
        """
        normalized = self.parser.load_file(file, filename)
        result = self.reconciler.import_records(user_id, normalized.records)

        if normalized.errors:
            result.errors = normalized.error_messages() + result.errors
            result.determine_success()

        return result
