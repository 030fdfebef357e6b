"""
Output service for exporting stored glucose records.

Writes a user's full record history to CSV.
"""

import logging
from datetime import date
from pathlib import Path

import pandas as pd

from glucose_ledger.domain.glucose import GlucoseRecord
from glucose_ledger.utils.exceptions import ExportError
from glucose_ledger.utils.parameters import OutputConfig

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: dict[str, str] = {
    "date": "Date",
    "time_of_day": "Time of Day",
    "glucose_level": "Glucose Level (mg/dL)",
    "food_description": "Food Description",
    "created_at": "Created At",
}


def default_export_name(today: date | None = None) -> str:
    """File name of a full export, stamped with the export day."""
    stamp = (today or date.today()).isoformat()
    return f"diabetes-data-full-export-{stamp}.csv"


class OutputService:
    """
    Service for writing records to output files.

    Columns are renamed to their display headers on the way out.
    """

    def __init__(self, config: OutputConfig) -> None:
        """
        Initialize output service.

        Args:
            config: Output configuration.
        """
        self.config = config
        self.output_dir = Path(config.dir)

    def export_records(self, records: list[GlucoseRecord], path: Path | None = None) -> Path:
        """
        Write records to a CSV file, most recent date first.

        Args:
            records: Stored records of one user.
            path: Output path. Defaults to a dated file in the output dir.

        Returns:
            Path of the written file.

        Raises:
            ExportError: If there are no records or writing fails.
        """
        if not records:
            raise ExportError("No data to export")

        csv_path = path or self.output_dir / default_export_name()

        df = pd.DataFrame([r.model_dump() for r in records])
        df = df.sort_values("date", ascending=False, kind="stable")
        df["created_at"] = df["created_at"].apply(
            lambda ts: ts.isoformat() if ts is not None and not pd.isna(ts) else ""
        )
        df = df[list(EXPORT_COLUMNS)].rename(columns=EXPORT_COLUMNS)

        try:
            csv_path.parent.mkdir(parents=True, exist_ok=True)
            df.to_csv(csv_path, index=False, encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Failed to write export {csv_path}: {e}") from e

        logger.info(f"Exported {len(records)} records to {csv_path}")
        return csv_path
