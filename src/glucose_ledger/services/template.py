"""
Import template generation.

Builds the starter spreadsheet users fill in before importing.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import BaseModel

from glucose_ledger.utils.date_utils import today_and_yesterday
from glucose_ledger.utils.exceptions import ExportError

logger = logging.getLogger(__name__)

TEMPLATE_HEADERS = ["Date", "Time of Day", "Glucose Level", "Food Description"]


class ImportTemplate(BaseModel):
    """Header row and sample rows of the import template."""

    headers: list[str]
    sample_data: list[dict[str, Any]]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.sample_data, columns=self.headers)


def generate_import_template(today: date | None = None) -> ImportTemplate:
    """
    Generate the import template with three sample readings.

    Args:
        today: Reference day for the sample dates. Defaults to today.

    Returns:
        Template headers and sample rows dated today and yesterday.
    """
    today_str, yesterday_str = today_and_yesterday(today)

    sample_data = [
        {
            "Date": today_str,
            "Time of Day": "Breakfast",
            "Glucose Level": 120,
            "Food Description": "Oatmeal with berries and a cup of coffee",
        },
        {
            "Date": today_str,
            "Time of Day": "Lunch",
            "Glucose Level": 110,
            "Food Description": "Grilled chicken salad with olive oil dressing",
        },
        {
            "Date": yesterday_str,
            "Time of Day": "Dinner",
            "Glucose Level": 130,
            "Food Description": "Salmon with steamed vegetables and brown rice",
        },
    ]

    return ImportTemplate(headers=list(TEMPLATE_HEADERS), sample_data=sample_data)


def write_template(
    path: Path, sheet_name: str = "Glucose Records", today: date | None = None
) -> Path:
    """
    Write the import template as an Excel workbook or CSV file.

    Args:
        path: Output path; the extension selects the format.
        sheet_name: Worksheet name for Excel output.
        today: Reference day for the sample dates.

    Returns:
        Path of the written file.

    Raises:
        ExportError: If the extension is unsupported or writing fails.
    """
    df = generate_import_template(today).to_frame()
    extension = path.suffix.lower()

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if extension == ".xlsx":
            df.to_excel(path, sheet_name=sheet_name, index=False, engine="openpyxl")
        elif extension == ".csv":
            df.to_csv(path, index=False, encoding="utf-8")
        else:
            raise ExportError(f"Unsupported template format: {path.suffix} (use .xlsx or .csv)")
    except ExportError:
        raise
    except Exception as e:
        raise ExportError(f"Failed to write template {path}: {e}") from e

    logger.info(f"Wrote import template to {path}")
    return path
