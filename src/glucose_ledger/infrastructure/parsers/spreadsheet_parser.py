"""
Spreadsheet parser for glucose records.

Decodes Excel workbooks and CSV files into loosely typed rows, then
normalizes each row into a validated glucose record. Column names are
resolved through ordered alias lists, and a bad row never aborts the batch.
"""

import io
import logging
import math
import numbers
import re
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any, BinaryIO

import pandas as pd
from pydantic import ValidationError

from glucose_ledger.domain.glucose import (
    ImportedRecord,
    NormalizationResult,
    RowError,
    TimeOfDay,
)
from glucose_ledger.utils.date_utils import format_date
from glucose_ledger.utils.exceptions import ParseError, RowValidationError
from glucose_ledger.utils.parameters import CSVConfig, ImporterConfig

logger = logging.getLogger(__name__)

EXCEL_ENGINES: dict[str, str] = {".xlsx": "openpyxl", ".xls": "xlrd"}
CSV_EXTENSIONS = {".csv"}

UNSUPPORTED_FILE_MESSAGE = (
    "Unsupported file type. Please upload an Excel (.xlsx, .xls) or CSV (.csv) file."
)

# Checked in order; first matching keyword wins.
TIME_OF_DAY_KEYWORDS: list[tuple[tuple[str, ...], TimeOfDay]] = [
    (("break", "morning"), TimeOfDay.BREAKFAST),
    (("lunch", "noon"), TimeOfDay.LUNCH),
    (("dinner", "evening"), TimeOfDay.DINNER),
]

# Leading number of a cell such as "145 mg/dL" or "5,6".
LEADING_NUMBER = re.compile(r"\s*([-+]?(?:\d+(?:[.,]\d*)?|[.,]\d+)(?:[eE][-+]?\d+)?)")

ImportFile = str | Path | BinaryIO


def normalize_time_of_day(value: Any) -> TimeOfDay:
    """
    Map a free-text meal label onto a TimeOfDay.

    Matching is a case-insensitive substring search, so "Morning snack"
    and "BREAKFAST" both map to Breakfast.

    Raises:
        RowValidationError: If no keyword matches.
    """
    text = "" if _is_blank(value) else str(value).lower()

    for keywords, time_of_day in TIME_OF_DAY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return time_of_day

    raise RowValidationError("Invalid time of day. Must be Breakfast, Lunch, or Dinner")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


class SpreadsheetParser:
    """
    Parser for glucose record spreadsheets.

    Handles decoder selection by extension, encoding and delimiter detection
    for CSV, column alias resolution, and per-row validation.
    """

    def __init__(
        self,
        importer_config: ImporterConfig | None = None,
        csv_config: CSVConfig | None = None,
    ) -> None:
        """
        Initialize spreadsheet parser.

        Args:
            importer_config: Import configuration (column aliases).
            csv_config: CSV decoding configuration.
        """
        self.importer_config = importer_config or ImporterConfig()
        self.csv_config = csv_config or CSVConfig()
        self.column_aliases = self.importer_config.column_aliases

    def parse_file(self, file: ImportFile, filename: str | None = None) -> list[ImportedRecord]:
        """
        Parse an import file into validated glucose records.

        Invalid rows are dropped; use load_file to also get their errors.

        Raises:
            ParseError: If the file type is unsupported or decoding fails.
        """
        return self.load_file(file, filename).records

    def load_file(self, file: ImportFile, filename: str | None = None) -> NormalizationResult:
        """
        Decode an import file and normalize its rows.

        Args:
            file: Path or binary file-like object.
            filename: Name used for decoder selection when `file` has none.

        Returns:
            Valid records and per-row errors.

        Raises:
            ParseError: If the file type is unsupported or decoding fails.
        """
        name = self._resolve_name(file, filename)
        extension = Path(name).suffix.lower()

        if extension not in EXCEL_ENGINES and extension not in CSV_EXTENSIONS:
            raise ParseError(UNSUPPORTED_FILE_MESSAGE)

        data = self._read_bytes(file)

        if extension in EXCEL_ENGINES:
            rows = self._read_excel(data, EXCEL_ENGINES[extension])
        else:
            rows = self._read_csv(data)

        result = self.normalize_rows(rows)
        logger.info(
            f"Parsed {len(result.records)} records from {name} "
            f"({len(result.errors)} rows rejected)"
        )
        return result

    def transform_rows(self, rows: Iterable[Mapping[str, Any]]) -> list[ImportedRecord]:
        """Normalize raw rows, returning only the valid records."""
        return self.normalize_rows(rows).records

    def normalize_rows(self, rows: Iterable[Mapping[str, Any]]) -> NormalizationResult:
        """
        Normalize raw rows into validated records.

        Each row is processed independently; a failing row is recorded as a
        RowError (1-based row number) and skipped.

        Args:
            rows: Mappings from column header to cell value.

        Returns:
            Valid records and per-row errors.
        """
        result = NormalizationResult()

        for index, row in enumerate(rows, start=1):
            try:
                result.records.append(self._transform_row(row))
            except RowValidationError as e:
                logger.warning(f"Row {index}: {e}")
                result.errors.append(RowError(row=index, message=str(e)))

        if result.errors:
            logger.error(f"Errors during import: {result.error_messages()}")

        return result

    def _transform_row(self, row: Mapping[str, Any]) -> ImportedRecord:
        """
        Validate and coerce a single row.

        Raises:
            RowValidationError: If a required field is missing or invalid.
        """
        raw_date = self._extract(row, "date")
        if raw_date is None:
            raise RowValidationError("Missing date")

        time_of_day = normalize_time_of_day(self._extract(row, "time_of_day"))

        glucose_level = self._safe_float_conversion(self._extract(row, "glucose_level"))
        if glucose_level is None or glucose_level <= 0:
            raise RowValidationError("Invalid glucose level")

        food_description = self._extract(row, "food_description")

        try:
            formatted_date = format_date(raw_date)
        except ValueError as e:
            raise RowValidationError("Invalid date format") from e

        try:
            return ImportedRecord(
                date=formatted_date,
                time_of_day=time_of_day,
                glucose_level=glucose_level,
                food_description="" if food_description is None else str(food_description).strip(),
            )
        except ValidationError as e:
            raise RowValidationError(f"Invalid record: {e}") from e

    def _extract(self, row: Mapping[str, Any], field: str) -> Any:
        """Return the first non-blank value among the field's column aliases."""
        for alias in self.column_aliases.get(field, []):
            value = row.get(alias)
            if not _is_blank(value):
                return value
        return None

    def _safe_float_conversion(self, value: Any) -> float | None:
        """
        Safely convert value to float, handling comma decimal separator.

        Text is read up to the end of its leading number, so a unit suffix
        ("145 mg/dL") is ignored.

        Args:
            value: Value to convert.

        Returns:
            Finite float value or None if conversion fails.
        """
        if _is_blank(value) or isinstance(value, bool):
            return None

        if isinstance(value, numbers.Real):
            number = float(value)
        elif isinstance(value, str):
            match = LEADING_NUMBER.match(value)
            if not match:
                return None
            number = float(match.group(1).replace(",", "."))
        else:
            return None

        return number if math.isfinite(number) else None

    def _resolve_name(self, file: ImportFile, filename: str | None) -> str:
        if filename:
            return filename
        if isinstance(file, (str, Path)):
            return Path(file).name
        name = getattr(file, "name", None)
        if not name:
            raise ParseError(UNSUPPORTED_FILE_MESSAGE)
        return str(name)

    def _read_bytes(self, file: ImportFile) -> bytes:
        try:
            if isinstance(file, (str, Path)):
                return Path(file).read_bytes()
            return file.read()
        except OSError as e:
            raise ParseError(f"Failed to read the file: {e}") from e

    def _read_excel(self, data: bytes, engine: str) -> list[dict[str, Any]]:
        """
        Decode the first sheet of a workbook into row mappings.

        Raises:
            ParseError: If the workbook is corrupt or has no readable sheet.
        """
        try:
            df = pd.read_excel(io.BytesIO(data), sheet_name=0, engine=engine)
        except Exception as e:
            raise ParseError(f"Failed to parse Excel file: {e}") from e

        return self._frame_to_rows(df)

    def _read_csv(self, data: bytes) -> list[dict[str, Any]]:
        """
        Decode delimited text with a header row into row mappings.

        A row with more fields than the header keeps its extra fields in the
        last column, so an unquoted delimiter inside a food description does
        not reject the file.

        Raises:
            ParseError: If the text cannot be decoded or tokenized.
        """
        text = self._decode_text(data)
        delimiter = self._detect_delimiter(text)

        try:
            header = pd.read_csv(io.StringIO(text), sep=delimiter, nrows=0)
            df = pd.read_csv(
                io.StringIO(text),
                sep=delimiter,
                dtype=str,
                keep_default_na=False,
                engine="python",
                index_col=False,
                on_bad_lines=self._fit_row(len(header.columns), delimiter),
            )
        except pd.errors.EmptyDataError:
            logger.warning("CSV file is empty")
            return []
        except Exception as e:
            raise ParseError(f"Failed to parse CSV file: {e}") from e

        return self._frame_to_rows(df)

    def _fit_row(self, width: int, delimiter: str) -> Callable[[list[str]], list[str]]:
        def fit(fields: list[str]) -> list[str]:
            logger.debug(f"Row has {len(fields)} fields, expected {width}; merging the extra fields")
            return fields[: width - 1] + [delimiter.join(fields[width - 1 :])]

        return fit

    def _decode_text(self, data: bytes) -> str:
        """Decode bytes with the first configured encoding that succeeds."""
        for encoding in self.csv_config.encodings:
            try:
                text = data.decode(encoding)
                logger.debug(f"Detected encoding: {encoding}")
                return text
            except (UnicodeDecodeError, LookupError):
                continue

        raise ParseError(
            f"Failed to parse CSV file: none of the encodings {self.csv_config.encodings} apply"
        )

    def _detect_delimiter(self, text: str) -> str:
        """Pick the first configured delimiter present in the header line."""
        first_line = text.split("\n", 1)[0]

        for delimiter in self.csv_config.delimiters:
            if delimiter in first_line:
                logger.debug(f"Detected delimiter: {repr(delimiter)}")
                return delimiter

        logger.debug("No delimiter found in header, using comma")
        return ","

    def _frame_to_rows(self, df: pd.DataFrame) -> list[dict[str, Any]]:
        df = df.rename(columns=lambda col: str(col).strip())
        return [dict(row) for row in df.to_dict(orient="records")]
