"""Tests for the command-line interface."""

from datetime import date
from pathlib import Path

import pytest
from typer.testing import CliRunner

from glucose_ledger.cli.main import app
from glucose_ledger.domain.glucose import GlucoseRecord
from glucose_ledger.infrastructure.store.memory_store import MemoryGlucoseStore

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        f"output:\n  dir: {tmp_path / 'output'}\nlogging:\n  console: false\n  file: null\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def readings_csv(tmp_path: Path) -> Path:
    path = tmp_path / "readings.csv"
    path.write_text(
        "Date,Meal,Glucose,Food\n"
        "2023-05-15,dinner time,145,Pasta\n"
        "2023-05-16,Brunch,120,Waffles\n",
        encoding="utf-8",
    )
    return path


def test_template_command(tmp_path: Path, config_file: Path) -> None:
    """Test writing the template to the configured output dir."""
    result = runner.invoke(app, ["template", "--config-path", str(config_file)])

    if result.exit_code != 0:
        raise AssertionError(f"Exit code {result.exit_code}: {result.output}")
    if not (tmp_path / "output" / "glucose_records_template.xlsx").exists():
        raise AssertionError("Expected template workbook to be written")


def test_preview_command(config_file: Path, readings_csv: Path) -> None:
    """Test previewing records and rejected rows."""
    result = runner.invoke(app, ["preview", str(readings_csv), "--config-path", str(config_file)])

    if result.exit_code != 0:
        raise AssertionError(f"Exit code {result.exit_code}: {result.output}")
    if "Valid records: 1" not in result.output:
        raise AssertionError(f"Unexpected output: {result.output}")
    if "Row 2: Invalid time of day" not in result.output:
        raise AssertionError(f"Expected rejected row in output: {result.output}")


def test_import_dry_run(config_file: Path, readings_csv: Path) -> None:
    """Test importing against the in-memory store."""
    result = runner.invoke(
        app,
        ["import", str(readings_csv), "--user-id", "u1", "--config-path", str(config_file), "--dry-run"],
    )

    if result.exit_code != 0:
        raise AssertionError(f"Exit code {result.exit_code}: {result.output}")
    if "Imported: 1" not in result.output or "Total records: 1" not in result.output:
        raise AssertionError(f"Unexpected output: {result.output}")


def test_import_unsupported_file(tmp_path: Path, config_file: Path) -> None:
    """Test that parse errors exit with code 1."""
    bad_file = tmp_path / "readings.pdf"
    bad_file.write_bytes(b"%PDF")

    result = runner.invoke(
        app,
        ["import", str(bad_file), "--user-id", "u1", "--config-path", str(config_file), "--dry-run"],
    )

    if result.exit_code != 1:
        raise AssertionError(f"Expected exit code 1, got {result.exit_code}")
    if "Unsupported file type" not in result.output:
        raise AssertionError(f"Unexpected output: {result.output}")


def test_missing_config(tmp_path: Path, readings_csv: Path) -> None:
    """Test that a missing configuration file exits with code 1."""
    result = runner.invoke(
        app, ["preview", str(readings_csv), "--config-path", str(tmp_path / "nope.yaml")]
    )

    if result.exit_code != 1:
        raise AssertionError(f"Expected exit code 1, got {result.exit_code}")


def test_record_add_command(monkeypatch: pytest.MonkeyPatch, config_file: Path) -> None:
    """Test adding a single reading through the configured store."""
    store = MemoryGlucoseStore()
    monkeypatch.setattr("glucose_ledger.cli.main.build_store", lambda *args, **kwargs: store)

    result = runner.invoke(
        app,
        [
            "record", "add",
            "--user-id", "u1",
            "--glucose", "128",
            "--meal", "Dinner",
            "--date", "2024-01-15",
            "--food", "Lentil soup",
            "--config-path", str(config_file),
        ],
    )

    if result.exit_code != 0:
        raise AssertionError(f"Exit code {result.exit_code}: {result.output}")
    if "Record added: 2024-01-15 Dinner 128 mg/dL" not in result.output:
        raise AssertionError(f"Unexpected output: {result.output}")
    records = store.list_records("u1")
    if len(records) != 1 or records[0].food_description != "Lentil soup":
        raise AssertionError(f"Unexpected stored records: {records}")


def test_record_add_rejects_invalid_level(monkeypatch: pytest.MonkeyPatch, config_file: Path) -> None:
    """Test that an invalid reading exits with code 1."""
    store = MemoryGlucoseStore()
    monkeypatch.setattr("glucose_ledger.cli.main.build_store", lambda *args, **kwargs: store)

    result = runner.invoke(
        app,
        ["record", "add", "--user-id", "u1", "--glucose", "0", "--config-path", str(config_file)],
    )

    if result.exit_code != 1:
        raise AssertionError(f"Expected exit code 1, got {result.exit_code}")
    if store.calls:
        raise AssertionError(f"Expected no store calls, got {store.calls}")


def test_stats_command_with_range(
    monkeypatch: pytest.MonkeyPatch, config_file: Path, stored_records: list[GlucoseRecord]
) -> None:
    """Test statistics restricted to a date range with monthly averages."""
    recent = date.today().isoformat()
    store = MemoryGlucoseStore(
        stored_records
        + [GlucoseRecord(id="9", user_id="u1", date=recent, time_of_day="Lunch", glucose_level=140)]
    )
    monkeypatch.setattr("glucose_ledger.cli.main.build_store", lambda *args, **kwargs: store)

    result = runner.invoke(
        app,
        ["stats", "--user-id", "u1", "--range", "1m", "--monthly", "--config-path", str(config_file)],
    )

    if result.exit_code != 0:
        raise AssertionError(f"Exit code {result.exit_code}: {result.output}")
    if "Readings: 1" not in result.output:
        raise AssertionError(f"Expected only the recent reading: {result.output}")
    if "This week: 140.0 mg/dL" not in result.output:
        raise AssertionError(f"Expected weekly average: {result.output}")
    if date.today().strftime("%B %Y") not in result.output:
        raise AssertionError(f"Expected monthly table: {result.output}")


def test_stats_command_rejects_unknown_range(config_file: Path) -> None:
    """Test that an unknown range is a usage error."""
    result = runner.invoke(
        app, ["stats", "--user-id", "u1", "--range", "2w", "--config-path", str(config_file)]
    )

    if result.exit_code != 2:
        raise AssertionError(f"Expected usage error exit code 2, got {result.exit_code}")
