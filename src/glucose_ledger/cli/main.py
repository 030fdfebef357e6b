"""
Command-line interface for Glucose Ledger.

Provides commands for generating the import template, previewing and
importing spreadsheets, adding single records, exporting records and
showing statistics.
"""

from datetime import date
from pathlib import Path

import typer

from glucose_ledger.domain.glucose import ImportResult, TimeOfDay
from glucose_ledger.infrastructure.parsers.spreadsheet_parser import SpreadsheetParser
from glucose_ledger.infrastructure.store.memory_store import MemoryGlucoseStore
from glucose_ledger.infrastructure.store.protocols import GlucoseRecordStore
from glucose_ledger.infrastructure.store.supabase_store import SupabaseGlucoseStore
from glucose_ledger.services.import_service import ImportReconciler, ImportService
from glucose_ledger.services.output import OutputService
from glucose_ledger.services.records import RecordService
from glucose_ledger.services.statistics import StatisticsService
from glucose_ledger.services.template import write_template
from glucose_ledger.utils.date_utils import REPORT_RANGES, range_start
from glucose_ledger.utils.exceptions import GlucoseLedgerError
from glucose_ledger.utils.logging_config import get_logger, setup_logging
from glucose_ledger.utils.parameters import ParameterLoader

app = typer.Typer(help="Glucose Ledger - Meal-tied glucose tracking with spreadsheet import")
record_app = typer.Typer(help="Manage individual glucose records")
app.add_typer(record_app, name="record")

logger = get_logger(__name__)

PREVIEW_ROWS = 5


def init_config(config_path: str = "config/config.yaml") -> ParameterLoader:
    """
    Initialize configuration and logging.

    Args:
        config_path: Path to configuration file.

    Returns:
        Parameter loader instance.
    """
    param_loader = ParameterLoader(config_path)
    setup_logging(param_loader.get_logging_config(), "glucose_ledger")
    return param_loader


def build_store(param_loader: ParameterLoader, dry_run: bool = False) -> GlucoseRecordStore:
    """Create the configured record store, or an in-memory one for dry runs."""
    if dry_run:
        logger.info("Dry run: using in-memory record store")
        return MemoryGlucoseStore()
    return SupabaseGlucoseStore(param_loader.get_store_config())


def build_import_service(param_loader: ParameterLoader, store: GlucoseRecordStore) -> ImportService:
    importer_config = param_loader.get_importer_config()
    parser = SpreadsheetParser(importer_config, param_loader.get_csv_config())
    reconciler = ImportReconciler(store, batch_size=importer_config.batch_size)
    return ImportService(parser, reconciler)


def echo_import_result(result: ImportResult) -> None:
    """Print import counters followed by the error list."""
    status = "succeeded" if result.success else "failed"
    typer.echo(f"Import {status}")
    typer.echo(f"  Total records: {result.total_records}")
    typer.echo(f"  Imported: {result.imported_records}")
    typer.echo(f"  Updated: {result.updated_records}")

    if result.errors:
        typer.echo(f"  Errors ({len(result.errors)}):")
        for error in result.errors:
            typer.echo(f"    - {error}")


@app.command()
def template(
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
    output_file: str | None = typer.Option(None, help="Output .xlsx or .csv file"),
) -> None:
    """
    Write the import template.

    Creates a spreadsheet with the expected headers and three sample rows.
    """
    try:
        param_loader = init_config(config_path)
        output_config = param_loader.get_output_config()

        path = Path(output_file) if output_file else Path(output_config.dir) / output_config.template_file
        write_template(path, sheet_name=output_config.template_sheet)

        typer.echo(f"Template written to {path}")

    except GlucoseLedgerError as e:
        logger.error(f"Template generation failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def preview(
    input_file: Path = typer.Argument(..., help="Spreadsheet to preview (.xlsx, .xls, .csv)"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
    rows: int = typer.Option(PREVIEW_ROWS, help="Number of records to show"),
) -> None:
    """
    Preview the records a spreadsheet would import.

    Parses and validates the file without contacting the record store.
    """
    try:
        param_loader = init_config(config_path)
        service = build_import_service(param_loader, MemoryGlucoseStore())

        normalized = service.preview(input_file)

        typer.echo(f"Valid records: {len(normalized.records)}")
        for record in normalized.records[:rows]:
            typer.echo(
                f"  {record.date}  {record.time_of_day:<9}  {record.glucose_level:>6g}  "
                f"{record.food_description}"
            )

        if normalized.errors:
            typer.echo(f"Rejected rows: {len(normalized.errors)}")
            for message in normalized.error_messages():
                typer.echo(f"  - {message}")

    except GlucoseLedgerError as e:
        logger.error(f"Preview failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command("import")
def import_file(
    input_file: Path = typer.Argument(..., help="Spreadsheet to import (.xlsx, .xls, .csv)"),
    user_id: str = typer.Option(..., envvar="GLUCOSE_LEDGER_USER_ID", help="Owner of the records"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
    dry_run: bool = typer.Option(False, help="Reconcile against an empty in-memory store"),
) -> None:
    """
    Import glucose records from a spreadsheet.

    Existing records with the same date and meal are updated; others are
    inserted. Failing rows are reported without stopping the import.
    """
    try:
        param_loader = init_config(config_path)
        store = build_store(param_loader, dry_run=dry_run)
        service = build_import_service(param_loader, store)

        logger.info(f"Importing {input_file.name} for user {user_id}")
        result = service.import_file(user_id, input_file)

        echo_import_result(result)

        if not result.success:
            raise typer.Exit(code=1)

    except GlucoseLedgerError as e:
        logger.error(f"Import failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def export(
    user_id: str = typer.Option(..., envvar="GLUCOSE_LEDGER_USER_ID", help="Owner of the records"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
    output_file: str | None = typer.Option(None, help="Output CSV file"),
) -> None:
    """
    Export all records of a user to CSV.
    """
    try:
        param_loader = init_config(config_path)
        store = build_store(param_loader)

        records = store.list_records(user_id)

        output_service = OutputService(param_loader.get_output_config())
        path = output_service.export_records(records, Path(output_file) if output_file else None)

        typer.echo(f"Exported {len(records)} records to {path}")

    except GlucoseLedgerError as e:
        logger.error(f"Export failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def stats(
    user_id: str = typer.Option(..., envvar="GLUCOSE_LEDGER_USER_ID", help="Owner of the records"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
    daily: bool = typer.Option(False, help="Also print per-day averages"),
    monthly: bool = typer.Option(False, help="Also print per-month averages"),
    range_key: str | None = typer.Option(
        None, "--range", help=f"Only records from the last {', '.join(REPORT_RANGES)}"
    ),
) -> None:
    """
    Show glucose statistics for a user.

    Prints overall figures and the averages of the current week, month and
    year, optionally restricted to a recent date range.
    """
    try:
        since = range_start(range_key) if range_key else None
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--range") from e

    try:
        param_loader = init_config(config_path)
        store = build_store(param_loader)

        records = store.list_records(user_id, since=since)

        service = StatisticsService()
        summary = service.summarize(records)
        periods = service.period_averages(records)

        if since:
            typer.echo(f"Since {since}")
        typer.echo(f"Readings: {summary.count}")
        typer.echo(f"Average: {summary.average} mg/dL")
        typer.echo(f"Highest: {summary.highest} mg/dL")
        typer.echo(f"Lowest: {summary.lowest} mg/dL")
        for meal, average in summary.meal_averages.items():
            typer.echo(f"  {meal}: {average} mg/dL")
        typer.echo(f"This week: {periods.weekly} mg/dL")
        typer.echo(f"This month: {periods.monthly} mg/dL")
        typer.echo(f"This year: {periods.yearly} mg/dL")

        if monthly and records:
            typer.echo("")
            typer.echo(service.monthly_averages(records).to_string(index=False))

        if daily and records:
            typer.echo("")
            typer.echo(service.daily_averages(records).to_string(index=False))

    except GlucoseLedgerError as e:
        logger.error(f"Statistics failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@record_app.command("add")
def add_record(
    user_id: str = typer.Option(..., envvar="GLUCOSE_LEDGER_USER_ID", help="Owner of the record"),
    glucose: float = typer.Option(..., help="Glucose level in mg/dL"),
    meal: TimeOfDay = typer.Option(TimeOfDay.BREAKFAST, help="Meal the reading is tied to"),
    record_date: str | None = typer.Option(None, "--date", help="Date of the reading (default: today)"),
    food: str = typer.Option("", help="What was eaten"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """
    Add a single glucose reading.
    """
    try:
        param_loader = init_config(config_path)
        store = build_store(param_loader)

        record = RecordService(store).add_record(
            user_id, record_date or date.today(), meal, glucose, food
        )

        typer.echo(
            f"Record added: {record.date} {record.time_of_day} {record.glucose_level:g} mg/dL"
        )

    except GlucoseLedgerError as e:
        logger.error(f"Adding record failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
