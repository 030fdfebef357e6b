"""
Configuration and parameter loading using Pydantic.

This module provides centralized configuration management for the entire application.
All parameters are loaded from YAML and validated using Pydantic models. Secrets such
as the store key may instead come from the environment, e.g. GLUCOSE_LEDGER_STORE__KEY.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from glucose_ledger.utils.exceptions import ConfigurationError

DEFAULT_COLUMN_ALIASES: dict[str, list[str]] = {
    "date": ["date", "Date", "Date (YYYY-MM-DD)"],
    "time_of_day": ["time_of_day", "Time of Day", "TimeOfDay", "Meal"],
    "glucose_level": ["glucose_level", "Glucose Level", "GlucoseLevel", "Glucose"],
    "food_description": ["food_description", "Food Description", "FoodDescription", "Food"],
}


class StoreConfig(BaseModel):
    """Remote record store (Supabase) configuration."""

    url: str = ""
    key: str = ""
    table: str = "glucose_records"


class ImporterConfig(BaseModel):
    """Spreadsheet import configuration."""

    batch_size: int = Field(50, gt=0)
    column_aliases: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_COLUMN_ALIASES.items()}
    )


class CSVConfig(BaseModel):
    """CSV parsing configuration."""

    encodings: list[str] = Field(default_factory=lambda: ["utf-8-sig", "utf-8", "latin-1"])
    delimiters: list[str] = Field(default_factory=lambda: [",", ";", "\t"])


class OutputConfig(BaseModel):
    """Template and export output configuration."""

    dir: str = "output"
    template_file: str = "glucose_records_template.xlsx"
    template_sheet: str = "Glucose Records"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    console: bool = True


class AppConfig(BaseSettings):
    """Main application configuration."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    importer: ImporterConfig = Field(default_factory=ImporterConfig)
    csv: CSVConfig = Field(default_factory=CSVConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="GLUCOSE_LEDGER_", env_nested_delimiter="__", case_sensitive=False
    )


class ParameterLoader:
    """
    Centralized parameter loader for the application.

    Loads and validates configuration from YAML files using Pydantic models.
    Provides type-safe access to all configuration parameters.
    """

    def __init__(self, config_path: str = "config/config.yaml") -> None:
        """
        Initialize parameter loader.

        Args:
            config_path: Path to the YAML configuration file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        self.config_path = Path(config_path)
        self.config: AppConfig
        self._load_config()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}

            self.config = AppConfig(**config_dict)

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def get_store_config(self) -> StoreConfig:
        """Get record store configuration."""
        return self.config.store

    def get_importer_config(self) -> ImporterConfig:
        """Get spreadsheet import configuration."""
        return self.config.importer

    def get_csv_config(self) -> CSVConfig:
        """Get CSV parsing configuration."""
        return self.config.csv

    def get_output_config(self) -> OutputConfig:
        """Get output configuration."""
        return self.config.output

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging

