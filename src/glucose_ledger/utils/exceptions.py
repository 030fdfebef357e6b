"""Custom exceptions for the glucose ledger."""


class GlucoseLedgerError(Exception):
    """Base exception for all glucose ledger errors."""

    pass


class ConfigurationError(GlucoseLedgerError):
    """Raised when there is a configuration error."""

    pass


class ParseError(GlucoseLedgerError):
    """Raised when an import file cannot be decoded."""

    pass


class RowValidationError(GlucoseLedgerError):
    """Raised when a single spreadsheet row fails validation."""

    pass


class RecordPersistenceError(GlucoseLedgerError):
    """Raised when a record store query, insert or update fails."""

    pass


class ExportError(GlucoseLedgerError):
    """Raised when exporting records fails."""

    pass
