class CorruptStateError(Exception):
    """Raised when a state file exists but does not hold a readable ledger."""


class ExportNameError(ValueError):
    """Raised when an export base name is blank or points outside the export directory."""


class UnknownExportFormatError(LookupError):
    """Raised when a format selector does not match any exporter."""
