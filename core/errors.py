from __future__ import annotations


class ReportError(Exception):
    """Base class for failures that abort a report request."""


class StoragePermissionError(ReportError):
    MESSAGE = "Storage permission is required to generate PDF reports"

    def __init__(self, message: str = MESSAGE) -> None:
        super().__init__(message)


class ReportExportError(ReportError):
    PREFIX = "PDF generation failed"

    def __init__(self, cause: object) -> None:
        super().__init__(f"{self.PREFIX}: {cause}")


class AppRecordError(ValueError):
    """Input file with app records cannot be used."""
