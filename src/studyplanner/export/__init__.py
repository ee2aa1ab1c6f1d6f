"""Schedule export collaborators."""

from .csv_export import CSV_HEADER, export_csv
from .ics_export import DEFAULT_TIMEZONE, export_ics

__all__ = ["CSV_HEADER", "DEFAULT_TIMEZONE", "export_csv", "export_ics"]
