"""CSV import/export utilities."""

from hilljump.csv.importer import CsvImporter
from hilljump.csv.exporter import CsvExporter

__all__ = [
    "CsvImporter",
    "CsvExporter",
]
