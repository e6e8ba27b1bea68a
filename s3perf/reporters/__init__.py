"""Reporter modules for outputting benchmark results."""

from .base import Reporter
from .console import ConsoleReporter
from .csv_reporter import CsvReporter
from .json_reporter import JsonReporter

__all__ = ["Reporter", "ConsoleReporter", "CsvReporter", "JsonReporter"]
