"""CSV reporter appending one space-separated row per run.

The file is created with a header row the first time and is never
rewritten afterwards.
"""

import csv
from decimal import Decimal
from pathlib import Path
from typing import Union

from s3perf.errors import OutputError, S3PerfError
from s3perf.models import Phase, RunConfig, RunResult, format_duration
from s3perf.reporters.base import Reporter

CSV_HEADER = [
    "DATE",
    "TIME",
    "NUM_FILES",
    "SIZE_FILES",
    *[phase.column for phase in Phase],
    "TIME_SUM",
]


def build_row(result: RunResult) -> list[str]:
    """Row for one run: date, time, file count and size, durations, sum."""
    durations = []
    for phase in Phase:
        duration = result.timings.get(phase)
        if duration is None:
            raise OutputError(f"No duration recorded for phase {phase.value}")
        durations.append(format_duration(duration))

    return [
        result.timestamp.strftime("%Y-%m-%d"),
        result.timestamp.strftime("%H:%M:%S"),
        str(result.config.file_count),
        str(result.config.file_size),
        *durations,
        format_duration(result.timings.total),
    ]


class CsvReporter(Reporter):
    """Append the timings of a completed run to a results file.

    Args:
        output_path: CSV file to append to
    """

    def __init__(self, output_path: Union[str, Path]):
        self.output_path = Path(output_path)

    def on_run_start(self, config: RunConfig) -> None:
        pass

    def on_step(self, message: str) -> None:
        pass

    def on_warning(self, message: str) -> None:
        pass

    def on_phase_start(self, phase: Phase) -> None:
        pass

    def on_phase_complete(self, phase: Phase, duration: Decimal) -> None:
        pass

    def on_run_complete(self, result: RunResult) -> None:
        """Append the row, writing the header first for a new file.

        Raises:
            OutputError: If the file cannot be written.
        """
        row = build_row(result)
        new_file = not self.output_path.is_file()

        try:
            with open(self.output_path, "a", newline="", encoding="utf-8") as f:
                writer = csv.writer(f, delimiter=" ", lineterminator="\n")
                if new_file:
                    writer.writerow(CSV_HEADER)
                writer.writerow(row)
        except OSError as e:
            raise OutputError(
                f"Unable to append the results to the output file {self.output_path}: {e}"
            ) from e

    def on_run_failed(self, error: S3PerfError) -> None:
        pass
