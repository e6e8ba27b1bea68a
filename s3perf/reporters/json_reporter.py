"""JSON reporter for structured output of a run."""

import json
from decimal import Decimal
from pathlib import Path
from typing import Optional

from s3perf.errors import OutputError, S3PerfError
from s3perf.models import Phase, RunConfig, RunResult
from s3perf.reporters.base import Reporter


class JsonReporter(Reporter):
    """Write the result of a completed run as JSON.

    Args:
        output_path: File path for JSON output (optional)
    """

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path

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

    def on_run_complete(self, result: RunResult) -> dict:
        """Generate the JSON data and write it if a path was given.

        Returns:
            The generated data as a dictionary
        """
        output = result.to_dict()

        if self.output_path:
            self._write_to_file(output)

        return output

    def on_run_failed(self, error: S3PerfError) -> None:
        pass

    def _write_to_file(self, output: dict) -> None:
        path = Path(self.output_path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(output, f, indent=2)
        except OSError as e:
            raise OutputError(f"Unable to write JSON results to {path}: {e}") from e
