"""Console reporter using Rich library for formatted CLI output.

Shows progress of every step while the benchmark runs and, at the end, the
duration of each phase plus the sum.
"""

from decimal import Decimal

from rich.console import Console
from rich.rule import Rule

from s3perf.errors import S3PerfError
from s3perf.models import Phase, RunConfig, RunResult, format_duration
from s3perf.reporters.base import Reporter

SUMMARY_WIDTH = 52


def summary_lines(result: RunResult) -> list[str]:
    """Plain-text summary lines, one per phase and one for the sum."""
    lines = []
    for phase in Phase:
        duration = result.timings.get(phase)
        if duration is None:
            continue
        label = f"Required time to {phase.label}:"
        lines.append(f"{label:<{SUMMARY_WIDTH}}{format_duration(duration)}s")
    label = "Required time to perform all S3-related operations:"
    lines.append(f"{label:<{SUMMARY_WIDTH}}{format_duration(result.timings.total)}s")
    return lines


class ConsoleReporter(Reporter):
    """Rich-based console reporter for CLI output.

    Args:
        quiet: If True, suppress progress output (the summary is always shown)
    """

    def __init__(self, quiet: bool = False):
        self.console = Console(legacy_windows=True, highlight=False)
        self.quiet = quiet

    def on_run_start(self, config: RunConfig) -> None:
        if self.quiet:
            return
        mode = "parallel" if config.parallel else "sequential"
        self.console.print(
            Rule(
                f"[bold cyan]s3perf: {config.file_count} x {config.file_size} bytes "
                f"via {config.backend.value} ({mode})[/bold cyan]",
                style="cyan",
                characters="-",
            )
        )

    def on_step(self, message: str) -> None:
        if self.quiet:
            return
        self.console.print(f"  [dim]{message}[/dim]")

    def on_warning(self, message: str) -> None:
        self.console.print(f"  [yellow][WARN][/yellow] {message}")

    def on_phase_start(self, phase: Phase) -> None:
        """Currently a no-op for console reporter."""
        pass

    def on_phase_complete(self, phase: Phase, duration: Decimal) -> None:
        if self.quiet:
            return
        self.console.print(
            f"  [green][DONE][/green] {phase.value} in {format_duration(duration)}s"
        )

    def on_run_complete(self, result: RunResult) -> None:
        """Print the duration of each phase and the sum, in phase order."""
        if not self.quiet:
            self.console.print()
        for line in summary_lines(result):
            self.console.print(line, markup=False)

    def on_run_failed(self, error: S3PerfError) -> None:
        if self.quiet:
            return
        self.console.print(f"  [red][FAIL][/red] {error.step}")
