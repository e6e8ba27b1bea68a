"""Command-line interface for the s3perf benchmark.

Provides argument parsing and main entry point for running a benchmark
from the command line.
"""

import argparse
import sys
from decimal import Decimal
from typing import Optional

from s3perf import __version__
from s3perf.config import load_run_config
from s3perf.errors import S3PerfError, ValidationError
from s3perf.models import MAX_FILE_SIZE, Phase, RunConfig, RunResult
from s3perf.network import check_connectivity
from s3perf.reporters import ConsoleReporter, CsvReporter, JsonReporter, Reporter
from s3perf.runner import BenchmarkRunner


class CompositeReporter(Reporter):
    """Reporter that delegates to multiple reporters.

    Allows using the console, CSV and JSON reporters simultaneously.
    """

    def __init__(self, reporters: list[Reporter]):
        self._reporters = reporters

    def on_run_start(self, config: RunConfig) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_run_start(config)

    def on_step(self, message: str) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_step(message)

    def on_warning(self, message: str) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_warning(message)

    def on_phase_start(self, phase: Phase) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_phase_start(phase)

    def on_phase_complete(self, phase: Phase, duration: Decimal) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_phase_complete(phase, duration)

    def on_run_complete(self, result: RunResult) -> None:
        """Delegate to all reporters.

        Every reporter gets the result even if an earlier one fails to write
        its output. The first failure is raised once all have run.
        """
        first_error: Optional[S3PerfError] = None
        for reporter in self._reporters:
            try:
                reporter.on_run_complete(result)
            except S3PerfError as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def on_run_failed(self, error: S3PerfError) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_run_failed(error)


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting bad input as a ValidationError."""

    def error(self, message: str):
        raise ValidationError(message)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        ValidationError: If the arguments cannot be parsed
    """
    parser = ArgumentParser(
        prog="s3perf",
        description="Analyze the performance and data integrity of "
                    "S3-compatible storage services",
        epilog="example: s3perf -n 5 -s 1048576  # 5 files of 1 MB size each",
    )

    parser.add_argument(
        "-n",
        dest="num_files",
        type=int,
        required=True,
        metavar="FILES",
        help="number of files to be created",
    )

    parser.add_argument(
        "-s",
        dest="size",
        type=int,
        required=True,
        metavar="SIZE",
        help=f"size of the files to be created in bytes (max {MAX_FILE_SIZE} = 16 MB)",
    )

    parser.add_argument(
        "-u",
        dest="uppercase",
        action="store_true",
        help="use upper-case letters for the bucket name "
             "(required for Nimbus Cumulus and S3ninja)",
    )

    parser.add_argument(
        "-a",
        dest="swift",
        action="store_true",
        help="use the Swift API instead of the S3 API (requires the swift client "
             "and the environment variables ST_AUTH, ST_USER and ST_KEY)",
    )

    parser.add_argument(
        "-m",
        dest="minio_alias",
        metavar="ALIAS",
        help="use the S3 API with the MinIO client (mc) and this alias "
             "instead of s3cmd",
    )

    parser.add_argument(
        "-k",
        dest="keep",
        action="store_true",
        help="keep the local files and the directory afterwards (do not clean up)",
    )

    parser.add_argument(
        "-p",
        dest="parallel",
        action="store_true",
        help="upload and download the files in parallel (requires GNU parallel)",
    )

    parser.add_argument(
        "-o",
        dest="output",
        action="store_true",
        help="append the results to a local CSV file",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="suppress progress output, show only the timings",
    )

    parser.add_argument(
        "-j", "--json-output",
        metavar="PATH",
        help="write the results as JSON to this file",
    )

    parser.add_argument(
        "-d", "--directory",
        metavar="DIR",
        help="local working directory for the test files (default: testfiles)",
    )

    parser.add_argument(
        "--output-file",
        metavar="PATH",
        help="CSV file used by -o (default: results.csv)",
    )

    parser.add_argument(
        "--ping-host",
        metavar="HOST",
        help="host pinged to check the network (default: 8.8.8.8, "
             "empty to skip)",
    )

    parser.add_argument(
        "--probe-url",
        metavar="URL",
        help="HTTP endpoint that must answer before the run starts",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def create_reporters(config: RunConfig) -> list[Reporter]:
    """Create reporters for a validated run configuration.

    Args:
        config: Validated run configuration

    Returns:
        List of configured reporters
    """
    reporters: list[Reporter] = [ConsoleReporter(quiet=config.quiet)]

    if config.append_csv:
        reporters.append(CsvReporter(config.output_file))

    if config.json_output:
        reporters.append(JsonReporter(output_path=config.json_output))

    return reporters


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 1 for any validation or benchmark failure
    """
    try:
        args = parse_args(argv)
        config = load_run_config(args)
        check_connectivity(config)
    except S3PerfError as e:
        print(f"Error during {e.step}: {e}", file=sys.stderr)
        return 1

    reporters = create_reporters(config)
    if len(reporters) == 1:
        reporter = reporters[0]
    else:
        reporter = CompositeReporter(reporters)

    runner = BenchmarkRunner(config, reporter=reporter)
    try:
        runner.run()
    except S3PerfError as e:
        print(f"Error during {e.step}: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
