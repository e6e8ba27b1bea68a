"""Execution of external command line tools.

All object storage work is delegated to client tools (swift, mc, s3cmd).
This module is the only place that spawns processes, either as a single
invocation or fanned out per file through GNU parallel.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from s3perf.errors import ToolMissing, TransportError

PARALLEL_TOOL = "parallel"

# Placeholder GNU parallel replaces with each input line
PLACEHOLDER = "{}"

PathLike = Union[str, Path]


def tool_available(tool: str) -> bool:
    """Check whether an executable is on the PATH."""
    return shutil.which(tool) is not None


def run_command(
    args: Sequence[str],
    step: str,
    cwd: Optional[PathLike] = None,
    input_text: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """Run a command and fail loudly if it does not succeed.

    Args:
        args: Program and arguments.
        step: Name of the benchmark step, used in error messages.
        cwd: Working directory for the command.
        input_text: Text fed to the command's standard input.

    Returns:
        The completed process with captured output.

    Raises:
        ToolMissing: If the program cannot be found.
        TransportError: If the program cannot be started or exits with a
            non-zero status.
    """
    try:
        result = subprocess.run(
            list(args),
            cwd=cwd,
            input=input_text,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise ToolMissing(args[0]) from e
    except OSError as e:
        # e.g. E2BIG for a batch with very many files, or a non-executable tool
        raise TransportError(f"Unable to {step}: {e}", step=step) from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        message = f"Unable to {step}: '{' '.join(args)}' exited with status {result.returncode}"
        if stderr:
            message = f"{message}: {stderr}"
        raise TransportError(
            message,
            step=step,
            returncode=result.returncode,
            stderr=stderr,
        )

    return result


def run_parallel(
    template: Sequence[str],
    items: Iterable[str],
    step: str,
    cwd: Optional[PathLike] = None,
) -> subprocess.CompletedProcess:
    """Run one command per item through GNU parallel.

    Each item becomes one input line; GNU parallel substitutes it for the
    ``{}`` placeholder in the template. Items are independent and may run in
    any order. The job count is left to GNU parallel's default.

    Args:
        template: Command with a ``{}`` placeholder.
        items: One entry per job.
        step: Name of the benchmark step, used in error messages.
        cwd: Working directory for every job.

    Returns:
        The completed parallel process.

    Raises:
        ValueError: If the template has no placeholder.
        ToolMissing: If GNU parallel is not installed.
        TransportError: If any job fails.
    """
    if not any(PLACEHOLDER in part for part in template):
        raise ValueError(f"Command template has no {PLACEHOLDER} placeholder")

    lines = "".join(f"{item}\n" for item in items)
    return run_command(
        [PARALLEL_TOOL, *template],
        step=step,
        cwd=cwd,
        input_text=lines,
    )
