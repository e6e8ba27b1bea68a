"""Exception hierarchy for s3perf.

Every error is terminal for a benchmark run. Each carries the name of the
step that failed so the entry point can report it in one line.
"""

from typing import Optional, Sequence


class S3PerfError(Exception):
    """Base class for all benchmark failures."""

    def __init__(self, message: str, step: str = "benchmark"):
        super().__init__(message)
        self.step = step


class ToolMissing(S3PerfError):
    """Raised when a required external command line tool is not installed."""

    def __init__(self, tool: str, hint: Optional[str] = None):
        message = f"s3perf requires the command line tool {tool}. Please install it."
        if hint:
            message = f"{message}\n{hint}"
        super().__init__(message, step="validation")
        self.tool = tool


class EnvironmentMisconfigured(S3PerfError):
    """Raised when a required environment variable is unset or empty."""

    def __init__(self, variable: str, hint: Optional[str] = None):
        message = f"The environment variable {variable} must be set."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message, step="validation")
        self.variable = variable


class ValidationError(S3PerfError):
    """Raised for bad numeric input or inconsistent flags."""

    def __init__(self, message: str):
        super().__init__(message, step="validation")


class NetworkUnreachable(S3PerfError):
    """Raised when the connectivity check fails."""

    def __init__(self, message: str):
        super().__init__(message, step="network check")


class FilesystemError(S3PerfError):
    """Raised when the local working directory cannot be prepared or removed."""


class TransportError(S3PerfError):
    """Raised when a storage client command exits unsuccessfully."""

    def __init__(
        self,
        message: str,
        step: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message, step=step)
        self.returncode = returncode
        self.stderr = stderr


class IntegrityError(S3PerfError):
    """Raised when downloaded files do not match the checksum manifest."""

    def __init__(
        self,
        missing: Sequence[str] = (),
        mismatched: Sequence[str] = (),
    ):
        parts = []
        if missing:
            parts.append(f"missing: {', '.join(missing)}")
        if mismatched:
            parts.append(f"checksum mismatch: {', '.join(mismatched)}")
        super().__init__(
            "The checksums do not match the files (" + "; ".join(parts) + ")",
            step="checksum validation",
        )
        self.missing = list(missing)
        self.mismatched = list(mismatched)


class OutputError(S3PerfError):
    """Raised when a result file cannot be written."""

    def __init__(self, message: str):
        super().__init__(message, step="reporting")
