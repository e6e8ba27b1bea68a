"""Run configuration and environment validation.

Settings come from three sources, in priority order:
1. Command-line flags
2. Environment variables
3. Built-in defaults

Environment Variables:
    S3PERF_DIRECTORY    Local working directory (default: testfiles)
    S3PERF_OUTPUT_FILE  CSV results file (default: results.csv)
    S3PERF_PING_HOST    Host pinged before the run (default: 8.8.8.8);
                        set it to an empty string to skip the ping
    S3PERF_PROBE_URL    Optional HTTP endpoint that must answer before the run

The Swift backend additionally requires ST_AUTH, ST_USER and ST_KEY.

Validation happens in a fixed order and stops at the first problem: backend
selection, required tools, numeric bounds, the parallel tool, then the Swift
environment. Nothing here creates files or touches the network.
"""

import argparse
import os
from pathlib import Path
from typing import Mapping, Optional

from s3perf.backends import BACKEND_TOOLS
from s3perf.commands import PARALLEL_TOOL, tool_available
from s3perf.errors import EnvironmentMisconfigured, ToolMissing, ValidationError
from s3perf.models import (
    DEFAULT_DIRECTORY,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_PING_HOST,
    MAX_FILE_SIZE,
    Backend,
    BucketCase,
    RunConfig,
)

# Variables the Swift client reads its credentials from
SWIFT_ENV_VARS = {
    "ST_AUTH": "It must contain the Auth URL of the storage service: "
               "export ST_AUTH=http://<IP_or_URL>/auth/v1.0",
    "ST_USER": "It must contain the username of the storage service: "
               "export ST_USER=<username>",
    "ST_KEY": "It must contain the password of the storage service: "
              "export ST_KEY=<password>",
}

TOOL_HINTS = {
    "swift": "Probably this will install the swift client: "
             "pip install python-swiftclient",
    "mc": "The installation is documented at https://github.com/minio/mc\n"
          "Configure it with: mc alias set <ALIAS> http://<IP>:<PORT> "
          "<ACCESSKEY> <SECRETKEY>",
    "s3cmd": "s3cmd needs to be configured first via s3cmd --configure",
    PARALLEL_TOOL: "GNU parallel is required for the -p option.",
}


def select_backend(args: argparse.Namespace) -> Backend:
    """Work out which client tool drives the run.

    Raises:
        ValidationError: If both the Swift and the MinIO client were requested.
    """
    if args.swift and args.minio_alias is not None:
        raise ValidationError(
            "Choose either the Swift API (-a) or the MinIO client (-m), not both"
        )
    if args.swift:
        return Backend.SWIFT
    if args.minio_alias is not None:
        return Backend.MINIO
    return Backend.S3CMD


def require_tool(tool: str) -> None:
    """Raise ToolMissing if ``tool`` is not on the PATH."""
    if not tool_available(tool):
        raise ToolMissing(tool, TOOL_HINTS.get(tool))


def validate_sizes(file_count: int, file_size: int) -> None:
    """Check the number of files and their size.

    Raises:
        ValidationError: If either value is out of range.
    """
    if file_count <= 0:
        raise ValidationError(
            f"The number of files must be greater than 0 (got {file_count})"
        )
    if file_size <= 0 or file_size > MAX_FILE_SIZE:
        raise ValidationError(
            f"The size of the files must be between 1 and {MAX_FILE_SIZE} bytes "
            f"(got {file_size})"
        )


def validate_swift_environment(environ: Mapping[str, str]) -> None:
    """Check the Swift credentials are present.

    Raises:
        EnvironmentMisconfigured: For the first empty or unset variable.
    """
    for variable, hint in SWIFT_ENV_VARS.items():
        if not environ.get(variable):
            raise EnvironmentMisconfigured(variable, hint)


def _setting(
    cli_value: Optional[str],
    environ: Mapping[str, str],
    env_var: str,
    default: Optional[str],
) -> Optional[str]:
    if cli_value is not None:
        return cli_value
    if env_var in environ:
        return environ[env_var]
    return default


def load_run_config(
    args: argparse.Namespace,
    environ: Optional[Mapping[str, str]] = None,
) -> RunConfig:
    """Validate parsed arguments and the environment into a RunConfig.

    Args:
        args: Namespace produced by ``s3perf.cli.parse_args``.
        environ: Environment to read (defaults to os.environ).

    Returns:
        The validated, immutable run configuration.

    Raises:
        ValidationError: Bad numbers or conflicting flags.
        ToolMissing: A required external tool is not installed.
        EnvironmentMisconfigured: A Swift credential variable is unset.
    """
    if environ is None:
        environ = os.environ

    backend = select_backend(args)

    ping_host = _setting(args.ping_host, environ, "S3PERF_PING_HOST", DEFAULT_PING_HOST)
    if ping_host:
        require_tool("ping")
    require_tool(BACKEND_TOOLS[backend])

    validate_sizes(args.num_files, args.size)

    alias = None
    if backend == Backend.MINIO:
        alias = args.minio_alias.strip()
        if not alias:
            raise ValidationError("The MinIO client (-m) requires a non-empty alias")

    if args.parallel:
        require_tool(PARALLEL_TOOL)

    if backend == Backend.SWIFT:
        validate_swift_environment(environ)

    directory = _setting(args.directory, environ, "S3PERF_DIRECTORY", DEFAULT_DIRECTORY)
    output_file = _setting(args.output_file, environ, "S3PERF_OUTPUT_FILE", DEFAULT_OUTPUT_FILE)
    probe_url = _setting(args.probe_url, environ, "S3PERF_PROBE_URL", None)

    return RunConfig(
        file_count=args.num_files,
        file_size=args.size,
        backend=backend,
        bucket_case=BucketCase.UPPER if args.uppercase else BucketCase.LOWER,
        parallel=args.parallel,
        keep_local_files=args.keep,
        append_csv=args.output,
        backend_alias=alias,
        directory=Path(directory),
        output_file=Path(output_file),
        ping_host=ping_host or None,
        probe_url=probe_url or None,
        quiet=args.quiet,
        json_output=args.json_output,
    )
