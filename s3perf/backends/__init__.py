"""Storage backends, one per supported client tool."""

from s3perf.backends.base import StorageBackend
from s3perf.backends.minio import MinioBackend
from s3perf.backends.s3cmd import S3cmdBackend
from s3perf.backends.swift import SwiftBackend
from s3perf.models import Backend, RunConfig

# Executable each backend shells out to
BACKEND_TOOLS = {
    Backend.SWIFT: SwiftBackend.tool,
    Backend.MINIO: MinioBackend.tool,
    Backend.S3CMD: S3cmdBackend.tool,
}


def build_backend(config: RunConfig) -> StorageBackend:
    """Build the storage backend selected by the run configuration.

    Args:
        config: Validated run configuration.

    Returns:
        A backend honoring the configuration's parallel flag.
    """
    if config.backend == Backend.SWIFT:
        return SwiftBackend(parallel=config.parallel)
    if config.backend == Backend.MINIO:
        return MinioBackend(config.backend_alias or "", parallel=config.parallel)
    return S3cmdBackend(parallel=config.parallel)


__all__ = [
    "BACKEND_TOOLS",
    "MinioBackend",
    "S3cmdBackend",
    "StorageBackend",
    "SwiftBackend",
    "build_backend",
]
