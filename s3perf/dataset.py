"""Generation and removal of the local test files.

The working directory must not exist beforehand, so reruns never silently
mix data from an earlier run. Generating the data is not part of any timed
phase.
"""

import hashlib
import os
import shutil
from pathlib import Path
from typing import Union

from s3perf.errors import FilesystemError
from s3perf.models import TestFile, TestFileSet

FILE_PREFIX = "s3perf-testfile"
FILE_SUFFIX = ".txt"
MANIFEST_NAME = "MD5SUM"

# Random data is written in 1 MiB chunks
CHUNK_SIZE = 1024 * 1024


def file_name_for(index: int) -> str:
    """Name of the ``index``-th (1-based) test file."""
    return f"{FILE_PREFIX}{index}{FILE_SUFFIX}"


def file_checksum(path: Union[str, Path]) -> str:
    """Compute the MD5 hex digest of a file."""
    digest = hashlib.md5()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _write_random_file(path: Path, size: int) -> None:
    with open(path, "wb") as f:
        remaining = size
        while remaining > 0:
            write_size = min(CHUNK_SIZE, remaining)
            f.write(os.urandom(write_size))
            remaining -= write_size


def write_manifest(manifest_path: Path, files: list[TestFile]) -> None:
    """Write checksums in md5sum format, relative to the manifest's directory."""
    with open(manifest_path, "w", encoding="utf-8") as f:
        for test_file in files:
            f.write(f"{test_file.checksum}  {test_file.name}\n")


def read_manifest(manifest_path: Union[str, Path]) -> dict[str, str]:
    """Read an md5sum-format manifest.

    Returns:
        Mapping of file name to expected hex digest, in manifest order.

    Raises:
        FilesystemError: If the manifest cannot be read or is malformed.
    """
    entries: dict[str, str] = {}
    try:
        with open(manifest_path, encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.rstrip("\n")
                if not line:
                    continue
                checksum, sep, name = line.partition("  ")
                if not sep or not name:
                    raise FilesystemError(
                        f"Malformed line {line_number} in {manifest_path}",
                        step="checksum validation",
                    )
                entries[name] = checksum
    except OSError as e:
        raise FilesystemError(
            f"Unable to read the checksum manifest {manifest_path}: {e}",
            step="checksum validation",
        ) from e
    return entries


def generate_test_files(
    directory: Union[str, Path],
    count: int,
    size: int,
) -> TestFileSet:
    """Create a fresh directory with ``count`` random files of ``size`` bytes.

    Args:
        directory: Directory to create; must not exist yet.
        count: Number of files.
        size: Size of each file in bytes.

    Returns:
        The generated files with their checksums and the manifest path.

    Raises:
        FilesystemError: If the directory exists or anything cannot be written.
    """
    directory = Path(directory)

    if directory.exists():
        raise FilesystemError(
            f"The directory {directory} already exists!",
            step="prepare test files",
        )

    try:
        directory.mkdir(parents=True)
    except OSError as e:
        raise FilesystemError(
            f"Unable to create the directory {directory}: {e}",
            step="prepare test files",
        ) from e

    files: list[TestFile] = []
    try:
        for index in range(1, count + 1):
            path = directory / file_name_for(index)
            _write_random_file(path, size)
            files.append(TestFile(path=path, checksum=file_checksum(path)))

        manifest_path = directory / MANIFEST_NAME
        write_manifest(manifest_path, files)
    except OSError as e:
        raise FilesystemError(
            f"Unable to create the test files in {directory}: {e}",
            step="prepare test files",
        ) from e

    return TestFileSet(directory=directory, files=files, manifest_path=manifest_path)


def remove_test_files(directory: Union[str, Path]) -> None:
    """Erase the working directory and everything in it.

    Raises:
        FilesystemError: If the directory cannot be removed.
    """
    try:
        shutil.rmtree(directory)
    except OSError as e:
        raise FilesystemError(
            f"Unable to erase the directory {directory}: {e}",
            step="clean up",
        ) from e
