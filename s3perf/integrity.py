"""Checksum validation of downloaded files."""

from pathlib import Path
from typing import Union

from s3perf.dataset import file_checksum, read_manifest
from s3perf.errors import IntegrityError


def verify_manifest(
    manifest_path: Union[str, Path],
    directory: Union[str, Path],
) -> int:
    """Check every file named in the manifest against its recorded checksum.

    Args:
        manifest_path: md5sum-format manifest written at generation time.
        directory: Directory holding the files to check.

    Returns:
        Number of files verified.

    Raises:
        IntegrityError: If any file is missing or its checksum differs.
    """
    directory = Path(directory)
    expected = read_manifest(manifest_path)

    missing = []
    mismatched = []
    for name, checksum in expected.items():
        path = directory / name
        if not path.is_file():
            missing.append(name)
        elif file_checksum(path) != checksum:
            mismatched.append(name)

    if missing or mismatched:
        raise IntegrityError(missing=missing, mismatched=mismatched)

    return len(expected)
