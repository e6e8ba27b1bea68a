"""S3 API access through s3cmd, the default backend.

s3cmd reads endpoint and credentials from its own configuration
(``s3cmd --configure``).
"""

from pathlib import Path
from typing import Sequence

from s3perf.backends.base import StorageBackend
from s3perf.models import TestFile


class S3cmdBackend(StorageBackend):
    """Drive the benchmark with s3cmd."""

    tool = "s3cmd"

    def create_container(self, container: str) -> None:
        self._run(["s3cmd", "mb", f"s3://{container}"], step="create the bucket")

    def upload_all(self, files: Sequence[TestFile], container: str) -> None:
        target = f"s3://{container}/"
        if self.parallel:
            self._fan_out(
                ["s3cmd", "put", "{}", target],
                [str(f.path) for f in files],
                step="upload the files",
            )
        else:
            self._run(
                ["s3cmd", "put", *[str(f.path) for f in files], target],
                step="upload the files",
            )

    def list_container(self, container: str) -> str:
        return self._run(
            ["s3cmd", "ls", f"s3://{container}"],
            step="fetch the list of objects",
        )

    def download_all(
        self,
        container: str,
        files: Sequence[TestFile],
        dest_dir: Path,
    ) -> None:
        # trailing slash makes s3cmd treat the target as a directory
        target = f"{dest_dir}/"
        if self.parallel:
            self._fan_out(
                ["s3cmd", "get", "--force", f"s3://{container}/{{}}", target],
                [f.name for f in files],
                step="download the files",
            )
        else:
            self._run(
                [
                    "s3cmd", "get", "--force",
                    *[f"s3://{container}/{f.name}" for f in files],
                    target,
                ],
                step="download the files",
            )

    def delete_objects(self, container: str, files: Sequence[TestFile]) -> None:
        if self.parallel:
            self._fan_out(
                ["s3cmd", "del", f"s3://{container}/{{}}"],
                [f.name for f in files],
                step="erase the objects",
            )
        else:
            self._run(
                ["s3cmd", "del", *[f"s3://{container}/{f.name}" for f in files]],
                step="erase the objects",
            )

    def delete_container(self, container: str) -> None:
        self._run(["s3cmd", "rb", f"s3://{container}"], step="erase the bucket")

    def container_exists(self, container: str) -> bool:
        return self._succeeds(["s3cmd", "ls", f"s3://{container}"])
