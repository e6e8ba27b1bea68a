"""S3 API access through the MinIO client (mc).

mc addresses a service through an alias configured beforehand with
``mc alias set <ALIAS> http://<IP>:<PORT> <ACCESSKEY> <SECRETKEY>``.

mc has no way to erase only the objects inside a bucket, so erasing the
objects removes the bucket as well.
"""

from pathlib import Path
from typing import Sequence

from s3perf.backends.base import StorageBackend
from s3perf.models import TestFile


class MinioBackend(StorageBackend):
    """Drive the benchmark with the MinIO client.

    Args:
        alias: mc alias of the target service.
        parallel: Fan transfers out through GNU parallel.
    """

    tool = "mc"
    deletes_container_with_objects = True

    def __init__(self, alias: str, parallel: bool = False):
        super().__init__(parallel=parallel)
        if not alias or not alias.strip():
            raise ValueError("The MinIO client needs a non-empty alias")
        self.alias = alias.strip()

    def _bucket(self, container: str) -> str:
        return f"{self.alias}/{container}"

    def create_container(self, container: str) -> None:
        self._run(["mc", "mb", self._bucket(container)], step="create the bucket")

    def upload_all(self, files: Sequence[TestFile], container: str) -> None:
        target = f"{self._bucket(container)}/"
        if self.parallel:
            self._fan_out(
                ["mc", "cp", "{}", target],
                [str(f.path) for f in files],
                step="upload the files",
            )
        else:
            self._run(
                ["mc", "cp", *[str(f.path) for f in files], target],
                step="upload the files",
            )

    def list_container(self, container: str) -> str:
        return self._run(
            ["mc", "ls", self._bucket(container)],
            step="fetch the list of objects",
        )

    def download_all(
        self,
        container: str,
        files: Sequence[TestFile],
        dest_dir: Path,
    ) -> None:
        target = f"{dest_dir}/"
        bucket = self._bucket(container)
        if self.parallel:
            self._fan_out(
                ["mc", "cp", f"{bucket}/{{}}", target],
                [f.name for f in files],
                step="download the files",
            )
        else:
            self._run(
                ["mc", "cp", *[f"{bucket}/{f.name}" for f in files], target],
                step="download the files",
            )

    def delete_objects(self, container: str, files: Sequence[TestFile]) -> None:
        # Removes the bucket together with its objects; the runner recreates it.
        self._run(
            ["mc", "rb", "--force", self._bucket(container)],
            step="erase the objects",
        )

    def delete_container(self, container: str) -> None:
        self._run(["mc", "rb", self._bucket(container)], step="erase the bucket")

    def container_exists(self, container: str) -> bool:
        return self._succeeds(["mc", "ls", self._bucket(container)])
