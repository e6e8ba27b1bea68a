"""Swift API access through the python-swiftclient command line tool.

In the Swift ecosystem buckets are called containers. The client reads the
auth URL and credentials from ST_AUTH, ST_USER and ST_KEY.

swift names objects after the paths it is given, so uploads run inside the
test directory and downloads inside the destination directory, keeping the
object names equal to the file basenames. The client always runs with a
single object thread; concurrency only ever comes from GNU parallel.
"""

from pathlib import Path
from typing import Sequence

from s3perf.backends.base import StorageBackend
from s3perf.models import TestFile


class SwiftBackend(StorageBackend):
    """Drive the benchmark with the swift client."""

    tool = "swift"

    def create_container(self, container: str) -> None:
        self._run(["swift", "post", container], step="create the container")

    def upload_all(self, files: Sequence[TestFile], container: str) -> None:
        if not files:
            return
        cwd = files[0].path.parent
        if self.parallel:
            self._fan_out(
                ["swift", "upload", "--object-threads", "1", container, "{}"],
                [f.name for f in files],
                step="upload the files",
                cwd=cwd,
            )
        else:
            self._run(
                ["swift", "upload", "--object-threads", "1", container,
                 *[f.name for f in files]],
                step="upload the files",
                cwd=cwd,
            )

    def list_container(self, container: str) -> str:
        return self._run(["swift", "list", container], step="fetch the list of objects")

    def download_all(
        self,
        container: str,
        files: Sequence[TestFile],
        dest_dir: Path,
    ) -> None:
        if self.parallel:
            self._fan_out(
                ["swift", "download", "--object-threads=1", container, "{}"],
                [f.name for f in files],
                step="download the files",
                cwd=dest_dir,
            )
        else:
            self._run(
                ["swift", "download", "--object-threads=1", container,
                 *[f.name for f in files]],
                step="download the files",
                cwd=dest_dir,
            )

    def delete_objects(self, container: str, files: Sequence[TestFile]) -> None:
        if self.parallel:
            self._fan_out(
                ["swift", "delete", "--object-threads=1", container, "{}"],
                [f.name for f in files],
                step="erase the objects",
            )
        else:
            self._run(
                ["swift", "delete", "--object-threads=1", container,
                 *[f.name for f in files]],
                step="erase the objects",
            )

    def delete_container(self, container: str) -> None:
        self._run(["swift", "delete", container], step="erase the container")

    def container_exists(self, container: str) -> bool:
        return self._succeeds(["swift", "stat", container])
