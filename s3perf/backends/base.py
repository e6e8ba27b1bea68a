"""Base storage backend interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from s3perf.commands import run_command, run_parallel
from s3perf.errors import TransportError
from s3perf.models import TestFile


class StorageBackend(ABC):
    """Abstract base class for object storage client adapters.

    Every operation shells out to a client tool and raises TransportError
    when the tool fails. Object keys are the basenames of the test files.

    Args:
        parallel: Fan uploads, downloads and object deletes out through
            GNU parallel instead of one batch invocation.
    """

    #: Name of the client executable.
    tool: str = ""

    #: True when the client cannot delete objects without also deleting
    #: the bucket, so the runner has to recreate it before the final phase.
    deletes_container_with_objects: bool = False

    def __init__(self, parallel: bool = False):
        self.parallel = parallel

    @abstractmethod
    def create_container(self, container: str) -> None:
        """Create the bucket (container)."""
        pass

    @abstractmethod
    def upload_all(self, files: Sequence[TestFile], container: str) -> None:
        """Upload every test file into the bucket."""
        pass

    @abstractmethod
    def list_container(self, container: str) -> str:
        """Fetch the object listing of the bucket."""
        pass

    @abstractmethod
    def download_all(
        self,
        container: str,
        files: Sequence[TestFile],
        dest_dir: Path,
    ) -> None:
        """Download the objects for every test file into ``dest_dir``."""
        pass

    @abstractmethod
    def delete_objects(self, container: str, files: Sequence[TestFile]) -> None:
        """Erase the uploaded objects."""
        pass

    @abstractmethod
    def delete_container(self, container: str) -> None:
        """Erase the (empty) bucket."""
        pass

    @abstractmethod
    def container_exists(self, container: str) -> bool:
        """Check whether the bucket is currently visible."""
        pass

    def _run(self, args: Sequence[str], step: str, cwd=None) -> str:
        return run_command(args, step=step, cwd=cwd).stdout

    def _fan_out(
        self,
        template: Sequence[str],
        items: Sequence[str],
        step: str,
        cwd=None,
    ) -> None:
        run_parallel(template, items, step=step, cwd=cwd)

    def _succeeds(self, args: Sequence[str]) -> bool:
        try:
            run_command(args, step="check the bucket")
        except TransportError:
            return False
        return True
