"""Benchmark runner and orchestrator.

Walks a single run through its linear lifecycle:

    PREPARING -> CREATING_CONTAINER -> UPLOADING -> LISTING -> DOWNLOADING
    -> VERIFYING -> DELETING_OBJECTS -> (RECREATING_CONTAINER) ->
    DELETING_CONTAINER -> REPORTING -> CLEANING_UP -> DONE

Any error moves the run to FAILED and propagates. Nothing that already
happened is rolled back: uploaded objects, the bucket and the local
directory stay where they are.
"""

import time
from pathlib import Path
from typing import Any, Callable, Optional

from s3perf.backends import StorageBackend, build_backend
from s3perf.dataset import generate_test_files, remove_test_files
from s3perf.errors import FilesystemError, S3PerfError
from s3perf.integrity import verify_manifest
from s3perf.models import (
    BucketHandle,
    BucketState,
    Phase,
    PhaseTiming,
    RunConfig,
    RunResult,
    RunState,
    TestFileSet,
)
from s3perf.reporters.base import Reporter
from s3perf.retry import POLL_ATTEMPTS, POLL_INTERVAL, poll
from s3perf.timer import PhaseTimer

# Subdirectory of the working directory the objects are downloaded into
DOWNLOAD_DIRNAME = "download"

# Pause after creating the bucket and after uploading; some services cannot
# serve fresh buckets and objects immediately. Not part of any timed phase.
SETTLE_SECONDS = 1.0


class BenchmarkRunner:
    """Runs the six timed phases against one storage backend.

    Args:
        config: Validated run configuration
        backend: Storage backend (built from the config when omitted)
        reporter: Optional reporter for progress callbacks
        clock: Wall-clock source for the phase timer
        sleep: Function used for settle delays and existence polls
    """

    def __init__(
        self,
        config: RunConfig,
        backend: Optional[StorageBackend] = None,
        reporter: Optional[Reporter] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.backend = backend if backend is not None else build_backend(config)
        self.reporter = reporter
        self.sleep = sleep
        self.state = RunState.VALIDATING
        self.timings = PhaseTiming()
        self.timer = PhaseTimer(self.timings, clock=clock)
        self.bucket = BucketHandle(config.bucket_name)
        self.file_set: Optional[TestFileSet] = None

    def run(self) -> RunResult:
        """Run the benchmark once.

        Returns:
            RunResult with the six phase durations

        Raises:
            S3PerfError: If any step fails; the run is then in FAILED state.
        """
        if self.reporter:
            self.reporter.on_run_start(self.config)

        try:
            result = self._run()
        except S3PerfError as e:
            self.state = RunState.FAILED
            if self.reporter:
                self.reporter.on_run_failed(e)
            raise

        return result

    def _run(self) -> RunResult:
        config = self.config
        backend = self.backend
        bucket = self.bucket.name

        self._enter(RunState.PREPARING)
        file_set = generate_test_files(config.directory, config.file_count, config.file_size)
        self.file_set = file_set
        self._step(
            f"{len(file_set)} files with random content and the checksum "
            f"manifest have been created in {file_set.directory}."
        )

        self._enter(RunState.CREATING_CONTAINER)
        self.bucket.transition(BucketState.CREATING)
        self._timed(Phase.CREATE_BUCKET, backend.create_container, bucket)
        self._step(f"Bucket {bucket} has been created.")
        self.sleep(SETTLE_SECONDS)
        self._wait_for_bucket(present=True)
        self.bucket.transition(BucketState.PRESENT)

        self._enter(RunState.UPLOADING)
        self._timed(Phase.UPLOAD, backend.upload_all, file_set.files, bucket)
        self._step("Files have been uploaded.")
        self.sleep(SETTLE_SECONDS)

        self._enter(RunState.LISTING)
        self._timed(Phase.LIST, backend.list_container, bucket)
        self._step(f"The list of objects inside {bucket} has been fetched.")

        self._enter(RunState.DOWNLOADING)
        dest_dir = self._prepare_download_dir(file_set.directory)
        self._timed(Phase.DOWNLOAD, backend.download_all, bucket, file_set.files, dest_dir)
        self._step("Files have been downloaded.")

        self._enter(RunState.VERIFYING)
        verified = verify_manifest(file_set.manifest_path, dest_dir)
        self._step(f"Checksums of {verified} files have been validated and match.")

        self._enter(RunState.DELETING_OBJECTS)
        self._timed(Phase.DELETE_OBJECTS, backend.delete_objects, bucket, file_set.files)
        self._step(f"Objects inside the bucket {bucket} have been erased.")

        if backend.deletes_container_with_objects:
            self._recreate_bucket()

        self._enter(RunState.DELETING_CONTAINER)
        self.bucket.transition(BucketState.DELETING)
        self._timed(Phase.DELETE_BUCKET, backend.delete_container, bucket)
        self.bucket.transition(BucketState.ABSENT)
        self._step(f"Bucket {bucket} has been erased.")

        self._enter(RunState.REPORTING)
        result = RunResult(config=config, timings=self.timings, state=RunState.DONE)
        if self.reporter:
            self.reporter.on_run_complete(result)

        self._enter(RunState.CLEANING_UP)
        if not config.keep_local_files:
            remove_test_files(file_set.directory)
            self._step(f"The directory {file_set.directory} has been erased.")

        self._enter(RunState.DONE)
        return result

    def _recreate_bucket(self) -> None:
        """Bring the bucket back after a client erased it with its objects.

        The final phase needs a bucket to erase, so the bucket is recreated
        once it is confirmed gone. Only the recreate itself can fail the run.
        """
        self._enter(RunState.RECREATING_CONTAINER)
        bucket = self.bucket.name

        self.bucket.transition(BucketState.DELETING)
        self._wait_for_bucket(present=False)
        self.bucket.transition(BucketState.ABSENT)

        self.bucket.transition(BucketState.CREATING)
        self.backend.create_container(bucket)
        self._step(f"Bucket {bucket} has been created again to erase it as next step.")
        self.sleep(SETTLE_SECONDS)
        self._wait_for_bucket(present=True)
        self.bucket.transition(BucketState.PRESENT)

    def _wait_for_bucket(self, present: bool) -> bool:
        """Poll until the bucket is (or is no longer) visible.

        Exhausting the attempts is only reported as a warning.
        """
        bucket = self.bucket.name

        def check() -> bool:
            return self.backend.container_exists(bucket) == present

        confirmed = poll(
            check,
            attempts=POLL_ATTEMPTS,
            interval=POLL_INTERVAL,
            sleep=self.sleep,
        )
        if confirmed:
            self._step(
                f"The bucket {bucket} is available."
                if present else f"The bucket {bucket} is gone."
            )
        elif self.reporter:
            expected = "available" if present else "gone"
            self.reporter.on_warning(
                f"The bucket {bucket} was not {expected} after {POLL_ATTEMPTS} checks; "
                "continuing anyway."
            )
        return confirmed

    def _timed(self, phase: Phase, operation: Callable[..., Any], *args: Any) -> Any:
        if self.reporter:
            self.reporter.on_phase_start(phase)
        result, duration = self.timer.time(phase, operation, *args)
        if self.reporter:
            self.reporter.on_phase_complete(phase, duration)
        return result

    def _prepare_download_dir(self, directory: Path) -> Path:
        dest_dir = directory / DOWNLOAD_DIRNAME
        try:
            dest_dir.mkdir()
        except OSError as e:
            raise FilesystemError(
                f"Unable to create the download directory {dest_dir}: {e}",
                step="download the files",
            ) from e
        return dest_dir

    def _enter(self, state: RunState) -> None:
        self.state = state

    def _step(self, message: str) -> None:
        if self.reporter:
            self.reporter.on_step(message)
