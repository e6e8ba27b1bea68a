"""Data models for the s3perf benchmark."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Optional

# Largest accepted file size in bytes (16 MiB)
MAX_FILE_SIZE = 16777216

DEFAULT_DIRECTORY = "testfiles"
DEFAULT_OUTPUT_FILE = "results.csv"
DEFAULT_PING_HOST = "8.8.8.8"

# Some services (Nimbus Cumulus, S3ninja) require an upper-case bucket name,
# others (Minio, Riak CS, Scality S3) reject it.
BUCKET_NAME = "s3perf-testbucket"


class Backend(Enum):
    """Object storage client used to drive the benchmark."""

    SWIFT = "swift"
    MINIO = "mc"
    S3CMD = "s3cmd"


class BucketCase(Enum):
    """Letter case of the bucket name."""

    LOWER = "lower"
    UPPER = "upper"


class Phase(Enum):
    """The six timed operations, in execution order."""

    CREATE_BUCKET = "create-bucket"
    UPLOAD = "upload"
    LIST = "list"
    DOWNLOAD = "download"
    DELETE_OBJECTS = "delete-objects"
    DELETE_BUCKET = "delete-bucket"

    @property
    def label(self) -> str:
        return PHASE_LABELS[self]

    @property
    def column(self) -> str:
        return PHASE_COLUMNS[self]


PHASE_LABELS = {
    Phase.CREATE_BUCKET: "create the bucket",
    Phase.UPLOAD: "upload the files",
    Phase.LIST: "fetch a list of files",
    Phase.DOWNLOAD: "download the files",
    Phase.DELETE_OBJECTS: "erase the objects",
    Phase.DELETE_BUCKET: "erase the bucket",
}

PHASE_COLUMNS = {
    Phase.CREATE_BUCKET: "TIME_CREATE_BUCKET",
    Phase.UPLOAD: "TIME_OBJECTS_UPLOAD",
    Phase.LIST: "TIME_OBJECTS_LIST",
    Phase.DOWNLOAD: "TIME_OBJECTS_DOWNLOAD",
    Phase.DELETE_OBJECTS: "TIME_ERASE_OBJECTS",
    Phase.DELETE_BUCKET: "TIME_ERASE_BUCKET",
}


class RunState(Enum):
    """Position of a run in its linear lifecycle."""

    VALIDATING = "validating"
    PREPARING = "preparing"
    CREATING_CONTAINER = "creating-container"
    UPLOADING = "uploading"
    LISTING = "listing"
    DOWNLOADING = "downloading"
    VERIFYING = "verifying"
    DELETING_OBJECTS = "deleting-objects"
    RECREATING_CONTAINER = "recreating-container"
    DELETING_CONTAINER = "deleting-container"
    REPORTING = "reporting"
    CLEANING_UP = "cleaning-up"
    DONE = "done"
    FAILED = "failed"


class BucketState(Enum):
    """Existence state of the benchmark bucket."""

    ABSENT = "absent"
    CREATING = "creating"
    PRESENT = "present"
    DELETING = "deleting"


_BUCKET_TRANSITIONS = {
    BucketState.ABSENT: {BucketState.CREATING},
    BucketState.CREATING: {BucketState.PRESENT},
    BucketState.PRESENT: {BucketState.DELETING},
    BucketState.DELETING: {BucketState.ABSENT},
}


@dataclass(frozen=True)
class RunConfig:
    """Validated configuration for a single benchmark run."""

    file_count: int
    file_size: int
    backend: Backend = Backend.S3CMD
    bucket_case: BucketCase = BucketCase.LOWER
    parallel: bool = False
    keep_local_files: bool = False
    append_csv: bool = False
    backend_alias: Optional[str] = None
    directory: Path = Path(DEFAULT_DIRECTORY)
    output_file: Path = Path(DEFAULT_OUTPUT_FILE)
    ping_host: Optional[str] = DEFAULT_PING_HOST
    probe_url: Optional[str] = None
    quiet: bool = False
    json_output: Optional[str] = None

    @property
    def bucket_name(self) -> str:
        if self.bucket_case == BucketCase.UPPER:
            return BUCKET_NAME.upper()
        return BUCKET_NAME


@dataclass(frozen=True)
class TestFile:
    """A generated local file and its expected checksum."""

    __test__ = False

    path: Path
    checksum: str

    @property
    def name(self) -> str:
        return self.path.name


@dataclass
class TestFileSet:
    """The files generated for one run plus their checksum manifest."""

    __test__ = False

    directory: Path
    files: list[TestFile]
    manifest_path: Path

    def __len__(self) -> int:
        return len(self.files)


@dataclass
class PhaseTiming:
    """Durations of the six phases, each recorded exactly once."""

    durations: dict[Phase, Decimal] = field(default_factory=dict)

    def record(self, phase: Phase, duration: Decimal) -> None:
        if phase in self.durations:
            raise ValueError(f"Phase {phase.value} has already been recorded")
        self.durations[phase] = duration

    def get(self, phase: Phase) -> Optional[Decimal]:
        return self.durations.get(phase)

    @property
    def total(self) -> Decimal:
        return sum(self.durations.values(), Decimal("0.000"))


@dataclass
class BucketHandle:
    """The benchmark bucket and where it is in its lifecycle."""

    name: str
    state: BucketState = BucketState.ABSENT

    def transition(self, new_state: BucketState) -> None:
        if new_state not in _BUCKET_TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Bucket {self.name} cannot go from {self.state.value} "
                f"to {new_state.value}"
            )
        self.state = new_state


def format_duration(duration: Decimal) -> str:
    """Render a duration as fixed-point seconds with three decimals."""
    return f"{duration:.3f}"


@dataclass
class RunResult:
    """Outcome of a benchmark run."""

    config: RunConfig
    timings: PhaseTiming
    state: RunState = RunState.DONE
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "backend": self.config.backend.value,
            "bucket": self.config.bucket_name,
            "num_files": self.config.file_count,
            "size_files": self.config.file_size,
            "parallel": self.config.parallel,
            "state": self.state.value,
            "phases": {
                phase.value: format_duration(duration)
                for phase, duration in self.timings.durations.items()
            },
            "total": format_duration(self.timings.total),
        }
