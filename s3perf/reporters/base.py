"""Base reporter interface."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from s3perf.errors import S3PerfError
    from s3perf.models import Phase, RunConfig, RunResult


class Reporter(ABC):
    """Abstract base class for benchmark reporters."""

    @abstractmethod
    def on_run_start(self, config: "RunConfig") -> None:
        """Called once the configuration has been validated."""
        pass

    @abstractmethod
    def on_step(self, message: str) -> None:
        """Called for progress of untimed steps."""
        pass

    @abstractmethod
    def on_warning(self, message: str) -> None:
        """Called for problems that do not fail the run."""
        pass

    @abstractmethod
    def on_phase_start(self, phase: "Phase") -> None:
        """Called right before a timed phase starts."""
        pass

    @abstractmethod
    def on_phase_complete(self, phase: "Phase", duration: Decimal) -> None:
        """Called when a timed phase completes."""
        pass

    @abstractmethod
    def on_run_complete(self, result: "RunResult") -> None:
        """Called when all six phases have been timed."""
        pass

    @abstractmethod
    def on_run_failed(self, error: "S3PerfError") -> None:
        """Called when the run aborts."""
        pass
