"""Wall-clock timing of benchmark phases."""

import time
from decimal import ROUND_DOWN, Decimal
from typing import Any, Callable

from s3perf.models import Phase, PhaseTiming

# Durations are kept with millisecond precision, truncated
PRECISION = Decimal("0.001")


def elapsed(start: float, end: float) -> Decimal:
    """Duration between two wall-clock readings, truncated to milliseconds."""
    delta = Decimal(repr(end)) - Decimal(repr(start))
    if delta < 0:
        delta = Decimal(0)
    return delta.quantize(PRECISION, rounding=ROUND_DOWN)


class PhaseTimer:
    """Times operations and records the durations into a PhaseTiming.

    Args:
        timing: Accumulator the durations are recorded into.
        clock: Source of wall-clock readings in seconds.
    """

    def __init__(
        self,
        timing: PhaseTiming,
        clock: Callable[[], float] = time.time,
    ):
        self.timing = timing
        self.clock = clock

    def time(
        self,
        phase: Phase,
        operation: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ) -> tuple[Any, Decimal]:
        """Run an operation and record how long it took.

        Nothing is recorded when the operation raises.
        """
        start = self.clock()
        result = operation(*args, **kwargs)
        duration = elapsed(start, self.clock())
        self.timing.record(phase, duration)
        return result, duration
