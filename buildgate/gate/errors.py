from __future__ import annotations

from typing import Any

from buildgate.gate.models import Verdict


class TransientPollError(Exception):
    """A single poll attempt produced no usable state. Retried within budget."""


class BuildGateError(Exception):
    """Fatal outcome of a gate run. The CLI maps every subclass to exit 1."""


class PollTimeoutError(BuildGateError):
    def __init__(self, attempts: int, last_state: str | None) -> None:
        self.attempts = attempts
        self.last_state = last_state
        super().__init__(
            f"Build state did not become 'finished' within {attempts} attempts "
            f"(final state: '{last_state or ''}')."
        )


class FetchError(BuildGateError):
    pass


class InvalidMetricsError(FetchError):
    def __init__(self, diff: Any, finished: Any) -> None:
        self.diff = diff
        self.finished = finished
        super().__init__(
            "Failed to extract valid non-negative numbers for comparisons. "
            f"Diff: '{diff}', Finished: '{finished}'"
        )


class ThresholdExceededError(BuildGateError):
    def __init__(self, verdict: Verdict) -> None:
        self.verdict = verdict
        super().__init__(verdict.reason)
