from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

FINISHED_STATE = "finished"


@dataclass(frozen=True)
class PollConfig:
    url: str
    token: str
    interval_seconds: float = 10.0
    max_attempts: int = 60
    threshold_percent: float = 50.0
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        if not self.url.strip():
            raise ValueError("url must not be empty")
        if not self.token.strip():
            raise ValueError("token must not be empty")
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.threshold_percent < 0:
            raise ValueError("threshold_percent must be >= 0")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")


@dataclass(frozen=True)
class BuildStatus:
    state: str | None
    attempt: int

    @property
    def is_finished(self) -> bool:
        return self.state == FINISHED_STATE


class PollOutcome(str, Enum):
    POLLING = "polling"
    FINISHED = "finished"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class PollState:
    """One step of the polling state machine.

    Each call to ``advance`` consumes one attempt and returns a new value;
    instances are never mutated. ``FINISHED`` and ``TIMED_OUT`` are terminal.
    """

    max_attempts: int
    outcome: PollOutcome = PollOutcome.POLLING
    last_state: str | None = None
    attempt: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not PollOutcome.POLLING

    @property
    def next_attempt(self) -> int:
        return self.attempt + 1

    def advance(self, status: BuildStatus) -> PollState:
        if self.is_terminal:
            raise RuntimeError(f"cannot advance a poll that already ended as {self.outcome.value}")
        if status.attempt != self.next_attempt:
            raise ValueError(f"expected attempt {self.next_attempt}, got {status.attempt}")
        if status.is_finished:
            outcome = PollOutcome.FINISHED
        elif status.attempt >= self.max_attempts:
            outcome = PollOutcome.TIMED_OUT
        else:
            outcome = PollOutcome.POLLING
        return replace(self, outcome=outcome, last_state=status.state, attempt=status.attempt)


@dataclass(frozen=True)
class PollResult:
    outcome: PollOutcome
    final_state: str | None
    attempts_used: int

    @property
    def finished(self) -> bool:
        return self.outcome is PollOutcome.FINISHED


@dataclass(frozen=True)
class ComparisonMetrics:
    diff: int
    finished: int

    def __post_init__(self) -> None:
        if self.diff < 0 or self.finished < 0:
            raise ValueError("comparison counts must be non-negative")


@dataclass(frozen=True)
class Verdict:
    passed: bool
    percentage: float | None
    reason: str
