from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

from buildgate.gate.errors import TransientPollError
from buildgate.gate.models import BuildStatus, PollConfig, PollOutcome, PollResult, PollState

logger = logging.getLogger(__name__)


class StatusSource(Protocol):
    def fetch_state(self) -> str: ...


def read_status(source: StatusSource, attempt: int) -> BuildStatus:
    try:
        state: str | None = source.fetch_state()
    except TransientPollError as exc:
        logger.warning(
            "Failed to extract state, retrying",
            extra={"attempt": attempt, "error": str(exc)},
        )
        state = None
    return BuildStatus(state=state, attempt=attempt)


def poll(
    config: PollConfig,
    source: StatusSource,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> PollResult:
    logger.info(
        "Polling build state until finished",
        extra={"url": config.url, "interval_seconds": config.interval_seconds, "max_attempts": config.max_attempts},
    )
    current = PollState(max_attempts=config.max_attempts)
    while not current.is_terminal:
        status = read_status(source, current.next_attempt)
        current = current.advance(status)
        logger.info(
            "Poll attempt complete",
            extra={
                "attempt": current.attempt,
                "max_attempts": config.max_attempts,
                "state": current.last_state,
                "outcome": current.outcome.value,
            },
        )
        if current.outcome is PollOutcome.POLLING:
            sleep(config.interval_seconds)

    if current.outcome is PollOutcome.FINISHED:
        logger.info("Build finished", extra={"attempts": current.attempt})
    else:
        logger.error(
            "Build did not finish within attempt budget",
            extra={"attempts": current.attempt, "state": current.last_state},
        )
    return PollResult(outcome=current.outcome, final_state=current.last_state, attempts_used=current.attempt)
