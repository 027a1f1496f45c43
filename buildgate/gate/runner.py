from __future__ import annotations

import time
from typing import Any, Callable, Protocol

from buildgate.gate.errors import PollTimeoutError, ThresholdExceededError
from buildgate.gate.evaluator import evaluate
from buildgate.gate.metrics import fetch_metrics
from buildgate.gate.models import PollConfig, Verdict
from buildgate.gate.poller import poll


class BuildClient(Protocol):
    def fetch_state(self) -> str: ...

    def fetch_build(self) -> dict[str, Any]: ...


def run_gate(
    config: PollConfig,
    client: BuildClient,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> Verdict:
    result = poll(config, client, sleep=sleep)
    if not result.finished:
        raise PollTimeoutError(result.attempts_used, result.final_state)

    metrics = fetch_metrics(client)
    verdict = evaluate(metrics, config.threshold_percent)
    if not verdict.passed:
        raise ThresholdExceededError(verdict)
    return verdict
