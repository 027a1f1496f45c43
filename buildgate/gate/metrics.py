from __future__ import annotations

import logging
import re
from typing import Any, Protocol

import httpx

from buildgate.gate.errors import FetchError, InvalidMetricsError
from buildgate.gate.models import ComparisonMetrics
from buildgate.percy.client import build_attributes

logger = logging.getLogger(__name__)

DIFF_FIELD = "total-comparisons-diff"
FINISHED_FIELD = "total-comparisons-finished"

_COUNT_RE = re.compile(r"^[0-9]+$")


class BuildSource(Protocol):
    def fetch_build(self) -> dict[str, Any]: ...


def parse_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and _COUNT_RE.match(value):
        return int(value)
    return None


def parse_metrics(payload: Any) -> ComparisonMetrics:
    attributes = build_attributes(payload)
    raw_diff = attributes.get(DIFF_FIELD)
    raw_finished = attributes.get(FINISHED_FIELD)
    diff = parse_count(raw_diff)
    finished = parse_count(raw_finished)
    if diff is None or finished is None:
        raise InvalidMetricsError(raw_diff, raw_finished)
    return ComparisonMetrics(diff=diff, finished=finished)


def fetch_metrics(source: BuildSource) -> ComparisonMetrics:
    logger.info("Fetching final comparison metrics")
    try:
        payload = source.fetch_build()
    except (httpx.HTTPError, ValueError) as exc:
        raise FetchError(f"Failed to fetch build metrics: {exc}") from exc
    metrics = parse_metrics(payload)
    logger.info(
        "Comparison metrics fetched",
        extra={"comparisons_diff": metrics.diff, "comparisons_finished": metrics.finished},
    )
    return metrics
