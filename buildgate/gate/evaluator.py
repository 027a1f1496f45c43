from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from buildgate.gate.models import ComparisonMetrics, Verdict

logger = logging.getLogger(__name__)

_TWO_PLACES = Decimal("0.01")


def compute_percentage(diff: int, finished: int) -> Decimal:
    if finished <= 0:
        raise ValueError("finished must be positive to compute a percentage")
    ratio = Decimal(diff) / Decimal(finished) * 100
    return ratio.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def evaluate(metrics: ComparisonMetrics, threshold_percent: float) -> Verdict:
    if metrics.finished == 0:
        reason = (
            "Total comparisons finished is 0. Unable to calculate percentage difference. "
            "Proceeding with success."
        )
        logger.warning(reason, extra={"comparisons_diff": metrics.diff})
        return Verdict(passed=True, percentage=None, reason=reason)

    percentage = compute_percentage(metrics.diff, metrics.finished)
    threshold = Decimal(str(threshold_percent))
    if percentage > threshold:
        reason = f"Percentage of difference ({percentage}%) exceeds the threshold ({threshold_percent}%)."
        passed = False
    else:
        reason = f"Percentage of difference ({percentage}%) is within the threshold ({threshold_percent}%)."
        passed = True
    logger.info(
        "Gate evaluated",
        extra={"percentage": str(percentage), "threshold_percent": threshold_percent, "passed": passed},
    )
    return Verdict(passed=passed, percentage=float(percentage), reason=reason)
