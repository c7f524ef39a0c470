from __future__ import annotations

from typing import Any

from ..check import CheckEvaluator
from ..compare import parse_timestamp
from ..context import EvaluationContext
from ..models import CheckResult, Criterion, TimeRangeCheck
from ..registry import register_check


def _parse_epoch_bound(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


@register_check
class CHECK_TIME_RANGE(CheckEvaluator):
    """
    Inclusive time window.

    The branch is picked by the runtime type of the resolved value, never the
    bounds: numbers are epoch milliseconds compared against integer bounds,
    strings are ISO-8601 timestamps compared against ISO-8601 bounds. There is
    no conversion between the two representations.
    """

    kind = "time_range"
    description = "Timestamp (ISO-8601 string or epoch milliseconds) lies within [min, max]"
    check_model = TimeRangeCheck

    def check(self, value: Any, criterion: Criterion, ctx: EvaluationContext) -> CheckResult:
        spec = criterion.check
        path = list(criterion.path)

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            low = _parse_epoch_bound(spec.min)
            high = _parse_epoch_bound(spec.max)
            if low is None or high is None:
                return self.failed(
                    {"message": "Min or max is not a valid number", "min": spec.min, "max": spec.max}
                )
            if low <= value <= high:
                return self.passed()
            return self.failed(
                {
                    "message": f"Timestamp {value} is outside range [{low}, {high}]",
                    "path": path,
                    "actual": value,
                    "min": low,
                    "max": high,
                }
            )

        if isinstance(value, str):
            timestamp = parse_timestamp(value)
            if timestamp is None:
                return self.failed({"message": f"Invalid timestamp: {value}", "path": path})
            low_ts = parse_timestamp(spec.min)
            high_ts = parse_timestamp(spec.max)
            if low_ts is None or high_ts is None:
                return self.failed({"message": "Invalid min or max time", "min": spec.min, "max": spec.max})
            if low_ts <= timestamp <= high_ts:
                return self.passed()
            return self.failed(
                {
                    "message": f"Timestamp {value} is outside range [{spec.min}, {spec.max}]",
                    "path": path,
                    "actual": value,
                    "min": spec.min,
                    "max": spec.max,
                }
            )

        return self.failed(
            {
                "message": f"Timestamp must be a string or number, got {type(value).__name__}",
                "path": path,
            }
        )
