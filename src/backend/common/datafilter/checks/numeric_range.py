from __future__ import annotations

from typing import Any

from ..check import CheckEvaluator
from ..context import EvaluationContext
from ..models import CheckResult, Criterion, NumericRangeCheck
from ..registry import register_check


@register_check
class CHECK_NUMERIC_RANGE(CheckEvaluator):
    kind = "numeric_range"
    description = "Number at path lies within [min, max]"
    check_model = NumericRangeCheck

    def check(self, value: Any, criterion: Criterion, ctx: EvaluationContext) -> CheckResult:
        spec = criterion.check
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return self.failed(
                {
                    "message": f"Value must be a number, got {type(value).__name__}",
                    "path": list(criterion.path),
                    "actual": value,
                }
            )
        if spec.min <= value <= spec.max:
            return self.passed()
        return self.failed(
            {
                "message": f"Value {value} is outside range [{spec.min}, {spec.max}]",
                "path": list(criterion.path),
                "actual": value,
                "min": spec.min,
                "max": spec.max,
            }
        )
