from __future__ import annotations

from typing import Any

from ..check import CheckEvaluator
from ..context import EvaluationContext
from ..models import ArraySizeCheck, CheckResult, Criterion, SizeComparator
from ..registry import register_check


@register_check
class CHECK_ARRAY_SIZE(CheckEvaluator):
    kind = "array_size"
    description = "Length of the array at path is equal to, less than or greater than size"
    check_model = ArraySizeCheck

    def check(self, value: Any, criterion: Criterion, ctx: EvaluationContext) -> CheckResult:
        spec = criterion.check
        if not isinstance(value, (list, tuple)):
            return self.failed(
                {
                    "message": "Value is not an array",
                    "path": list(criterion.path),
                    "actual_type": type(value).__name__,
                }
            )

        actual = len(value)
        if spec.comparator == SizeComparator.EQUAL:
            passes = actual == spec.size
            message = f"Array length should be {spec.size} but is {actual}"
        elif spec.comparator == SizeComparator.LESS_THAN:
            passes = actual < spec.size
            message = f"Array length should be less than {spec.size} but is {actual}"
        else:
            passes = actual > spec.size
            message = f"Array length should be greater than {spec.size} but is {actual}"

        if passes:
            return self.passed()
        return self.failed(
            {
                "message": message,
                "path": list(criterion.path),
                "expected": spec.size,
                "actual": actual,
            }
        )
