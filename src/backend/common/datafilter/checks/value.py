from __future__ import annotations

from typing import Any

from ..check import CheckEvaluator
from ..compare import deep_equal
from ..context import EvaluationContext
from ..models import CheckResult, Criterion, ValueCheck
from ..registry import register_check


@register_check
class CHECK_VALUE(CheckEvaluator):
    kind = "value"
    description = "Value at path deep-equals the expected value"
    check_model = ValueCheck

    def check(self, value: Any, criterion: Criterion, ctx: EvaluationContext) -> CheckResult:
        expected = criterion.check.value
        if deep_equal(value, expected):
            return self.passed()
        return self.failed(
            {
                "message": "Value mismatch",
                "path": list(criterion.path),
                "expected": expected,
                "actual": value,
            }
        )
