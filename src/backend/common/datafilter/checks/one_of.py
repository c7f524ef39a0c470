from __future__ import annotations

from typing import Any

from ..check import CheckEvaluator
from ..compare import deep_equal
from ..context import EvaluationContext
from ..models import CheckResult, Criterion, OneOfCheck
from ..registry import register_check


@register_check
class CHECK_ONE_OF(CheckEvaluator):
    kind = "one_of"
    description = "Value at path deep-equals one of the allowed values"
    check_model = OneOfCheck

    def check(self, value: Any, criterion: Criterion, ctx: EvaluationContext) -> CheckResult:
        allowed = criterion.check.allowed
        if any(deep_equal(value, candidate) for candidate in allowed):
            return self.passed()
        return self.failed(
            {
                "message": "Value is not one of the allowed values",
                "path": list(criterion.path),
                "allowed": list(allowed),
                "actual": value,
            }
        )
