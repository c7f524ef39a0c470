from __future__ import annotations

from typing import Any

from ..check import CheckEvaluator
from ..context import EvaluationContext
from ..models import CheckResult, Criterion, ExistsCheck
from ..object_access import get_value_from_path
from ..registry import register_check


@register_check
class CHECK_EXISTS(CheckEvaluator):
    kind = "exists"
    description = "Path resolves (exists=true) or does not resolve (exists=false)"
    check_model = ExistsCheck

    def evaluate(self, data: Any, criterion: Criterion, ctx: EvaluationContext) -> CheckResult:
        # An unresolvable path is the expected outcome for exists=false.
        access = get_value_from_path(data, criterion.path)
        return self._compare(access.found, access.error, criterion)

    def check(self, value: Any, criterion: Criterion, ctx: EvaluationContext) -> CheckResult:
        return self._compare(True, None, criterion)

    def _compare(self, found: bool, error: str | None, criterion: Criterion) -> CheckResult:
        if criterion.check.exists == found:
            return self.passed()
        if criterion.check.exists:
            message = f"Path should exist but doesn't: {error}"
        else:
            message = "Path should not exist but does"
        return self.failed({"message": message, "path": list(criterion.path)})
