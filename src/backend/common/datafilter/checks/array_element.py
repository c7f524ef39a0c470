from __future__ import annotations

from typing import Any

from ..check import CheckEvaluator
from ..compare import deep_equal
from ..context import EvaluationContext
from ..models import ArrayElementCheck, CheckResult, Criterion
from ..registry import register_check


@register_check
class CHECK_ARRAY_ELEMENT(CheckEvaluator):
    kind = "array_element"
    description = "Array at path contains (item_exists=true) or lacks (item_exists=false) an item"
    check_model = ArrayElementCheck

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

        present = any(deep_equal(element, spec.item) for element in value)
        if present == spec.item_exists:
            return self.passed()

        if spec.item_exists:
            message = "Item should exist in array but doesn't"
        else:
            message = "Item should not exist in array but does"
        return self.failed({"message": message, "path": list(criterion.path), "item": spec.item})
