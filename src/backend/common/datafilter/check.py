from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Type, Union

from pydantic import BaseModel

from .context import EvaluationContext
from .models import CheckResult, Criterion
from .object_access import get_value_from_path


class CheckEvaluator(ABC):
    """Evaluates one kind of check against the value a criterion's path resolves to."""

    kind: str
    description: str
    check_model: Type[BaseModel]

    def __init__(self):
        if not getattr(self, "kind", None):
            raise ValueError("CheckEvaluator must define kind")

    def evaluate(self, data: Any, criterion: Criterion, ctx: EvaluationContext) -> CheckResult:
        access = get_value_from_path(data, criterion.path)
        if not access.found:
            return self.failed(
                {
                    "message": access.error or "Path not found",
                    "path": list(criterion.path),
                    "resolved_path": list(access.resolved_prefix),
                }
            )
        return self.check(access.value, criterion, ctx)

    @abstractmethod
    def check(self, value: Any, criterion: Criterion, ctx: EvaluationContext) -> CheckResult:  # pragma: no cover
        raise NotImplementedError

    def passed(self) -> CheckResult:
        return CheckResult(status=True, check_type=self.kind)

    def failed(self, reason: Union[str, Dict[str, Any]]) -> CheckResult:
        return CheckResult(status=False, check_type=self.kind, reason=reason)
