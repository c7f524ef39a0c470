from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from .check import CheckEvaluator
from .context import EvaluationContext
from .models import CheckResult, Criterion, UnknownCheck
from .registry import registry

# Import built-in checks so they self-register with the global registry.
from . import checks as _builtin_checks  # noqa: F401

logger = logging.getLogger(__name__)

UNKNOWN_CHECK_TYPE = "unknown"


class CriterionEvaluator:
    """Dispatches each criterion to the evaluator registered for its check kind."""

    def __init__(
        self,
        ctx: Optional[EvaluationContext] = None,
        *,
        evaluators: Optional[Iterable[CheckEvaluator]] = None,
    ):
        self.ctx = ctx or EvaluationContext()
        if evaluators is None:
            self._evaluators = registry.create_all()
        else:
            self._evaluators = {evaluator.kind: evaluator for evaluator in evaluators}

    def evaluate(self, data: Any, criterion: Criterion) -> CheckResult:
        check = criterion.check
        evaluator = None if isinstance(check, UnknownCheck) else self._evaluators.get(check.kind)
        if evaluator is None:
            logger.debug("No evaluator for check %r at path %s", check, criterion.path)
            return CheckResult(
                status=False,
                check_type=UNKNOWN_CHECK_TYPE,
                reason=f"Unknown check type: {check.model_dump()}",
            )
        return evaluator.evaluate(data, criterion, self.ctx)

    def evaluate_all(self, data: Any, criteria: Iterable[Criterion]) -> List[CheckResult]:
        # No short-circuit: callers rely on the full list to explain near misses.
        return [self.evaluate(data, criterion) for criterion in criteria]
