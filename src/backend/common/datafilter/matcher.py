from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .context import EvaluationContext
from .evaluator import CriterionEvaluator
from .models import Criterion, MatchTrace, PreFilteredRecord, Record


class Matcher:
    def __init__(
        self,
        ctx: Optional[EvaluationContext] = None,
        *,
        evaluator: Optional[CriterionEvaluator] = None,
    ):
        self.evaluator = evaluator or CriterionEvaluator(ctx)

    def match_record(self, record: Record, rule: Any) -> MatchTrace:
        checks = self.evaluator.evaluate_all(record.data, rule.criteria)
        return MatchTrace(matched=all(check.status for check in checks), checks=checks, rule=rule)

    def admits(self, record: Record, criteria: Iterable[Criterion]) -> bool:
        return all(check.status for check in self.evaluator.evaluate_all(record.data, criteria))

    def apply_pre_filter(
        self,
        records: Sequence[Record],
        criteria: Sequence[Criterion],
    ) -> Tuple[List[Record], List[PreFilteredRecord]]:
        passed: List[Record] = []
        excluded: List[PreFilteredRecord] = []
        for record in records:
            checks = self.evaluator.evaluate_all(record.data, criteria)
            if all(check.status for check in checks):
                passed.append(record)
            else:
                excluded.append(
                    PreFilteredRecord(
                        record=record,
                        failed_checks=[check for check in checks if not check.status],
                    )
                )
        return passed, excluded
