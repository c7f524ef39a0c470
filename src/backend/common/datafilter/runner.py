from __future__ import annotations

import json
import logging
from functools import cmp_to_key
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from .compare import deep_equal
from .config import load_filter_request
from .context import EvaluationContext
from .matcher import Matcher
from .models import (
    END_LABEL,
    START_LABEL,
    FilterGroup,
    FilterRequest,
    FilterResult,
    FilterStats,
    GapContext,
    Mode,
    OptionalRecord,
    PathStep,
    Record,
    UnmappedRecord,
)
from .object_access import get_value_from_path
from .sequence import SequenceOutcome, count_rules, match_sequence

logger = logging.getLogger(__name__)

SortFn = Callable[[Record, Record], int]


class FilterUsageError(ValueError):
    """Raised for a malformed invocation, before any record is matched."""


def _sort_key(value: Any) -> Tuple[int, Any]:
    # Values of different types order by type rank: None, bool, number, str, then containers.
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, value)
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, str):
        return (3, value)
    return (4, json.dumps(value, sort_keys=True, default=str))


def sort_by_path(path: Sequence[PathStep]) -> SortFn:
    """Comparator ordering records by the value at `path`; records lacking it sort first."""
    steps = list(path)

    def _compare(a: Record, b: Record) -> int:
        left = get_value_from_path(a.data, steps)
        right = get_value_from_path(b.data, steps)
        if not left.found or not right.found:
            return int(left.found) - int(right.found)
        if deep_equal(left.value, right.value):
            return 0
        left_key, right_key = _sort_key(left.value), _sort_key(right.value)
        if left_key == right_key:
            return 0
        return -1 if left_key < right_key else 1

    return _compare


class FilterRunner:
    def __init__(self, matcher: Optional[Matcher] = None):
        self._matcher = matcher

    def run(self, request: FilterRequest, *, sort_fn: Optional[SortFn] = None) -> FilterResult:
        _validate(request)
        matcher = self._matcher or Matcher(EvaluationContext.from_time_context(request.context))

        records: List[Record] = list(request.records)
        pre_filtered = []
        if request.pre_filter is not None:
            records, pre_filtered = matcher.apply_pre_filter(records, request.pre_filter)

        sort_fn = sort_fn or request.sort_fn
        if sort_fn is not None:
            records = sorted(records, key=cmp_to_key(sort_fn))

        if request.groups is not None:
            outcome = self._run_groups(records, request.groups, matcher, request.mode)
            program: List[Any] = [unit for group in request.groups for unit in group.rules]
        else:
            program = list(request.rules or [])
            outcome = match_sequence(records, program, matcher, request.mode)

        total_rules, mandatory_rules, optional_rules = count_rules(program)
        stats = FilterStats(
            total_files=len(request.records),
            mapped_files=len(outcome.mapped),
            wildcard_matched_files=len(outcome.wildcard_matched),
            unmapped_files=len(outcome.unmapped),
            optional_files=len(outcome.optional_files),
            pre_filtered_files=len(pre_filtered),
            total_rules=total_rules,
            mandatory_rules=mandatory_rules,
            optional_rules=optional_rules,
        )
        logger.info(
            "Filter run (%s): %d records, %d mapped, %d wildcard, %d optional, %d unmapped, %d pre-filtered",
            request.mode.value,
            stats.total_files,
            stats.mapped_files,
            stats.wildcard_matched_files,
            stats.optional_files,
            stats.unmapped_files,
            stats.pre_filtered_files,
        )

        return FilterResult(
            mapped=outcome.mapped,
            wildcard_matched=outcome.wildcard_matched,
            optional_files=outcome.optional_files,
            unmapped=outcome.unmapped,
            pre_filtered=pre_filtered,
            stats=stats,
        )

    def _run_groups(
        self,
        records: Sequence[Record],
        groups: Sequence[FilterGroup],
        matcher: Matcher,
        mode: Mode,
    ) -> SequenceOutcome:
        outcome = SequenceOutcome()
        admitted = [False] * len(records)

        for group_idx, group in enumerate(groups):
            member_idx: List[int] = []
            for idx, record in enumerate(records):
                if matcher.admits(record, group.group_filter):
                    member_idx.append(idx)
                    admitted[idx] = True
            logger.debug("Group %d admits %d of %d records", group_idx, len(member_idx), len(records))
            if not member_idx:
                continue
            group_outcome = match_sequence([records[i] for i in member_idx], group.rules, matcher, mode)
            # Positions index the sorted, pre-filtered record list, not the group subset.
            group_outcome.optional_files = [
                entry.model_copy(update={"position": member_idx[entry.position]})
                for entry in group_outcome.optional_files
            ]
            outcome.extend(group_outcome)

        # Records no group admitted still land in exactly one bucket.
        for idx, record in enumerate(records):
            if admitted[idx]:
                continue
            if mode == Mode.STRICT:
                outcome.unmapped.append(UnmappedRecord(record=record, attempted=[]))
            else:
                outcome.optional_files.append(
                    OptionalRecord(
                        record_id=record.id,
                        record=record,
                        position=idx,
                        between=GapContext(after_rule=START_LABEL, before_rule=END_LABEL),
                    )
                )
        return outcome


def _validate(request: FilterRequest) -> None:
    if request.rules is not None and request.groups is not None:
        raise FilterUsageError('Provide either "rules" or "groups", not both')
    if request.rules is None and request.groups is None:
        raise FilterUsageError('Must provide either "rules" or "groups"')


def filter_files(
    request: Union[FilterRequest, Mapping[str, Any]],
    *,
    sort_fn: Optional[SortFn] = None,
) -> FilterResult:
    """Run one filter request; plain mappings are loaded through `config.load_filter_request`."""
    if not isinstance(request, FilterRequest):
        request = load_filter_request(request)
    return FilterRunner().run(request, sort_fn=sort_fn)
