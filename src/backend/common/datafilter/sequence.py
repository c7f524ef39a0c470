"""Sequence matching: walks an ordered record list against an ordered rule program.

Two independent walks share only the Matcher:

- `match_strict` advances a record cursor and a rule cursor together. A record
  that fails a mandatory rule is unmapped; optional rules are skipped over.
- `match_scan_forward` visits each rule unit once and scans forward from the
  record cursor for its first match. Skipped records become optional gaps and
  nothing is ever unmapped.

Neither walk rewinds: a rule never claims a record earlier than the one that
last matched.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .matcher import Matcher
from .models import (
    END_LABEL,
    START_LABEL,
    GapContext,
    MappedRecord,
    MatchTrace,
    Mode,
    OptionalRecord,
    Record,
    SingleRule,
    UnmappedRecord,
    WildcardMatchedRecord,
    WildcardRule,
    is_mandatory,
    rule_label,
    unit_members,
)

logger = logging.getLogger(__name__)


@dataclass
class SequenceOutcome:
    mapped: List[MappedRecord] = field(default_factory=list)
    wildcard_matched: List[WildcardMatchedRecord] = field(default_factory=list)
    unmapped: List[UnmappedRecord] = field(default_factory=list)
    optional_files: List[OptionalRecord] = field(default_factory=list)

    def extend(self, other: "SequenceOutcome") -> None:
        self.mapped.extend(other.mapped)
        self.wildcard_matched.extend(other.wildcard_matched)
        self.unmapped.extend(other.unmapped)
        self.optional_files.extend(other.optional_files)

    def emit(self, record: Record, rule: Any, trace: MatchTrace) -> None:
        if isinstance(rule, SingleRule):
            self.mapped.append(
                MappedRecord(
                    label=rule.label,
                    record=record,
                    trace=trace,
                    optional=rule.optional,
                    info=rule.info,
                )
            )
        else:
            self.wildcard_matched.append(WildcardMatchedRecord(record=record, trace=trace, info=rule.info))


class ConsumedSet:
    """Per-unit flags recording which members have been used up."""

    def __init__(self, program: Sequence[Any]):
        self._used = [[False] * len(unit_members(unit)) for unit in program]

    def is_used(self, unit_idx: int, member_idx: int) -> bool:
        return self._used[unit_idx][member_idx]

    def mark(self, unit_idx: int, member_idx: int) -> None:
        self._used[unit_idx][member_idx] = True

    def exhausted(self, unit_idx: int) -> bool:
        return all(self._used[unit_idx])


def _has_mandatory(members: Sequence[Any]) -> bool:
    return any(is_mandatory(rule) for rule in members)


def _consumes(rule: Any) -> bool:
    # Greedy wildcards stay available for further records.
    return isinstance(rule, SingleRule) or not rule.greedy


def count_rules(program: Sequence[Any]) -> Tuple[int, int, int]:
    """Return (total, mandatory, optional) rule counts, flattening flexible groups."""
    total = mandatory = 0
    for unit in program:
        for rule in unit_members(unit):
            total += 1
            if is_mandatory(rule):
                mandatory += 1
    return total, mandatory, total - mandatory


def match_strict(records: Sequence[Record], program: Sequence[Any], matcher: Matcher) -> SequenceOutcome:
    outcome = SequenceOutcome()
    consumed = ConsumedSet(program)
    file_idx = 0
    rule_idx = 0

    while file_idx < len(records):
        record = records[file_idx]

        if rule_idx >= len(program):
            outcome.unmapped.append(UnmappedRecord(record=record, attempted=[]))
            file_idx += 1
            continue

        unit = program[rule_idx]

        if isinstance(unit, list):
            attempts: List[MatchTrace] = []
            hit: Optional[Tuple[int, Any, MatchTrace]] = None
            for member_idx, rule in enumerate(unit):
                if consumed.is_used(rule_idx, member_idx):
                    continue
                trace = matcher.match_record(record, rule)
                attempts.append(trace)
                if trace.matched:
                    hit = (member_idx, rule, trace)
                    break

            if hit is not None:
                member_idx, rule, trace = hit
                outcome.emit(record, rule, trace)
                if _consumes(rule):
                    consumed.mark(rule_idx, member_idx)
                file_idx += 1
                if consumed.exhausted(rule_idx):
                    logger.debug("Flexible group %d exhausted at record %s", rule_idx, record.id)
                    rule_idx += 1
            elif _has_mandatory(unit):
                # The group holds its place until every member is consumed.
                outcome.unmapped.append(UnmappedRecord(record=record, attempted=attempts))
                file_idx += 1
            else:
                # A group of optional members only: close it and retry the record.
                logger.debug("Closing flexible group %d at record %s", rule_idx, record.id)
                rule_idx += 1
            continue

        rule = unit
        if consumed.is_used(rule_idx, 0):
            rule_idx += 1
            continue

        trace = matcher.match_record(record, rule)
        if trace.matched:
            outcome.emit(record, rule, trace)
            file_idx += 1
            if isinstance(rule, WildcardRule) and rule.greedy:
                continue
            consumed.mark(rule_idx, 0)
            rule_idx += 1
        elif rule.optional:
            rule_idx += 1
        else:
            outcome.unmapped.append(UnmappedRecord(record=record, attempted=[trace]))
            file_idx += 1

    return outcome


def _scan(
    records: Sequence[Record],
    start: int,
    members: Sequence[Any],
    matcher: Matcher,
    failed: Dict[int, List[MatchTrace]],
) -> Optional[Tuple[int, Any, MatchTrace]]:
    for idx in range(start, len(records)):
        for rule in members:
            trace = matcher.match_record(records[idx], rule)
            if trace.matched:
                return idx, rule, trace
            failed[idx].append(trace)
    return None


def _record_gap(
    outcome: SequenceOutcome,
    records: Sequence[Record],
    start: int,
    stop: int,
    between: GapContext,
    failed: Dict[int, List[MatchTrace]],
) -> None:
    for idx in range(start, stop):
        record = records[idx]
        outcome.optional_files.append(
            OptionalRecord(
                record_id=record.id,
                record=record,
                position=idx,
                between=between,
                failed_matches=failed.pop(idx, []),
            )
        )


def match_scan_forward(
    records: Sequence[Record],
    program: Sequence[Any],
    matcher: Matcher,
    mode: Mode,
) -> SequenceOutcome:
    outcome = SequenceOutcome()
    failed: Dict[int, List[MatchTrace]] = defaultdict(list)
    cursor = 0
    last_label = START_LABEL

    for unit_idx, unit in enumerate(program):
        # Each unit, flexible group or not, claims at most one record.
        members = unit_members(unit)
        hit = _scan(records, cursor, members, matcher, failed)

        if hit is None:
            if _has_mandatory(members):
                logger.debug("Mandatory unit %d not found from position %d", unit_idx, cursor)
                if mode == Mode.STRICT_OPTIONAL:
                    break
            continue

        idx, rule, trace = hit
        label = rule_label(rule)
        _record_gap(outcome, records, cursor, idx, GapContext(after_rule=last_label, before_rule=label), failed)
        failed.pop(idx, None)
        outcome.emit(records[idx], rule, trace)
        last_label = label
        cursor = idx + 1

        if isinstance(rule, WildcardRule) and rule.greedy:
            while cursor < len(records):
                trace = matcher.match_record(records[cursor], rule)
                if not trace.matched:
                    failed[cursor].append(trace)
                    break
                outcome.emit(records[cursor], rule, trace)
                cursor += 1

    _record_gap(
        outcome,
        records,
        cursor,
        len(records),
        GapContext(after_rule=last_label, before_rule=END_LABEL),
        failed,
    )
    return outcome


def match_sequence(
    records: Sequence[Record],
    program: Sequence[Any],
    matcher: Matcher,
    mode: Mode = Mode.STRICT,
) -> SequenceOutcome:
    if mode == Mode.STRICT:
        return match_strict(records, program, matcher)
    return match_scan_forward(records, program, matcher, mode)
