import pytest

from common.datafilter.models import END_LABEL, START_LABEL, WILDCARD_LABEL, Mode
from common.datafilter.sequence import match_scan_forward, match_sequence


def _labels(outcome):
    return [(m.record.id, m.label) for m in outcome.mapped]


def _gaps(outcome):
    return [
        (o.record_id, o.position, o.between.after_rule, o.between.before_rule)
        for o in outcome.optional_files
    ]


@pytest.mark.parametrize("mode", [Mode.OPTIONAL, Mode.STRICT_OPTIONAL])
def test_records_between_matches_become_optional(matcher, typed_records, type_rule, mode):
    records = typed_records("critA", "info", "debug", "critB")
    program = [type_rule("critA", "A"), type_rule("critB", "B")]
    outcome = match_scan_forward(records, program, matcher, mode)
    assert _labels(outcome) == [("r0", "A"), ("r3", "B")]
    assert _gaps(outcome) == [("r1", 1, "A", "B"), ("r2", 2, "A", "B")]
    assert outcome.unmapped == []


def test_leading_and_trailing_records_use_start_and_end(matcher, typed_records, type_rule):
    records = typed_records("x", "a", "y")
    outcome = match_scan_forward(records, [type_rule("a", "A")], matcher, Mode.OPTIONAL)
    assert _gaps(outcome) == [("r0", 0, START_LABEL, "A"), ("r2", 2, "A", END_LABEL)]


def test_no_matches_leave_everything_optional(matcher, typed_records, type_rule):
    records = typed_records("x", "y")
    outcome = match_scan_forward(records, [type_rule("a", "A")], matcher, Mode.OPTIONAL)
    assert outcome.mapped == []
    assert _gaps(outcome) == [("r0", 0, START_LABEL, END_LABEL), ("r1", 1, START_LABEL, END_LABEL)]


def test_strict_optional_stops_at_missing_mandatory_rule(matcher, typed_records, type_rule):
    records = typed_records("a", "x", "c")
    program = [type_rule("a", "A"), type_rule("b", "B"), type_rule("c", "C")]
    outcome = match_scan_forward(records, program, matcher, Mode.STRICT_OPTIONAL)
    assert _labels(outcome) == [("r0", "A")]
    assert _gaps(outcome) == [("r1", 1, "A", END_LABEL), ("r2", 2, "A", END_LABEL)]


def test_optional_mode_continues_past_missing_mandatory_rule(matcher, typed_records, type_rule):
    records = typed_records("a", "x", "c")
    program = [type_rule("a", "A"), type_rule("b", "B"), type_rule("c", "C")]
    outcome = match_scan_forward(records, program, matcher, Mode.OPTIONAL)
    assert _labels(outcome) == [("r0", "A"), ("r2", "C")]
    assert _gaps(outcome) == [("r1", 1, "A", "C")]


def test_strict_optional_tolerates_missing_optional_rule(matcher, typed_records, type_rule):
    records = typed_records("a", "c")
    program = [type_rule("a", "A"), type_rule("b", "B", optional=True), type_rule("c", "C")]
    outcome = match_scan_forward(records, program, matcher, Mode.STRICT_OPTIONAL)
    assert _labels(outcome) == [("r0", "A"), ("r1", "C")]
    assert outcome.optional_files == []


def test_optional_records_carry_failed_attempts(matcher, typed_records, type_rule):
    records = typed_records("a", "x", "c")
    program = [type_rule("a", "A"), type_rule("b", "B"), type_rule("c", "C")]
    outcome = match_scan_forward(records, program, matcher, Mode.OPTIONAL)
    gap = outcome.optional_files[0]
    assert gap.record_id == "r1"
    assert [t.rule.label for t in gap.failed_matches] == ["B", "C"]
    assert all(not t.matched for t in gap.failed_matches)


def test_greedy_wildcard_absorbs_run_in_scan_mode(matcher, typed_records, type_rule, type_wildcard):
    records = typed_records("a", "w", "w", "b", "w")
    program = [type_rule("a", "A"), type_wildcard("w", greedy=True), type_rule("b", "B")]
    outcome = match_scan_forward(records, program, matcher, Mode.OPTIONAL)
    assert _labels(outcome) == [("r0", "A"), ("r3", "B")]
    assert [w.record.id for w in outcome.wildcard_matched] == ["r1", "r2"]
    assert _gaps(outcome) == [("r4", 4, "B", END_LABEL)]


def test_wildcard_label_marks_gap_boundary(matcher, typed_records, type_rule, type_wildcard):
    records = typed_records("w", "x", "b")
    program = [type_wildcard("w"), type_rule("b", "B")]
    outcome = match_scan_forward(records, program, matcher, Mode.OPTIONAL)
    assert _gaps(outcome) == [("r1", 1, WILDCARD_LABEL, "B")]


def test_flexible_group_claims_one_record_in_scan_mode(matcher, typed_records, type_rule):
    records = typed_records("y", "q", "x", "z")
    program = [[type_rule("x", "X"), type_rule("y", "Y")], type_rule("z", "Z")]
    outcome = match_scan_forward(records, program, matcher, Mode.OPTIONAL)
    assert _labels(outcome) == [("r0", "Y"), ("r3", "Z")]
    assert _gaps(outcome) == [("r1", 1, "Y", "Z"), ("r2", 2, "Y", "Z")]


def test_flexible_group_leftover_member_does_not_match_later(matcher, typed_records, type_rule):
    records = typed_records("x", "y")
    outcome = match_scan_forward(records, [[type_rule("x", "X"), type_rule("y", "Y")]], matcher, Mode.OPTIONAL)
    assert _labels(outcome) == [("r0", "X")]
    assert _gaps(outcome) == [("r1", 1, "X", END_LABEL)]


def test_strict_optional_stops_when_group_with_mandatory_member_finds_nothing(matcher, typed_records, type_rule):
    records = typed_records("a", "q", "c")
    program = [
        type_rule("a", "A"),
        [type_rule("b", "B"), type_rule("d", "D", optional=True)],
        type_rule("c", "C"),
    ]
    outcome = match_scan_forward(records, program, matcher, Mode.STRICT_OPTIONAL)
    assert _labels(outcome) == [("r0", "A")]
    assert _gaps(outcome) == [("r1", 1, "A", END_LABEL), ("r2", 2, "A", END_LABEL)]


@pytest.mark.parametrize("mode", [Mode.OPTIONAL, Mode.STRICT_OPTIONAL])
def test_scan_modes_never_unmap(matcher, typed_records, type_rule, type_wildcard, mode):
    records = typed_records("q", "a", "w", "q", "b", "b", "c")
    program = [
        type_rule("a", "A"),
        type_wildcard("w"),
        [type_rule("b", "B1"), type_rule("b", "B2")],
        type_rule("missing", "M"),
        type_rule("c", "C"),
    ]
    outcome = match_sequence(records, program, matcher, mode)
    assert outcome.unmapped == []
    ids = (
        [m.record.id for m in outcome.mapped]
        + [w.record.id for w in outcome.wildcard_matched]
        + [o.record_id for o in outcome.optional_files]
    )
    assert sorted(ids) == sorted(r.id for r in records)


def test_strict_mode_never_produces_optional_records(matcher, typed_records, type_rule):
    records = typed_records("q", "a", "z")
    outcome = match_sequence(records, [type_rule("a", "A")], matcher, Mode.STRICT)
    assert outcome.optional_files == []
    assert [u.record.id for u in outcome.unmapped] == ["r0", "r2"]
