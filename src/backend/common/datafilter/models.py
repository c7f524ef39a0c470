from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)


PathStep = Union[int, str]

START_LABEL = "(start)"
END_LABEL = "(end)"
WILDCARD_LABEL = "(wildcard)"


class Mode(str, Enum):
    STRICT = "strict"
    OPTIONAL = "optional"
    STRICT_OPTIONAL = "strict-optional"


class SizeComparator(str, Enum):
    EQUAL = "equal"
    LESS_THAN = "lessThan"
    GREATER_THAN = "greaterThan"


class Record(BaseModel):
    """One input item to classify. `data` is an arbitrary JSON-like tree."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(validation_alias=AliasChoices("id", "fileName"))
    data: Any = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


# Checks


class ValueCheck(BaseModel):
    kind: Literal["value"] = "value"
    value: Any


class ExistsCheck(BaseModel):
    kind: Literal["exists"] = "exists"
    exists: bool


class ArrayElementCheck(BaseModel):
    kind: Literal["array_element"] = "array_element"
    item: Any
    item_exists: bool = Field(True, validation_alias=AliasChoices("item_exists", "itemExists"))


class ArraySizeCheck(BaseModel):
    kind: Literal["array_size"] = "array_size"
    comparator: SizeComparator = Field(validation_alias=AliasChoices("comparator", "type"))
    size: int


class TimeRangeCheck(BaseModel):
    # Bounds stay raw: numeric values parse them as integers, strings as ISO-8601.
    kind: Literal["time_range"] = "time_range"
    min: Union[str, int]
    max: Union[str, int]


class NumericRangeCheck(BaseModel):
    kind: Literal["numeric_range"] = "numeric_range"
    min: float
    max: float


class OneOfCheck(BaseModel):
    kind: Literal["one_of"] = "one_of"
    allowed: List[Any] = Field(validation_alias=AliasChoices("allowed", "oneOf"))


class UnknownCheck(BaseModel):
    """Any check shape the engine does not recognise. Evaluates as a failure."""

    model_config = ConfigDict(extra="allow")

    kind: str = "unknown"


CHECK_KINDS = (
    "value",
    "exists",
    "array_element",
    "array_size",
    "time_range",
    "numeric_range",
    "one_of",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def infer_check_kind(raw: Any) -> str:
    """Resolve the check tag, inferring it from the fields present when untagged."""
    if isinstance(raw, BaseModel):
        kind = getattr(raw, "kind", "unknown")
        return kind if kind in CHECK_KINDS else "unknown"
    if not isinstance(raw, dict):
        return "unknown"
    if "kind" in raw:
        return raw["kind"] if raw["kind"] in CHECK_KINDS else "unknown"
    if "value" in raw:
        return "value"
    if "exists" in raw:
        return "exists"
    if "item" in raw and ("itemExists" in raw or "item_exists" in raw):
        return "array_element"
    if "size" in raw and ("type" in raw or "comparator" in raw):
        return "array_size"
    if "min" in raw and "max" in raw:
        if _is_number(raw["min"]) and _is_number(raw["max"]):
            return "numeric_range"
        return "time_range"
    if "allowed" in raw or "oneOf" in raw:
        return "one_of"
    return "unknown"


Check = Annotated[
    Union[
        Annotated[ValueCheck, Tag("value")],
        Annotated[ExistsCheck, Tag("exists")],
        Annotated[ArrayElementCheck, Tag("array_element")],
        Annotated[ArraySizeCheck, Tag("array_size")],
        Annotated[TimeRangeCheck, Tag("time_range")],
        Annotated[NumericRangeCheck, Tag("numeric_range")],
        Annotated[OneOfCheck, Tag("one_of")],
        Annotated[UnknownCheck, Tag("unknown")],
    ],
    Discriminator(infer_check_kind),
]


class Criterion(BaseModel):
    path: List[PathStep] = Field(default_factory=list)
    check: Check

    @field_validator("check", mode="wrap")
    @classmethod
    def _malformed_check_is_unknown(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        # A check shape that fails validation still loads and evaluates as a failure.
        try:
            return handler(value)
        except ValidationError:
            if isinstance(value, dict):
                return UnknownCheck.model_validate({**value, "kind": "unknown"})
            return UnknownCheck(raw=value)


# Rules


class SingleRule(BaseModel):
    """Matches at most one record; consumed at most once."""

    kind: Literal["single"] = "single"
    criteria: List[Criterion] = Field(
        default_factory=list, validation_alias=AliasChoices("criteria", "match")
    )
    label: str = Field(validation_alias=AliasChoices("label", "expected"))
    optional: bool = False
    info: Dict[str, Any] = Field(default_factory=dict)


class WildcardRule(BaseModel):
    """Always optional; absorbs zero, one or (greedy) many records."""

    kind: Literal["wildcard"] = "wildcard"
    criteria: List[Criterion] = Field(
        default_factory=list, validation_alias=AliasChoices("criteria", "matchAny")
    )
    greedy: bool = False
    info: Dict[str, Any] = Field(default_factory=dict)

    @property
    def optional(self) -> bool:
        return True


def infer_rule_kind(raw: Any) -> str:
    if isinstance(raw, BaseModel):
        return getattr(raw, "kind", "single")
    if isinstance(raw, dict):
        if raw.get("kind") in ("single", "wildcard"):
            return raw["kind"]
        if "matchAny" in raw:
            return "wildcard"
    return "single"


Rule = Annotated[
    Union[
        Annotated[SingleRule, Tag("single")],
        Annotated[WildcardRule, Tag("wildcard")],
    ],
    Discriminator(infer_rule_kind),
]

# A unit is either one positional rule or a flexible-order group of rules.
RuleUnit = Union[Rule, List[Rule]]
RuleProgram = List[RuleUnit]


def unit_members(unit: Any) -> List[Any]:
    if isinstance(unit, list):
        return list(unit)
    return [unit]


def is_mandatory(rule: Any) -> bool:
    return isinstance(rule, SingleRule) and not rule.optional


def rule_label(rule: Any) -> str:
    if isinstance(rule, SingleRule):
        return rule.label
    return WILDCARD_LABEL


class FilterGroup(BaseModel):
    group_filter: List[Criterion] = Field(
        default_factory=list, validation_alias=AliasChoices("group_filter", "groupFilter")
    )
    rules: List[RuleUnit] = Field(default_factory=list)
    info: Dict[str, Any] = Field(default_factory=dict)


class TimeContext(BaseModel):
    reference_times: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("reference_times", "referenceTimes")
    )


# Results


class CheckResult(BaseModel):
    status: bool
    check_type: str
    reason: Optional[Union[str, Dict[str, Any]]] = None


class MatchTrace(BaseModel):
    matched: bool
    checks: List[CheckResult] = Field(default_factory=list)
    rule: Rule


class MappedRecord(BaseModel):
    label: str
    record: Record
    trace: MatchTrace
    optional: bool = False
    info: Dict[str, Any] = Field(default_factory=dict)


class WildcardMatchedRecord(BaseModel):
    record: Record
    trace: MatchTrace
    info: Dict[str, Any] = Field(default_factory=dict)


class UnmappedRecord(BaseModel):
    record: Record
    attempted: List[MatchTrace] = Field(default_factory=list)


class GapContext(BaseModel):
    after_rule: str
    before_rule: str


class OptionalRecord(BaseModel):
    record_id: str
    record: Record
    # Index into the sorted, pre-filtered record list the walk ran over.
    position: int
    between: GapContext
    failed_matches: List[MatchTrace] = Field(default_factory=list)


class PreFilteredRecord(BaseModel):
    record: Record
    failed_checks: List[CheckResult] = Field(default_factory=list)


class FilterStats(BaseModel):
    total_files: int = 0
    mapped_files: int = 0
    wildcard_matched_files: int = 0
    unmapped_files: int = 0
    optional_files: int = 0
    pre_filtered_files: int = 0
    total_rules: int = 0
    mandatory_rules: int = 0
    optional_rules: int = 0


class FilterResult(BaseModel):
    mapped: List[MappedRecord] = Field(default_factory=list)
    wildcard_matched: List[WildcardMatchedRecord] = Field(default_factory=list)
    optional_files: List[OptionalRecord] = Field(default_factory=list)
    unmapped: List[UnmappedRecord] = Field(default_factory=list)
    pre_filtered: List[PreFilteredRecord] = Field(default_factory=list)
    stats: FilterStats = Field(default_factory=FilterStats)


class FilterRequest(BaseModel):
    """One invocation: records plus exactly one of `rules` or `groups`."""

    records: List[Record] = Field(
        default_factory=list, validation_alias=AliasChoices("records", "files")
    )
    rules: Optional[List[RuleUnit]] = None
    groups: Optional[List[FilterGroup]] = None
    pre_filter: Optional[List[Criterion]] = Field(
        None, validation_alias=AliasChoices("pre_filter", "preFilter")
    )
    mode: Mode = Mode.STRICT
    context: TimeContext = Field(default_factory=TimeContext)
    sort_fn: Optional[Callable[[Record, Record], int]] = Field(default=None, exclude=True)
