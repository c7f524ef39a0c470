"""Rule-sequence matching engine for ordered record streams.

This package contains only domain logic:
- Inputs are records (JSON-like trees) plus a rule program or filter groups.
- Record loading from disk and the HTTP surface live in `adapters` and `api`.
"""

from .context import EvaluationContext
from .evaluator import CriterionEvaluator
from .matcher import Matcher
from .models import (
    CheckResult,
    Criterion,
    FilterGroup,
    FilterRequest,
    FilterResult,
    FilterStats,
    MappedRecord,
    MatchTrace,
    Mode,
    OptionalRecord,
    PreFilteredRecord,
    Record,
    SingleRule,
    UnmappedRecord,
    WildcardMatchedRecord,
    WildcardRule,
)
from .object_access import get_value_from_path, get_value_or, path_exists
from .runner import FilterRunner, FilterUsageError, filter_files, sort_by_path
