import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work when running this folder alone.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest

from common.datafilter.matcher import Matcher
from common.datafilter.models import Criterion, Record, SingleRule, WildcardRule


@pytest.fixture
def matcher() -> Matcher:
    return Matcher()


@pytest.fixture
def make_record():
    def _make(record_id: str, data=None, **metadata) -> Record:
        return Record(id=record_id, data=data, metadata=metadata)

    return _make


@pytest.fixture
def make_criterion():
    def _make(path, **check) -> Criterion:
        return Criterion.model_validate({"path": list(path), "check": check})

    return _make


@pytest.fixture
def type_rule(make_criterion):
    """SingleRule matching data["type"] == value."""

    def _make(value, label: str, *, optional: bool = False, path=("type",)) -> SingleRule:
        return SingleRule(
            criteria=[make_criterion(path, value=value)],
            label=label,
            optional=optional,
        )

    return _make


@pytest.fixture
def type_wildcard(make_criterion):
    def _make(value, *, greedy: bool = False, path=("type",)) -> WildcardRule:
        return WildcardRule(criteria=[make_criterion(path, value=value)], greedy=greedy)

    return _make


@pytest.fixture
def typed_records(make_record):
    """Records named after their position, e.g. typed_records("a", "b") -> r0 (type a), r1 (type b)."""

    def _make(*types) -> list[Record]:
        return [make_record(f"r{i}", {"type": t}) for i, t in enumerate(types)]

    return _make
