from __future__ import annotations

import logging
import os
from typing import Any, List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, TypeAdapter, field_validator

from .models import Criterion, FilterGroup, FilterRequest, Mode, RuleProgram


load_dotenv()

_PROGRAM_ADAPTER = TypeAdapter(RuleProgram)
_GROUPS_ADAPTER = TypeAdapter(List[FilterGroup])
_CRITERIA_ADAPTER = TypeAdapter(List[Criterion])


class EngineSettings(BaseModel):
    default_mode: Mode = Mode.STRICT
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


def get_engine_settings() -> EngineSettings:
    """
    Load engine settings from environment variables (a `.env` file is honoured).

    Reads:
      DATAFILTER_DEFAULT_MODE  strict | optional | strict-optional
      DATAFILTER_LOG_LEVEL     DEBUG | INFO | WARNING | ...
    """
    raw: dict[str, Any] = {}
    mode = os.getenv("DATAFILTER_DEFAULT_MODE", "").strip().lower()
    if mode:
        raw["default_mode"] = mode
    level = os.getenv("DATAFILTER_LOG_LEVEL", "").strip()
    if level:
        raw["log_level"] = level
    return EngineSettings.model_validate(raw)


def load_rule_program(payload: Any) -> RuleProgram:
    return _PROGRAM_ADAPTER.validate_python(payload)


def load_groups(payload: Any) -> List[FilterGroup]:
    return _GROUPS_ADAPTER.validate_python(payload)


def load_criteria(payload: Any) -> List[Criterion]:
    return _CRITERIA_ADAPTER.validate_python(payload)


def load_filter_request(
    payload: Mapping[str, Any],
    *,
    settings: Optional[EngineSettings] = None,
) -> FilterRequest:
    """
    Build a FilterRequest from its plain-data representation.

    Accepts both the tagged shape (`{"kind": "value", ...}`) and the untagged
    legacy shape (`{"value": ...}`, `{"match": [...], "expected": "..."}`).
    A payload without `mode` takes the configured default mode.
    """
    data = dict(payload)
    if data.get("mode") is None:
        data["mode"] = (settings or get_engine_settings()).default_mode
    return FilterRequest.model_validate(data)
