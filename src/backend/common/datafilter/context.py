from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .models import TimeContext


@dataclass(frozen=True)
class EvaluationContext:
    time_context: TimeContext = field(default_factory=TimeContext)

    @classmethod
    def from_time_context(cls, time_context: Optional[TimeContext]) -> "EvaluationContext":
        return cls(time_context=time_context or TimeContext())
