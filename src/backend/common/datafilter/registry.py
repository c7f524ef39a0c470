from __future__ import annotations

from typing import Dict, List, Type

from .check import CheckEvaluator


class CheckRegistry:
    """Check evaluator classes keyed by the check kind they evaluate."""

    def __init__(self):
        self._checks: Dict[str, Type[CheckEvaluator]] = {}

    def register(self, check_cls: Type[CheckEvaluator]) -> None:
        kind = getattr(check_cls, "kind", None)
        if not kind:
            raise ValueError(f"Check evaluator {check_cls.__name__} missing kind")
        if kind in self._checks:
            raise ValueError(
                f"Duplicate check kind registered: {kind} "
                f"({self._checks[kind].__name__} and {check_cls.__name__})"
            )
        model = getattr(check_cls, "check_model", None)
        if model is None:
            raise ValueError(f"Check evaluator {check_cls.__name__} missing check_model")
        # The model's kind tag must route to this evaluator.
        tag = model.model_fields["kind"].default if "kind" in model.model_fields else None
        if tag != kind:
            raise ValueError(f"{check_cls.__name__} evaluates {kind!r} but {model.__name__} is tagged {tag!r}")
        self._checks[kind] = check_cls

    def create_all(self) -> Dict[str, CheckEvaluator]:
        return {kind: cls() for kind, cls in self._checks.items()}

    def get(self, kind: str) -> Type[CheckEvaluator]:
        try:
            return self._checks[kind]
        except KeyError:
            raise KeyError(f"No check evaluator for kind {kind!r} (known: {', '.join(self.kinds())})") from None

    def kinds(self) -> List[str]:
        return sorted(self._checks)


registry = CheckRegistry()


def register_check(check_cls: Type[CheckEvaluator]) -> Type[CheckEvaluator]:
    registry.register(check_cls)
    return check_cls
