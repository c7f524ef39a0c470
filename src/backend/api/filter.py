from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, HTTPException
from pydantic import ValidationError

from common.datafilter.config import load_filter_request
from common.datafilter.runner import FilterRunner, FilterUsageError, sort_by_path


router = APIRouter(prefix="/filter", tags=["filter"])


def _sort_path(payload: dict[str, Any]) -> list[Any] | None:
    raw = payload.pop("sortPath", None)
    if raw is None:
        raw = payload.pop("sort_path", None)
    if raw is None:
        return None
    if not isinstance(raw, list) or not all(isinstance(step, (str, int)) for step in raw):
        raise HTTPException(status_code=422, detail="sortPath must be a list of keys and indices.")
    return raw


@router.post("/run")
def filter_run(payload: dict[str, Any] = Body(...)):
    """
    Run one filter request.

    Body: {"records"|"files": [...], "rules"|"groups": [...], "preFilter": [...],
           "mode": "strict"|"optional"|"strict-optional", "context": {...}, "sortPath": [...]}
    """
    data = dict(payload)
    sort_path = _sort_path(data)
    try:
        request = load_filter_request(data)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))

    sort_fn = sort_by_path(sort_path) if sort_path else None
    try:
        result = FilterRunner().run(request, sort_fn=sort_fn)
    except FilterUsageError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return result.model_dump(mode="json")
