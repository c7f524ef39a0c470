from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from common.datafilter.config import EngineSettings, load_filter_request
from common.datafilter.models import FilterRequest, Mode

from .records import records_from_directory


def load_payload(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def request_from_files(
    records_dir: Path,
    rules_path: Path,
    *,
    mode: Mode | None = None,
    settings: EngineSettings | None = None,
) -> FilterRequest:
    """
    Build a FilterRequest from a records directory and a rules file.

    The rules file is either:
      - a list: the rule program itself, or
      - an object with "rules" or "groups" plus optional "preFilter", "mode", "context".
    An explicit `mode` overrides the file's.
    """
    payload = load_payload(rules_path)
    if isinstance(payload, list):
        payload = {"rules": payload}
    elif not isinstance(payload, dict):
        raise ValueError(f"Rules file must contain a list or an object: {rules_path}")

    data = dict(payload)
    data["records"] = records_from_directory(records_dir)
    if mode is not None:
        data["mode"] = mode
    return load_filter_request(data, settings=settings)
