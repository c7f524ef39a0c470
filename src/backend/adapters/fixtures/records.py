from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from common.datafilter.models import Record

METADATA_SUFFIX = ".meta.json"


def record_from_file(path: Path) -> Record:
    """
    Build a Record from one JSON file.

    Notes:
    - the record id is the file name (e.g. "event_001.json")
    - a sidecar "<stem>.meta.json" next to the file, if present, is merged into metadata
    - metadata always carries "path" (the file path as a string)
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    metadata: dict[str, Any] = {"path": str(path)}

    sidecar = path.with_name(path.stem + METADATA_SUFFIX)
    if sidecar.exists():
        extra = json.loads(sidecar.read_text(encoding="utf-8"))
        if not isinstance(extra, dict):
            raise ValueError(f"Metadata sidecar must be an object: {sidecar}")
        metadata.update(extra)

    return Record(id=path.name, data=data, metadata=metadata)


def records_from_directory(directory: Path, *, pattern: str = "*.json") -> list[Record]:
    """Load every matching file in `directory` (sidecars excluded), ordered by file name."""
    if not directory.is_dir():
        raise ValueError(f"Records directory does not exist: {directory}")
    paths = sorted(
        p for p in directory.glob(pattern) if p.is_file() and not p.name.endswith(METADATA_SUFFIX)
    )
    return [record_from_file(p) for p in paths]
