from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel

from .registry import registry

# Ensure built-in checks are imported/registered when generating a catalog.
from . import checks as _builtin_checks  # noqa: F401


class CheckCatalogEntry(BaseModel):
    kind: str
    description: str = ""

    module: str
    class_name: str

    check_model: str
    check_schema: Dict[str, Any]


def build_catalog() -> List[CheckCatalogEntry]:
    entries: List[CheckCatalogEntry] = []
    for kind in registry.kinds():
        check_cls = registry.get(kind)
        model = check_cls.check_model
        entries.append(
            CheckCatalogEntry(
                kind=kind,
                description=getattr(check_cls, "description", ""),
                module=check_cls.__module__,
                class_name=check_cls.__name__,
                check_model=model.__name__,
                check_schema=model.model_json_schema(),
            )
        )

    entries.sort(key=lambda e: e.kind)
    return entries


def _dump_json(catalog: list[dict[str, Any]]) -> str:
    return json.dumps(catalog, indent=2, sort_keys=True)


def _dump_yaml(catalog: list[dict[str, Any]]) -> str:
    return yaml.safe_dump(catalog, sort_keys=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="List the check kinds criteria can use.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    args = parser.parse_args(argv)

    catalog = [e.model_dump() for e in build_catalog()]
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()
