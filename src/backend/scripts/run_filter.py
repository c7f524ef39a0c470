from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def parse_sort_path(raw: str) -> list[str | int]:
    """Turn "header.events.0.ts" into ["header", "events", 0, "ts"]."""
    steps: list[str | int] = []
    for part in raw.split("."):
        if not part:
            raise ValueError(f"Empty segment in sort path: {raw!r}")
        steps.append(int(part) if part.isdigit() else part)
    return steps


def _write_markdown(result, out_path: Path, *, title: str) -> None:
    stats = result.stats
    lines = [
        f"# Filter Report {title}",
        "",
        "## Totals",
        f"- Records: {stats.total_files}",
        f"- Mapped: {stats.mapped_files}",
        f"- Wildcard matched: {stats.wildcard_matched_files}",
        f"- Optional: {stats.optional_files}",
        f"- Unmapped: {stats.unmapped_files}",
        f"- Pre-filtered: {stats.pre_filtered_files}",
        f"- Rules: {stats.total_rules} ({stats.mandatory_rules} mandatory, {stats.optional_rules} optional)",
        "",
        "## Mapped",
    ]
    for entry in result.mapped:
        suffix = " (optional)" if entry.optional else ""
        lines.append(f"- {entry.label}{suffix}: {entry.record.id}")
    if result.wildcard_matched:
        lines.append("")
        lines.append("## Wildcard matched")
        for entry in result.wildcard_matched:
            lines.append(f"- {entry.record.id}")
    if result.optional_files:
        lines.append("")
        lines.append("## Optional")
        for entry in result.optional_files:
            lines.append(
                f"- {entry.record_id} (position {entry.position}, "
                f"between {entry.between.after_rule} and {entry.between.before_rule})"
            )
    if result.unmapped:
        lines.append("")
        lines.append("## Unmapped")
        for entry in result.unmapped:
            lines.append(f"- {entry.record.id}")
            for trace in entry.attempted:
                failed = [c for c in trace.checks if not c.status]
                label = getattr(trace.rule, "label", "(wildcard)")
                lines.append(f"  - tried {label}: {len(failed)} failed check(s)")
                for check in failed:
                    lines.append(f"    - {check.check_type}: {check.reason}")
    if result.pre_filtered:
        lines.append("")
        lines.append("## Pre-filtered")
        for entry in result.pre_filtered:
            lines.append(f"- {entry.record.id}: {len(entry.failed_checks)} failed check(s)")
    out_path.write_text("\n".join(lines) + "\n")


def run_filter_from_files(
    records_dir: Path,
    rules_path: Path,
    *,
    mode: str | None = None,
    sort_path: str | None = None,
):
    _ensure_backend_on_path()
    from adapters.fixtures import request_from_files
    from common.datafilter.models import Mode
    from common.datafilter.runner import FilterRunner, sort_by_path

    request = request_from_files(records_dir, rules_path, mode=Mode(mode) if mode else None)
    sort_fn = sort_by_path(parse_sort_path(sort_path)) if sort_path else None
    return FilterRunner().run(request, sort_fn=sort_fn)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Match a directory of JSON records against a rule program and write JSON/MD outputs."
    )
    parser.add_argument("--records", required=True, help="Directory of JSON record files.")
    parser.add_argument("--rules", required=True, help="Rules file (JSON or YAML): a program list or a request object.")
    parser.add_argument(
        "--mode",
        choices=("strict", "optional", "strict-optional"),
        default=None,
        help="Matching mode (defaults to the rules file, then DATAFILTER_DEFAULT_MODE).",
    )
    parser.add_argument(
        "--sort-path",
        default=None,
        help="Dot-separated data path to sort records by before matching (e.g. header.timestamp).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory for result files (defaults to the current directory).",
    )
    args = parser.parse_args(argv)

    _ensure_backend_on_path()
    from common.datafilter.config import get_engine_settings

    settings = get_engine_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    records_dir = Path(args.records).resolve()
    rules_path = Path(args.rules).resolve()
    output_dir = Path(args.output_dir).resolve() if args.output_dir else Path(".").resolve()
    output_dir.mkdir(parents=True, exist_ok=True)

    result = run_filter_from_files(records_dir, rules_path, mode=args.mode, sort_path=args.sort_path)

    out_json = output_dir / "filter_result.json"
    out_md = output_dir / "filter_result.md"
    out_json.write_text(json.dumps(result.model_dump(mode="json"), indent=2))
    _write_markdown(result, out_md, title=rules_path.name)

    stats = result.stats
    print(
        f"{stats.total_files} records: {stats.mapped_files} mapped, {stats.wildcard_matched_files} wildcard, "
        f"{stats.optional_files} optional, {stats.unmapped_files} unmapped, {stats.pre_filtered_files} pre-filtered"
    )
    print(f"Wrote {out_json}")
    print(f"Wrote {out_md}")

    return 0 if not result.unmapped else 1


if __name__ == "__main__":
    raise SystemExit(main())
