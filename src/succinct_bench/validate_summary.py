from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from importlib import resources
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator


def _default_schema_text() -> str:
    schema_resource = resources.files("succinct_bench.contracts") / "run_summary_schema.json"
    with schema_resource.open(encoding="utf-8") as stream:
        return stream.read()


def _load_schema_text(custom_schema: Path | None) -> str:
    if custom_schema is None:
        return _default_schema_text()
    return custom_schema.read_text(encoding="utf-8")


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate a benchmark run summary against the run_summary.v1 schema",
    )
    parser.add_argument("summary", type=Path, help="Path to a run summary JSON file")
    parser.add_argument(
        "--schema",
        type=Path,
        default=None,
        help="Schema JSON path (default: bundled run_summary.v1 schema)",
    )
    return parser


def summary_problems(payload: Any, schema: dict[str, Any] | None = None) -> list[str]:
    """Return human-readable problems with ``payload``; empty when valid."""

    validator = Draft202012Validator(schema or json.loads(_default_schema_text()))
    problems = [
        f"{err.message} @ {list(err.path)}"
        for err in sorted(validator.iter_errors(payload), key=lambda err: list(err.path))
    ]
    if problems:
        return problems
    for idx, outcome in enumerate(payload.get("outcomes", [])):
        if outcome.get("status") != "ok":
            continue
        p50, p90, p99 = (outcome.get(k, 0.0) for k in ("p50_us", "p90_us", "p99_us"))
        if not p50 <= p90 <= p99:
            problems.append(
                f"outcome {idx} ({outcome['target']}.{outcome['operation']}) has "
                f"non-monotonic latency percentiles: p50={p50}, p90={p90}, p99={p99}"
            )
    return problems


def main(argv: Sequence[str] | None = None) -> int:
    parser = _create_parser()
    args = parser.parse_args(argv)

    schema = json.loads(_load_schema_text(args.schema))
    payload = json.loads(args.summary.read_text(encoding="utf-8"))
    problems = summary_problems(payload, schema)
    for problem in problems:
        print(f"  - {problem}", file=sys.stderr)
    if problems:
        print(f"Validation finished: {len(problems)} problem(s)", file=sys.stderr)
        return 1
    print("Validation finished: summary valid")
    return 0


def console_main() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(console_main())
