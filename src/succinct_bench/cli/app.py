#!/usr/bin/env python3
"""
app.py

Command-line front end for the succinct benchmark harness:
- resolves a ``target[.operation]`` specifier (or ``all``) against the
  capability table before touching any data
- loads the dataset once per target and runs the requested operations
- writes one result artifact per operation under the result path prefix
- optional JSON run summary (--summary-out) for CI pipelines

Exit codes follow ``succinct_bench.contracts.error.Exit``: configuration and
specifier problems print usage and exit non-zero without running anything; a
sweep that finishes with failed operations exits with ``Exit.PARTIAL``.
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from succinct_bench.bench.capabilities import TARGET_NAMES, needs_query_file
from succinct_bench.bench.dispatcher import Dispatcher
from succinct_bench.bench.specifier import BenchmarkRequest, resolve
from succinct_bench.config import CONFIG_ENV_VAR, HarnessConfig, load_harness_config
from succinct_bench.contracts.error import (
    ConfigurationError,
    Exit,
    ValidationError,
    guard_cli,
)
from succinct_bench.core.modes import StorageMode
from succinct_bench.workloads.samples import WorkloadSource

# --------------------------------------------------------------------
# Logging
# --------------------------------------------------------------------
logger = logging.getLogger("succinct_bench")
logger.setLevel(logging.INFO)
logger.propagate = False

PROG = "succinct-perf"
DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"
DEFAULT_LOG_MAX_BYTES = 5_000_000
DEFAULT_LOG_BACKUP_COUNT = 5


class JsonFormatter(logging.Formatter):
    """Render log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, DEFAULT_LOG_DATEFMT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    use_json: bool = False,
    log_file: str | None = None,
    *,
    max_bytes: int = DEFAULT_LOG_MAX_BYTES,
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT,
    verbose: bool = False,
) -> None:
    """Configure console (and optional rotating file) logging."""

    formatter: logging.Formatter
    if use_json:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_LOG_DATEFMT)

    for handler in list(logger.handlers):
        with contextlib.suppress(Exception):
            handler.close()
        logger.removeHandler(handler)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file:
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        handler.setFormatter(formatter)
        logger.addHandler(handler)


configure_logging()

OUTPUT_JSON: bool = False


def emit_success(
    command: str, *, text: str | None = None, data: dict[str, Any] | None = None
) -> None:
    if OUTPUT_JSON:
        payload: dict[str, Any] = {"ok": True, "command": command}
        if data:
            payload.update(data)
        if text is not None and "result" not in payload:
            payload["result"] = text
        print(json.dumps(payload, ensure_ascii=False))
    else:
        if text is not None:
            print(text)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=PROG,
        description="Run benchmarks for succinct data-structure targets.",
    )
    p.add_argument(
        "-b",
        dest="benchmark",
        default=None,
        help=(
            "The benchmark to run, as <target>.<operation>. With only a target, every "
            "operation of that target runs; 'all' runs every target. Targets: "
            + ", ".join(TARGET_NAMES)
        ),
    )
    p.add_argument(
        "-r", dest="result_path", default=None, help="Path prefix where results are stored."
    )
    p.add_argument(
        "-q",
        dest="query_file",
        default=None,
        help="Query file with one query per line (required for search/count benchmarks).",
    )
    p.add_argument(
        "-s",
        dest="storage_mode",
        default=None,
        help="Storage mode for buffer benchmarks: MEMORY_ONLY or MEMORY_MAPPED.",
    )
    p.add_argument(
        "-d", dest="dataset", default=None, help="Path to serialized succinct data. (REQUIRED)"
    )
    p.add_argument(
        "-n",
        "--num-queries",
        type=int,
        default=None,
        help="Workload size per operation (default: config num_queries)",
    )
    p.add_argument(
        "--seed", type=int, default=None, help="Seed for random numeric workloads"
    )
    p.add_argument(
        "--summary-out", default=None, help="Write a JSON run summary to this path"
    )
    p.add_argument(
        "--config",
        default=None,
        help=f"Path to TOML config file (falls back to ${CONFIG_ENV_VAR})",
    )
    p.add_argument(
        "--json", action="store_true", help="Emit machine-readable success output to stdout"
    )
    p.add_argument("--log-json", action="store_true", help="Emit logs in JSON format")
    p.add_argument(
        "--log-file",
        default=None,
        help="Optional log file path (rotates at 5MB, keeps 5 backups by default)",
    )
    p.add_argument(
        "--log-max-bytes",
        type=int,
        default=DEFAULT_LOG_MAX_BYTES,
        help="Max bytes per log file before rotation (default: %(default)s)",
    )
    p.add_argument(
        "--log-backup-count",
        type=int,
        default=DEFAULT_LOG_BACKUP_COUNT,
        help="Number of rotated log files to keep (default: %(default)s)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def prepare_result_path(raw: str | None, cfg: HarnessConfig) -> Path:
    if raw is None:
        logger.info("Result path not specified; results will be stored under %s", cfg.result_path)
        raw = cfg.result_path
    result_path = Path(raw).expanduser()
    try:
        result_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(f"Cannot create result directory {result_path.parent}: {exc}") from exc
    return result_path


def _check_query_file(request: BenchmarkRequest, query_file: str | None) -> None:
    if query_file:
        return
    for entry in request.entries:
        if entry.operation is not None and needs_query_file(entry.target, entry.operation):
            raise ConfigurationError(
                f"{entry} needs a query file",
                hint="Pass -q <file> with one query per line",
            )


def run_benchmarks(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    *,
    dispatcher: Dispatcher | None = None,
) -> int:
    """Validate every input, then dispatch. Returns an ``Exit`` code."""

    try:
        if not args.dataset:
            raise ConfigurationError("Data path must be specified.", hint="Pass -d <dataset>")
        cfg_path = args.config or os.getenv(CONFIG_ENV_VAR)
        cfg = load_harness_config(cfg_path)
        if cfg_path:
            logger.info("Loaded config from %s", cfg_path)
        storage_mode = StorageMode.parse(args.storage_mode) if args.storage_mode else cfg.mode
        num_queries = args.num_queries if args.num_queries is not None else cfg.num_queries
        if num_queries <= 0:
            raise ConfigurationError("--num-queries must be > 0")

        if args.benchmark is None:
            logger.info("No benchmark specified (-b); nothing to run")
            emit_success("bench", text="No benchmark specified", data={"ran": 0})
            return int(Exit.OK)

        request = resolve(args.benchmark)
        logger.info(
            "Benchmark parameters (%d): %s",
            len(args.benchmark.split(".")),
            ", ".join(f'"{token}"' for token in args.benchmark.split(".")),
        )
        _check_query_file(request, args.query_file)
    except (ConfigurationError, ValidationError):
        parser.print_help(sys.stderr)
        raise

    result_path = prepare_result_path(args.result_path, cfg)
    workload = WorkloadSource(
        query_file=args.query_file,
        num_queries=num_queries,
        seed=args.seed if args.seed is not None else cfg.seed,
    )
    if dispatcher is None:
        dispatcher = Dispatcher(
            extract_length=cfg.extract_length, latency_sample_k=cfg.latency_sample_k
        )
    summary = dispatcher.execute(request, args.dataset, storage_mode, workload, result_path)

    if args.summary_out:
        out = summary.write_json(args.summary_out)
        logger.info("Wrote run summary to %s", out)

    emit_success(
        "bench",
        text=f"Ran {len(summary.succeeded)} operation(s), {len(summary.failed)} failed",
        data={"summary": summary.to_payload()},
    )
    return int(summary.exit_code())


def main(argv: list[str], *, dispatcher: Dispatcher | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    global OUTPUT_JSON
    OUTPUT_JSON = bool(args.json)

    configure_logging(
        args.log_json,
        args.log_file,
        max_bytes=args.log_max_bytes,
        backup_count=args.log_backup_count,
        verbose=args.verbose,
    )

    handler = guard_cli(run_benchmarks)
    return handler(args, p, dispatcher=dispatcher)


def console_main() -> None:
    """Entry point for console_scripts."""

    try:
        raise SystemExit(main(sys.argv[1:]))
    except SystemExit:
        raise
    except Exception as e:  # noqa: BLE001
        logger.exception("Fatal error: %s", e)
        raise SystemExit(int(Exit.EXECUTION)) from e


if __name__ == "__main__":
    console_main()
