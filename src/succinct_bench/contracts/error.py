"""Error envelope helpers and exit codes for the succinct benchmark harness."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from functools import wraps
from typing import Any, NoReturn, TypeVar

logger = logging.getLogger(__name__)
T = TypeVar("T")


class Exit(IntEnum):
    """Stable exit codes shared across the CLI."""

    OK = 0
    CONFIG = 2
    VALIDATION = 3
    EXECUTION = 4
    IO = 5
    PARTIAL = 6


@dataclass(slots=True)
class ErrorEnvelope:
    """Machine-readable error contract for CLI failures."""

    error: str
    detail: str
    hint: str | None = None

    def to_json(self) -> str:
        payload = {"error": self.error, "detail": self.detail}
        if self.hint:
            payload["hint"] = self.hint
        return json.dumps(payload, ensure_ascii=False)


def die(code: Exit, kind: str, detail: str, hint: str | None = None) -> NoReturn:
    """Emit standardized JSON error on stderr and exit with a stable code."""

    env = ErrorEnvelope(error=kind, detail=detail, hint=hint)
    sys.stderr.write(env.to_json() + "\n")
    try:
        sys.stderr.flush()
    finally:
        sys.exit(int(code))


class EnvelopeError(Exception):
    """Base exception that carries an optional hint for the error envelope."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(EnvelopeError):
    """Required input missing or malformed before any benchmark runs."""


class ValidationError(EnvelopeError):
    """Benchmark specifier does not match the known target/operation grammar."""


class WorkloadError(EnvelopeError):
    """Query file could not be read, or a workload was requested without one."""


class ExecutionError(EnvelopeError):
    """A benchmark target failed while loading or running."""


class DatasetError(ExecutionError):
    """The serialized dataset is missing, unreadable, or has no backend."""


# Subclasses must precede their bases.
_EXCEPTION_ORDER: tuple[tuple[type[EnvelopeError], Exit, str], ...] = (
    (ConfigurationError, Exit.CONFIG, "Configuration"),
    (ValidationError, Exit.VALIDATION, "Validation"),
    (WorkloadError, Exit.IO, "Workload"),
    (DatasetError, Exit.EXECUTION, "Dataset"),
    (ExecutionError, Exit.EXECUTION, "Execution"),
)


def classify(exc: EnvelopeError) -> tuple[Exit, str]:
    """Return the exit code and envelope label for ``exc``."""

    for exc_type, exit_code, label in _EXCEPTION_ORDER:
        if isinstance(exc, exc_type):
            return exit_code, label
    return Exit.EXECUTION, "UnhandledEnvelope"


def guard_cli(fn: Callable[..., T]) -> Callable[..., T]:
    """Decorate a CLI handler to enforce exit codes and error envelopes."""

    @wraps(fn)
    def _wrapped(*args: Any, **kwargs: Any) -> T:
        try:
            return fn(*args, **kwargs)
        except EnvelopeError as exc:
            exit_code, label = classify(exc)
            die(exit_code, label, str(exc), hint=exc.hint)
        except FileNotFoundError as exc:
            die(Exit.IO, "FileNotFound", str(exc))
        except Exception as exc:  # pragma: no cover - last-resort envelope
            logger.exception("Unhandled CLI exception")
            die(Exit.EXECUTION, "Unhandled", f"{type(exc).__name__}: {exc}")

    return _wrapped


__all__ = [
    "Exit",
    "ErrorEnvelope",
    "EnvelopeError",
    "ConfigurationError",
    "ValidationError",
    "WorkloadError",
    "ExecutionError",
    "DatasetError",
    "classify",
    "guard_cli",
    "die",
]
