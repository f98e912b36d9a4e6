"""Contract helpers for the succinct benchmark CLI."""

from .error import (
    ConfigurationError,
    DatasetError,
    EnvelopeError,
    ErrorEnvelope,
    ExecutionError,
    Exit,
    ValidationError,
    WorkloadError,
    classify,
    die,
    guard_cli,
)

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
