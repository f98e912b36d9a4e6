"""Benchmark resolution and dispatch."""

from .capabilities import CAPABILITIES, TARGET_NAMES, WorkloadKind
from .dispatcher import Dispatcher
from .specifier import BenchmarkRequest, BenchmarkSpecifier, resolve
from .summary import OperationOutcome, OutcomeStatus, RunSummary
from .targets import TARGET_CLASSES, BenchTarget

__all__ = [
    "BenchTarget",
    "BenchmarkRequest",
    "BenchmarkSpecifier",
    "CAPABILITIES",
    "Dispatcher",
    "OperationOutcome",
    "OutcomeStatus",
    "RunSummary",
    "TARGET_CLASSES",
    "TARGET_NAMES",
    "WorkloadKind",
    "resolve",
]
