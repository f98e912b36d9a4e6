"""Static table of benchmark targets and the operations each one supports.

Every validity check on a ``target.operation`` pair goes through this table.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

ALL_TARGETS = "all"


class WorkloadKind(StrEnum):
    NONE = "none"
    NUMERIC = "numeric"
    QUERIES = "queries"


@dataclass(frozen=True, slots=True)
class OperationCapability:
    name: str
    workload: WorkloadKind
    method: str


@dataclass(frozen=True, slots=True)
class TargetCapability:
    name: str
    structure_kind: str
    uses_storage_mode: bool
    operations: tuple[OperationCapability, ...]

    @property
    def operation_names(self) -> tuple[str, ...]:
        return tuple(op.name for op in self.operations)

    def operation(self, name: str) -> OperationCapability | None:
        for op in self.operations:
            if op.name == name:
                return op
        return None


_LOOKUP_OPERATIONS = (
    OperationCapability("lookupNPA", WorkloadKind.NUMERIC, "lookup_npa"),
    OperationCapability("lookupSA", WorkloadKind.NUMERIC, "lookup_sa"),
    OperationCapability("lookupISA", WorkloadKind.NUMERIC, "lookup_isa"),
)

_FILE_OPERATIONS = (
    OperationCapability("count", WorkloadKind.QUERIES, "count"),
    OperationCapability("search", WorkloadKind.QUERIES, "search"),
    OperationCapability("extract", WorkloadKind.NONE, "extract"),
)

_TABLE: dict[str, TargetCapability] = {
    cap.name: cap
    for cap in (
        TargetCapability("SuccinctBuffer", "buffer", True, _LOOKUP_OPERATIONS),
        TargetCapability("SuccinctFileBuffer", "file_buffer", True, _FILE_OPERATIONS),
        TargetCapability("SuccinctStream", "stream", False, _LOOKUP_OPERATIONS),
        TargetCapability("SuccinctFileStream", "file_stream", False, _FILE_OPERATIONS),
    )
}

CAPABILITIES: Mapping[str, TargetCapability] = MappingProxyType(_TABLE)
TARGET_NAMES: tuple[str, ...] = tuple(_TABLE)


def get_capability(target: str) -> TargetCapability | None:
    return CAPABILITIES.get(target)


def iter_pairs() -> list[tuple[str, str]]:
    """Every valid ``(target, operation)`` pair in table order."""

    return [(cap.name, op.name) for cap in CAPABILITIES.values() for op in cap.operations]


def needs_query_file(target: str, operation: str | None = None) -> bool:
    cap = CAPABILITIES[target]
    if operation is None:
        return any(op.workload is WorkloadKind.QUERIES for op in cap.operations)
    op = cap.operation(operation)
    return op is not None and op.workload is WorkloadKind.QUERIES


__all__ = [
    "ALL_TARGETS",
    "CAPABILITIES",
    "OperationCapability",
    "TARGET_NAMES",
    "TargetCapability",
    "WorkloadKind",
    "get_capability",
    "iter_pairs",
    "needs_query_file",
]
