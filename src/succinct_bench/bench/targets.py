"""Benchmark targets: one class per structure family.

A target loads its structure once and then times individual calls against it,
writing one tab-separated artifact per operation. Each line holds the workload
item, the call result (an integer, or the size of a returned collection) and
the call latency in nanoseconds.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence, Sized
from pathlib import Path
from typing import Any, ClassVar

from succinct_bench.contracts.error import (
    EnvelopeError,
    ExecutionError,
    ValidationError,
    WorkloadError,
)
from succinct_bench.core.latency import LatencyReservoir
from succinct_bench.core.modes import StorageMode
from succinct_bench.io.structures import StructureLoader, SuccinctStructure
from succinct_bench.workloads.samples import WorkloadSource

from .capabilities import CAPABILITIES, OperationCapability, TargetCapability, WorkloadKind
from .summary import OperationOutcome

logger = logging.getLogger(__name__)

DEFAULT_EXTRACT_LENGTH = 1000


def artifact_path(result_path: str | Path, target: str, operation: str) -> Path:
    base = Path(result_path)
    return base.with_name(f"{base.name}-{target}-{operation}")


def _result_size(result: Any) -> int:
    if isinstance(result, bool):
        return int(result)
    if isinstance(result, int):
        return result
    if isinstance(result, Sized):
        return len(result)
    if result is None:
        return 0
    return len(list(result))


class BenchTarget:
    """Time the operations of one structure family."""

    capability: ClassVar[TargetCapability]

    def __init__(
        self,
        dataset_path: str,
        storage_mode: StorageMode | None = None,
        *,
        loader: StructureLoader,
        clock: Callable[[], int] = time.perf_counter_ns,
        extract_length: int = DEFAULT_EXTRACT_LENGTH,
        latency_sample_k: int = 1000,
    ) -> None:
        if not self.capability.uses_storage_mode and storage_mode is not None:
            logger.debug("%s ignores storage mode %s", self.name, storage_mode)
            storage_mode = None
        self.dataset_path = dataset_path
        self.storage_mode = storage_mode
        self.clock = clock
        self.extract_length = extract_length
        self.latency_sample_k = latency_sample_k
        logger.info("Loading %s from %s", self.name, dataset_path)
        self.structure: SuccinctStructure = loader(
            self.capability.structure_kind, dataset_path, storage_mode, None
        )

    @property
    def name(self) -> str:
        return self.capability.name

    def _size(self) -> int:
        size = int(self.structure.original_size())
        if size <= 0:
            raise ExecutionError(f"{self.name} structure at {self.dataset_path} is empty")
        return size

    def _plan(
        self, op: OperationCapability, workload: WorkloadSource
    ) -> tuple[Sequence[Any], Callable[[Any], Any]]:
        method = getattr(self.structure, op.method)
        stream = f"{self.name}.{op.name}"
        if op.workload is WorkloadKind.NUMERIC:
            return workload.numeric(self._size(), stream=stream), method
        if op.workload is WorkloadKind.QUERIES:
            return workload.queries(), method
        span = max(1, self._size() - self.extract_length)
        offsets = workload.numeric(span, stream=stream)
        length = self.extract_length
        return offsets, lambda offset: method(offset, length)

    def bench(
        self, operation: str, workload: WorkloadSource, result_path: str | Path
    ) -> OperationOutcome:
        """Run ``operation`` once per workload item and write its artifact."""

        op = self.capability.operation(operation)
        if op is None:
            raise ValidationError(f"{self.name} has no operation {operation!r}")

        out_path = artifact_path(result_path, self.name, op.name)
        reservoir = LatencyReservoir(k=self.latency_sample_k)
        logger.info("Benchmarking %s.%s", self.name, op.name)
        started = self.clock()
        try:
            items, call = self._plan(op, workload)
            with open(out_path, "w", encoding="utf-8") as fh:
                for item in items:
                    t0 = self.clock()
                    result = call(item)
                    elapsed = self.clock() - t0
                    reservoir.offer(elapsed)
                    fh.write(f"{item}\t{_result_size(result)}\t{elapsed}\n")
        except EnvelopeError:
            raise
        except Exception as exc:
            raise ExecutionError(f"{self.name}.{op.name} failed: {exc}") from exc
        total_ns = self.clock() - started

        percentiles = reservoir.percentiles_us()
        logger.info(
            "%s.%s: %d calls, p50=%.3fus p99=%.3fus -> %s",
            self.name,
            op.name,
            reservoir.n,
            percentiles["p50"],
            percentiles["p99"],
            out_path,
        )
        return OperationOutcome(
            target=self.name,
            operation=op.name,
            invocations=reservoir.n,
            result_path=str(out_path),
            elapsed_ms=max(0, total_ns) / 1_000_000,
            mean_us=reservoir.mean_us(),
            p50_us=percentiles["p50"],
            p90_us=percentiles["p90"],
            p99_us=percentiles["p99"],
        )

    def bench_all(
        self, workload: WorkloadSource, result_path: str | Path
    ) -> list[OperationOutcome]:
        """Run every operation; a failing one is recorded and the sweep goes on."""

        outcomes: list[OperationOutcome] = []
        for op in self.capability.operations:
            try:
                outcomes.append(self.bench(op.name, workload, result_path))
            except (ExecutionError, WorkloadError) as exc:
                logger.error("%s.%s failed: %s", self.name, op.name, exc)
                outcomes.append(OperationOutcome.failure(self.name, op.name, exc))
        return outcomes


class SuccinctBufferBench(BenchTarget):
    capability = CAPABILITIES["SuccinctBuffer"]


class SuccinctFileBufferBench(BenchTarget):
    capability = CAPABILITIES["SuccinctFileBuffer"]


class SuccinctStreamBench(BenchTarget):
    capability = CAPABILITIES["SuccinctStream"]


class SuccinctFileStreamBench(BenchTarget):
    capability = CAPABILITIES["SuccinctFileStream"]


TARGET_CLASSES: dict[str, type[BenchTarget]] = {
    cls.capability.name: cls
    for cls in (
        SuccinctBufferBench,
        SuccinctFileBufferBench,
        SuccinctStreamBench,
        SuccinctFileStreamBench,
    )
}

__all__ = [
    "BenchTarget",
    "DEFAULT_EXTRACT_LENGTH",
    "SuccinctBufferBench",
    "SuccinctFileBufferBench",
    "SuccinctFileStreamBench",
    "SuccinctStreamBench",
    "TARGET_CLASSES",
    "artifact_path",
]
