"""Run a resolved benchmark request against its targets."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from pathlib import Path

from succinct_bench.core.modes import StorageMode
from succinct_bench.io.structures import EntryPointLoader, StructureLoader, check_dataset
from succinct_bench.workloads.samples import WorkloadSource

from .specifier import BenchmarkRequest
from .summary import RunSummary
from .targets import DEFAULT_EXTRACT_LENGTH, TARGET_CLASSES, BenchTarget

logger = logging.getLogger(__name__)


class Dispatcher:
    """Build each requested target once and drive its entry points.

    Dataset and construction failures propagate and end the run. Inside a
    sweep the target records per-operation failures and keeps going; a
    single-operation request raises on failure.
    """

    def __init__(
        self,
        loader: StructureLoader | None = None,
        target_classes: Mapping[str, type[BenchTarget]] | None = None,
        *,
        clock: Callable[[], int] = time.perf_counter_ns,
        extract_length: int = DEFAULT_EXTRACT_LENGTH,
        latency_sample_k: int = 1000,
        dataset_check: Callable[[str], None] = check_dataset,
    ) -> None:
        self._loader = loader
        self.target_classes = dict(target_classes or TARGET_CLASSES)
        self.clock = clock
        self.extract_length = extract_length
        self.latency_sample_k = latency_sample_k
        self._dataset_check = dataset_check

    @property
    def loader(self) -> StructureLoader:
        if self._loader is None:
            self._loader = EntryPointLoader()
        return self._loader

    def _build(
        self, name: str, dataset_path: str, storage_mode: StorageMode
    ) -> BenchTarget:
        cls = self.target_classes[name]
        return cls(
            dataset_path,
            storage_mode,
            loader=self.loader,
            clock=self.clock,
            extract_length=self.extract_length,
            latency_sample_k=self.latency_sample_k,
        )

    def execute(
        self,
        request: BenchmarkRequest,
        dataset_path: str,
        storage_mode: StorageMode,
        workload: WorkloadSource,
        result_path: str | Path,
    ) -> RunSummary:
        self._dataset_check(dataset_path)
        summary = RunSummary(
            specifier=request.raw,
            dataset=dataset_path,
            storage_mode=storage_mode.value,
            result_path=str(result_path),
            started_at=datetime.now(UTC),
        )
        targets: dict[str, BenchTarget] = {}

        for entry in request.entries:
            target = targets.get(entry.target)
            if target is None:
                target = self._build(entry.target, dataset_path, storage_mode)
                targets[entry.target] = target
            if entry.operation is None:
                logger.info("Benchmarking all operations for %s", entry.target)
                summary.outcomes.extend(target.bench_all(workload, result_path))
            else:
                summary.outcomes.append(target.bench(entry.operation, workload, result_path))

        summary.finished_at = datetime.now(UTC)
        if summary.failed:
            logger.warning(
                "%d of %d operation(s) failed", len(summary.failed), len(summary.outcomes)
            )
        return summary


__all__ = ["Dispatcher"]
