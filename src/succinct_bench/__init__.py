"""Benchmark harness for succinct data-structure implementations."""

from . import bench, contracts, core, io, workloads

__version__ = "0.1.0"

__all__ = [
    "bench",
    "contracts",
    "core",
    "io",
    "workloads",
]
