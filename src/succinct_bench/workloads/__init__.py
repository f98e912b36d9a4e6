"""Workload generators used by benchmark targets."""

from .samples import (
    WorkloadSource,
    derive_seed,
    generate_random_samples,
    iter_query_lines,
    load_queries,
)

__all__ = [
    "WorkloadSource",
    "derive_seed",
    "generate_random_samples",
    "iter_query_lines",
    "load_queries",
]
