"""Workload generation for benchmark targets.

Numeric workloads are uniform random positions inside a structure; query
workloads are literal lines read from a file. Both are sized by the run's
``num_queries`` setting.
"""

from __future__ import annotations

import hashlib
import logging
import random
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from itertools import islice
from pathlib import Path
from typing import TextIO

from succinct_bench.contracts.error import WorkloadError

logger = logging.getLogger(__name__)

__all__ = [
    "WorkloadSource",
    "derive_seed",
    "generate_random_samples",
    "iter_query_lines",
    "load_queries",
]


def generate_random_samples(
    count: int,
    exclusive_upper_bound: int,
    *,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> list[int]:
    """Return ``count`` uniform samples in ``[0, exclusive_upper_bound)``.

    Not suitable for anything security-sensitive. An explicit ``rng`` wins over
    ``seed``; with neither, every call draws a fresh sequence.
    """

    if count < 0:
        raise ValueError("count must be >= 0")
    if exclusive_upper_bound <= 0:
        raise ValueError("exclusive_upper_bound must be > 0")
    generator = rng or random.Random(seed)  # noqa: S311  # nosec B311 - benchmark sampler
    return [generator.randrange(exclusive_upper_bound) for _ in range(count)]


def derive_seed(seed: int | None, stream: str) -> int | None:
    """Per-stream seed so each (target, operation) pair draws its own sequence."""

    if seed is None:
        return None
    digest = hashlib.blake2s(f"{seed}:{stream}".encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


@contextmanager
def _query_file(path: str | Path) -> Iterator[TextIO]:
    try:
        with open(path, encoding="utf-8", newline="") as fh:
            yield fh
    except OSError as exc:
        raise WorkloadError(f"Cannot read query file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise WorkloadError(
            f"Query file {path} is not valid UTF-8: {exc}",
            hint="Re-encode the query file as UTF-8",
        ) from exc


def iter_query_lines(path: str | Path) -> Iterator[str]:
    with _query_file(path) as fh:
        for line in fh:
            yield line.rstrip("\r\n")


def load_queries(path: str | Path, count: int) -> list[str]:
    """Read up to ``count`` query lines from ``path`` in file order.

    The file is opened even when ``count`` is zero, so an unreadable path is
    always reported.
    """

    if count < 0:
        raise ValueError("count must be >= 0")
    with _query_file(path) as fh:
        queries = [line.rstrip("\r\n") for line in islice(fh, count)]
    if len(queries) < count:
        logger.warning(
            "Query file %s holds %d queries, fewer than the %d requested",
            path,
            len(queries),
            count,
        )
    return queries


@dataclass
class WorkloadSource:
    """Per-run workload settings; queries are read once and reused."""

    query_file: str | None = None
    num_queries: int = 10_000
    seed: int | None = None
    _queries: list[str] | None = field(default=None, init=False, repr=False)

    def numeric(self, limit: int, *, stream: str = "") -> list[int]:
        """``num_queries`` positions in ``[0, limit)``, reproducible per ``stream`` when seeded."""

        return generate_random_samples(
            self.num_queries, limit, seed=derive_seed(self.seed, stream)
        )

    def queries(self) -> list[str]:
        if self._queries is None:
            if not self.query_file:
                raise WorkloadError(
                    "This benchmark needs a query file",
                    hint="Pass -q <file> for search/count benchmarks",
                )
            self._queries = load_queries(self.query_file, self.num_queries)
        return self._queries
