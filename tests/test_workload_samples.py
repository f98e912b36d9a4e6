from __future__ import annotations

import logging
import random
from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from succinct_bench.contracts.error import WorkloadError
from succinct_bench.workloads.samples import (
    WorkloadSource,
    derive_seed,
    generate_random_samples,
    load_queries,
)


@given(st.integers(0, 500), st.integers(1, 10_000))
def test_random_samples_have_exact_length_and_range(count: int, limit: int) -> None:
    samples = generate_random_samples(count, limit)
    assert len(samples) == count
    assert all(0 <= value < limit for value in samples)


def test_random_samples_with_seed_are_reproducible() -> None:
    first = generate_random_samples(64, 1_000, seed=7)
    second = generate_random_samples(64, 1_000, seed=7)
    assert first == second
    assert generate_random_samples(64, 1_000, seed=8) != first


def test_explicit_rng_wins_over_seed() -> None:
    expected = random.Random(3)
    samples = generate_random_samples(5, 100, seed=99, rng=random.Random(3))
    assert samples == [expected.randrange(100) for _ in range(5)]


def test_limit_of_one_always_yields_zero() -> None:
    assert generate_random_samples(10, 1) == [0] * 10


@pytest.mark.parametrize(("count", "limit"), [(-1, 10), (5, 0), (5, -3)])
def test_random_samples_reject_bad_arguments(count: int, limit: int) -> None:
    with pytest.raises(ValueError):
        generate_random_samples(count, limit)


def test_load_queries_preserves_file_order(tmp_path: Path) -> None:
    path = tmp_path / "q.txt"
    path.write_text("one\ntwo\nthree\nfour\n", encoding="utf-8")
    assert load_queries(path, 3) == ["one", "two", "three"]


def test_load_queries_keeps_literal_content(tmp_path: Path) -> None:
    path = tmp_path / "q.txt"
    path.write_bytes(b" padded \r\n\nlast")
    assert load_queries(path, 3) == [" padded ", "", "last"]


def test_short_query_file_warns_without_raising(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "q.txt"
    path.write_text("a\nb\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="succinct_bench.workloads.samples"):
        queries = load_queries(path, 5)
    assert queries == ["a", "b"]
    assert any("fewer than the 5 requested" in r.getMessage() for r in caplog.records)


def test_exact_query_count_does_not_warn(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "q.txt"
    path.write_text("a\nb\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="succinct_bench.workloads.samples"):
        assert load_queries(path, 2) == ["a", "b"]
    assert not caplog.records


@given(st.lists(st.text(alphabet="abcxyz ", max_size=8), max_size=20), st.integers(0, 25))
def test_load_queries_length_is_min_of_request_and_file(
    tmp_path_factory: pytest.TempPathFactory, lines: list[str], count: int
) -> None:
    path = tmp_path_factory.mktemp("queries") / "q.txt"
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    queries = load_queries(path, count)
    assert queries == lines[:count]


def test_missing_query_file_raises_workload_error(tmp_path: Path) -> None:
    with pytest.raises(WorkloadError):
        load_queries(tmp_path / "missing.txt", 3)


def test_directory_as_query_file_raises_workload_error(tmp_path: Path) -> None:
    with pytest.raises(WorkloadError):
        load_queries(tmp_path, 3)


def test_undecodable_query_file_raises_workload_error(tmp_path: Path) -> None:
    path = tmp_path / "q.txt"
    path.write_bytes(b"ok\n\xff\xfe bad\n")
    with pytest.raises(WorkloadError) as excinfo:
        load_queries(path, 2)
    assert "not valid UTF-8" in str(excinfo.value)
    assert excinfo.value.hint


def test_zero_queries_still_opens_the_file(tmp_path: Path) -> None:
    with pytest.raises(WorkloadError):
        load_queries(tmp_path / "missing.txt", 0)
    path = tmp_path / "q.txt"
    path.write_text("a\n", encoding="utf-8")
    assert load_queries(path, 0) == []


def test_workload_source_caches_queries(tmp_path: Path) -> None:
    path = tmp_path / "q.txt"
    path.write_text("x\ny\n", encoding="utf-8")
    source = WorkloadSource(query_file=str(path), num_queries=2)
    first = source.queries()
    path.write_text("changed\n", encoding="utf-8")
    assert source.queries() is first


def test_workload_source_without_query_file() -> None:
    source = WorkloadSource(num_queries=4, seed=1)
    assert len(source.numeric(10)) == 4
    with pytest.raises(WorkloadError) as excinfo:
        source.queries()
    assert excinfo.value.hint and "-q" in excinfo.value.hint


def test_seeded_streams_are_independent_and_reproducible() -> None:
    source = WorkloadSource(num_queries=32, seed=3)
    npa = source.numeric(1_000_000, stream="SuccinctBuffer.lookupNPA")
    sa = source.numeric(1_000_000, stream="SuccinctBuffer.lookupSA")
    assert npa != sa
    assert source.numeric(1_000_000, stream="SuccinctBuffer.lookupNPA") == npa
    assert WorkloadSource(num_queries=32, seed=3).numeric(
        1_000_000, stream="SuccinctBuffer.lookupNPA"
    ) == npa


def test_derive_seed_passes_through_unseeded_runs() -> None:
    assert derive_seed(None, "SuccinctStream.lookupISA") is None
    assert derive_seed(5, "a") != derive_seed(5, "b")
    assert derive_seed(5, "a") == derive_seed(5, "a")
