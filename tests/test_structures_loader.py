from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from succinct_bench.contracts.error import DatasetError
from succinct_bench.core.modes import StorageMode
from succinct_bench.io.hadoop import ExternalConfig
from succinct_bench.io.structures import (
    EntryPointLoader,
    SuccinctStructure,
    check_dataset,
    is_remote,
)
from tests.util.fakes import FakeStructure


@dataclass
class FakeEntryPoint:
    name: str
    backend: Any
    value: str = "fake.module:backend"
    loaded: int = field(default=0)

    def load(self) -> Any:
        self.loaded += 1
        return self.backend


class RecordingBackend:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, kind, path, storage_mode, external_config):  # type: ignore[no-untyped-def]
        self.calls.append((kind, path, storage_mode, external_config))
        return FakeStructure()


def test_fake_structure_satisfies_protocol() -> None:
    assert isinstance(FakeStructure(), SuccinctStructure)


def test_check_dataset_accepts_files_and_remote_paths(dataset: Path) -> None:
    check_dataset(str(dataset))
    check_dataset("hdfs://namenode/data/wiki.succinct")
    assert is_remote("hdfs://x")
    assert not is_remote("/tmp/hdfs://x")


@pytest.mark.parametrize("raw", ["", "   "])
def test_check_dataset_rejects_blank(raw: str) -> None:
    with pytest.raises(DatasetError):
        check_dataset(raw)


def test_check_dataset_rejects_missing(tmp_path: Path) -> None:
    with pytest.raises(DatasetError, match="not found"):
        check_dataset(str(tmp_path / "missing"))


def test_no_backend_installed() -> None:
    loader = EntryPointLoader(env={}, discover=lambda: [])
    with pytest.raises(DatasetError) as excinfo:
        loader("buffer", "/data", StorageMode.MEMORY_ONLY)
    assert excinfo.value.hint and "succinct_bench.backends" in excinfo.value.hint


def test_single_backend_is_loaded_once() -> None:
    backend = RecordingBackend()
    ep = FakeEntryPoint("ref", backend)
    loader = EntryPointLoader(env={}, discover=lambda: [ep])
    loader("buffer", "/data", StorageMode.MEMORY_MAPPED)
    loader("stream", "/data", None)
    assert ep.loaded == 1
    assert backend.calls == [
        ("buffer", "/data", StorageMode.MEMORY_MAPPED, None),
        ("stream", "/data", None, None),
    ]


def test_backend_selected_by_env() -> None:
    first, second = RecordingBackend(), RecordingBackend()
    eps = [FakeEntryPoint("one", first), FakeEntryPoint("two", second)]
    loader = EntryPointLoader(env={"SUCCINCT_BENCH_BACKEND": "two"}, discover=lambda: eps)
    loader("buffer", "/data", None)
    assert not first.calls and len(second.calls) == 1


def test_ambiguous_or_unknown_backend() -> None:
    eps = [FakeEntryPoint("one", RecordingBackend()), FakeEntryPoint("two", RecordingBackend())]
    with pytest.raises(DatasetError, match="Several"):
        EntryPointLoader(env={}, discover=lambda: eps)("buffer", "/d", None)
    with pytest.raises(DatasetError, match="'three'"):
        EntryPointLoader(env={"SUCCINCT_BENCH_BACKEND": "three"}, discover=lambda: eps)(
            "buffer", "/d", None
        )


def test_remote_paths_get_external_config(tmp_path: Path) -> None:
    backend = RecordingBackend()
    external = ExternalConfig(conf_dir=tmp_path)
    requested: list[int] = []

    def provider() -> ExternalConfig:
        requested.append(1)
        return external

    loader = EntryPointLoader(
        env={}, discover=lambda: [FakeEntryPoint("ref", backend)], config_provider=provider
    )
    loader("file_stream", "/local/data", None)
    loader("file_stream", "hdfs://nn/data", None)
    assert requested == [1]
    assert backend.calls[0][3] is None
    assert backend.calls[1][3] is external


def test_backend_os_errors_become_dataset_errors() -> None:
    def broken(kind, path, storage_mode, external_config):  # type: ignore[no-untyped-def]
        raise OSError("truncated file")

    loader = EntryPointLoader(env={}, discover=lambda: [FakeEntryPoint("ref", broken)])
    with pytest.raises(DatasetError, match="truncated file"):
        loader("buffer", "/data", None)
