import logging
import sys
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Register shared Hypothesis profiles for deterministic CI runs and fast local loops.
from tests.util import hypothesis_profiles  # noqa: E402,F401  pylint: disable=unused-import
from tests.util.fakes import FakeLoader  # noqa: E402


@pytest.fixture(autouse=True)
def _propagate_package_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    """The CLI owns the package logger; let caplog see its records during tests."""

    monkeypatch.setattr(logging.getLogger("succinct_bench"), "propagate", True)


@pytest.fixture()
def fake_loader() -> FakeLoader:
    return FakeLoader()


@pytest.fixture()
def dataset(tmp_path: Path) -> Path:
    path = tmp_path / "data.succinct"
    path.write_bytes(b"serialized")
    return path


@pytest.fixture()
def query_file(tmp_path: Path) -> Path:
    path = tmp_path / "queries.txt"
    path.write_text("alpha\nbeta\ngamma\n", encoding="utf-8")
    return path


@pytest.fixture()
def result_prefix(tmp_path: Path) -> Path:
    out = tmp_path / "results"
    out.mkdir()
    return out / "res"


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "cli: tests that drive the command-line front end")
