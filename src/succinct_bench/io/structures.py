"""Dataset checks and structure backend lookup.

The succinct structures themselves live outside this package. A backend is
any callable registered under the ``succinct_bench.backends`` entry-point
group that accepts ``(kind, path, storage_mode, external_config)`` and
returns an object implementing :class:`SuccinctStructure`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from importlib.metadata import EntryPoint, entry_points
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from succinct_bench.contracts.error import DatasetError
from succinct_bench.core.modes import StorageMode

from .hadoop import ExternalConfig, load_external_config

logger = logging.getLogger(__name__)

BACKEND_GROUP = "succinct_bench.backends"
BACKEND_ENV_VAR = "SUCCINCT_BENCH_BACKEND"
REMOTE_SCHEMES: tuple[str, ...] = ("hdfs://",)


@runtime_checkable
class SuccinctStructure(Protocol):
    def original_size(self) -> int: ...

    def lookup_npa(self, i: int) -> int: ...

    def lookup_sa(self, i: int) -> int: ...

    def lookup_isa(self, i: int) -> int: ...

    def count(self, query: str) -> int: ...

    def search(self, query: str) -> Any: ...

    def extract(self, offset: int, length: int) -> Any: ...


class StructureLoader(Protocol):
    def __call__(
        self,
        kind: str,
        path: str,
        storage_mode: StorageMode | None,
        external_config: ExternalConfig | None,
    ) -> SuccinctStructure: ...


def is_remote(path: str) -> bool:
    return path.startswith(REMOTE_SCHEMES)


def check_dataset(path: str) -> None:
    """Fail fast when a local dataset path cannot be read."""

    if not path or not path.strip():
        raise DatasetError("Dataset path is empty")
    if is_remote(path):
        return
    target = Path(path)
    if not target.exists():
        raise DatasetError(f"Dataset not found: {path}")
    if not os.access(target, os.R_OK):
        raise DatasetError(f"Dataset is not readable: {path}")


class EntryPointLoader:
    """Load structures through the installed backend plugin."""

    def __init__(
        self,
        *,
        env: Mapping[str, str] | None = None,
        discover: Callable[[], list[EntryPoint]] | None = None,
        config_provider: Callable[[], ExternalConfig | None] = load_external_config,
    ) -> None:
        self._env = os.environ if env is None else env
        self._discover = discover or (lambda: list(entry_points(group=BACKEND_GROUP)))
        self._config_provider = config_provider
        self._backend: Callable[..., SuccinctStructure] | None = None

    def _select(self) -> Callable[..., SuccinctStructure]:
        if self._backend is not None:
            return self._backend
        available = self._discover()
        if not available:
            raise DatasetError(
                "No succinct structure backend is installed",
                hint=f"Install a package that registers the '{BACKEND_GROUP}' entry point",
            )
        wanted = self._env.get(BACKEND_ENV_VAR)
        if wanted:
            matches = [ep for ep in available if ep.name == wanted]
            if not matches:
                names = ", ".join(sorted(ep.name for ep in available))
                raise DatasetError(
                    f"Backend {wanted!r} is not installed",
                    hint=f"Available backends: {names}",
                )
            chosen = matches[0]
        elif len(available) == 1:
            chosen = available[0]
        else:
            names = ", ".join(sorted(ep.name for ep in available))
            raise DatasetError(
                "Several structure backends are installed",
                hint=f"Set {BACKEND_ENV_VAR} to one of: {names}",
            )
        logger.debug("Using structure backend %s (%s)", chosen.name, chosen.value)
        self._backend = chosen.load()
        return self._backend

    def __call__(
        self,
        kind: str,
        path: str,
        storage_mode: StorageMode | None,
        external_config: ExternalConfig | None = None,
    ) -> SuccinctStructure:
        backend = self._select()
        if external_config is None and is_remote(path):
            external_config = self._config_provider()
        try:
            return backend(kind, path, storage_mode, external_config)
        except DatasetError:
            raise
        except (OSError, ValueError) as exc:
            raise DatasetError(f"Failed to load {kind} from {path}: {exc}") from exc


__all__ = [
    "BACKEND_ENV_VAR",
    "BACKEND_GROUP",
    "EntryPointLoader",
    "StructureLoader",
    "SuccinctStructure",
    "check_dataset",
    "is_remote",
]
