"""Typed configuration loader for the succinct benchmark harness."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .contracts.error import ConfigurationError
from .core.modes import StorageMode

CONFIG_ENV_VAR = "SUCCINCT_BENCH_CONFIG"


def _optional_int(raw: str) -> int | None:
    if raw.strip().lower() in {"", "none", "null", "off"}:
        return None
    return int(raw)


@dataclass
class HarnessConfig:
    num_queries: int = 10_000
    result_path: str = "results/res"
    storage_mode: str = StorageMode.MEMORY_ONLY.value
    seed: int | None = None
    extract_length: int = 1000
    latency_sample_k: int = 1000

    def validate(self) -> None:
        for name in ("num_queries", "extract_length", "latency_sample_k"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"bench.{name} must be an integer > 0")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigurationError("bench.seed must be an integer when set")
        if not isinstance(self.result_path, str) or not self.result_path.strip():
            raise ConfigurationError("bench.result_path must not be blank")
        if not isinstance(self.storage_mode, str):
            raise ConfigurationError("bench.storage_mode must be a string")
        StorageMode.parse(self.storage_mode)

    @property
    def mode(self) -> StorageMode:
        return StorageMode.parse(self.storage_mode)

    @classmethod
    def load(cls, path: Path | None) -> HarnessConfig:
        if path is None:
            cfg = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise ConfigurationError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise ConfigurationError(f"Invalid TOML: {exc}") from exc
            cfg = cls.from_dict(data)
        cfg.apply_env_overrides(os.environ)
        cfg.validate()
        return cfg

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HarnessConfig:
        bench_data = data.get("bench", {})
        if not isinstance(bench_data, dict):
            raise ConfigurationError("[bench] section must be a table")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(bench_data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown bench option(s): {', '.join(unknown)}")
        try:
            return cls(**bench_data)
        except TypeError as exc:
            raise ConfigurationError(f"Invalid [bench] section: {exc}") from exc

    def apply_env_overrides(self, env: Mapping[str, str]) -> None:
        mapping: dict[str, tuple[str, Callable[[str], Any]]] = {
            "SUCCINCT_BENCH_NUM_QUERIES": ("num_queries", int),
            "SUCCINCT_BENCH_RESULT_PATH": ("result_path", str),
            "SUCCINCT_BENCH_STORAGE_MODE": ("storage_mode", str),
            "SUCCINCT_BENCH_SEED": ("seed", _optional_int),
            "SUCCINCT_BENCH_EXTRACT_LENGTH": ("extract_length", int),
            "SUCCINCT_BENCH_LATENCY_SAMPLE_K": ("latency_sample_k", int),
        }
        for key, (attr, caster) in mapping.items():
            raw_value = env.get(key)
            if raw_value is None:
                continue
            try:
                value = caster(raw_value)
            except ValueError as exc:
                raise ConfigurationError(f"Invalid env override {key}={raw_value!r}") from exc
            setattr(self, attr, value)


def load_harness_config(path: str | None) -> HarnessConfig:
    config_path = Path(path) if path else None
    return HarnessConfig.load(config_path)


__all__ = ["CONFIG_ENV_VAR", "HarnessConfig", "load_harness_config"]
