from __future__ import annotations

from enum import StrEnum

from succinct_bench.contracts.error import ConfigurationError


class StorageMode(StrEnum):
    """How an in-memory target constructs or loads its structure."""

    MEMORY_ONLY = "MEMORY_ONLY"
    MEMORY_MAPPED = "MEMORY_MAPPED"

    @classmethod
    def parse(cls, raw: str | None) -> StorageMode:
        if raw is None:
            return cls.MEMORY_ONLY
        try:
            return cls(raw)
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ConfigurationError(
                f"Unknown storage mode {raw!r}",
                hint=f"Storage mode must be one of {choices}",
            ) from exc


__all__ = ["StorageMode"]
