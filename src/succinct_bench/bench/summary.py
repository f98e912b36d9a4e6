"""Pydantic models describing the outcome of a benchmark run."""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import suppress
from datetime import datetime
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from succinct_bench.contracts.error import Exit

SUMMARY_SCHEMA = "succinct_bench.run_summary.v1"


class OutcomeStatus(StrEnum):
    OK = "ok"
    FAILED = "failed"


class OperationOutcome(BaseModel):
    """Result of running one operation of one target."""

    target: str
    operation: str
    status: OutcomeStatus = OutcomeStatus.OK
    invocations: int = Field(default=0, ge=0)
    result_path: str | None = Field(default=None, description="Artifact written for this operation.")
    elapsed_ms: float = Field(default=0.0, ge=0.0)
    mean_us: float = Field(default=0.0, ge=0.0)
    p50_us: float = Field(default=0.0, ge=0.0)
    p90_us: float = Field(default=0.0, ge=0.0)
    p99_us: float = Field(default=0.0, ge=0.0)
    error: str | None = None

    @field_validator("target", "operation")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("value must not be blank")
        return value

    @classmethod
    def failure(cls, target: str, operation: str, exc: BaseException) -> OperationOutcome:
        return cls(
            target=target,
            operation=operation,
            status=OutcomeStatus.FAILED,
            error=f"{type(exc).__name__}: {exc}",
        )


class RunSummary(BaseModel):
    """Every outcome from one CLI invocation."""

    schema_id: str = Field(default=SUMMARY_SCHEMA, alias="schema")
    specifier: str
    dataset: str
    storage_mode: str
    result_path: str
    started_at: datetime
    finished_at: datetime | None = None
    outcomes: list[OperationOutcome] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @property
    def succeeded(self) -> list[OperationOutcome]:
        return [o for o in self.outcomes if o.status is OutcomeStatus.OK]

    @property
    def failed(self) -> list[OperationOutcome]:
        return [o for o in self.outcomes if o.status is not OutcomeStatus.OK]

    @property
    def ok(self) -> bool:
        return not self.failed

    def exit_code(self) -> Exit:
        return Exit.OK if self.ok else Exit.PARTIAL

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)

    def write_json(self, path: str | Path) -> Path:
        """Write the summary atomically and return the resolved path."""

        target = Path(path).expanduser().resolve()
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = tempfile.NamedTemporaryFile(
            "w",
            delete=False,
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            encoding="utf-8",
        )
        tmp_path = Path(tmp.name)
        try:
            with tmp:
                json.dump(self.to_payload(), tmp, indent=2, ensure_ascii=False)
                tmp.write("\n")
            os.replace(tmp_path, target)
        except Exception:
            with suppress(FileNotFoundError):
                tmp_path.unlink()
            raise
        return target


__all__ = ["OperationOutcome", "OutcomeStatus", "RunSummary", "SUMMARY_SCHEMA"]
