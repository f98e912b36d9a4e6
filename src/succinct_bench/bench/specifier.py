"""Parse ``target[.operation]`` benchmark specifiers into requests."""

from __future__ import annotations

from dataclasses import dataclass

from succinct_bench.contracts.error import ValidationError

from .capabilities import ALL_TARGETS, CAPABILITIES, TARGET_NAMES

_SEPARATOR = "."
_MAX_TOKENS = 2


@dataclass(frozen=True, slots=True)
class BenchmarkSpecifier:
    target: str
    operation: str | None = None

    def __str__(self) -> str:
        if self.operation is None:
            return self.target
        return f"{self.target}{_SEPARATOR}{self.operation}"


@dataclass(frozen=True, slots=True)
class BenchmarkRequest:
    raw: str
    entries: tuple[BenchmarkSpecifier, ...]
    is_global: bool = False

    @property
    def is_sweep(self) -> bool:
        return all(entry.operation is None for entry in self.entries)

    @property
    def targets(self) -> tuple[str, ...]:
        return tuple(entry.target for entry in self.entries)


def _global_request(raw: str) -> BenchmarkRequest:
    entries = tuple(BenchmarkSpecifier(name) for name in TARGET_NAMES)
    return BenchmarkRequest(raw=raw or ALL_TARGETS, entries=entries, is_global=True)


def _unknown_target(token: str) -> ValidationError:
    return ValidationError(
        f"Unknown benchmark target {token!r}",
        hint=f"Target must be one of {', '.join(TARGET_NAMES)} or {ALL_TARGETS}",
    )


def resolve(raw: str | None) -> BenchmarkRequest:
    """Validate ``raw`` against the capability table and build a request.

    ``None``, ``""`` and ``"all"`` select every operation of every target.
    Matching is exact and case-sensitive.
    """

    if raw is None or raw == "" or raw == ALL_TARGETS:
        return _global_request(raw or "")

    tokens = raw.split(_SEPARATOR)
    if len(tokens) > _MAX_TOKENS:
        raise ValidationError(
            f"Invalid benchmark specifier {raw!r}: expected at most {_MAX_TOKENS} "
            f"dot-separated tokens, got {len(tokens)}",
            hint="Use <target>, <target>.<operation> or all",
        )

    target = tokens[0]
    capability = CAPABILITIES.get(target)
    if capability is None:
        raise _unknown_target(target)

    if len(tokens) == 1:
        return BenchmarkRequest(raw=raw, entries=(BenchmarkSpecifier(target),))

    operation = tokens[1]
    if capability.operation(operation) is None:
        raise ValidationError(
            f"Unknown operation {operation!r} for target {target!r}",
            hint=f"{target} supports {', '.join(capability.operation_names)}",
        )
    return BenchmarkRequest(raw=raw, entries=(BenchmarkSpecifier(target, operation),))


__all__ = ["BenchmarkRequest", "BenchmarkSpecifier", "resolve"]
