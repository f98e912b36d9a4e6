"""Shared primitives: storage modes and latency sampling."""

from .latency import DEFAULT_PERCENTILES, LatencyReservoir
from .modes import StorageMode

__all__ = ["DEFAULT_PERCENTILES", "LatencyReservoir", "StorageMode"]
