"""Dataset access helpers for the benchmark harness."""

from .hadoop import ExternalConfig, load_external_config
from .structures import (
    EntryPointLoader,
    StructureLoader,
    SuccinctStructure,
    check_dataset,
)

__all__ = [
    "EntryPointLoader",
    "ExternalConfig",
    "StructureLoader",
    "SuccinctStructure",
    "check_dataset",
    "load_external_config",
]
