"""Optional Hadoop configuration lookup for remote dataset access."""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET  # noqa: S405  # nosec B405 - local admin-controlled config
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from succinct_bench.contracts.error import ConfigurationError

logger = logging.getLogger(__name__)

HADOOP_CONF_ENV_VAR = "HADOOP_CONF_DIR"
RESOURCE_NAMES: tuple[str, ...] = ("core-site.xml", "hdfs-site.xml")


@dataclass(frozen=True)
class ExternalConfig:
    """Hadoop resource files found under a configuration directory."""

    conf_dir: Path
    resources: tuple[Path, ...] = field(default_factory=tuple)

    def properties(self) -> dict[str, str]:
        """Merge ``<property>`` name/value pairs; later resources win."""

        merged: dict[str, str] = {}
        for resource in self.resources:
            try:
                root = ET.parse(resource).getroot()  # noqa: S314  # nosec B314
            except ET.ParseError as exc:
                raise ConfigurationError(
                    f"Malformed Hadoop resource {resource}: {exc}",
                    hint=f"Check the files under ${HADOOP_CONF_ENV_VAR}",
                ) from exc
            for prop in root.iter("property"):
                name = prop.findtext("name")
                if not name:
                    continue
                merged[name.strip()] = (prop.findtext("value") or "").strip()
        return merged


def load_external_config(
    env: Mapping[str, str] | None = None, var: str = HADOOP_CONF_ENV_VAR
) -> ExternalConfig | None:
    """Return the resources named by ``var``, or ``None`` when it is unset."""

    source = os.environ if env is None else env
    raw = source.get(var)
    if raw is None or not raw.strip():
        return None
    conf_dir = Path(raw.strip()).expanduser()
    resources = tuple(
        conf_dir / name for name in RESOURCE_NAMES if (conf_dir / name).is_file()
    )
    if not resources:
        logger.warning("%s=%s contains no Hadoop resources", var, conf_dir)
    return ExternalConfig(conf_dir=conf_dir, resources=resources)


__all__ = ["ExternalConfig", "HADOOP_CONF_ENV_VAR", "RESOURCE_NAMES", "load_external_config"]
