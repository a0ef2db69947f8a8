"""
SeededRandomConfig: Project-level settings for the pytest plugin.

Settings live in the ``[tool.seededrandom]`` table of the nearest
``pyproject.toml``::

    [tool.seededrandom]
    report_seeds = true     # list generator seeds in failure reports
    log_level = "DEBUG"     # level for the "seededrandom" logger

All keys are optional.

Example:
    >>> config = SeededRandomConfig.load()
    >>> config.report_seeds
    True
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "pyproject.toml"
TOOL_SECTION = "seededrandom"


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """
    Return the nearest ``pyproject.toml`` at or above *start_dir*.

    *start_dir* defaults to the current working directory. Returns ``None``
    when no directory up to the filesystem root has one.
    """
    here = (start_dir or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


@dataclass(frozen=True)
class SeededRandomConfig:
    """
    Settings for the pytest plugin.

    Attributes:
        report_seeds: Add the seeds of all generators used by a failing
            test to its report.
        log_level: Level name applied to the ``seededrandom`` logger, or
            ``None`` to leave logging configuration alone.
    """

    report_seeds: bool = True
    log_level: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SeededRandomConfig:
        """
        Create a config from the ``[tool.seededrandom]`` table.

        Raises:
            ValueError: On unknown keys or values of the wrong type.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown [tool.{TOOL_SECTION}] keys: {', '.join(unknown)}. "
                f"Known keys: {', '.join(sorted(known))}"
            )

        report_seeds = data.get("report_seeds", True)
        if not isinstance(report_seeds, bool):
            raise ValueError(f"report_seeds must be a boolean, got {report_seeds!r}")

        log_level = data.get("log_level")
        if log_level is not None:
            if not isinstance(log_level, str):
                raise ValueError(f"log_level must be a string, got {log_level!r}")
            log_level = log_level.upper()
            if log_level not in logging.getLevelNamesMapping():
                raise ValueError(f"Unknown log_level: {data['log_level']!r}")

        return cls(report_seeds=report_seeds, log_level=log_level)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> SeededRandomConfig:
        """
        Find and load the config from the nearest ``pyproject.toml``.

        Returns the defaults when there is no ``pyproject.toml`` or it has no
        ``[tool.seededrandom]`` table.
        """
        config_path = find_config_file(start_dir)
        if config_path is None:
            logger.debug("No %s found; using default settings", CONFIG_FILENAME)
            return cls()

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        section = data.get("tool", {}).get(TOOL_SECTION, {})
        logger.debug("Loaded [tool.%s] from %s", TOOL_SECTION, config_path)
        return cls.from_dict(section)

    def apply_logging(self) -> None:
        """Set the level of the ``seededrandom`` logger, if configured."""
        if self.log_level is not None:
            logging.getLogger("seededrandom").setLevel(self.log_level)
