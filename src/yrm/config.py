"""TOML config loading for yrm.toml."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "yrm.toml"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class OutputConfig:
    indent: int = 4
    sort_keys: bool = False


@dataclass
class DiagnosticsConfig:
    color: bool = True


@dataclass
class LoggingConfig:
    level: str = "WARNING"

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level)


@dataclass
class YrmConfig:
    output: OutputConfig = field(default_factory=OutputConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find yrm.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> YrmConfig:
    """Parse a yrm.toml file into a YrmConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = YrmConfig()

    if "output" in data:
        out = data["output"]
        config.output = OutputConfig(
            indent=out.get("indent", 4),
            sort_keys=out.get("sort_keys", False),
        )

    if "diagnostics" in data:
        diag = data["diagnostics"]
        config.diagnostics = DiagnosticsConfig(
            color=diag.get("color", True),
        )

    if "logging" in data:
        level = str(data["logging"].get("level", "WARNING")).upper()
        if level not in _LEVELS:
            raise ValueError(f"unknown log level '{level}' in {path}")
        config.logging = LoggingConfig(level=level)

    return config
