# Copyright (c) Syntropy Systems
"""Configuration management for expose."""
from __future__ import annotations

from pathlib import Path
from typing import cast

import yaml

from expose.models.experiment import ExperimentConfig

CONFIG_FILENAME = "config.yaml"


def find_expose_dir(start_path: Path | None = None) -> Path | None:
    """Find the nearest .expose directory by walking up from start_path.

    Returns None if no .expose directory is found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        expose_dir = current / ".expose"
        if expose_dir.is_dir():
            return expose_dir
        current = current.parent

    # Check root
    expose_dir = current / ".expose"
    if expose_dir.is_dir():
        return expose_dir

    return None


def get_global_config_dir() -> Path:
    """Get the global expose config directory (~/.expose)."""
    return Path.home() / ".expose"


def find_config_path(expose_dir: Path | None = None) -> Path | None:
    """Locate the config file that load_config would read.

    Looks in:
    1. Provided expose_dir
    2. Nearest .expose directory walking up
    3. ~/.expose/config.yaml
    """
    if expose_dir is not None:
        return expose_dir / CONFIG_FILENAME

    found_dir = find_expose_dir()
    if found_dir is not None:
        return found_dir / CONFIG_FILENAME

    global_config = get_global_config_dir() / CONFIG_FILENAME
    if global_config.exists():
        return global_config

    return None


def load_config(
    config_path: Path | None = None,
    expose_dir: Path | None = None,
) -> ExperimentConfig:
    """Load experiment settings from YAML, falling back to defaults.

    An explicit ``config_path`` must exist. Otherwise the file found by
    find_config_path is used if present. Unknown keys are ignored.

    Raises:
        FileNotFoundError: If ``config_path`` is given but missing.
        ValueError: If the file does not hold a mapping.
        pydantic.ValidationError: If a value is out of range.

    """
    if config_path is not None:
        if not config_path.exists():
            msg = f"Config file not found: {config_path}"
            raise FileNotFoundError(msg)
    else:
        config_path = find_config_path(expose_dir)

    if config_path is None or not config_path.exists():
        return ExperimentConfig()

    with config_path.open() as f:
        data = cast("object", yaml.safe_load(f) or {})

    if not isinstance(data, dict):
        msg = f"Config file must contain a mapping: {config_path}"
        raise ValueError(msg)  # noqa: TRY004

    return ExperimentConfig.model_validate(data)


def write_default_config(path: Path) -> None:
    """Write the default settings as YAML to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.dump(ExperimentConfig().model_dump(), f, default_flow_style=False)
