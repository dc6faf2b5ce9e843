"""User configuration file handling."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = "config.yaml"


def default_config_dir() -> Path:
    """``$SUPLOAD_CONFIG_DIR``, or ``~/.supload``."""
    return Path(os.getenv("SUPLOAD_CONFIG_DIR") or Path.home() / ".supload")


def get_config_path(config_dir: Optional[Path] = None) -> Path:
    """Location of the user's config file."""
    return Path(config_dir or default_config_dir()) / CONFIG_FILENAME


def load_config(config_path: Path) -> Optional[Dict[str, Any]]:
    """
    Load the config file.

    Returns:
        The parsed mapping, or None if the file does not exist

    Raises:
        yaml.YAMLError: If the file is not valid YAML
    """
    if not config_path.exists():
        return None

    with open(config_path, "r") as f:
        return yaml.safe_load(f)


def save_config(config_path: Path, config_data: Dict[str, Any]) -> None:
    """Write the config file in block style, creating its directory."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.safe_dump(config_data, f, default_flow_style=False, sort_keys=False)
