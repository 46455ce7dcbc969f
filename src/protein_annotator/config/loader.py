"""Configuration loading with YAML parsing and validation."""

from pathlib import Path
from typing import Any

import pydantic_yaml

from .schema import AnnotatorConfig


def load_config(config_path: Path | str) -> AnnotatorConfig:
    """
    Load and validate annotator configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated AnnotatorConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        yaml_content = f.read()

    return pydantic_yaml.parse_yaml_raw_as(AnnotatorConfig, yaml_content)


def _set_dotted(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    """Assign value at a dotted path such as "fragmentation.step_size"."""
    *parents, leaf = dotted_key.split(".")
    for part in parents:
        section = data.get(part)
        if not isinstance(section, dict):
            raise KeyError(f"Unknown config section: {dotted_key}")
        data = section
    data[leaf] = value


def load_config_with_overrides(
    config_path: Path | str,
    overrides: dict[str, Any],
) -> AnnotatorConfig:
    """
    Load the YAML config and replace individual values before validation.

    The annotate command uses this for --window-size and --step-size, so the
    same window/step checks apply to flags as to the file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        KeyError: If a dotted key names a section the config lacks
        pydantic.ValidationError: If the overridden config is invalid
    """
    values = load_config(config_path).model_dump()
    for dotted_key, value in overrides.items():
        _set_dotted(values, dotted_key, value)
    return AnnotatorConfig.model_validate(values)
