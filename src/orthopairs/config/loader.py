"""Load the run configuration from YAML.

Missing files, schema violations and unknown override sections are
reported as ConfigurationError so the CLI can show one message and exit
instead of a traceback.
"""

from pathlib import Path
from typing import Any

import pydantic_yaml
import structlog
from pydantic import ValidationError

from orthopairs.exceptions import ConfigurationError

from .schema import OrthopairsConfig

logger = structlog.get_logger()


def _describe_validation_error(config_path: Path, error: ValidationError) -> str:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or '<root>'}: {item['msg']}"
        for item in error.errors()
    )
    return f"Invalid configuration {config_path}: {problems}"


def load_config(config_path: Path | str) -> OrthopairsConfig:
    """
    Read and validate a release configuration.

    Raises:
        ConfigurationError: If the file is missing or fails validation
            (e.g. no release_number)
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigurationError(f"Config file not found: {config_path}")

    yaml_content = config_path.read_text()
    try:
        config = pydantic_yaml.parse_yaml_raw_as(OrthopairsConfig, yaml_content)
    except ValidationError as e:
        raise ConfigurationError(_describe_validation_error(config_path, e)) from e

    logger.debug("config_loaded", path=str(config_path), release=config.release_number)
    return config


def load_config_with_overrides(
    config_path: Path | str,
    overrides: dict[str, Any],
) -> OrthopairsConfig:
    """
    Load a configuration and replace selected values, e.g. from CLI flags.

    Nested keys use dots: ``{"api.batch_size": 250}``. Overridden values are
    validated like values read from the file.

    Raises:
        ConfigurationError: If loading fails, an override names an unknown
            section, or the result is invalid
    """
    config_path = Path(config_path)
    config_dict = load_config(config_path).model_dump()

    for key, value in overrides.items():
        *sections, field_name = key.split(".")
        target = config_dict
        for section in sections:
            if not isinstance(target.get(section), dict):
                raise ConfigurationError(f"Unknown configuration section in override '{key}'")
            target = target[section]
        target[field_name] = value

    try:
        return OrthopairsConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(_describe_validation_error(config_path, e)) from e
