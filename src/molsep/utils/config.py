"""Configuration management and validation."""

import yaml
import json
from pathlib import Path
from typing import Dict, Any, Union

from molsep.core.types import ValidationResult, SeparationStrategy
from molsep.core.exceptions import ConfigurationError


SUPPORTED_STRATEGIES = [strategy.value for strategy in SeparationStrategy]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def create_default_configuration() -> Dict[str, Any]:
    """
    Create default configuration.

    Returns:
        Default configuration dictionary
    """
    return {
        "separation": {
            "strategy": "bc"
        },
        "resources": {
            "threads": 1,
            "chunk_size": None
        },
        "output": {
            "graph_file": None,
            "stats_file": None
        },
        "logging": {
            "level": "INFO",
            "file": None
        }
    }


def load_configuration(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load and validate configuration from file.

    Values missing from the file are taken from the default configuration.

    Args:
        config_path: Path to configuration file (YAML or JSON)

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigurationError: Invalid configuration
        FileNotFoundError: Configuration file not found
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            if config_path.suffix.lower() in ['.yaml', '.yml']:
                config = yaml.safe_load(f)
            elif config_path.suffix.lower() == '.json':
                config = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported config file format: {config_path.suffix}", config_path
                )

    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error parsing configuration file: {e}", config_path)

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration file must contain a mapping", config_path)

    try:
        return merge_configurations(create_default_configuration(), config)
    except ConfigurationError as e:
        raise ConfigurationError(str(e), config_path) from None


def validate_configuration_schema(config: Dict[str, Any]) -> ValidationResult:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        ValidationResult with validation status
    """
    errors = []
    warnings = []

    for section in ["separation", "resources", "output", "logging"]:
        if section not in config:
            warnings.append(f"Missing '{section}' configuration - using defaults")
        elif not isinstance(config[section], dict):
            errors.append(f"'{section}' must be a dictionary")

    separation = config.get("separation")
    if isinstance(separation, dict):
        strategy = separation.get("strategy", "bc")
        if strategy not in SUPPORTED_STRATEGIES:
            errors.append(f"unsupported molecule separation strategy: {strategy!r}")

    resources = config.get("resources")
    if isinstance(resources, dict):
        threads = resources.get("threads", 1)
        if isinstance(threads, bool) or not isinstance(threads, int) or threads < 1:
            errors.append(f"'resources.threads' must be a positive integer, got {threads!r}")
        chunk_size = resources.get("chunk_size")
        if chunk_size is not None and (
            isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size < 1
        ):
            errors.append(f"'resources.chunk_size' must be a positive integer, got {chunk_size!r}")

    logging_config = config.get("logging")
    if isinstance(logging_config, dict):
        level = logging_config.get("level", "INFO")
        if str(level).upper() not in LOG_LEVELS:
            errors.append(f"'logging.level' must be one of {LOG_LEVELS}, got {level!r}")

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        details={"validation": "schema_checks_completed"}
    )


def merge_configurations(
    base_config: Dict[str, Any],
    override_config: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Merge configuration dictionaries with validation.

    Args:
        base_config: Base configuration
        override_config: Override parameters

    Returns:
        Merged configuration
    """
    def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    merged = merge_dicts(base_config, override_config)

    validation_result = validate_configuration_schema(merged)
    if not validation_result.is_valid:
        raise ConfigurationError(
            f"Configuration validation failed: {'; '.join(validation_result.errors)}"
        )

    return merged


def save_configuration(config: Dict[str, Any], output_path: Union[str, Path]) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration dictionary
        output_path: Output file path

    Raises:
        ConfigurationError: Error saving configuration
    """
    output_path = Path(output_path)

    if output_path.suffix.lower() not in ['.yaml', '.yml', '.json']:
        raise ConfigurationError(f"Unsupported output format: {output_path.suffix}", output_path)

    try:
        with open(output_path, 'w') as f:
            if output_path.suffix.lower() == '.json':
                json.dump(config, f, indent=2)
            else:
                yaml.dump(config, f, default_flow_style=False, indent=2)

    except (yaml.YAMLError, TypeError, OSError) as e:
        raise ConfigurationError(f"Error saving configuration: {e}", output_path)
