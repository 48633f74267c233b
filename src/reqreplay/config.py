"""
reqreplay Generator Configuration

YAML-backed settings for script generation.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any, Union

import yaml

from .exceptions import ConfigError


@dataclass
class GeneratorConfig:
    """Configuration for replay script generation."""

    # Output location
    output_dir: str = "."
    filename_template: str = "request_{index}.py"  # {index}, {method}
    file_mode: int = 0o600  # Generated scripts may carry credentials

    # Generated script help text
    prog_name: str = "make_request.py"
    epilog: str = "Script generated with reqreplay"

    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GeneratorConfig':
        """Create config from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        config = cls(**{k: v for k, v in data.items() if k in known})

        if isinstance(config.file_mode, str):
            try:
                config.file_mode = int(config.file_mode, 8)
            except ValueError:
                raise ConfigError(f"Invalid file_mode: {config.file_mode!r}") from None

        config.validate()
        return config

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> 'GeneratorConfig':
        """
        Load config from a YAML file.

        Args:
            yaml_path: Path to YAML config

        Returns:
            GeneratorConfig

        Raises:
            ConfigError: If the file can't be read or isn't a mapping
        """
        try:
            with open(yaml_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config {yaml_path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config {yaml_path} must be a mapping, got {type(data).__name__}"
            )

        return cls.from_dict(data)

    def output_filename(self, index: int, method: str) -> str:
        """Filename for the script generated from capture index."""
        return self.filename_template.format(index=index, method=method.lower())

    def validate(self):
        """
        Check values that are only used later in generation.

        Raises:
            ConfigError: If log_level isn't a logging level name or
                filename_template uses placeholders other than {index}/{method}
        """
        if not isinstance(getattr(logging, str(self.log_level).upper(), None), int):
            raise ConfigError(
                f"Invalid log_level: {self.log_level!r} "
                f"(expected one of debug, info, warning, error, critical)"
            )

        try:
            self.output_filename(0, "get")
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigError(
                f"Invalid filename_template {self.filename_template!r}: {e!r} "
                f"(available placeholders: {{index}}, {{method}})"
            ) from None
