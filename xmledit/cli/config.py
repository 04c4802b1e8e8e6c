"""YAML configuration loading and saving.

This module handles the project configuration stored in
.xmledit/config.yaml. A missing file is not an error: every field has a
default.
"""

import os
from dataclasses import asdict
from typing import Any, Dict

import yaml

from .errors import ConfigError
from .models import EditorConfig

DEFAULT_CONFIG_PATH = os.path.join('.xmledit', 'config.yaml')


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure:
        ai_endpoint: "http://localhost:3001"
        samples_dir: "./xml-samples"
        export_dir: "./exports"
        request_timeout: 30
    """

    KNOWN_FIELDS = {'ai_endpoint', 'samples_dir', 'export_dir', 'request_timeout'}

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_PATH) -> EditorConfig:
        """Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            EditorConfig; defaults when the file does not exist or is empty

        Raises:
            ConfigError: If the file cannot be read or is malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            return EditorConfig()
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}")

        if not content.strip():
            return EditorConfig()

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> EditorConfig:
        unknown = set(config_dict) - cls.KNOWN_FIELDS
        if unknown:
            raise ConfigError(f"Unknown field(s): {', '.join(sorted(unknown))}")

        for name in ('ai_endpoint', 'samples_dir', 'export_dir'):
            value = config_dict.get(name)
            if value is not None and not isinstance(value, str):
                raise ConfigError("must be a string", name)

        timeout = config_dict.get('request_timeout')
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigError("must be a positive number", 'request_timeout')

        return EditorConfig(
            ai_endpoint=config_dict.get('ai_endpoint'),
            samples_dir=config_dict.get('samples_dir'),
            export_dir=config_dict.get('export_dir') or EditorConfig.export_dir,
            request_timeout=timeout,
        )

    @classmethod
    def save(cls, config_path: str, config: EditorConfig) -> None:
        """Save configuration to a YAML file, omitting unset fields.

        Raises:
            ConfigError: If the file cannot be written
        """
        config_dict = {k: v for k, v in asdict(config).items() if v is not None}
        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(config_path)
        try:
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except OSError as e:
            raise ConfigError(f"Cannot write {config_path}: {e}")
