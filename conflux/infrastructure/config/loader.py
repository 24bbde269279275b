"""
Retriever options loading and saving utilities.

Options are read from a YAML or JSON file and then overridden by
environment variables prefixed with ``CONFLUX_``.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ...core.services.merger import merge
from .models import RetrieverOptions


class ConfigLoader:
    """Options loader supporting YAML, JSON and environment overrides."""

    def __init__(self, env_prefix: str = "CONFLUX_") -> None:
        self._env_prefix = env_prefix

    def load_config(self, config_file: Optional[str] = None) -> RetrieverOptions:
        """
        Load retriever options from file and environment variables.

        Args:
            config_file: Path to options file (optional)

        Returns:
            Loaded and validated options
        """
        config_data: Dict[str, Any] = {}

        if config_file:
            config_data = self._load_from_file(config_file)

        env_overrides = self._load_from_environment()
        config_data = merge(config_data, 1, env_overrides)

        options = RetrieverOptions.from_dict(config_data)
        options.config_file_path = config_file

        return options

    def save_config(self, options: RetrieverOptions, file_path: str, format: str = "yaml") -> None:
        """
        Save options to file.

        Args:
            options: Options to save
            file_path: Output file path
            format: File format (yaml or json)
        """
        config_data = options.to_dict()

        if format.lower() == "yaml":
            self._save_yaml(config_data, file_path)
        elif format.lower() == "json":
            self._save_json(config_data, file_path)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load options from file."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Options file not found: {file_path}")

        if path.suffix.lower() in ['.yaml', '.yml']:
            data = self._load_yaml(file_path)
        elif path.suffix.lower() == '.json':
            data = self._load_json(file_path)
        else:
            raise ValueError(f"Unsupported options file format: {path.suffix}")

        if not isinstance(data, dict):
            raise ValueError(f"Options file {file_path} must contain a mapping")
        return data

    def _load_yaml(self, file_path: str) -> Any:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {file_path}: {e}")
        except OSError as e:
            raise ValueError(f"Error reading {file_path}: {e}")

    def _load_json(self, file_path: str) -> Any:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {file_path}: {e}")
        except OSError as e:
            raise ValueError(f"Error reading {file_path}: {e}")

    def _save_yaml(self, data: Dict[str, Any], file_path: str) -> None:
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(data, f, default_flow_style=False, indent=2, sort_keys=False)
        except OSError as e:
            raise ValueError(f"Error writing YAML to {file_path}: {e}")

    def _save_json(self, data: Dict[str, Any], file_path: str) -> None:
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise ValueError(f"Error writing JSON to {file_path}: {e}")

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load option overrides from environment variables."""
        config: Dict[str, Any] = {}

        env_mappings = {
            f"{self._env_prefix}SCAN_PERIOD": ("scan_period", float),
            f"{self._env_prefix}INCLUDE_DEFAULT_STORES": ("include_default_stores", self._parse_bool),
            f"{self._env_prefix}LOG_LEVEL": ("logging.level", str),
            f"{self._env_prefix}LOG_DIR": ("logging.log_directory", str),
            f"{self._env_prefix}LOG_FILE_ENABLED": ("logging.file_enabled", self._parse_bool),
        }

        for env_var, (config_path, converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                try:
                    converted_value = converter(value)  # type: ignore[operator]
                    self._set_nested_value(config, config_path, converted_value)
                except (ValueError, TypeError) as e:
                    raise ValueError(f"Invalid value for {env_var}: {value} ({e})")

        return config

    def _parse_bool(self, value: str) -> bool:
        return value.lower() in ('true', '1', 'yes', 'on', 'enabled')

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any) -> None:
        """Set a nested value using dot notation."""
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value
