"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from typing import Any, Dict

import yaml

DEFAULT_DOCUMENT_ID = '1KqZd2pXXTppIx6GaIAmdS80ax-eZX1Sp3bptmg3HMYg'
DOCUMENTS_READONLY_SCOPE = 'https://www.googleapis.com/auth/documents.readonly'

DEFAULT_CONFIG: Dict[str, Any] = {
    'google': {
        'client_secret_file': 'credentials.json',
        'token_file': '.token',
        # Changing scopes requires deleting the saved token file
        'scopes': [DOCUMENTS_READONLY_SCOPE],
    },
    'document': {
        'id': DEFAULT_DOCUMENT_ID,
        'source': 'api',
        'json_path': None,
    },
    'export': {
        'output_directory': 'tmp',
        'download_images': True,
        'progress_bars': True,
    },
    'logging': {
        'level': None,
        'file': None,
    },
}

DOCUMENT_SOURCES = ('api', 'file')


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Values missing from the file fall back to ``DEFAULT_CONFIG``.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        # An empty file is a valid "use the defaults" config
        if config_data is None:
            config_data = {}

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        config_data = cls._substitute_env_vars_recursive(config_data)

        return deep_merge(DEFAULT_CONFIG, config_data)

    @classmethod
    def defaults(cls) -> Dict[str, Any]:
        """Return a fresh copy of the default configuration."""
        return copy.deepcopy(DEFAULT_CONFIG)

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        source = get_nested(config, 'document.source', 'api')
        if source not in DOCUMENT_SOURCES:
            raise ValueError(f"document.source must be one of: {list(DOCUMENT_SOURCES)}")

        if source == 'api':
            cls._validate_required_field(config, 'document.id')
            cls._validate_required_field(config, 'google.client_secret_file')
            cls._validate_required_field(config, 'google.token_file')

            scopes = get_nested(config, 'google.scopes')
            if not isinstance(scopes, list) or not scopes:
                raise ValueError("google.scopes must be a non-empty list")
        else:
            cls._validate_required_field(config, 'document.json_path')

        cls._validate_required_field(config, 'export.output_directory')

        for flag in ('export.download_images', 'export.progress_bars'):
            if not isinstance(get_nested(config, flag, True), bool):
                raise ValueError(f"{flag} must be a boolean")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments namespace

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)
        merged.setdefault('logging', {})

        verbose = getattr(args, 'verbose', 0)
        if verbose >= 2:
            merged['logging']['level'] = 'DEBUG'
        elif verbose == 1:
            merged['logging']['level'] = 'INFO'

        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            env_value = os.getenv(match.group(1))
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @staticmethod
    def _validate_required_field(config: dict, field: str) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config, field)
        if value is None or value == '':
            raise ValueError(f"Missing required configuration: {field}")

        if isinstance(value, str) and '${' in value:
            match = ConfigLoader.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ValueError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of base with override merged in, recursing into dictionaries."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "export.output_directory")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    value = config

    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


__all__ = [
    'ConfigLoader',
    'DEFAULT_CONFIG',
    'DEFAULT_DOCUMENT_ID',
    'DOCUMENTS_READONLY_SCOPE',
    'deep_merge',
    'get_nested'
]
