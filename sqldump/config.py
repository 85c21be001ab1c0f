"""
Configuration loading and validation for SQL Dump.
"""

import os
import re
from typing import Any, Optional

import yaml

from .exceptions import ConfigurationError
from .models import AuthMode, DumpConfig, DumpOptions

CONNECTION_KEYS = (
    'server', 'database', 'authentication', 'username', 'password',
    'driver', 'timeout', 'encrypt', 'trust_server_certificate',
)
DUMP_KEYS = ('limit', 'use_transaction', 'identity_insert', 'exclude', 'tables', 'batch_size')
OUTPUT_KEYS = ('file', 'encoding')


class ConfigLoader:
    """Loads configuration from an optional YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.config = self._load_config() if config_path else {}

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration file '{self.config_path}' must contain a mapping")

        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_connection_settings(self) -> dict[str, Any]:
        """Get connection settings."""
        return self.config.get('connection') or {}

    def get_dump_settings(self) -> dict[str, Any]:
        """Get dump settings."""
        return self.config.get('dump') or {}

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self.config.get('output') or {}

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return dict(self.config.get('logging') or {})

    def resolve(self, overrides: Optional[dict[str, Any]] = None) -> DumpConfig:
        """
        Build a validated DumpConfig.

        Values in ``overrides`` (typically from the command line) take
        priority over the file; ``None`` means "not given".
        """
        overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

        connection = _merge(self.get_connection_settings(), overrides, CONNECTION_KEYS)
        dump = _merge(self.get_dump_settings(), overrides, DUMP_KEYS)
        output = _merge(self.get_output_settings(), overrides, OUTPUT_KEYS, prefix='output_')

        options = DumpOptions(
            limit=_optional_int(dump.get('limit'), 'limit', minimum=0),
            include_identity_insert=_flag(dump.get('identity_insert')),
            list_is_exclusive=_flag(dump.get('exclude')),
            table_name_filter=frozenset(_table_list(dump.get('tables'))),
            use_transaction=_flag(dump.get('use_transaction')),
            batch_size=_optional_int(dump.get('batch_size'), 'batch_size', minimum=1) or DumpOptions.batch_size,
        )

        config = DumpConfig(
            server=_text(connection.get('server')),
            database=_text(connection.get('database')),
            auth_mode=_auth_mode(connection.get('authentication')),
            username=connection.get('username'),
            password=connection.get('password'),
            driver=connection.get('driver'),
            timeout=_optional_int(connection.get('timeout'), 'timeout', minimum=0) or 0,
            encrypt=_optional_flag(connection.get('encrypt')),
            trust_server_certificate=_optional_flag(connection.get('trust_server_certificate')),
            options=options,
            output_file=output.get('file'),
            output_encoding=output.get('encoding') or 'utf-8',
        )

        validate_config(config)
        return config


def validate_config(config: DumpConfig) -> None:
    """Reject configurations that cannot produce a dump."""
    if not config.server:
        raise ConfigurationError("No server supplied")
    if not config.database:
        raise ConfigurationError("No database supplied")
    if config.auth_mode == AuthMode.SQL and (config.username is None or config.password is None):
        raise ConfigurationError("Must supply username and password for SQL Server Authentication")


def _merge(
    file_settings: dict[str, Any],
    overrides: dict[str, Any],
    keys: tuple[str, ...],
    prefix: str = ''
) -> dict[str, Any]:
    merged = {}
    for key in keys:
        if key in file_settings:
            merged[key] = file_settings[key]
        if prefix + key in overrides:
            merged[key] = overrides[prefix + key]
    return merged


def _text(value: Any) -> str:
    return '' if value is None else str(value).strip()


def _flag(value: Any) -> bool:
    return bool(_optional_flag(value))


def _optional_flag(value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ('1', 'true', 'yes', 'on'):
            return True
        if lowered in ('0', 'false', 'no', 'off', ''):
            return False
    raise ConfigurationError(f"Invalid boolean value: {value!r}")


def _optional_int(value: Any, name: str, minimum: int) -> Optional[int]:
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ConfigurationError(f"'{name}' must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{name}' must be an integer, got {value!r}") from None
    if number < minimum:
        raise ConfigurationError(f"'{name}' must be at least {minimum}, got {number}")
    return number


def _auth_mode(value: Any) -> AuthMode:
    if value is None:
        return AuthMode.INTEGRATED
    if isinstance(value, AuthMode):
        return value
    try:
        return AuthMode(str(value).strip().lower())
    except ValueError:
        choices = ', '.join(mode.value for mode in AuthMode)
        raise ConfigurationError(f"Unknown authentication mode '{value}' (expected one of: {choices})") from None


def _table_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(',')
    return [str(name).strip() for name in value if str(name).strip()]
