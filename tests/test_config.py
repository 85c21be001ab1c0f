"""
Unit tests for config.py
"""

import os
import tempfile
from unittest import mock

import pytest
import yaml

from sqldump.config import ConfigLoader, validate_config
from sqldump.exceptions import ConfigurationError
from sqldump.models import AuthMode, DumpConfig


class TestConfigLoader:
    """Tests for ConfigLoader class."""

    @pytest.fixture
    def sample_config(self):
        """Sample configuration dictionary."""
        return {
            "connection": {
                "server": "db01",
                "database": "shop",
                "authentication": "sql",
                "username": "dumper",
                "password": "${SQLDUMP_TEST_PASSWORD}",
                "driver": "ODBC Driver 17 for SQL Server",
                "timeout": 30,
                "trust_server_certificate": True
            },
            "dump": {
                "limit": 100,
                "use_transaction": True,
                "identity_insert": False,
                "exclude": True,
                "tables": ["audit_log", "sessions"],
                "batch_size": 250
            },
            "output": {
                "file": "./dumps/shop.sql",
                "encoding": "utf-8-sig"
            },
            "logging": {
                "level": "INFO",
                "file": "./dumps/dump.log"
            }
        }

    @pytest.fixture
    def config_file(self, sample_config):
        """Create a temporary config file."""
        with tempfile.NamedTemporaryFile(
            mode='w', suffix='.yaml', delete=False
        ) as f:
            yaml.dump(sample_config, f)
            f.flush()
            yield f.name
        os.unlink(f.name)

    def test_load_config(self, config_file):
        loader = ConfigLoader(config_file)
        assert loader.config["connection"]["server"] == "db01"

    def test_no_config_file(self):
        loader = ConfigLoader()
        assert loader.config == {}
        assert loader.get_connection_settings() == {}
        assert loader.get_logging_settings() == {}

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            ConfigLoader("/nonexistent/path/config.yaml")

    def test_invalid_yaml(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("connection: [unclosed")
        try:
            with pytest.raises(yaml.YAMLError):
                ConfigLoader(f.name)
        finally:
            os.unlink(f.name)

    def test_non_mapping_config(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("- just\n- a list\n")
        try:
            with pytest.raises(ConfigurationError):
                ConfigLoader(f.name)
        finally:
            os.unlink(f.name)

    def test_empty_file(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            pass
        try:
            assert ConfigLoader(f.name).config == {}
        finally:
            os.unlink(f.name)

    @mock.patch.dict(os.environ, {"SQLDUMP_TEST_PASSWORD": "from-env"})
    def test_env_var_resolution(self, config_file):
        loader = ConfigLoader(config_file)
        assert loader.get_connection_settings()["password"] == "from-env"

    def test_missing_env_var_is_empty(self, config_file):
        with mock.patch.dict(os.environ, {}, clear=True):
            loader = ConfigLoader(config_file)
        assert loader.get_connection_settings()["password"] == ""

    def test_resolve_env_vars_nested(self):
        loader = ConfigLoader()
        with mock.patch.dict(os.environ, {"HOST": "db02", "PORT": "1433"}):
            result = loader._resolve_env_vars({"a": ["${HOST},${PORT}", {"b": "${HOST}"}], "c": 5})
        assert result == {"a": ["db02,1433", {"b": "db02"}], "c": 5}

    def test_logging_settings_is_copy(self, config_file):
        loader = ConfigLoader(config_file)
        settings = loader.get_logging_settings()
        settings["level"] = "DEBUG"
        assert loader.get_logging_settings()["level"] == "INFO"

    @mock.patch.dict(os.environ, {"SQLDUMP_TEST_PASSWORD": "from-env"})
    def test_resolve_from_file(self, config_file):
        config = ConfigLoader(config_file).resolve()

        assert config.server == "db01"
        assert config.database == "shop"
        assert config.auth_mode == AuthMode.SQL
        assert config.username == "dumper"
        assert config.password == "from-env"
        assert config.driver == "ODBC Driver 17 for SQL Server"
        assert config.timeout == 30
        assert config.encrypt is None
        assert config.trust_server_certificate is True
        assert config.options.limit == 100
        assert config.options.use_transaction is True
        assert config.options.include_identity_insert is False
        assert config.options.list_is_exclusive is True
        assert config.options.table_name_filter == frozenset({"audit_log", "sessions"})
        assert config.options.batch_size == 250
        assert config.output_file == "./dumps/shop.sql"
        assert config.output_encoding == "utf-8-sig"

    @mock.patch.dict(os.environ, {"SQLDUMP_TEST_PASSWORD": "from-env"})
    def test_overrides_take_priority(self, config_file):
        config = ConfigLoader(config_file).resolve({
            "server": "db99",
            "limit": 5,
            "exclude": False,
            "tables": ["orders"],
            "output_file": "out.sql",
            "database": None,
        })

        assert config.server == "db99"
        assert config.database == "shop"
        assert config.options.limit == 5
        assert config.options.list_is_exclusive is False
        assert config.options.table_name_filter == frozenset({"orders"})
        assert config.output_file == "out.sql"

    def test_defaults(self):
        config = ConfigLoader().resolve({"server": "db01", "database": "shop"})

        assert config.auth_mode == AuthMode.INTEGRATED
        assert config.options.limit is None
        assert config.options.use_transaction is False
        assert config.options.include_identity_insert is False
        assert config.options.list_is_exclusive is False
        assert config.options.table_name_filter == frozenset()
        assert config.options.batch_size == 1000
        assert config.output_file is None
        assert config.output_encoding == "utf-8"

    def test_tables_as_comma_separated_string(self):
        config = ConfigLoader().resolve({"server": "s", "database": "d", "tables": "a, b,,c"})
        assert config.options.table_name_filter == frozenset({"a", "b", "c"})

    def test_boolean_strings(self):
        config = ConfigLoader().resolve({
            "server": "s", "database": "d", "use_transaction": "yes", "exclude": "off"
        })
        assert config.options.use_transaction is True
        assert config.options.list_is_exclusive is False

    def test_invalid_boolean(self):
        with pytest.raises(ConfigurationError):
            ConfigLoader().resolve({"server": "s", "database": "d", "use_transaction": "maybe"})

    def test_negative_limit_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader().resolve({"server": "s", "database": "d", "limit": -1})
        assert "limit" in str(exc_info.value)

    def test_non_integer_limit_rejected(self):
        with pytest.raises(ConfigurationError):
            ConfigLoader().resolve({"server": "s", "database": "d", "limit": "ten"})

    def test_zero_limit_allowed(self):
        config = ConfigLoader().resolve({"server": "s", "database": "d", "limit": 0})
        assert config.options.limit == 0

    def test_zero_batch_size_rejected(self):
        with pytest.raises(ConfigurationError):
            ConfigLoader().resolve({"server": "s", "database": "d", "batch_size": 0})

    def test_unknown_authentication(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader().resolve({"server": "s", "database": "d", "authentication": "kerberos"})
        assert "integrated" in str(exc_info.value)

    def test_sql_auth_requires_credentials(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader().resolve({
                "server": "s", "database": "d", "authentication": "sql", "username": "sa"
            })
        assert "username and password" in str(exc_info.value)


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid(self):
        validate_config(DumpConfig(server="s", database="d"))

    def test_missing_server(self):
        with pytest.raises(ConfigurationError):
            validate_config(DumpConfig(server="", database="d"))

    def test_missing_database(self):
        with pytest.raises(ConfigurationError):
            validate_config(DumpConfig(server="s", database=""))

    def test_sql_auth_without_password(self):
        with pytest.raises(ConfigurationError):
            validate_config(DumpConfig(server="s", database="d", auth_mode=AuthMode.SQL, username="sa"))

    def test_sql_auth_with_empty_password(self):
        validate_config(
            DumpConfig(server="s", database="d", auth_mode=AuthMode.SQL, username="sa", password="")
        )

    def test_integrated_ignores_credentials(self):
        validate_config(DumpConfig(server="s", database="d", username="sa"))
