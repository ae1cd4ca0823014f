"""
Database configuration tests.

Tests DatabaseConfig loading from environment variables, connection string
building and secret masking.
"""

import pytest
from psycopg.conninfo import conninfo_to_dict

from pgstac_client.config import (
    DatabaseConfig,
    DatabaseDefaults,
    debug_config,
    get_config,
    reset_config,
)
from pgstac_client.exceptions import ConfigurationError


class TestFromEnvironment:
    """DatabaseConfig.from_environment()."""

    def test_individual_settings(self, clean_env):
        clean_env.setenv("POSTGIS_HOST", "db.example.com")
        clean_env.setenv("POSTGIS_PORT", "6543")
        clean_env.setenv("POSTGIS_USER", "stac")
        clean_env.setenv("POSTGIS_PASSWORD", "s3cret")
        clean_env.setenv("POSTGIS_DATABASE", "catalog")
        clean_env.setenv("PGSTAC_SCHEMA", "pgstac_v9")
        clean_env.setenv("DB_CONNECTION_TIMEOUT", "7")

        config = DatabaseConfig.from_environment()

        assert config.host == "db.example.com"
        assert config.port == 6543
        assert config.user == "stac"
        assert config.password == "s3cret"
        assert config.database == "catalog"
        assert config.pgstac_schema == "pgstac_v9"
        assert config.connection_timeout_seconds == 7

    def test_defaults(self, clean_env):
        clean_env.setenv("POSTGIS_HOST", "localhost")
        clean_env.setenv("POSTGIS_DATABASE", "postgis")

        config = DatabaseConfig.from_environment()

        assert config.port == DatabaseDefaults.PORT
        assert config.pgstac_schema == DatabaseDefaults.PGSTAC_SCHEMA
        assert config.sslmode == DatabaseDefaults.SSLMODE
        assert config.connection_timeout_seconds == DatabaseDefaults.CONNECTION_TIMEOUT_SECONDS

    def test_connection_string_override_alone_is_enough(self, clean_env):
        clean_env.setenv("POSTGRESQL_CONNECTION_STRING", "postgresql://u:p@db/postgis")
        config = DatabaseConfig.from_environment()
        assert config.connection_string == "postgresql://u:p@db/postgis"

    def test_missing_database_rejected(self, clean_env):
        clean_env.setenv("POSTGIS_HOST", "localhost")
        with pytest.raises(ConfigurationError):
            DatabaseConfig.from_environment()

    def test_empty_environment_rejected(self, clean_env):
        with pytest.raises(ConfigurationError):
            DatabaseConfig.from_environment()

    def test_bad_port_rejected(self, clean_env):
        clean_env.setenv("POSTGIS_HOST", "localhost")
        clean_env.setenv("POSTGIS_DATABASE", "postgis")
        clean_env.setenv("POSTGIS_PORT", "not-a-port")
        with pytest.raises(ConfigurationError) as exc_info:
            DatabaseConfig.from_environment()
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestConnectionString:
    """DatabaseConfig.connection_string."""

    def test_key_value_string(self):
        config = DatabaseConfig(
            host="db", port=5433, user="stac", password="pw", database="postgis", sslmode="require"
        )
        assert config.connection_string == (
            "host=db port=5433 dbname=postgis user=stac password=pw sslmode=require"
        )

    def test_optional_credentials_left_out(self):
        config = DatabaseConfig(host="db", database="postgis")
        assert "user=" not in config.connection_string
        assert "password=" not in config.connection_string

    def test_override_wins(self):
        config = DatabaseConfig(host="db", database="postgis", connection_string_override="dbname=other")
        assert config.connection_string == "dbname=other"

    @pytest.mark.parametrize("password", ["a b", "it's", "back\\slash", ""])
    def test_password_survives_parsing(self, password):
        config = DatabaseConfig(host="db", database="postgis", user="stac", password=password or None)
        parsed = conninfo_to_dict(config.connection_string)
        assert parsed.get("password") == (password or None)
        assert parsed["dbname"] == "postgis"
        assert parsed["user"] == "stac"

    def test_incomplete_config_rejected(self):
        with pytest.raises(ConfigurationError):
            _ = DatabaseConfig(host="db").connection_string


class TestMasking:
    """Secrets never show up in repr or debug output."""

    def test_debug_dict_masks_password(self):
        config = DatabaseConfig(host="db", database="postgis", password="s3cret")
        debug = config.debug_dict()
        assert debug["password"] == "***MASKED***"
        assert "s3cret" not in str(debug)

    def test_debug_dict_masks_override(self):
        config = DatabaseConfig(connection_string_override="postgresql://u:s3cret@db/postgis")
        assert "s3cret" not in str(config.debug_dict())

    def test_repr_hides_password(self):
        config = DatabaseConfig(host="db", database="postgis", password="s3cret")
        assert "s3cret" not in repr(config)

    def test_no_password_is_none(self):
        assert DatabaseConfig(host="db", database="postgis").debug_dict()["password"] is None


class TestSingleton:
    """get_config() / reset_config() / debug_config()."""

    def test_same_instance(self, clean_env):
        clean_env.setenv("POSTGIS_HOST", "localhost")
        clean_env.setenv("POSTGIS_DATABASE", "postgis")
        assert get_config() is get_config()

    def test_reset_rereads_environment(self, clean_env):
        clean_env.setenv("POSTGIS_HOST", "first")
        clean_env.setenv("POSTGIS_DATABASE", "postgis")
        assert get_config().host == "first"

        clean_env.setenv("POSTGIS_HOST", "second")
        assert get_config().host == "first"
        reset_config()
        assert get_config().host == "second"

    def test_debug_config_reports_errors(self, clean_env):
        result = debug_config()
        assert "error" in result

    def test_debug_config_masks(self, clean_env):
        clean_env.setenv("POSTGIS_HOST", "localhost")
        clean_env.setenv("POSTGIS_DATABASE", "postgis")
        clean_env.setenv("POSTGIS_PASSWORD", "s3cret")
        assert debug_config()["password"] == "***MASKED***"
