"""
PostgreSQL/pgstac Database Configuration.

Provides connection settings for the database hosting the pgstac schema.
The client itself never reads configuration: callers that do not manage
their own psycopg connections use DatabaseConfig with
pgstac_client.infrastructure.postgresql.connect().

Exports:
    DatabaseConfig: Connection configuration
"""

import os
from typing import Optional
from psycopg.conninfo import make_conninfo
from pydantic import BaseModel, Field

from ..exceptions import ConfigurationError
from .defaults import DatabaseDefaults


# ============================================================================
# DATABASE CONFIGURATION
# ============================================================================

class DatabaseConfig(BaseModel):
    """
    PostgreSQL connection configuration for a pgstac database.

    Either connection_string_override is set (a complete libpq connection
    string or URI), or host and database are required.
    """

    host: Optional[str] = Field(
        default=None,
        description="PostgreSQL server hostname",
        examples=["localhost"]
    )

    port: int = Field(
        default=DatabaseDefaults.PORT,
        description="PostgreSQL server port number"
    )

    user: Optional[str] = Field(
        default=None,
        description="PostgreSQL username"
    )

    password: Optional[str] = Field(
        default=None,
        repr=False,
        description="PostgreSQL password (masked in repr and debug output)"
    )

    database: Optional[str] = Field(
        default=None,
        description="PostgreSQL database name",
        examples=["postgis"]
    )

    pgstac_schema: str = Field(
        default=DatabaseDefaults.PGSTAC_SCHEMA,
        description="Schema holding the pgstac functions"
    )

    sslmode: str = Field(
        default=DatabaseDefaults.SSLMODE,
        description="libpq sslmode (disable, prefer, require, verify-full, ...)"
    )

    connection_timeout_seconds: int = Field(
        default=DatabaseDefaults.CONNECTION_TIMEOUT_SECONDS,
        ge=1,
        description="Connection timeout in seconds"
    )

    connection_string_override: Optional[str] = Field(
        default=None,
        repr=False,
        description="Complete connection string; wins over the individual settings"
    )

    @property
    def connection_string(self) -> str:
        """
        Build the PostgreSQL connection string.

        Returns the override untouched when present, otherwise a libpq
        key=value string built from the individual settings, with values
        quoted where libpq needs it.

        Raises:
            ConfigurationError: If host or database is missing
        """
        if self.connection_string_override:
            return self.connection_string_override

        if not self.host or not self.database:
            raise ConfigurationError(
                "POSTGIS_HOST and POSTGIS_DATABASE are required "
                "when POSTGRESQL_CONNECTION_STRING is not set"
            )

        params = {
            "host": self.host,
            "port": self.port,
            "dbname": self.database,
            "user": self.user,
            "password": self.password,
            "sslmode": self.sslmode,
        }
        return make_conninfo(**{key: value for key, value in params.items() if value})

    def debug_dict(self) -> dict:
        """Debug output with masked password."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "database": self.database,
            "password": "***MASKED***" if self.password else None,
            "connection_string_override": "***MASKED***" if self.connection_string_override else None,
            "pgstac_schema": self.pgstac_schema,
            "sslmode": self.sslmode,
            "connection_timeout_seconds": self.connection_timeout_seconds,
        }

    @classmethod
    def from_environment(cls) -> "DatabaseConfig":
        """
        Load from environment variables.

        Environment Variables:
            POSTGRESQL_CONNECTION_STRING: Complete connection string (optional)
            POSTGIS_HOST, POSTGIS_PORT, POSTGIS_USER, POSTGIS_PASSWORD,
            POSTGIS_DATABASE, POSTGIS_SSLMODE: Individual settings
            PGSTAC_SCHEMA: pgstac schema name (default: pgstac)
            DB_CONNECTION_TIMEOUT: Connect timeout in seconds (default: 30)

        Raises:
            ConfigurationError: If required settings are missing or malformed
        """
        override = os.environ.get("POSTGRESQL_CONNECTION_STRING") or None
        host = os.environ.get("POSTGIS_HOST") or None
        database = os.environ.get("POSTGIS_DATABASE") or None

        if override is None and (host is None or database is None):
            raise ConfigurationError(
                "Set POSTGRESQL_CONNECTION_STRING, or both POSTGIS_HOST and POSTGIS_DATABASE"
            )

        try:
            port = int(os.environ.get("POSTGIS_PORT", str(DatabaseDefaults.PORT)))
            timeout = int(os.environ.get(
                "DB_CONNECTION_TIMEOUT", str(DatabaseDefaults.CONNECTION_TIMEOUT_SECONDS)
            ))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric database setting: {e}") from e

        return cls(
            host=host,
            port=port,
            user=os.environ.get("POSTGIS_USER"),
            password=os.environ.get("POSTGIS_PASSWORD"),
            database=database,
            pgstac_schema=os.environ.get("PGSTAC_SCHEMA", DatabaseDefaults.PGSTAC_SCHEMA),
            sslmode=os.environ.get("POSTGIS_SSLMODE", DatabaseDefaults.SSLMODE),
            connection_timeout_seconds=timeout,
            connection_string_override=override,
        )
