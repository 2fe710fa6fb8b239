"""Configuration management for dataforge."""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .types import Driver, Environment


class DatabaseConfig(BaseModel):
    """Connection settings for a single database."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    driver: Driver = Field(default=Driver.MYSQL, description="Database driver")
    host: str | None = Field(default=None, description="Server host name")
    port: int | None = Field(default=None, description="Server port")
    name: str = Field(description="Database name, or file path for SQLite")
    user: str | None = Field(default=None, description="Login user")
    password: str | None = Field(
        default=None, alias="pass", description="Login password"
    )
    odbc_driver: str = Field(
        default="ODBC Driver 18 for SQL Server",
        description="ODBC driver name used for SQL Server connections",
    )


class Settings(BaseModel):
    """Application settings."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production/testing)",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    database: DatabaseConfig | None = Field(
        default=None, description="Default database connection settings"
    )

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == Environment.TESTING


def _database_from_env() -> dict[str, Any] | None:
    """Collect DATAFORGE_DB_* variables into a config mapping."""
    name = os.getenv("DATAFORGE_DB_NAME")
    if not name:
        return None

    port = os.getenv("DATAFORGE_DB_PORT")
    return {
        "driver": os.getenv("DATAFORGE_DB_DRIVER", "mysql").lower(),
        "host": os.getenv("DATAFORGE_DB_HOST"),
        "port": int(port) if port else None,
        "name": name,
        "user": os.getenv("DATAFORGE_DB_USER"),
        "pass": os.getenv("DATAFORGE_DB_PASS"),
    }


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Load settings from environment variables and an optional .env file.

    Args:
        env_file: Explicit .env path; searched for upwards when omitted.
            Variables already set in the environment take precedence.
    """
    load_dotenv(env_file)

    database = _database_from_env()
    return Settings(
        environment=Environment(os.getenv("DATAFORGE_ENV", "development")),
        log_level=os.getenv("DATAFORGE_LOG_LEVEL", "INFO").upper(),
        database=DatabaseConfig.model_validate(database) if database else None,
    )
