"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
No hardcoded values in code; all configuration comes from these sources.

Secrets (.env):
    DB_PASSWORD, JWT_SECRET, DATABASE_URL (optional override)

Settings (YAML):
    application.yaml - App identity, server, cors, pagination
    database.yaml    - Database connection and pool settings
    logging.yaml     - Logging configuration
    security.yaml    - JWT and password policy

The loaders here are meant for the composition root only (app factory,
CLI, migrations). Everything below it receives the loaded values
explicitly.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notes_app.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    LoggingSchema,
    SecuritySchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str, root: Path | None = None) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = root or find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env or the environment."""

    jwt_secret: str
    db_password: str = ""
    database_url: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str, root: Path | None) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename, root)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.

    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(
        self,
        application: ApplicationSchema,
        database: DatabaseSchema,
        logging: LoggingSchema,
        security: SecuritySchema,
    ) -> None:
        self._application = application
        self._database = database
        self._logging = logging
        self._security = security

    @classmethod
    def load(cls, root: Path | None = None) -> "AppConfig":
        """Load and validate every YAML file under config/settings/."""
        return cls(
            application=_load_validated(ApplicationSchema, "application.yaml", root),
            database=_load_validated(DatabaseSchema, "database.yaml", root),
            logging=_load_validated(LoggingSchema, "logging.yaml", root),
            security=_load_validated(SecuritySchema, "security.yaml", root),
        )

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def security(self) -> SecuritySchema:
        """Security settings."""
        return self._security


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path) if env_path.exists() else None)


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig.load()


def get_database_url(database: DatabaseSchema, settings: Settings) -> str:
    """
    Construct database URL from YAML config and secrets.

    DATABASE_URL, when set, wins over the YAML connection fields.
    Plain postgres:// URLs are rewritten to the async driver.
    """
    if settings.database_url:
        url = settings.database_url.strip()
        if url.startswith("postgres://"):
            url = "postgresql+asyncpg://" + url[len("postgres://"):]
        elif url.startswith("postgresql://"):
            url = "postgresql+asyncpg://" + url[len("postgresql://"):]
        elif url.startswith("mysql://"):
            url = "mysql+aiomysql://" + url[len("mysql://"):]
        return url

    return (
        f"{database.driver}://{database.user}:{settings.db_password}"
        f"@{database.host}:{database.port}/{database.name}"
    )
