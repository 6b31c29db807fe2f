"""
Configuration management via environment variables.

This module loads configuration from .env file using python-dotenv.
All configuration values are accessed through the Settings class.

Database selection order:
1. DATABASE_URL (full SQLAlchemy URL)
2. DB_HOST / DB_PORT / DB_USER / DB_PASSWORD / DB_NAME (MySQL components)
3. Local SQLite file (development fallback)
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load .env file from project root
# This must happen before accessing os.environ
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)

STORE_BACKENDS = {"sql", "memory"}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        database_url: SQLAlchemy connection string for the record store
        db_pool_size: Connections kept open by the engine pool
        db_max_overflow: Extra connections allowed under fan-out load
        store_backend: "sql" for the relational store, "memory" for in-process
        aggregation_timeout_seconds: Deadline for branch/country aggregation
        enable_audit_logging: Log every request through AuditMiddleware
        api_prefix: Prefix for all directory routes
        host: Bind address for uvicorn
        port: Bind port for uvicorn
        import_file_path: Default source file for the data loader
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str

    # Store settings
    database_url: str
    db_pool_size: int
    db_max_overflow: int
    store_backend: str

    # Aggregation settings
    aggregation_timeout_seconds: float

    # HTTP settings
    enable_audit_logging: bool
    api_prefix: str
    host: str
    port: int

    # Import settings
    import_file_path: str

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"

    def uses_sql_store(self) -> bool:
        """Check if records are persisted through SQLAlchemy."""
        return self.store_backend == "sql"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None:
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _build_database_url() -> str:
    """Resolve the store URL from DATABASE_URL, MySQL components or SQLite."""
    database_url = os.environ.get("DATABASE_URL")

    if not database_url:
        if os.environ.get("DB_HOST"):
            host = _get_env("DB_HOST")
            port = _get_env("DB_PORT", "3306")
            user = _get_env("DB_USER", "root")
            password = _get_env("DB_PASSWORD", "")
            name = _get_env("DB_NAME", "swift_directory")
            database_url = f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}"
        else:
            database_url = "sqlite:///./swift_directory.db"

    # SQLAlchemy needs explicit driver names
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    if database_url.startswith("mysql://"):
        database_url = database_url.replace("mysql://", "mysql+pymysql://", 1)

    return database_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once at startup; maxsize=1 keeps a single instance.

    Returns:
        Settings instance with all configuration values

    Raises:
        ValueError: If a variable holds an unsupported value
    """
    store_backend = _get_env("STORE_BACKEND", "sql").lower()
    if store_backend not in STORE_BACKENDS:
        raise ValueError(
            f"Unsupported STORE_BACKEND '{store_backend}'. "
            f"Expected one of: {sorted(STORE_BACKENDS)}"
        )

    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "SwiftDirectory"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),

        # Store
        database_url=_build_database_url(),
        db_pool_size=int(_get_env("DB_POOL_SIZE", "20")),
        db_max_overflow=int(_get_env("DB_MAX_OVERFLOW", "10")),
        store_backend=store_backend,

        # Aggregation
        aggregation_timeout_seconds=float(_get_env("AGGREGATION_TIMEOUT_SECONDS", "10")),

        # HTTP
        enable_audit_logging=_get_env("ENABLE_AUDIT_LOGGING", "true").lower() == "true",
        api_prefix=_get_env("API_PREFIX", "/v1"),
        host=_get_env("HOST", "0.0.0.0"),
        port=int(_get_env("PORT", "8080")),

        # Import
        import_file_path=_get_env("IMPORT_FILE_PATH", "./data/swift_codes.csv"),
    )
