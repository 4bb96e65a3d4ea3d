"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - Environment names match the deployment's existing .env (DB_HOST, MONGO_URI, REGION, ...)
    - get_settings() is cached (lru_cache): single instance per process
    - Clients receive this object at construction; nothing else reads os.environ

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - database_url override lets tests and local runs point at another SQLAlchemy URL
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Relational (MySQL)
    db_host: str = "localhost"
    db_user: str = "root"
    db_password: str = ""
    db_port: int = 3306
    db_name: str = "storegate"
    database_url: str | None = None
    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_pool_timeout: float = 30.0

    # Document store (MongoDB)
    mongo_uri: str = "mongodb://localhost:27017/test"
    mongo_default_database: str = "test"
    mongo_users_collection: str = "usuarios"
    mongo_server_selection_timeout_ms: int = 5000

    # Object storage (S3)
    access_key_id: str | None = None
    secret_access_key: str | None = None
    region: str = "us-east-1"
    session_token: str | None = None
    s3_endpoint_url: str | None = None
    s3_max_pool_connections: int = 10
    upload_acl: str = "private"
    upload_max_bytes: int = 50 * 1024 * 1024
    # Room for multipart boundaries and part headers around the file bytes
    upload_multipart_overhead: int = 16 * 1024

    # API
    port: int = 3000
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def relational_url(self) -> str:
        """SQLAlchemy URL bound to the configured database."""
        if self.database_url:
            return self.database_url
        return self._mysql_url(self.db_name).render_as_string(hide_password=False)

    def relational_server_url(self) -> str | None:
        """Database-less URL used to issue CREATE DATABASE; None when overridden."""
        if self.database_url:
            return None
        return self._mysql_url(None).render_as_string(hide_password=False)

    def _mysql_url(self, database: str | None) -> URL:
        return URL.create(
            "mysql+aiomysql",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=database,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
