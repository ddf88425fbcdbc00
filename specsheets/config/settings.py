from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "specsheets"
    db_username: str = "specsheets"
    db_password: str = "secret"

    storage_backend: str = "snapshot"
    snapshot_path: str = "data/documents.json"

    max_upload_bytes: int = 50 * 1024 * 1024
    min_upload_bytes: int = 1024
    fetch_timeout_seconds: int = 30

    admin_email: str = "admin@example.com"
    admin_password: SecretStr = SecretStr("admin123")
    session_secret: SecretStr = SecretStr("change-me-to-a-long-random-session-secret")
    session_ttl_seconds: int = 60 * 60 * 8
