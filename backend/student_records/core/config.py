from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    database_url: str
    db_pool_size: int = 10
    db_pool_timeout_seconds: int = 30
    db_pool_recycle_seconds: int = 30
    auth_secret: str
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    environment: str = "development"
    log_level: str = "INFO"

    @field_validator("database_url", mode="before")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        # Render/Postgres providers often expose postgres:// URLs.
        if isinstance(value, str) and value.startswith("postgres://"):
            return "postgresql://" + value[len("postgres://"):]
        return value

    @field_validator("auth_secret")
    @classmethod
    def require_auth_secret(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("AUTH_SECRET must be set to a non-empty value")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

settings = Settings()
