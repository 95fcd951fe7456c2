"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_MIME_WHITELIST = ["image/png", "image/jpeg", "image/webp"]


def _split_csv(value: str | list[str], default: list[str]) -> list[str]:
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return default.copy()
        return [item.strip() for item in stripped.split(",") if item.strip()]
    return value


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./resume_assets.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    # Shared secret presented by the PDF render worker on internal endpoints.
    internal_api_secret: str = ""


class RedisSettings(BaseModel):
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None


class MinioSettings(BaseModel):
    endpoint: str = "localhost:9000"
    access_key: str = "minioadmin"
    secret_key: str = "minioadmin"
    use_ssl: bool = False
    bucket: str = "resumes"
    public_endpoint: str = "http://localhost:9000"
    region: str = "us-east-1"
    auto_create_bucket: bool = True


class ClamAVSettings(BaseModel):
    host: str = "clamav"
    port: int = 3310
    timeout: Optional[float] = 30.0


class UploadSettings(BaseModel):
    max_bytes: int = 5 * 1024 * 1024
    mime_whitelist: list[str] | str = Field(default_factory=lambda: _DEFAULT_MIME_WHITELIST.copy())
    max_assets_per_user: int = 50
    max_uploads_per_day: int = 20
    list_default_limit: int = 60
    list_max_limit: int = 200
    preview_url_ttl_seconds: int = 10 * 60
    view_url_ttl_seconds: int = 15 * 60

    @field_validator("mime_whitelist", mode="before")
    @classmethod
    def _split_whitelist(cls, value: str | list[str]) -> list[str]:
        return _split_csv(value, _DEFAULT_MIME_WHITELIST)


class CorsSettings(BaseModel):
    allowed_origins: list[str] | str = Field(default_factory=lambda: ["*"])

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str]) -> list[str]:
        return _split_csv(value, ["*"])


class LoggingSettings(BaseModel):
    level: str = "INFO"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Resume Asset Service"
    api_prefix: str = "/api/v1"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    redis: RedisSettings = RedisSettings()
    minio: MinioSettings = MinioSettings()
    clamav: ClamAVSettings = ClamAVSettings()
    uploads: UploadSettings = UploadSettings()
    cors: CorsSettings = CorsSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def redis_url(self) -> str:
        auth = f":{self.redis.password}@" if self.redis.password else ""
        return f"redis://{auth}{self.redis.host}:{self.redis.port}/{self.redis.db}"

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def internal_api_secret(self) -> str:
        return self.security.internal_api_secret


@lru_cache()
def get_settings() -> Settings:
    return Settings()
