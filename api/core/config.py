from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


def _split_csv(value: str) -> list[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "postgresql+psycopg2://studyai:studyai_dev@db:5432/studyai"

    # App settings
    app_name: str = "StudyAI"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Hosted auth service (validates bearer tokens, owns user identities)
    auth_url: str = ""
    auth_anon_key: str = ""
    auth_timeout_seconds: float = 10.0

    # Object storage (any S3-compatible endpoint, e.g. {project}/storage/v1/s3)
    storage_endpoint_url: str = ""
    storage_access_key_id: str = ""
    storage_secret_access_key: str = ""
    storage_region: str = "us-east-1"
    storage_bucket: str = "documents"
    max_upload_size_mb: int = 50

    # AI gateway (OpenAI-compatible chat completions with function calling)
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    ai_gateway_api_key: str = ""
    ai_model: str = "google/gemini-3-flash-preview"
    ai_gateway_timeout_seconds: float = 120.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def cors_origins_list(self) -> list[str]:
        return _split_csv(self.cors_origins)

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
