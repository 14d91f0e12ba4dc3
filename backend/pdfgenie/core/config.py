"""
Application configuration via environment variables (12-factor).
Pydantic BaseSettings validates and coerces all values at startup.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ------------------------------------------------------------------
    # AWS: S3 + Textract
    # ------------------------------------------------------------------
    aws_region: str = "us-east-1"

    # Raw uploads land here; the bucket's lifecycle rule expires them after 1 day
    s3_bucket: str = "pdf-genie-uploads"

    # Textract DetectDocumentText rejects inline Bytes payloads above 10 MiB
    textract_inline_max_bytes: int = 10 * 1024 * 1024

    # ------------------------------------------------------------------
    # LLM: Bedrock (Amazon Titan)
    # ------------------------------------------------------------------
    bedrock_model_id: str   = "amazon.titan-text-lite-v1"
    llm_max_tokens:   int   = 512
    llm_temperature:  float = 0.7
    llm_top_p:        float = 0.9

    # Extracted text is cut to this many characters before prompting (~750 tokens)
    prompt_max_chars: int = 3000

    # ------------------------------------------------------------------
    # API gateway concerns
    # ------------------------------------------------------------------
    # Comma-separated lists; an empty api_keys disables the X-Api-Key check
    api_keys:     str = ""
    cors_origins: str = "*"

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------
    app_env: str = "development"   # development | staging | production
    debug: bool = False

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def api_key_list(self) -> list[str]:
        return _split_csv(self.api_keys)

    @property
    def cors_origin_list(self) -> list[str]:
        return _split_csv(self.cors_origins)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
