"""
Configuration and settings for the review store service.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

WritePolicy = Literal["last_writer_wins", "optimistic"]


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service and Lambda handler."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="")

    # S3 (or any S3-compatible store)
    s3_bucket_name: Optional[str] = Field(default="sakuraqa-review-results")
    aws_region: str = Field(default="ap-northeast-1")
    s3_endpoint_url: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # Document names inside the bucket
    review_document_key: str = Field(default="review.json")
    progress_document_key: str = Field(default="progress.json")

    # Concurrency handling for read-modify-write cycles
    write_policy: WritePolicy = Field(
        default="last_writer_wins", validation_alias="REVIEW_STORE_WRITE_POLICY"
    )

    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    log_level: str = Field(default="INFO")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="REVIEW_STORE_USE_IN_MEMORY_BACKENDS"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "OPTIONS"]
CORS_ALLOW_HEADERS = [
    "Content-Type",
    "X-Amz-Date",
    "Authorization",
    "X-Api-Key",
    "X-Amz-Security-Token",
]


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
