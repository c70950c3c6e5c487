"""
Configuration and settings for the qaboard service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # AWS credentials shared by DynamoDB and SNS. Unset values fall back to
    # the default boto3 credential chain.
    aws_region: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # DynamoDB
    dynamodb_endpoint_url: Optional[str] = Field(default=None)
    questions_table: str = Field(default="Questions")
    answers_table: str = Field(default="Answers")
    queries_table: str = Field(default="Queries")
    emails_table: str = Field(default="Emails")

    # SNS
    sns_topic_arn: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "QABOARD_USE_IN_MEMORY_BACKENDS", "use_in_memory_backends"
        ),
    )
    # Listing endpoints answer 500 instead of [] when the store fails.
    strict_reads: bool = Field(
        default=False,
        validation_alias=AliasChoices("QABOARD_STRICT_READS", "strict_reads"),
    )

    # Site content
    pages_dir: str = Field(default="pages")
    public_dir: str = Field(default="public")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
