"""Configuration settings for recipe schema rendering"""

import logging
from typing import Optional
from pathlib import Path

from pydantic import field_validator, ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = ConfigDict(
        env_file="../.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging
    log_level: str = "INFO"

    # Persisted block marker
    block_name: str = "recipe-schema/recipe"

    # Structured data output
    schema_context: str = "https://schema.org"
    microdata_container_class: str = "recipe-schema-data"
    emit_microdata_placeholders: bool = True
    jsonld_indent: Optional[int] = None

    # Author used when neither the parameters nor the host supply one
    default_author_name: Optional[str] = None
    default_author_url: Optional[str] = None

    @field_validator('schema_context')
    @classmethod
    def validate_schema_context(cls, v):
        """Ensure the vocabulary URL is properly formatted"""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('Schema context must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level: {v}')
        return level

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        # Load from .env file in project root if it exists
        env_file = Path(__file__).parent.parent / ".env"
        if env_file.exists():
            from dotenv import load_dotenv
            load_dotenv(env_file)


# Global settings instance
settings = Settings()
