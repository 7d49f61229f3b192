"""Tests for application settings"""

import pytest
from pydantic import ValidationError

from config.settings import Settings


class TestSettings:
    """Test cases for Settings validation"""

    def test_defaults(self):
        """Test the shipped defaults"""
        settings = Settings()

        assert settings.block_name == "recipe-schema/recipe"
        assert settings.schema_context == "https://schema.org"
        assert settings.microdata_container_class == "recipe-schema-data"
        assert settings.emit_microdata_placeholders is True

    def test_schema_context_trailing_slash_stripped(self):
        """Test the vocabulary URL is normalized"""
        assert Settings(schema_context="https://schema.org/").schema_context == "https://schema.org"

    def test_schema_context_requires_http(self):
        """Test non-http vocabulary URLs are rejected"""
        with pytest.raises(ValidationError):
            Settings(schema_context="ftp://schema.org")

    def test_log_level_normalized(self):
        """Test log levels are case-insensitive"""
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        """Test unknown log levels fail validation"""
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    def test_environment_override(self, monkeypatch):
        """Test values are read from the environment"""
        monkeypatch.setenv("BLOCK_NAME", "my-site/recipe")
        monkeypatch.setenv("EMIT_MICRODATA_PLACEHOLDERS", "false")

        settings = Settings()
        assert settings.block_name == "my-site/recipe"
        assert settings.emit_microdata_placeholders is False
