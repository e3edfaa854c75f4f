"""Unit tests for configuration validation."""

import pytest
from pydantic import ValidationError
from backend.app.core.config import Settings


class TestSettingsValidation:
    """Test cases for Settings validation."""

    def test_default_settings(self):
        """Test that default settings are valid."""
        settings = Settings(_env_file=None)

        assert settings.log_level == "INFO"
        assert settings.log_format == "text"
        assert settings.default_page_size <= settings.max_page_size
        assert settings.vote_conflict_retries >= 1
        assert settings.jwt_algorithm == "HS256"

    def test_log_level_validation_case_insensitive(self):
        """Test log level is case-insensitive."""
        settings = Settings(log_level="info")
        assert settings.log_level == "INFO"

        settings = Settings(log_level="DeBuG")
        assert settings.log_level == "DEBUG"

    def test_log_level_validation_invalid(self):
        """Test log level rejects invalid values."""
        with pytest.raises(ValidationError, match="log_level must be one of"):
            Settings(log_level="INVALID")

    def test_log_format_validation(self):
        """Test log format accepts text and json only."""
        assert Settings(log_format="JSON").log_format == "json"

        with pytest.raises(ValidationError, match="log_format must be 'text' or 'json'"):
            Settings(log_format="xml")

    def test_positive_values(self):
        """Test sizes and retry counts must be positive."""
        with pytest.raises(ValidationError, match="Value must be positive"):
            Settings(max_page_size=0)

        with pytest.raises(ValidationError, match="Value must be positive"):
            Settings(vote_conflict_retries=0)

        with pytest.raises(ValidationError, match="Value must be positive"):
            Settings(jwt_expiration_hours=-1)

    def test_page_sizes_logical_consistency(self):
        """Test default page sizes cannot exceed the maximum."""
        with pytest.raises(ValidationError, match="default_page_size must be less than or equal to max_page_size"):
            Settings(default_page_size=50, max_page_size=20, default_comment_page_size=10)

        with pytest.raises(ValidationError, match="default_comment_page_size must be less than or equal to max_page_size"):
            Settings(default_page_size=10, max_page_size=20, default_comment_page_size=30)

    def test_cors_origins_list_with_spaces(self):
        """Test CORS origins list handles spaces correctly."""
        settings = Settings(cors_origins="http://localhost:3000 , http://localhost:5173 ,")

        assert settings.cors_origins_list == ["http://localhost:3000", "http://localhost:5173"]
