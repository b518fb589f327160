"""
Tests for environment-backed settings.
"""

from typing import List

import pytest

from itipcheck.common.settings import (
    AliasChoices,
    BaseSettings,
    Field,
    Settings,
    SettingsConfigDict,
    get_settings,
    reset_settings,
)

SETTING_NAMES = (
    "LOG_LEVEL",
    "LOG_FORMAT",
    "ITIP_FAIL_FAST",
    "ITIP_RELAXED_VALIDATION",
    "ITIP_RELAXED",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Run each test in an empty directory with no itipcheck variables set."""
    monkeypatch.chdir(tmp_path)
    for name in SETTING_NAMES:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.lower(), raising=False)
    reset_settings()
    yield
    reset_settings()


class TestSettingsDefaults:
    """Test default values when nothing is configured."""

    def test_defaults(self):
        """Test that every setting has its documented default."""
        settings = Settings()
        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_FORMAT == "text"
        assert settings.ITIP_FAIL_FAST is False
        assert settings.ITIP_RELAXED_VALIDATION is False

    def test_kwargs_override_defaults(self):
        """Test that keyword arguments win over everything else."""
        settings = Settings(ITIP_FAIL_FAST=True, LOG_LEVEL="DEBUG")
        assert settings.ITIP_FAIL_FAST is True
        assert settings.LOG_LEVEL == "DEBUG"


class TestSettingsEnvironment:
    """Test loading values from the environment and .env files."""

    def test_bool_from_environment(self, monkeypatch):
        """Test that boolean strings are converted."""
        monkeypatch.setenv("ITIP_FAIL_FAST", "true")
        assert Settings().ITIP_FAIL_FAST is True

        monkeypatch.setenv("ITIP_FAIL_FAST", "0")
        assert Settings().ITIP_FAIL_FAST is False

    def test_alias_choice(self, monkeypatch):
        """Test that the short alias enables relaxed validation."""
        monkeypatch.setenv("ITIP_RELAXED", "yes")
        assert Settings().ITIP_RELAXED_VALIDATION is True

    def test_case_insensitive_lookup(self, monkeypatch):
        """Test that lower-case variable names are accepted."""
        monkeypatch.setenv("log_format", "json")
        assert Settings().LOG_FORMAT == "json"

    def test_env_file(self, tmp_path):
        """Test values read from a .env file in the working directory."""
        (tmp_path / ".env").write_text(
            "# comment\nLOG_LEVEL=WARNING\nITIP_FAIL_FAST='on'\n"
        )
        settings = Settings()
        assert settings.LOG_LEVEL == "WARNING"
        assert settings.ITIP_FAIL_FAST is True

    def test_environment_beats_env_file(self, monkeypatch, tmp_path):
        """Test that the process environment takes precedence."""
        (tmp_path / ".env").write_text("LOG_LEVEL=WARNING\n")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert Settings().LOG_LEVEL == "ERROR"


class TestCustomSettings:
    """Test the BaseSettings machinery with a purpose-built subclass."""

    def test_required_field_missing(self):
        """Test that a required field without a value raises."""

        class RequiredSettings(BaseSettings):
            model_config = SettingsConfigDict()
            API_TOKEN: str = Field(...)

        with pytest.raises(ValueError, match="API_TOKEN"):
            RequiredSettings()

    def test_list_and_int_conversion(self, monkeypatch):
        """Test comma-separated lists and integers."""

        class ListSettings(BaseSettings):
            model_config = SettingsConfigDict()
            METHODS: List[str] = Field(default=[])
            LIMIT: int = Field(default=1)

        monkeypatch.setenv("METHODS", "REQUEST, REPLY")
        monkeypatch.setenv("LIMIT", "5")
        settings = ListSettings()
        assert settings.METHODS == ["REQUEST", "REPLY"]
        assert settings.LIMIT == 5

    def test_alias_choices_order(self, monkeypatch):
        """Test that the first matching alias is used."""

        class AliasSettings(BaseSettings):
            model_config = SettingsConfigDict()
            TIMEOUT: str = Field(
                default="30", validation_alias=AliasChoices("PRIMARY", "SECONDARY")
            )

        monkeypatch.setenv("SECONDARY", "20")
        assert AliasSettings().TIMEOUT == "20"

        monkeypatch.setenv("PRIMARY", "10")
        assert AliasSettings().TIMEOUT == "10"


class TestGlobalSettings:
    """Test the cached settings instance."""

    def test_get_settings_is_cached(self):
        """Test that the same instance is returned until reset."""
        assert get_settings() is get_settings()

    def test_reset_settings(self, monkeypatch):
        """Test that reset re-reads the environment."""
        assert get_settings().ITIP_FAIL_FAST is False

        monkeypatch.setenv("ITIP_FAIL_FAST", "1")
        assert get_settings().ITIP_FAIL_FAST is False

        reset_settings()
        assert get_settings().ITIP_FAIL_FAST is True
