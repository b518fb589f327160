"""
Environment-backed settings for itipcheck.

A small settings base class in the spirit of pydantic_settings: fields are
declared as annotated class attributes with ``Field(...)`` defaults and are
resolved from keyword arguments, the process environment, an optional
``.env`` file and finally the declared default, in that order.
"""

import json
import os
from abc import ABC
from pathlib import Path
from typing import Any, Dict, List, Optional, Union, get_type_hints


class AliasChoices:
    """Several environment variable names that may supply one field."""

    def __init__(self, *choices: str) -> None:
        self.choices = list(choices)


class FieldInfo:
    """Information about a field in a settings class."""

    def __init__(
        self,
        default: Any = None,
        description: str = "",
        validation_alias: Optional[Union[str, List[str], AliasChoices]] = None,
        required: bool = False,
    ) -> None:
        self.default = default
        self.description = description
        self.validation_alias = validation_alias
        self.required = required


def Field(
    default: Any = None,
    *,
    description: str = "",
    validation_alias: Optional[Union[str, List[str], AliasChoices]] = None,
) -> Any:
    """Create a field descriptor for settings. ``...`` marks a required field."""
    required = default is ...
    return FieldInfo(
        default=None if required else default,
        description=description,
        validation_alias=validation_alias,
        required=required,
    )


class SettingsConfigDict:
    """Configuration for settings loading."""

    def __init__(
        self,
        env_file: Optional[str] = None,
        env_file_encoding: str = "utf-8",
        case_sensitive: bool = True,
    ) -> None:
        self.env_file = env_file
        self.env_file_encoding = env_file_encoding
        self.case_sensitive = case_sensitive


class BaseSettings(ABC):
    """Base class for settings that loads from environment variables."""

    model_config: SettingsConfigDict = SettingsConfigDict()

    def __init__(self, **kwargs: Any) -> None:
        env_file_vars: Dict[str, str] = {}
        if self.model_config.env_file:
            env_file_vars = self._load_env_file(self.model_config.env_file)

        for field_name, field_type in get_type_hints(self.__class__).items():
            if field_name.startswith("_") or field_name == "model_config":
                continue

            info = getattr(self.__class__, field_name, None)
            if not isinstance(info, FieldInfo):
                info = FieldInfo(default=info)

            if field_name in kwargs:
                value = kwargs[field_name]
            else:
                value = self._lookup(field_name, info, env_file_vars)
                if value is None:
                    if info.required:
                        raise ValueError(
                            f"Required field '{field_name}' not found in environment"
                        )
                    value = info.default

            setattr(self, field_name, self._convert_value(value, field_type))

    def _env_names(self, field_name: str, info: FieldInfo) -> List[str]:
        names: List[str] = []
        alias = info.validation_alias
        if isinstance(alias, AliasChoices):
            names.extend(alias.choices)
        elif isinstance(alias, list):
            names.extend(alias)
        elif alias:
            names.append(alias)
        names.append(field_name.upper())

        if not self.model_config.case_sensitive:
            names.extend([name.lower() for name in names])
        return names

    def _lookup(
        self, field_name: str, info: FieldInfo, env_file_vars: Dict[str, str]
    ) -> Optional[str]:
        for env_name in self._env_names(field_name, info):
            if env_name in os.environ:
                return os.environ[env_name]
            if env_name in env_file_vars:
                return env_file_vars[env_name]
        return None

    def _load_env_file(self, env_file_path: str) -> Dict[str, str]:
        """Load KEY=VALUE pairs from a .env file, if it exists."""
        env_vars: Dict[str, str] = {}
        env_path = Path(env_file_path)
        if not env_path.exists():
            return env_vars

        with open(env_path, "r", encoding=self.model_config.env_file_encoding) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    env_vars[key.strip()] = value.strip().strip("\"'")
        return env_vars

    def _convert_value(self, value: Any, target_type: Any) -> Any:
        """Convert a string value from the environment to the target type."""
        if not isinstance(value, str):
            return value

        # Optional[X] converts as X
        if getattr(target_type, "__origin__", None) is Union:
            non_none = [arg for arg in target_type.__args__ if arg is not type(None)]
            if non_none:
                return self._convert_value(value, non_none[0])

        if target_type is bool:
            return value.strip().lower() in ("true", "1", "yes", "on")
        if target_type is int:
            return int(value)
        if target_type is float:
            return float(value)
        if getattr(target_type, "__origin__", None) is list:
            if value.startswith("[") and value.endswith("]"):
                return json.loads(value)
            return [item.strip() for item in value.split(",") if item.strip()]

        return value


class Settings(BaseSettings):
    """itipcheck settings and configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Logging configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="text", description="Log format (json or text)")

    # Engine behaviour
    ITIP_FAIL_FAST: bool = Field(
        default=False,
        description="Stop at the first violation instead of collecting all",
    )
    ITIP_RELAXED_VALIDATION: bool = Field(
        default=False,
        description="Accept PUBLISH objects without ORGANIZER",
        validation_alias=AliasChoices("ITIP_RELAXED_VALIDATION", "ITIP_RELAXED"),
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
