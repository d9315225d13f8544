from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

CONFIG_FILE_ENV = "KUBEPICK_CONFIG_FILE"
LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_PATH_FIELDS: tuple[str, ...] = ("kubeconfig", "log_dir", "document_dir")
_OPTIONAL_TEXT_FIELDS: tuple[str, ...] = ("editor",)


def default_config_file() -> Path:
    override = os.environ.get(CONFIG_FILE_ENV)
    if override and override.strip():
        return Path(override.strip()).expanduser()
    return Path.home() / ".config" / "kubepick" / "config.yaml"


def _resolve_path(value: str | Path) -> Path:
    return Path(value).expanduser().resolve()


def _normalize_optional_text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    if normalized:
        return normalized
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


class _YamlConfigFileSource(PydanticBaseSettingsSource):
    """Lowest-priority source backed by the user's YAML config file."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        data = read_config_file(default_config_file())
        return data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        data = read_config_file(default_config_file())
        return {
            key: value
            for key, value in data.items()
            if key in self.settings_cls.model_fields
        }


class KubepickSettings(BaseSettings):
    """
    Runtime configuration.

    Precedence, highest first: explicit keyword arguments (CLI options),
    `KUBEPICK_*` environment variables, `.env`, then the YAML config file.
    """

    model_config = SettingsConfigDict(
        env_prefix="KUBEPICK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    kubectl_binary: str = Field(
        default="kubectl",
        description="kubectl executable name or path.",
    )
    kubeconfig: Path | None = Field(
        default=None,
        description="Explicit kubeconfig passed as --kubeconfig. Uses kubectl's default when unset.",
    )
    command_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-invocation kubectl timeout. No timeout when unset.",
    )
    strict_context_switch: bool = Field(
        default=False,
        description=(
            "Abort a workflow when `kubectl config use-context` fails. "
            "When false the failure is logged and the workflow continues."
        ),
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Directory for the JSON log file. File logging is off when unset.",
    )
    editor: str | None = Field(
        default=None,
        description="Editor used to open documents written with --output-dir.",
    )
    document_dir: Path | None = Field(
        default=None,
        description="Default directory for rendered resource documents.",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            _YamlConfigFileSource(settings_cls),
            file_secret_settings,
        )

    @field_validator("kubectl_binary", mode="before")
    @classmethod
    def _normalize_binary(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("KUBEPICK_KUBECTL_BINARY must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("KUBEPICK_KUBECTL_BINARY must not be empty.")
        return normalized

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("KUBEPICK_LOG_LEVEL must be a string.")
        normalized = value.strip().upper()
        if normalized in LOG_LEVELS:
            return normalized
        raise ValueError(
            "KUBEPICK_LOG_LEVEL must be set to: " + ", ".join(sorted(LOG_LEVELS)) + "."
        )

    @field_validator(*_PATH_FIELDS, mode="before")
    @classmethod
    def _normalize_paths(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            return None
        return _resolve_path(value)

    @field_validator(*_OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def _normalize_optional_strings(cls, value: Any) -> str | None:
        return _normalize_optional_text(value)

    @field_validator("command_timeout_seconds", mode="before")
    @classmethod
    def _normalize_timeout(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def load_settings(**overrides: Any) -> KubepickSettings:
    explicit = {key: value for key, value in overrides.items() if value is not None}
    return KubepickSettings(**explicit)
