"""DocBridge — Configuration.

Settings are layered, later layers winning:

    1. defaults declared on the models below
    2. ``/etc/docbridge/config.yaml``
    3. ``~/.docbridge/config.yaml``
    4. a file passed with ``docbridge --config`` (``Settings.load(path)``)
    5. ``DOCBRIDGE_*`` environment variables, ``__`` separating sections
       (``DOCBRIDGE_LOGGING__LEVEL=debug``)

YAML layers are merged section by section, so a user file that only sets
``logging.format`` keeps the ``logging.level`` chosen system-wide.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DocumentKindName = Literal["word", "excel", "powerpoint", "pdf"]

SYSTEM_CONFIG = Path("/etc/docbridge/config.yaml")
USER_CONFIG = Path("~/.docbridge/config.yaml")


class DocumentsConfig(BaseModel):
    enabled: list[DocumentKindName] = Field(
        default_factory=lambda: ["word", "excel", "powerpoint", "pdf"],
        description="Document kinds whose handler registries are built at startup.",
    )
    disabled: list[DocumentKindName] = Field(
        default_factory=list,
        description="Explicitly disabled kinds (overrides 'enabled').",
    )


class DispatchConfig(BaseModel):
    list_valid_operations: bool = Field(
        default=True,
        description="Include the registered operation names in UnknownOperationError messages.",
    )


class LoggingConfig(BaseModel):
    level: Literal["debug", "info", "warning", "error", "critical"] = "warning"
    format: Literal["json", "console"] = "console"
    file: Path | None = None

    @field_validator("file")
    @classmethod
    def expand_file(cls, v: Path | None) -> Path | None:
        return v.expanduser() if v is not None else None


def _merge_layer(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in layer.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_layer(merged[key], value)
        else:
            merged[key] = value
    return merged


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse one YAML layer.  An empty file is an empty layer.

    Raises:
        ValueError: The file is not valid YAML or its top level is not a mapping.
    """
    try:
        with path.open(encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"{path}: invalid YAML: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"{path}: expected a mapping at the top level, got {type(loaded).__name__}")
    return loaded


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DOCBRIDGE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    documents: DocumentsConfig = Field(default_factory=DocumentsConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML layers reach the model as init kwargs; the environment beats them.
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Settings":
        """Build settings from the YAML layers that exist, then the environment.

        A *config_file* that does not exist is skipped like the default
        locations; the CLI checks existence itself before calling.
        """
        layers = [SYSTEM_CONFIG, USER_CONFIG.expanduser()]
        if config_file is not None:
            layers.append(config_file)

        data: dict[str, Any] = {}
        for path in layers:
            if path.is_file():
                data = _merge_layer(data, read_config_file(path))
        return cls(**data)

    def active_document_kinds(self) -> list[str]:
        """Kinds in ``documents.enabled`` that ``documents.disabled`` does not remove."""
        return [k for k in self.documents.enabled if k not in self.documents.disabled]


_active: Settings | None = None


def get_settings() -> Settings:
    """Return the active settings, loading the default layers on first use."""
    global _active
    if _active is None:
        _active = Settings.load()
    return _active


def override_settings(settings: Settings | None) -> Settings | None:
    """Install *settings* as the active instance and return the one it replaced.

    Passing ``None`` drops the active instance so the next
    :func:`get_settings` call reloads from disk and the environment.
    """
    global _active
    previous, _active = _active, settings
    return previous
