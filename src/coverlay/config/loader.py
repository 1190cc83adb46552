"""Configuration loading with pydantic-settings.

Sources, highest precedence first:
1. Direct kwargs
2. Environment variables (COVERLAY__SECTION__KEY)
3. Repo config (.coverlay/config.yaml)
4. Global config (~/.config/coverlay/config.yaml)
5. Built-in defaults

YAML layers are deep-merged in order, so a repo file only needs the keys
it changes. Unknown top-level sections are reported and ignored.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from coverlay.config.models import (
    CoverageConfig,
    CoverlayConfig,
    LoggingConfig,
    RenderConfig,
    WatchConfig,
)
from coverlay.core.errors import ConfigError

log = structlog.get_logger(__name__)

GLOBAL_CONFIG_PATH = Path("~/.config/coverlay/config.yaml").expanduser()
REPO_CONFIG_NAME = Path(".coverlay") / "config.yaml"


def config_layers(repo_root: Path) -> list[Path]:
    """YAML files consulted for `repo_root`, lowest precedence first."""
    return [GLOBAL_CONFIG_PATH, repo_root / REPO_CONFIG_NAME]


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(
            str(path), f"top level must be a mapping, got {type(data).__name__}"
        )
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result


class CoverlaySettings(BaseSettings):
    """Root settings. Env vars: COVERLAY__LOGGING__LEVEL, COVERLAY__COVERAGE__..., etc."""

    model_config = SettingsConfigDict(
        env_prefix="COVERLAY__",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    logging: LoggingConfig = LoggingConfig()
    coverage: CoverageConfig = CoverageConfig()
    render: RenderConfig = RenderConfig()
    watch: WatchConfig = WatchConfig()


class _YamlLayersSource(PydanticBaseSettingsSource):
    """Deep-merged YAML layers, restricted to known top-level sections."""

    def __init__(self, settings_cls: type[BaseSettings], layers: Sequence[Path]) -> None:
        super().__init__(settings_cls)
        merged: dict[str, Any] = {}
        for path in layers:
            merged = _deep_merge(merged, _load_yaml(path))

        known = set(settings_cls.model_fields)
        for section in sorted(set(merged) - known):
            log.warning("unknown_config_section", section=section)
        self._data = {key: value for key, value in merged.items() if key in known}

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return self._data


def _settings_for(layers: Sequence[Path]) -> type[CoverlaySettings]:
    """Bind `CoverlaySettings` to a set of YAML layers."""

    class _LayeredSettings(CoverlaySettings):
        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (init_settings, env_settings, _YamlLayersSource(settings_cls, layers))

    return _LayeredSettings


def load_config(repo_root: Path | None = None, **kwargs: Any) -> CoverlayConfig:
    """Load config: defaults < global yaml < repo yaml < env vars < kwargs.

    Args:
        repo_root: Workspace root holding `.coverlay/config.yaml`.
                   Defaults to current working directory.
        **kwargs: Override values (highest precedence).

    Raises:
        ConfigError: On unreadable YAML or a value that fails validation.
    """
    settings_cls = _settings_for(config_layers(repo_root or Path.cwd()))
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(field, first.get("input"), first["msg"]) from e

    return CoverlayConfig.model_validate(settings.model_dump())
