"""MilaanSettings — one frozen object for CLI flags, env vars and ``milaan.toml``.

Sources, strongest first:

1. keyword arguments (Click flags, test fixtures)
2. ``MILAAN_*`` environment variables (``MILAAN_LATENCY__LOGIN=0``)
3. the discovered ``milaan.toml``
4. defaults on the section models in :mod:`milaan.config.models`
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from milaan.config.discovery import find_config
from milaan.config.models import LatencyConfig, NotificationsConfig, SessionConfig

# File picked by from_cli() for the settings object being built.
_active_toml: ContextVar[Path | None] = ContextVar("milaan_active_toml", default=None)


class MilaanSettings(BaseSettings):
    """Resolved settings for one CLI invocation or test session.

    Attributes:
        root: Base directory for ``session.state_dir``. The config file's
            directory when one was found, else the working directory.
        config_path: The ``milaan.toml`` that was read, if any.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="MILAAN_",
        env_nested_delimiter="__",
    )

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    session: SessionConfig = Field(default_factory=SessionConfig)
    latency: LatencyConfig = Field(default_factory=LatencyConfig)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        toml_path = _active_toml.get()
        if toml_path is not None:
            sources.append(TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        return tuple(sources)

    @property
    def state_dir(self) -> Path:
        return self.root / self.session.state_dir

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **flags: Any,
    ) -> MilaanSettings:
        """Build settings the way the CLI does.

        *config_path* skips discovery. Without it ``milaan.toml`` is looked
        up from *root* (or the working directory) upwards.

        Raises:
            click.ClickException: If the config file is not valid TOML.
        """
        toml_path = Path(config_path) if config_path else find_config(root)
        if root is None:
            root = toml_path.parent if toml_path is not None else Path.cwd()

        token = _active_toml.set(toml_path)
        try:
            return cls(root=root, config_path=toml_path, **flags)
        except tomllib.TOMLDecodeError as exc:
            import click

            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
        finally:
            _active_toml.reset(token)
