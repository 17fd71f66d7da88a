"""DeskSettings: one frozen object built from flags, environment and TOML.

Sources, strongest first: keyword arguments from the CLI, ``DESKCTL_*``
environment variables (``__`` separates nested keys, so
``DESKCTL_CANVAS__WIDTH=2560`` sets ``canvas.width``), the discovered
``deskctl.toml``, and finally the defaults of the section models.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from deskctl.config.discovery import find_config
from deskctl.config.models import (
    CanvasConfig,
    GridConfig,
    HistoryConfig,
    PluginsConfig,
    TagsConfig,
)
from deskctl.domain.grid import Canvas, GridSpec

# The TOML path chosen by from_cli(); pydantic-settings builds sources
# inside __init__, so it cannot be passed as an argument.
_construction = threading.local()


def read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    def __init__(self, settings_cls: type[BaseSettings], path: Path | None) -> None:
        super().__init__(settings_cls)
        self._values = read_toml(path) if path is not None and path.is_file() else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._values.get(field_name), field_name, field_name in self._values

    def __call__(self) -> dict[str, Any]:
        return dict(self._values)


class DeskSettings(BaseSettings):
    model_config = {
        "frozen": True,
        "env_prefix": "DESKCTL_",
        "env_nested_delimiter": "__",
    }

    # Directory that holds .deskctl/: the config file's parent, else the CWD.
    workspace_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    grid: GridConfig = Field(default_factory=GridConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    tags: TagsConfig = Field(default_factory=TagsConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_source = TomlSettingsSource(settings_cls, getattr(_construction, "path", None))
        return init_settings, env_settings, toml_source

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        workspace_root: Path | None = None,
        **cli_flags: Any,
    ) -> DeskSettings:
        """Resolve the config file and workspace, then build the settings.

        An explicit *config_path* must exist. Without one, ``deskctl.toml``
        is searched upward from *workspace_root* (or the CWD). Extra
        keyword arguments are CLI flags and win over every other source.

        Raises:
            click.ClickException: the config file is missing or not valid TOML.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(workspace_root)

        if workspace_root is None:
            workspace_root = toml_path.parent if toml_path is not None else Path.cwd()

        _construction.path = toml_path
        try:
            return cls(workspace_root=workspace_root, config_path=toml_path, **cli_flags)
        finally:
            _construction.path = None

    @property
    def grid_spec(self) -> GridSpec:
        return self.grid.to_spec()

    @property
    def canvas_spec(self) -> Canvas:
        return self.canvas.to_canvas(self.grid)
