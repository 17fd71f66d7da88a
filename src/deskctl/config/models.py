"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, deskctl.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from deskctl.domain.grid import Canvas, GridSpec

DEFAULT_TAG_PALETTE: tuple[str, ...] = (
    "#60a5fa",
    "#4ade80",
    "#fbbf24",
    "#f87171",
    "#a78bfa",
    "#fb923c",
    "#34d399",
    "#f472b6",
)


class CanvasConfig(BaseModel):
    """[canvas] section."""

    model_config = {"frozen": True}

    width: int = 1920
    height: int = 1080
    taskbar_height: int = 48

    def to_canvas(self, grid: GridConfig) -> Canvas:
        """Reserve the taskbar plus one icon row at the bottom."""
        return Canvas(
            width=self.width,
            height=self.height,
            reserved_margin=self.taskbar_height + grid.icon_height,
        )


class GridConfig(BaseModel):
    """[grid] section."""

    model_config = {"frozen": True}

    offset_x: int = Field(default=20, ge=0)
    offset_y: int = Field(default=20, ge=0)
    pitch_x: int = Field(default=100, gt=0)
    pitch_y: int = Field(default=110, gt=0)
    icon_width: int = Field(default=100, gt=0)
    icon_height: int = Field(default=110, gt=0)

    def to_spec(self) -> GridSpec:
        return GridSpec(**self.model_dump())


class HistoryConfig(BaseModel):
    """[history] section."""

    model_config = {"frozen": True}

    record_before_state: bool = True


class TagsConfig(BaseModel):
    """[tags] section."""

    model_config = {"frozen": True}

    default_color: str = "#fb923c"
    palette: list[str] = Field(default_factory=lambda: list(DEFAULT_TAG_PALETTE))


class PluginsConfig(BaseModel):
    """[plugins] section.

    ``blocked`` lists plugin names (as shown by the plugin manager) that
    must not register.
    """

    model_config = {"frozen": True}

    enabled: bool = True
    blocked: list[str] = Field(default_factory=list)
