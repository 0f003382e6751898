"""Configuration loading and validation."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from glyphfit.models import Point, PxScale
from glyphfit.types import BoundsPolicy

DEFAULT_CONFIG_NAME = "glyphfit.toml"


class TextStyle(BaseModel):
    """
    How and where text is drawn.

    Defaults reproduce the classic demo: blue text at a 2:1 stretched scale,
    anchored at the top-left corner, fitted to 200px.
    """

    color: tuple[int, ...] = (0, 0, 255)
    """Text color in the canvas's channel layout (RGB for the default canvas), 0-255."""

    scale_x: float = Field(default=24.8, gt=0)
    """Horizontal pixel scale."""

    scale_y: float = Field(default=12.4, gt=0)
    """Vertical pixel scale (font height in pixels)."""

    max_width: float = Field(default=200.0, gt=0)
    """Maximum rendered width; wider text is compressed horizontally once."""

    x: float = 0.0
    """Left edge of the text in pixels."""

    y: float = 0.0
    """Top edge of the text in pixels."""

    @property
    def scale(self) -> PxScale:
        return PxScale(self.scale_x, self.scale_y)

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


class CanvasSettings(BaseModel):
    """Canvas created by the CLI."""

    width: int = Field(default=200, gt=0)
    height: int = Field(default=200, gt=0)
    mode: str = "RGB"
    """Pillow image mode."""

    background: tuple[int, ...] = (0, 0, 0)
    """Background color in the mode's channel layout."""

    bounds: BoundsPolicy = "clip"
    """Out-of-range pixel policy: "clip" drops writes, "strict" raises."""


class FontSettings(BaseModel):
    """Font selection."""

    spec: str | None = None
    """Font file path, or Google Fonts "family:weight" (e.g., "Roboto:400")."""


class Config(BaseModel):
    """Root configuration; every section has defaults."""

    style: TextStyle = Field(default_factory=TextStyle)
    canvas: CanvasSettings = Field(default_factory=CanvasSettings)
    font: FontSettings = Field(default_factory=FontSettings)


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses ./glyphfit.toml when
            present and built-in defaults otherwise.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist.
        ValueError: If config is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            return Config()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        config_dict = tomllib.load(f)

    return Config(**config_dict)
