"""CLI interface for glyphfit."""

import logging
from pathlib import Path

import click
from PIL import Image, ImageMode

from glyphfit.config import CanvasSettings, Config, load_config
from glyphfit.fonts import FontLoadError, load_font
from glyphfit.render import ImageCanvas, draw_text_mut, layout_fitted
from glyphfit.types import PixelValue


def _parse_numbers(value: str, count: int, name: str, cast=float) -> tuple:
    parts = [p.strip() for p in value.replace("x", ",").split(",")]
    if len(parts) != count:
        raise click.BadParameter(f"Expected {count} comma-separated values, got '{value}'", param_hint=name)
    try:
        return tuple(cast(p) for p in parts)
    except ValueError as e:
        raise click.BadParameter(f"Invalid number in '{value}': {e}", param_hint=name) from None


def pixel_for_mode(color: tuple[int, ...], mode: str) -> PixelValue:
    """
    Fit a configured color to an image mode's band count.

    Single-band modes take the first channel. When the mode ends in an alpha
    band and the color omits it, full opacity is added.
    """
    band_names = ImageMode.getmode(mode).bands
    bands = len(band_names)
    if bands == 1:
        return color[0]
    if band_names[-1] in ("A", "a") and len(color) == bands - 1:
        return (*color, 255)
    if len(color) != bands:
        raise ValueError(f"Color {color} has {len(color)} channels, mode {mode} needs {bands}")
    return tuple(color)


def _apply_overrides(
    cfg: Config,
    font: str | None,
    color: str | None,
    scale: str | None,
    max_width: float | None,
    x: float | None,
    y: float | None,
) -> Config:
    style_updates: dict = {}
    if color:
        style_updates["color"] = _parse_numbers(color, color.count(",") + 1, "--color", int)
    if scale:
        style_updates["scale_x"], style_updates["scale_y"] = _parse_numbers(scale, 2, "--scale")
    if max_width is not None:
        style_updates["max_width"] = max_width
    if x is not None:
        style_updates["x"] = x
    if y is not None:
        style_updates["y"] = y

    data = cfg.model_dump()
    data["style"].update(style_updates)
    if font:
        data["font"]["spec"] = font
    return Config.model_validate(data)


@click.group()
@click.version_option()
@click.option("-v", "--verbose", is_flag=True, help="Show layout and font loading details.")
def main(verbose: bool) -> None:
    """Draw text onto images, shrinking it horizontally to fit a maximum width."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


_common_options = [
    click.option("--text", type=str, default="Hello, world!", show_default=True, help="Text to draw."),
    click.option("--font", type=str, help="Font file path or Google Font 'family:weight'."),
    click.option(
        "--config",
        type=click.Path(exists=True, path_type=Path),
        help="Path to glyphfit.toml. Defaults to ./glyphfit.toml if present.",
    ),
    click.option("--scale", type=str, help="Pixel scale as 'X,Y' (e.g., '24.8,12.4')."),
    click.option("--max-width", type=float, help="Maximum text width in pixels."),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


@main.command()
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@common_options
@click.option("--color", type=str, help="Text color as comma-separated channels (e.g., '0,0,255').")
@click.option("--x", "x", type=float, help="Left edge of the text.")
@click.option("--y", "y", type=float, help="Top edge of the text.")
@click.option("--size", type=str, help="Canvas size as 'WxH' (e.g., '200x200').")
@click.option(
    "--bounds",
    type=click.Choice(["clip", "strict"], case_sensitive=False),
    help="Out-of-range pixel policy.",
)
def render(
    output: Path,
    text: str,
    font: str | None,
    config: Path | None,
    scale: str | None,
    max_width: float | None,
    color: str | None,
    x: float | None,
    y: float | None,
    size: str | None,
    bounds: str | None,
) -> None:
    """
    Draw text onto a new image and save it to OUTPUT.

    The image format is taken from the OUTPUT extension (e.g., .png).
    """
    try:
        cfg = _apply_overrides(load_config(config), font, color, scale, max_width, x, y)
        canvas_cfg = cfg.canvas
        if size:
            width, height = _parse_numbers(size, 2, "--size", int)
            canvas_cfg = CanvasSettings.model_validate({**canvas_cfg.model_dump(), "width": width, "height": height})
        if bounds:
            canvas_cfg = canvas_cfg.model_copy(update={"bounds": bounds.lower()})

        if not cfg.font.spec:
            click.echo("Error: No font given. Use --font or set [font] spec in the config.", err=True)
            raise SystemExit(1)
        loaded = load_font(cfg.font.spec)

        image = Image.new(
            canvas_cfg.mode,
            (canvas_cfg.width, canvas_cfg.height),
            pixel_for_mode(canvas_cfg.background, canvas_cfg.mode),
        )
        canvas = ImageCanvas(image, bounds=canvas_cfg.bounds)
        style = cfg.style
        draw_text_mut(
            canvas,
            pixel_for_mode(style.color, canvas_cfg.mode),
            style.x,
            style.y,
            style.scale,
            style.max_width,
            loaded,
            text,
        )

        image.save(output)
        click.echo(f"✓ Text rendered to: {output}")

    except (FileNotFoundError, ValueError, FontLoadError, OSError) as e:
        # EmptyRenderableText and pydantic ValidationError are ValueErrors
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@main.command()
@common_options
def measure(
    text: str,
    font: str | None,
    config: Path | None,
    scale: str | None,
    max_width: float | None,
) -> None:
    """Print the natural width of the text and the scale it would be drawn at."""
    try:
        cfg = _apply_overrides(load_config(config), font, None, scale, max_width, None, None)
        if not cfg.font.spec:
            click.echo("Error: No font given. Use --font or set [font] spec in the config.", err=True)
            raise SystemExit(1)
        loaded = load_font(cfg.font.spec)

        style = cfg.style
        layout = layout_fitted(loaded, style.position, style.scale, style.max_width, text)
        click.echo(f"Glyphs: {len(layout.glyphs)}")
        click.echo(f"Natural width: {layout.natural_width:.2f}px (max {style.max_width:g}px)")
        click.echo(f"Final scale: {layout.scale.x:.3f} x {layout.scale.y:.3f}")
        click.echo(f"Final width: {layout.width:.2f}px")
        click.echo(f"Shrunk: {'yes' if layout.shrunk else 'no'}")

    except (FileNotFoundError, ValueError, FontLoadError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
