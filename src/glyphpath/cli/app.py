"""CLI application entry point for glyphpath.

This module provides the main CLI interface using Typer.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from glyphpath import __version__
from glyphpath.cli.output import (
    SYM_DOT,
    console,
    create_progress,
    print_capabilities,
    print_error,
    print_font_info,
    print_header,
    print_raw,
    print_step,
    print_success,
)
from glyphpath.config import (
    GlyphPathSettings,
    LoadingConfig,
    LoggingConfig,
    PathDataOptions,
    RenderOptions,
)
from glyphpath.core import Glyph
from glyphpath.exceptions import FontLoadError, GlyphPathError
from glyphpath.io import FontReader, GlyphExporter
from glyphpath.svg import DecimalRounder

# Create the Typer app
app = typer.Typer(
    name="glyphpath",
    help="Inspect font glyph outlines and export them as SVG path data.",
    add_completion=False,
    no_args_is_help=True,
)

FontArgument = Annotated[
    Path,
    typer.Argument(help="Path to a TTF/OTF font file", show_default=False),
]
GlyphArgument = Annotated[
    str,
    typer.Argument(
        help="Glyph name, single character, or glyph index",
        show_default=False,
    ),
]
LowMemoryOption = Annotated[
    bool,
    typer.Option(
        "--low-memory",
        help="Materialize glyphs on first access instead of indexing all of them",
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print machine-readable JSON"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]glyphpath[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Inspect font glyph outlines and export them as SVG path data."""


def _parse_variation(values: list[str] | None) -> dict[str, float] | None:
    """Parse ``tag=value`` pairs into a variation location.

    Raises:
        typer.BadParameter: If a pair is malformed
    """
    if not values:
        return None
    location: dict[str, float] = {}
    for item in values:
        tag, sep, value = item.partition("=")
        if not sep or not tag:
            raise typer.BadParameter(f"Expected TAG=VALUE, got {item!r}")
        try:
            location[tag.strip()] = float(value)
        except ValueError:
            raise typer.BadParameter(f"Axis value is not a number: {item!r}") from None
    return location


def _open_reader(font_path: Path, low_memory: bool = False) -> FontReader:
    """Load a font, wrapping loader failures.

    Raises:
        FontLoadError: If the file is missing or cannot be decoded
    """
    settings = GlyphPathSettings(loading=LoadingConfig(low_memory=low_memory))
    reader = FontReader(font_path, settings)
    try:
        reader.load()
    except Exception as e:
        raise FontLoadError(str(font_path), str(e)) from e
    return reader


def _find_glyph(reader: FontReader, key: str) -> Glyph:
    """Resolve a glyph argument.

    Raises:
        typer.BadParameter: If no glyph matches
    """
    glyph = reader.get_glyph(key)
    if glyph is None and key.isdigit():
        glyph = reader.get_glyph(int(key))
    if glyph is None:
        raise typer.BadParameter(f"No glyph named or mapped to {key!r}")
    return glyph


@app.command()
def info(
    font: FontArgument,
    as_json: JsonOption = False,
) -> None:
    """Show format, size and capabilities of a font."""
    try:
        reader = _open_reader(font)
        try:
            data = {
                "path": str(font),
                "format": reader.format,
                "glyph_count": reader.glyph_count,
                "units_per_em": reader.units_per_em,
                "variable": reader.is_variable,
                "color_layers": reader.has_color_layers,
                "svg_images": reader.has_svg_images,
            }
            axes = reader.context.variation.axes if reader.context.variation else []
        finally:
            reader.close()
    except GlyphPathError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if as_json:
        print_raw(json.dumps({**data, "axes": axes}))
        return

    print_header(__version__)
    print_font_info(str(font), data["format"], data["glyph_count"], data["units_per_em"])
    print_step("Capabilities")

    def yes_no(flag: object) -> str:
        return "yes" if flag else "no"

    print_capabilities(
        {
            "Variations": f"yes ({', '.join(axes)})" if axes else "no",
            "Colour layers": yes_no(data["color_layers"]),
            "SVG images": yes_no(data["svg_images"]),
        }
    )


@app.command()
def svg(
    font: FontArgument,
    glyph: GlyphArgument,
    size: Annotated[
        float | None,
        typer.Option(
            "--size",
            "-s",
            help="Render at this size (Y-down, baseline at 0) instead of font units",
            min=0.0,
        ),
    ] = None,
    decimals: Annotated[
        int,
        typer.Option("--decimals", "-d", help="Decimal places", min=0, max=10),
    ] = 2,
    no_flip: Annotated[
        bool,
        typer.Option("--no-flip", help="Keep font-unit y coordinates (Y up)"),
    ] = False,
    variation: Annotated[
        list[str] | None,
        typer.Option("--variation", help="Variation axis location, e.g. wght=700"),
    ] = None,
    path_only: Annotated[
        bool,
        typer.Option("--path-only", help="Print only the path data"),
    ] = False,
    low_memory: LowMemoryOption = False,
) -> None:
    """Print a glyph outline as an SVG <path> element."""
    location = _parse_variation(variation)
    settings = GlyphPathSettings()
    rounder = DecimalRounder(settings.codec.rounding_cache_size)

    try:
        reader = _open_reader(font, low_memory)
        try:
            target = _find_glyph(reader, glyph)
            context = reader.context
            if size is not None:
                path = target.get_path(
                    0, 0, size, RenderOptions(variation=location), font=context
                )
                options = PathDataOptions(decimal_places=decimals, flip_y=False)
            else:
                path = target.path
                if location is not None and context.variation is not None:
                    path = context.variation.get_transform(target, location).path
                options = PathDataOptions(decimal_places=decimals, flip_y=not no_flip)

            parts = path.layers or [path]
            if path_only:
                output = "\n".join(part.to_path_data(options, rounder) for part in parts)
            else:
                output = "\n".join(
                    part.to_svg(options, part.to_path_data(options, rounder)) for part in parts
                )
        finally:
            reader.close()
    except GlyphPathError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    print_raw(output)


@app.command()
def bbox(
    font: FontArgument,
    glyph: GlyphArgument,
    as_json: JsonOption = False,
    low_memory: LowMemoryOption = False,
) -> None:
    """Print the exact bounding box and metrics of a glyph in font units."""
    try:
        reader = _open_reader(font, low_memory)
        try:
            target = _find_glyph(reader, glyph)
            box = target.get_bounding_box()
            metrics = target.get_metrics()
            name = target.name
            advance = target.advance_width
        finally:
            reader.close()
    except GlyphPathError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if as_json:
        print_raw(
            json.dumps(
                {
                    "glyph": name,
                    "bbox": list(box.to_tuple()),
                    "advance_width": advance,
                    "left_side_bearing": metrics.left_side_bearing,
                    "right_side_bearing": metrics.right_side_bearing,
                }
            )
        )
        return

    console.print(f"[bold]{name}[/bold]")
    console.print(
        f"  bbox {box.x1:g} {box.y1:g} {box.x2:g} {box.y2:g} {SYM_DOT} "
        f"{box.width:g} x {box.height:g}"
    )
    console.print(
        f"  advance {advance} {SYM_DOT} lsb {metrics.left_side_bearing} "
        f"{SYM_DOT} rsb {metrics.right_side_bearing:g}"
    )


@app.command()
def export(
    font: FontArgument,
    output_dir: Annotated[
        Path,
        typer.Argument(help="Directory receiving one SVG file per glyph", show_default=False),
    ],
    decimals: Annotated[
        int,
        typer.Option("--decimals", "-d", help="Decimal places", min=0, max=10),
    ] = 2,
    low_memory: LowMemoryOption = False,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write detailed logs to file"),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Write every glyph of a font as a standalone SVG document."""
    if not font.is_file():
        print_error(
            f"Input file not found: {font}",
            details="Please provide a path to a TTF or OTF font file.",
        )
        raise typer.Exit(code=1)

    settings = GlyphPathSettings(
        loading=LoadingConfig(low_memory=low_memory),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    exporter = GlyphExporter(settings, decimal_places=decimals, quiet=quiet)

    if not quiet:
        print_header(__version__)
        print_step("Exporting glyphs")

    try:
        if not quiet:
            with create_progress() as progress:
                task_id = progress.add_task("Exporting", total=None)

                def update_progress(completed: int, total: int, *_: object) -> None:
                    progress.update(task_id, completed=completed, total=total)

                stats = exporter.export(font, output_dir, progress_callback=update_progress)
        else:
            stats = exporter.export(font, output_dir)
    except GlyphPathError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except Exception as e:
        print_error(f"Could not export font: {e}")
        raise typer.Exit(code=1)

    if not quiet:
        print_success(
            output_dir=str(output_dir),
            total_time_s=stats.duration_seconds,
            exported=stats.exported_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
        )
    if stats.error_count:
        raise typer.Exit(code=1)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
