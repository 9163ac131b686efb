"""Per-glyph SVG export.

Writes one standalone SVG document per glyph. Outlines are resolved with
Glyph.get_path at one unit per font unit, so documents share the font's
coordinate grid with the baseline at y=0.
"""

import re
import time
import traceback
import xml.etree.ElementTree as ET
from collections.abc import Callable
from pathlib import Path

from glyphpath.config import GlyphPathSettings, PathDataOptions, get_default_settings
from glyphpath.core.capabilities import FontContext
from glyphpath.core.glyph import Glyph
from glyphpath.core.path import SVG_NAMESPACE
from glyphpath.core.path import Path as OutlinePath
from glyphpath.io.reader import FontReader
from glyphpath.utils import ExportLogger, ExportStats, configure_logging

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")

ET.register_namespace("", SVG_NAMESPACE)


def svg_file_name(glyph: Glyph) -> str:
    """File name for a glyph's SVG document, unique within a font."""
    name = _UNSAFE_CHARS.sub("_", glyph.name or "glyph")
    return f"{glyph.index:05d}-{name}.svg"


def _count_commands(path: OutlinePath) -> int:
    if path.layers:
        return sum(_count_commands(layer) for layer in path.layers)
    return len(path.commands)


class GlyphExporter:
    """Exports every glyph of a font as an SVG file.

    Example:
        exporter = GlyphExporter(GlyphPathSettings())
        stats = exporter.export(Path("font.ttf"), Path("out/"))
    """

    def __init__(
        self,
        config: GlyphPathSettings | None = None,
        decimal_places: int = 2,
        quiet: bool = True,
    ) -> None:
        """Initialize the exporter.

        Args:
            config: Application settings (defaults if None)
            decimal_places: Coordinate precision of written path data
            quiet: Suppress console log output
        """
        self.config = config or get_default_settings()
        self.logger = configure_logging(
            log_file=self.config.logging.log_file,
            console_level=self.config.logging.log_level,
            file_level=self.config.logging.file_log_level,
            quiet=quiet,
        )
        self.export_logger = ExportLogger(self.logger)
        self.path_options = PathDataOptions(decimal_places=decimal_places, flip_y=False)

    def build_document(
        self,
        path: OutlinePath,
        width: float,
        ascender: float,
        descender: float,
    ) -> ET.Element:
        """Build the SVG document of one resolved glyph outline.

        Args:
            path: Result of Glyph.get_path at one unit per font unit
            width: Advance width in font units
            ascender: Top of the view box in font units
            descender: Bottom of the view box in font units (usually negative)

        Returns:
            Root ``<svg>`` element
        """
        height = ascender - descender

        root = ET.Element(f"{{{SVG_NAMESPACE}}}svg")
        root.set("viewBox", f"0 {-ascender:g} {width:g} {height:g}")
        root.set("width", f"{width:g}")
        root.set("height", f"{height:g}")

        if path.image is not None:
            image = ET.SubElement(root, f"{{{SVG_NAMESPACE}}}image")
            image.set("x", f"{path.image.x:g}")
            image.set("y", f"{path.image.y:g}")
            image.set("width", f"{path.image.width:g}")
            image.set("height", f"{path.image.height:g}")
            image.set("href", "data:image/svg+xml;utf8," + str(path.image.image))
            return root

        for part in path.layers or [path]:
            root.append(part.to_svg_element(self.path_options))
        return root

    def export(
        self,
        font_path: Path,
        output_dir: Path,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> ExportStats:
        """Export all glyphs of a font.

        Args:
            font_path: Path to input font file (TTF or OTF)
            output_dir: Directory receiving the SVG files (created if missing)
            progress_callback: Optional callback(completed, total, glyph_name, success)

        Returns:
            ExportStats with counts, timing, and error details

        Raises:
            FileNotFoundError: If font file does not exist
        """
        stats = self.export_logger.stats
        stats.start_time = time.time()

        self.logger.info(
            "Starting export",
            input=str(font_path),
            output=str(output_dir),
        )
        output_dir.mkdir(parents=True, exist_ok=True)

        reader = FontReader(font_path, self.config)
        reader.load()

        try:
            context = reader.context
            glyphs = reader.load_glyphs()
            hhea = reader.font["hhea"] if "hhea" in reader.font else None
            ascender = hhea.ascent if hhea else reader.units_per_em
            descender = hhea.descent if hhea else 0

            total = len(glyphs)
            for completed, glyph in enumerate(glyphs, start=1):
                name = glyph.name or str(glyph.index)
                success = self._export_glyph(glyph, context, ascender, descender, output_dir)
                if progress_callback is not None:
                    progress_callback(completed, total, name, success)
        finally:
            reader.close()

        stats.end_time = time.time()
        self.logger.info(
            "Export complete",
            exported=stats.exported_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return stats

    def _export_glyph(
        self,
        glyph: Glyph,
        context: FontContext,
        ascender: float,
        descender: float,
        output_dir: Path,
    ) -> bool:
        name = glyph.name or str(glyph.index)
        self.export_logger.log_glyph_start(name)
        started = time.perf_counter()

        try:
            path = glyph.get_path(0, 0, context.units_per_em, font=context)
            if path.image is None and not path.layers and not path.commands:
                self.export_logger.log_glyph_skipped(name, "empty outline")
                return True

            width = glyph.advance_width or context.units_per_em
            document = self.build_document(path, width, ascender, descender)
            ET.ElementTree(document).write(
                output_dir / svg_file_name(glyph), encoding="utf-8", xml_declaration=True
            )
        except Exception as e:
            self.export_logger.log_glyph_error(name, e, traceback.format_exc())
            return False

        duration_ms = (time.perf_counter() - started) * 1000
        self.export_logger.log_glyph_complete(name, _count_commands(path), duration_ms)
        return True
