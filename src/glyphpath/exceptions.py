"""Exception hierarchy for glyphpath."""


class GlyphPathError(Exception):
    """Base exception for all glyphpath errors."""

    pass


class GlyphError(GlyphPathError):
    """Errors related to glyph construction or glyph accessors."""

    pass


class GlyphConstructionError(GlyphError):
    """Glyph was constructed with identity data that violates a reserved mapping."""

    def __init__(self, name: str | None, unicode: int) -> None:
        self.name = name
        self.unicode = unicode
        super().__init__(
            f'The unicode value "{unicode}" is reserved for the glyph name ".null" '
            f"and cannot be used by glyph {name!r}"
        )


class MissingFontContextError(GlyphError):
    """A font-backed accessor was called without a font context."""

    def __init__(self, accessor: str, table: str) -> None:
        self.accessor = accessor
        self.table = table
        super().__init__(
            f"A font context is required to read the {table} table in {accessor}()"
        )


class PathError(GlyphPathError):
    """Errors related to path data."""

    pass


class PathParseError(PathError):
    """Malformed SVG path data."""

    def __init__(self, character: str, offset: int, reason: str = "Unexpected character") -> None:
        self.character = character
        self.offset = offset
        self.reason = reason
        super().__init__(f"{reason}: {character} at offset {offset}")


class ContourConsistencyError(GlyphPathError):
    """Point list ended with an unterminated contour.

    Signals a bug in whatever produced the point list, not bad user input.
    """

    def __init__(self, remaining: int) -> None:
        self.remaining = remaining
        super().__init__(
            f"There are still {remaining} points left in the current contour"
        )


class FontError(GlyphPathError):
    """Errors related to font loading."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")
