"""Ordered, lazily materialized collection of glyphs."""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from typing import Union

from glyphpath.core.capabilities import GlyphSource
from glyphpath.core.glyph import Glyph
from glyphpath.domain.deferred import Deferred

logger = logging.getLogger(__name__)

GlyphEntry = Union[Glyph, Callable[[], Glyph]]


class GlyphSet:
    """Glyphs indexed by a dense integer space ``0..length-1``.

    Each entry is either a Glyph or a zero-argument producer of one; producers
    run on first ``get`` and their result is kept. With a ``source`` the set
    streams: entries are absent until requested and are then built from the
    source's tables.

    Example:
        glyphs = GlyphSet([Glyph(0, ".notdef"), Glyph(1, "A", unicode=65)], units_per_em=1000)
        glyphs.get(1).name  # 'A'
    """

    def __init__(
        self,
        glyphs: Iterable[Glyph] | None = None,
        units_per_em: int | None = None,
        source: GlyphSource | None = None,
        length: int | None = None,
    ) -> None:
        """Initialize the set.

        Args:
            glyphs: Ready glyphs; each path is stamped with ``units_per_em``
            units_per_em: Design grid resolution of the owning font
            source: Table-backed materializer for streaming mode
            length: Declared glyph count (defaults to the number of glyphs given)
        """
        self.units_per_em = units_per_em
        self.source = source
        self._entries: dict[int, Deferred[Glyph]] = {}
        self._lock = threading.Lock()

        for i, glyph in enumerate(glyphs or ()):
            if units_per_em is not None:
                glyph.path.units_per_em = units_per_em
            self._entries[i] = Deferred.ready(glyph)

        self.length = length if length is not None else len(self._entries)

    def __repr__(self) -> str:
        mode = "streaming" if self.source is not None else "eager"
        return f"GlyphSet(length={self.length}, loaded={len(self._entries)}, mode={mode!r})"

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[Glyph]:
        for index in range(self.length):
            glyph = self.get(index)
            if glyph is not None:
                yield glyph

    def __getitem__(self, index: int) -> Glyph:
        glyph = self.get(index)
        if glyph is None:
            raise IndexError(f"Glyph index out of range: {index}")
        return glyph

    @property
    def streaming(self) -> bool:
        return self.source is not None

    def get(self, index: int) -> Glyph | None:
        """Return the glyph at ``index``, materializing it if needed.

        Args:
            index: Glyph index

        Returns:
            The same Glyph object on every call, or None if no entry exists
        """
        entry = self._entries.get(index)
        if entry is None:
            if self.source is None or not 0 <= index < self.length:
                return None
            return self._materialize(index)
        return entry.resolve()

    def _materialize(self, index: int) -> Glyph:
        with self._lock:
            entry = self._entries.get(index)
            if entry is None:
                entry = Deferred(lambda: self._load_streamed(index), lazy=True)
                self._entries[index] = entry
        return entry.resolve()

    def _load_streamed(self, index: int) -> Glyph:
        """Build a streamed glyph and apply its name, code points and metrics.

        Runs inside the index's Deferred, so a failure leaves the slot
        unresolved and the next ``get`` starts over.
        """
        source = self.source
        assert source is not None

        logger.debug("Materializing streamed glyph", extra={"glyph": index})
        loaded = source.load(index)
        glyph = loaded if isinstance(loaded, Glyph) else loaded()

        if glyph.name is None:
            glyph.name = source.glyph_name(index)
        for unicode in source.unicodes(index):
            glyph.add_unicode(unicode)
        metrics = source.horizontal_metrics(index)
        if metrics is not None:
            glyph.advance_width, glyph.left_side_bearing = metrics
        return glyph

    def push(self, index: int, entry: GlyphEntry) -> None:
        """Register a glyph or glyph producer at ``index`` and grow the set by one.

        Args:
            index: Glyph index
            entry: Glyph, or a zero-argument producer of one
        """
        self._entries[index] = Deferred(entry)
        self.length += 1

    def is_loaded(self, index: int) -> bool:
        """Whether ``index`` holds a built Glyph (not a pending producer)."""
        entry = self._entries.get(index)
        return entry is not None and entry.is_resolved
