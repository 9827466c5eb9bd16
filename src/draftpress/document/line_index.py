"""Offset-to-line lookup over a document source."""

from __future__ import annotations

from bisect import bisect_right


class LineIndex:
    """Precomputed start offsets of every line in *source*.

    Built once per lint or mapping pass so that each diagnostic costs a
    binary search instead of a rescan of the source.

    >>> index = LineIndex("# Title\\n\\nBody")
    >>> index.line_for(0), index.line_for(9)
    (1, 3)
    """

    __slots__ = ("_starts",)

    def __init__(self, source: str) -> None:
        starts = [0]
        position = source.find("\n")
        while position != -1:
            starts.append(position + 1)
            position = source.find("\n", position + 1)
        self._starts: list[int] = starts

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def line_for(self, offset: int) -> int:
        """Return the 1-based line containing *offset*.

        Offsets before the start clamp to line 1; offsets past the end
        clamp to the last line.
        """
        if offset <= 0:
            return 1
        return bisect_right(self._starts, offset)
