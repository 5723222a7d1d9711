"""Character feed: the source as a sequence of logical codes.

The feed is built once per document and shared, read-only, by every
tokenizer working on that document. It turns the source string into a
list of codes:

- every character is one code, except
- a tab is one ``"\\t"`` code followed by ``VIRTUAL_SPACE`` codes up to
  the next tab stop, so each code is exactly one column wide;
- ``"\\r\\n"``, ``"\\r"`` and ``"\\n"`` are one ``"\\n"`` code each;
- U+0000 becomes U+FFFD;
- a leading byte order mark is skipped.

Each code has a start Point; ``points[len(codes)]`` is the end of input.

Thread Safety:
Feed instances are immutable after construction and safe to share.

"""

from __future__ import annotations

from huellas.charsets import LINE_ENDING, SPACE_OR_TAB, VIRTUAL_SPACE
from huellas.errors import InvariantError
from huellas.location import Point

TAB_SIZE = 4
BOM = "\ufeff"


class Feed:
    """Logical codes of a source string with their positions.

    Usage:
            >>> feed = Feed("a\\tb")
            >>> feed.codes
            ['a', '\\t', '\\x00vs', '\\x00vs', 'b']
            >>> feed.points[4]
            Point(line=1, column=5, offset=2, vs=0)

    """

    __slots__ = ("source", "codes", "raws", "points", "line_ending", "space_runs", "_by_position")

    def __init__(self, source: str) -> None:
        """Build the feed.

        Args:
            source: Markdown source text
        """
        self.source = source
        self.codes: list[str] = []
        self.raws: list[str] = []
        self.points: list[Point] = []
        self.line_ending: str | None = None

        line = 1
        column = 1
        offset = 1 if source.startswith(BOM) else 0
        length = len(source)

        while offset < length:
            char = source[offset]
            if char == "\t":
                self._push("\t", "\t", Point(line, column, offset))
                width = TAB_SIZE - ((column - 1) % TAB_SIZE)
                for vs in range(1, width):
                    self._push(VIRTUAL_SPACE, "", Point(line, column + vs, offset, vs))
                column += width
                offset += 1
            elif char == "\n" or char == "\r":
                raw = "\r\n" if source.startswith("\r\n", offset) else char
                if self.line_ending is None:
                    self.line_ending = raw
                self._push(LINE_ENDING, raw, Point(line, column, offset))
                line += 1
                column = 1
                offset += len(raw)
            else:
                self._push("\ufffd" if char == "\0" else char, char, Point(line, column, offset))
                column += 1
                offset += 1

        self.points.append(Point(line, column, offset))
        self._by_position = {(p.offset, p.vs): i for i, p in enumerate(self.points)}

        # Length of the space/tab run starting at each code
        runs = [0] * (len(self.codes) + 1)
        for index in range(len(self.codes) - 1, -1, -1):
            if self.codes[index] in SPACE_OR_TAB:
                runs[index] = runs[index + 1] + 1
        self.space_runs = runs

    def _push(self, code: str, raw: str, point: Point) -> None:
        self.codes.append(code)
        self.raws.append(raw)
        self.points.append(point)

    def __len__(self) -> int:
        return len(self.codes)

    @property
    def end(self) -> int:
        """Index one past the last code."""
        return len(self.codes)

    def code(self, index: int) -> str | None:
        """Code at ``index``, or None at and past the end."""
        if index < len(self.codes):
            return self.codes[index]
        return None

    def index_of(self, point: Point) -> int:
        """Index of the code starting at ``point`` (the end index for the end point).

        Raises:
            InvariantError: If no code starts at that position.
        """
        try:
            return self._by_position[(point.offset, point.vs)]
        except KeyError:
            raise InvariantError("point does not fall on a code boundary", point) from None

    def serialize(self, indices: list[int] | range) -> str:
        """Source text of the given codes.

        Virtual spaces at the start of the run stand for the part of a tab
        that was not consumed before it and become spaces; other virtual
        spaces are covered by their tab.
        """
        parts: list[str] = []
        leading = True
        for index in indices:
            code = self.codes[index]
            if code == VIRTUAL_SPACE:
                if leading:
                    parts.append(" ")
                continue
            leading = False
            parts.append(self.raws[index])
        return "".join(parts)
