"""Source positions for the event stream.

Provides the Point dataclass attached to every Enter/Exit event.

Thread Safety:
Point is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, order=True)
class Point:
    """A position in the source.

    Points are ordered and compared by ``(offset, vs)`` only: the line and
    column are derived from the offset and never disagree for points taken
    from the same feed.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed), with tabs expanded to tab stops
        offset: Index into the source string
        vs: Virtual space inside an expanded tab (0 for real characters)

    Examples:
            >>> Point(1, 1, 0)
            Point(line=1, column=1, offset=0, vs=0)

            >>> Point(1, 2, 1, 1) > Point(1, 1, 1)
            True

    """

    line: int = field(compare=False)
    column: int = field(compare=False)
    offset: int
    vs: int = 0

    def __str__(self) -> str:
        """Format as ``line:column`` for error messages."""
        return f"{self.line}:{self.column}"

    @classmethod
    def start(cls) -> Point:
        """The first position of a document."""
        return cls(line=1, column=1, offset=0)
