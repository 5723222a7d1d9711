"""EventRenderer protocol: stable interface for event stream consumers.

Any renderer that implements ``render(result) -> str`` conforms to this
protocol. Huellas stops at the event stream; HTML compilation, escaping
and URL allow-listing belong to the renderer.

Example:
    from huellas.renderers.protocol import EventRenderer

    def render_page(renderer: EventRenderer, source: str) -> str:
        return renderer.render(parse(source))

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from huellas.parser import ParseResult


@runtime_checkable
class EventRenderer(Protocol):
    """Protocol for event stream renderers.

    Implementations must read ``result.events`` strictly in order and
    treat every Enter/Exit pair as self-contained. The built-in
    ``TraceRenderer`` conforms to this protocol.

    """

    def render(self, result: ParseResult) -> str:
        """Render a parse result to a string.

        Args:
            result: Events, definitions and source of one document.

        Returns:
            Rendered string output.

        """
        ...
