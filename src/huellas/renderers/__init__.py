"""Huellas renderers.

Renderers consume the event stream of a ParseResult.

Available Renderers:
- TraceRenderer: indented outline of tokens with positions and leaf text

Thread Safety:
All renderers keep their state local to each render() call.
Safe for concurrent use from multiple threads.

"""

from huellas.renderers.protocol import EventRenderer
from huellas.renderers.trace import TraceRenderer, render_trace

__all__ = ["EventRenderer", "TraceRenderer", "render_trace"]
