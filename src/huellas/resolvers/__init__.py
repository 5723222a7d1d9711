"""Deferred resolvers, run in registration order when a tokenizer flushes.

- media: label starts and ends into links and images (registered first)
- attention: ``*`` and ``_`` runs into emphasis and strong
- data: merge adjacent data
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from huellas.resolvers.attention import resolve_attention
from huellas.resolvers.data import resolve_data
from huellas.resolvers.media import resolve_media

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

RESOLVERS: dict[str, Callable[[Tokenizer], None]] = {
    "media": resolve_media,
    "attention": resolve_attention,
    "data": resolve_data,
}

__all__ = [
    "RESOLVERS",
    "resolve_attention",
    "resolve_data",
    "resolve_media",
]
