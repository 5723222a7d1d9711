"""Exception classes for huellas.

Markdown itself never fails to parse: malformed constructs degrade to
literal text. The exceptions here cover the two remaining cases, bad
configuration (raised before parsing starts) and internal invariant
violations (a bug in a construct or resolver, never bad input).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from huellas.location import Point


class HuellasError(Exception):
    """Base exception for all huellas errors.
    
    Subclass this for specific error categories.
    """

    pass


class ConfigError(HuellasError):
    """Invalid parse configuration.
    
    Raised by ParseConfig validation, before any parsing happens.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize config error.
        
        Args:
            message: Description of the problem
            field: Name of the offending ParseConfig field (optional)
        """
        self.message = message
        self.field = field
        prefix = f"{field}: " if field else ""
        super().__init__(f"{prefix}{message}")


class InvariantError(HuellasError):
    """Internal consistency violation in the tokenizer or a resolver.

    Signals a defect in huellas itself (an exit without a matching enter,
    an unbalanced stack at flush, a write to a frozen definition table).
    Never raised for malformed Markdown.
    """

    def __init__(self, message: str, point: Point | None = None) -> None:
        """Initialize invariant error with optional location.
        
        Args:
            message: Error description
            point: Source position where the violation was detected
        """
        self.message = message
        self.point = point

        location = f"{point} " if point is not None else ""
        super().__init__(f"{location}{message}")
