"""Error taxonomy and diagnostics for DIR decoding.

Hierarchy::

  DirError (ValueError)
    DirParseError              any failure while decoding a message
      HeaderNotFoundError      no ``$<digits><digit><LETTERS>`` header
      TruncatedReadError       declared length runs past the window
      InvalidLengthPrefixError length/count position holds a non-number
      IncompleteArrayError     array window ends before elementCount
      SectionDepthError        array nesting exceeds ParseOptions.max_depth
    TreeMutationError          tree edit with an unknown index / node
  RibbonError (ValueError)     cursor misuse

Strict parsing raises these. Lenient parsing converts the recoverable ones
into ``Diagnostic`` records attached to the parse result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias


DiagnosticLevel: TypeAlias = Literal["error", "warning"]


class DirError(ValueError):
    """Base class for every error raised by wspan_dir."""


class RibbonError(ValueError):
    """Raised when a Ribbon is used out of contract (e.g. load before save)."""


class DirParseError(DirError):
    """A DIR message could not be decoded."""

    code = "parse_error"

    def __init__(self, message: str, *, position: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def to_diagnostic(self, level: DiagnosticLevel = "error") -> Diagnostic:
        return Diagnostic(
            code=self.code,
            message=self.message,
            position=self.position,
            level=level,
        )


class HeaderNotFoundError(DirParseError):
    code = "header_not_found"


class TruncatedReadError(DirParseError):
    """A declared length asks for more characters than remain."""

    code = "truncated_read"

    def __init__(
        self,
        message: str,
        *,
        position: int = 0,
        expected: int = 0,
        available: int = 0,
        partial: str = "",
    ) -> None:
        super().__init__(message, position=position)
        self.expected = expected
        self.available = available
        self.partial = partial


class InvalidLengthPrefixError(DirParseError):
    code = "invalid_length_prefix"

    def __init__(self, message: str, *, position: int = 0, token: str = "") -> None:
        super().__init__(message, position=position)
        self.token = token


class IncompleteArrayError(DirParseError):
    code = "incomplete_array"

    def __init__(
        self,
        message: str,
        *,
        position: int = 0,
        expected: int = 0,
        parsed: int = 0,
    ) -> None:
        super().__init__(message, position=position)
        self.expected = expected
        self.parsed = parsed


class SectionDepthError(DirParseError):
    code = "section_depth_exceeded"


class TreeMutationError(DirError):
    """Raised for a tree edit whose target is not a valid index or child."""


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A recoverable decoding problem recorded by the lenient parser."""

    code: str
    message: str
    position: int = 0    # absolute offset in the source text
    level: DiagnosticLevel = "error"

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "message": self.message,
            "position": self.position,
            "level": self.level,
        }
