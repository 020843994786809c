"""DIR message entry point.

A message looks like::

    ...$000000000002163PNR511175H239M23ADG...
       ^ header digits  ^ type length, type code, body length, body

Parsing locates the header, reads the message type and body length, then
decodes body sections until the body window is exhausted.

Public API:

* ``parse_dir(source, options)``: tree plus diagnostics (``DirParseResult``).
* ``parse_dir_message(source, options)``: just the tree.
* ``encode_section`` / ``encode_array_section`` / ``encode_message``: build
  wire text from plain strings.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from wspan_dir.errors import Diagnostic, HeaderNotFoundError
from wspan_dir.options import DEFAULT_OPTIONS, ParseOptions
from wspan_dir.ribbon import Ribbon
from wspan_dir.sections import SectionParser
from wspan_dir.tree import DIRTree
from wspan_dir.varlen import encode_var_number, encode_var_string

log = logging.getLogger(__name__)

# Shortest prefix, "$", a digit run, then one held-back digit (the type
# length) directly followed by the upper-case type code.
HEADER_RE = re.compile(r"(.*?\$[0-9]+)([0-9])[A-Z]+", re.DOTALL)

_TYPE_CODE_RE = re.compile(r"[A-Z][A-Z0-9]{0,8}")


@dataclass(frozen=True, slots=True)
class DirParseResult:
    """A decoded message plus whatever the lenient parser had to forgive."""

    tree: DIRTree
    message_type: str
    body_length: int
    diagnostics: tuple[Diagnostic, ...] = ()
    trailing_text: str = ""     # input left after the body window

    @property
    def ok(self) -> bool:
        """True if no error-level diagnostics were recorded."""
        return not any(d.level == "error" for d in self.diagnostics)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message_type": self.message_type,
            "body_length": self.body_length,
            "ok": self.ok,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "trailing_text": self.trailing_text,
            "tree": self.tree.to_dict(),
        }


def parse_dir(source: str | Ribbon, options: ParseOptions | None = None) -> DirParseResult:
    """Decode one DIR message.

    Raises ``HeaderNotFoundError`` when the input has no DIR header, and in
    strict mode any other ``DirParseError`` met while decoding.
    """
    options = options or DEFAULT_OPTIONS
    ribbon = source if isinstance(source, Ribbon) else Ribbon(source)

    m = HEADER_RE.match(ribbon.remaining())
    if m is None:
        raise HeaderNotFoundError(
            "no DIR header ($<digits><type length><TYPE>) found in input",
            position=ribbon.absolute_pos,
        )
    ribbon.advance(m.end(1))
    log.debug("DIR header found; payload starts at offset %d", ribbon.absolute_pos)

    parser = SectionParser(options)
    type_length = int(ribbon.read(1))
    message_type = parser.read_exact(ribbon, type_length, "message type")
    tree = DIRTree(
        message_type,
        id=message_type,
        path=message_type,
        separator=options.id_separator,
    )

    body_length = parser.read_number(ribbon)
    body = parser.read_window(ribbon, body_length, f"body of {message_type!r}")
    log.debug("message %s declares a %d-char body", message_type, body_length)
    parser.parse_body(body, tree)

    return DirParseResult(
        tree=tree,
        message_type=message_type,
        body_length=body_length,
        diagnostics=tuple(parser.diagnostics),
        trailing_text=ribbon.remaining(),
    )


def parse_dir_message(source: str | Ribbon, options: ParseOptions | None = None) -> DIRTree:
    return parse_dir(source, options).tree


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def _encode_type_code(name: str, reserved: Sequence[str]) -> str:
    if not name:
        raise ValueError("type code cannot be empty")
    if len(name) == 1 and not name.isdigit() and name not in reserved:
        return name
    return encode_var_string(name)


def encode_section(
    name: str,
    value: str,
    *,
    options: ParseOptions | None = None,
) -> str:
    """Wire text for one value section."""
    options = options or DEFAULT_OPTIONS
    reserved = (*options.array_markers, *options.terminators)
    return f"{_encode_type_code(name, reserved)}{encode_var_number(len(value))}{value}"


def encode_array_section(
    name: str,
    elements: Sequence[str],
    *,
    marker: str = "*",
) -> str:
    """Wire text for an array section whose elements are already encoded."""
    body = "".join(elements)
    return (
        f"{marker}{encode_var_number(len(elements))}"
        f"{_encode_type_code(name, ())}"
        f"{encode_var_number(len(body))}{body}"
    )


def encode_message(
    message_type: str,
    sections: Sequence[str],
    *,
    prefix: str = "",
    header_digits: str = "0",
) -> str:
    """Wire text for a full message: optional prefix, header, type, body."""
    if not _TYPE_CODE_RE.fullmatch(message_type):
        raise ValueError(
            f"message type must start with A-Z and be at most 9 chars, got {message_type!r}",
        )
    if not re.fullmatch(r"[0-9]+", header_digits):
        raise ValueError(f"header_digits must be digits, got {header_digits!r}")
    body = "".join(sections)
    return (
        f"{prefix}${header_digits}{len(message_type)}{message_type}"
        f"{encode_var_number(len(body))}{body}"
    )
