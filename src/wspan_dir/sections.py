"""Section parser: turns a DIR body window into tree nodes.

Two section shapes, told apart by the first character:

  array   ``*`` or ``.``, elementCount, type code, length, then a window of
          ``length`` chars holding exactly ``elementCount`` sections
  value   type code (one char, or a digit ``j`` followed by ``j`` chars),
          length, then ``length`` chars of raw value

``>`` and ``0`` in type-code position are end-of-record padding and produce
no node.

Nested arrays are handled with an explicit stack of open array frames rather
than recursion; ``ParseOptions.max_depth`` bounds how many can be open.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from wspan_dir.errors import (
    Diagnostic,
    DirParseError,
    IncompleteArrayError,
    InvalidLengthPrefixError,
    SectionDepthError,
    TruncatedReadError,
)
from wspan_dir.options import DEFAULT_OPTIONS, ParseOptions
from wspan_dir.ribbon import Ribbon
from wspan_dir.tree import DIRTree
from wspan_dir.varlen import (
    Digit,
    NonDigit,
    decode_marker,
    parse_int_prefix,
    read_var_number,
    read_var_string,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class _ArrayFrame:
    """An array section whose elements are still being read."""

    ribbon: Ribbon       # the array's exclusive window
    node: DIRTree
    expected: int
    start: int           # absolute offset of the array marker
    parsed: int = 0


class SectionParser:
    """Decode sections from a Ribbon into a DIRTree.

    In strict mode the first malformed length, count or window raises a
    ``DirParseError``. Otherwise the problem is appended to ``diagnostics``
    and decoding continues with whatever could be read.
    """

    def __init__(self, options: ParseOptions | None = None) -> None:
        self.options = options or DEFAULT_OPTIONS
        self.diagnostics: list[Diagnostic] = []

    def parse_body(self, ribbon: Ribbon, parent: DIRTree) -> int:
        """Parse sections until ``ribbon`` is exhausted; return how many."""
        count = 0
        while ribbon:
            self.parse_section(ribbon, parent)
            count += 1
        log.debug("parsed %d top-level sections under %s", count, parent.id)
        return count

    def parse_section(self, ribbon: Ribbon, parent: DIRTree) -> None:
        """Consume exactly one section (with any nested arrays) from ``ribbon``."""
        if not ribbon:
            self._recover(TruncatedReadError(
                "expected a section, found end of input",
                position=ribbon.absolute_pos,
                expected=1,
            ))
            return

        stack: list[_ArrayFrame] = []
        self._parse_head(ribbon, parent, stack)
        while stack:
            frame = stack[-1]
            if frame.parsed >= frame.expected:
                stack.pop()
                if frame.ribbon:
                    self._warn_trailing(frame)
                continue
            if not frame.ribbon:
                stack.pop()
                self._recover(IncompleteArrayError(
                    f"array {frame.node.name!r} declares {frame.expected} elements "
                    f"but its window ended after {frame.parsed}",
                    position=frame.start,
                    expected=frame.expected,
                    parsed=frame.parsed,
                ))
                continue
            frame.parsed += 1
            self._parse_head(frame.ribbon, frame.node, stack)

    # -- section shapes ------------------------------------------------------

    def _parse_head(self, ribbon: Ribbon, parent: DIRTree, stack: list[_ArrayFrame]) -> None:
        """Read one section header; values complete here, arrays open a frame."""
        start = ribbon.absolute_pos
        if any(ribbon.startswith(marker) for marker in self.options.array_markers):
            ribbon.read(1)
            element_count = self.read_number(ribbon)
            section_type = self.read_string(ribbon)
            window = self.read_window(ribbon, self.read_number(ribbon), f"array {section_type!r}")
            if len(stack) >= self.options.max_depth:
                raise SectionDepthError(
                    f"array {section_type!r} nests deeper than {self.options.max_depth}",
                    position=start,
                )
            node = parent.append_child(section_type, path=f"{parent.path}.{section_type}")
            stack.append(_ArrayFrame(
                ribbon=window,
                node=node,
                expected=element_count,
                start=start,
            ))
            return

        provisional = ribbon.read(1)
        if provisional in self.options.terminators:
            return
        match decode_marker(provisional):
            case Digit(count=j):
                section_type = self.read_exact(ribbon, j, "section type")
            case NonDigit(char=c):
                section_type = c
        value = self.read_exact(ribbon, self.read_number(ribbon), f"value of {section_type!r}")
        parent.append_child(
            section_type,
            value=value,
            path=f"{parent.path}.{section_type}",
        )

    # -- checked reads -------------------------------------------------------

    def read_number(self, ribbon: Ribbon) -> int:
        try:
            return read_var_number(ribbon, strict=True) or 0
        except TruncatedReadError as exc:
            self._recover(exc)
            return parse_int_prefix(exc.partial) or 0
        except InvalidLengthPrefixError as exc:
            self._recover(exc)
            return parse_int_prefix(exc.token) or 0

    def read_string(self, ribbon: Ribbon) -> str:
        try:
            return read_var_string(ribbon, strict=True)
        except TruncatedReadError as exc:
            self._recover(exc)
            return exc.partial

    def read_exact(self, ribbon: Ribbon, n: int, what: str) -> str:
        start = ribbon.absolute_pos
        available = len(ribbon)
        text = ribbon.read(n)
        if n > available:
            self._recover(TruncatedReadError(
                f"{what} declares {n} chars but only {available} remain",
                position=start,
                expected=n,
                available=available,
                partial=text,
            ))
        return text

    def read_window(self, ribbon: Ribbon, n: int, what: str) -> Ribbon:
        available = len(ribbon)
        window = ribbon.window(n)
        if n > available:
            self._recover(TruncatedReadError(
                f"{what} declares {n} chars but only {available} remain",
                position=window.base,
                expected=n,
                available=available,
                partial=window.origin,
            ))
        return window

    # -- error policy --------------------------------------------------------

    def _recover(self, exc: DirParseError) -> None:
        if self.options.strict:
            raise exc
        self.diagnostics.append(exc.to_diagnostic())
        log.warning("%s at offset %d: %s", exc.code, exc.position, exc.message)

    def _warn_trailing(self, frame: _ArrayFrame) -> None:
        leftover = len(frame.ribbon)
        diagnostic = Diagnostic(
            code="trailing_section_data",
            message=(
                f"{leftover} unparsed chars left in array {frame.node.name!r} "
                f"after {frame.expected} elements"
            ),
            position=frame.ribbon.absolute_pos,
            level="warning",
        )
        self.diagnostics.append(diagnostic)
        log.warning("%s at offset %d: %s", diagnostic.code, diagnostic.position, diagnostic.message)


def parse_section(
    ribbon: Ribbon,
    parent: DIRTree,
    *,
    options: ParseOptions | None = None,
) -> list[Diagnostic]:
    """Parse one section from ``ribbon`` under ``parent``.

    Returns the diagnostics recorded in lenient mode (empty when strict).
    """
    parser = SectionParser(options)
    parser.parse_section(ribbon, parent)
    return parser.diagnostics
