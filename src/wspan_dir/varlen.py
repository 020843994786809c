"""Self-describing variable-length tokens.

A token starts with one marker character:

  digit ``k``  : a count; the token is the next ``k`` characters
  anything else: a one-character literal ("short form" for type codes)

``read_var_number`` is the same decode interpreted as an integer; it is used
for field lengths and for array element counts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeAlias

from wspan_dir.errors import InvalidLengthPrefixError, TruncatedReadError
from wspan_dir.ribbon import Ribbon


_DIGITS = frozenset("0123456789")
_INT_PREFIX_RE = re.compile(r"[0-9]+")

MAX_SHORT_COUNT = 9


# ---------------------------------------------------------------------------
# Marker ADT
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Digit:
    """Marker is a count prefix."""

    count: int


@dataclass(frozen=True, slots=True)
class NonDigit:
    """Marker is the value itself."""

    char: str


Marker: TypeAlias = Digit | NonDigit


def decode_marker(ch: str) -> Marker:
    """Classify a single marker character.

    Usage::

        match decode_marker(ribbon.read(1)):
            case Digit(count=k): ...
            case NonDigit(char=c): ...
    """
    if len(ch) == 1 and ch in _DIGITS:
        return Digit(int(ch))
    return NonDigit(ch)


def parse_int_prefix(text: str) -> int | None:
    """Leading ASCII digits of ``text`` as an int, or None if there are none."""
    m = _INT_PREFIX_RE.match(text)
    return int(m.group()) if m else None


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------

def read_var_string(ribbon: Ribbon, *, strict: bool = False) -> str:
    """Decode one variable-length string.

    Without ``strict`` a count larger than the remaining input silently
    yields the truncated remainder. With ``strict`` the available characters
    are still consumed, then ``TruncatedReadError`` is raised carrying them
    as ``partial``.
    """
    start = ribbon.absolute_pos
    first = ribbon.read(1)
    if not first:
        if strict:
            raise TruncatedReadError(
                "expected a variable-length token, found end of input",
                position=start,
                expected=1,
                available=0,
            )
        return ""

    match decode_marker(first):
        case Digit(count=k):
            available = len(ribbon)
            value = ribbon.read(k)
            if strict and k > available:
                raise TruncatedReadError(
                    f"token declares {k} chars but only {available} remain",
                    position=start,
                    expected=k,
                    available=available,
                    partial=value,
                )
            return value
        case NonDigit(char=c):
            return c


def read_var_number(ribbon: Ribbon, *, strict: bool = False) -> int | None:
    """Decode one variable-length integer (a length or an element count).

    An empty token (count prefix ``0``) is zero. A token that does not start
    with digits returns None, or raises ``InvalidLengthPrefixError`` when
    ``strict``.
    """
    start = ribbon.absolute_pos
    token = read_var_string(ribbon, strict=strict)
    if token == "":
        return 0
    if strict:
        if not all(ch in _DIGITS for ch in token):
            raise InvalidLengthPrefixError(
                f"expected a numeric token, got {token!r}",
                position=start,
                token=token,
            )
        return int(token)
    return parse_int_prefix(token)


# ---------------------------------------------------------------------------
# Encoders
# ---------------------------------------------------------------------------

def encode_var_string(value: str) -> str:
    """Encode ``value`` with a single-digit count prefix."""
    if len(value) > MAX_SHORT_COUNT:
        raise ValueError(
            f"value too long for a single-digit count: {len(value)} > {MAX_SHORT_COUNT}",
        )
    return f"{len(value)}{value}"


def encode_var_number(n: int) -> str:
    if n < 0:
        raise ValueError(f"cannot encode negative number {n}")
    return encode_var_string(str(n))
