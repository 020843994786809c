"""Resumable read head over an immutable source string.

A ``Ribbon`` is the single source of truth for parse position. Reads never
fault: asking for more characters than remain returns what is left and parks
the head at the end of the source.
"""

from __future__ import annotations

from wspan_dir.errors import RibbonError


class Ribbon:
    """Stateful cursor over ``origin`` with one bookmark slot."""

    __slots__ = ("_origin", "_pos", "_slot", "_base")

    def __init__(self, origin: str, *, base: int = 0) -> None:
        self._origin = str(origin)
        self._pos = 0
        self._slot: int | None = None
        self._base = base

    @property
    def origin(self) -> str:
        return self._origin

    @property
    def pos(self) -> int:
        return self._pos

    @property
    def base(self) -> int:
        """Absolute offset of ``origin[0]`` in the enclosing message."""
        return self._base

    @property
    def absolute_pos(self) -> int:
        return self._base + self._pos

    def remaining(self) -> str:
        return self._origin[self._pos:]

    def save(self) -> None:
        """Bookmark the current offset, replacing any earlier bookmark."""
        self._slot = self._pos

    def load(self) -> None:
        """Return to the bookmarked offset."""
        if self._slot is None:
            raise RibbonError("load() called before save()")
        self._pos = self._slot

    def advance(self, n: int | str) -> str:
        """Move forward by ``n`` chars (or ``len(n)`` for a string).

        Returns the new remainder.
        """
        step = len(n) if isinstance(n, str) else int(n)
        self._pos = min(max(self._pos + step, 0), len(self._origin))
        return self.remaining()

    def read(self, n: int) -> str:
        """Consume and return up to ``n`` characters."""
        n = max(int(n), 0)
        chunk = self._origin[self._pos:self._pos + n]
        self.advance(n)
        return chunk

    def window(self, n: int) -> Ribbon:
        """Consume up to ``n`` characters and wrap them in a fresh Ribbon."""
        start = self.absolute_pos
        return Ribbon(self.read(n), base=start)

    def peek(self, n: int = 1) -> str:
        return self._origin[self._pos:self._pos + max(n, 0)]

    def lookbehind(self, n: int = 1) -> str:
        """The ``n`` characters immediately before the head."""
        return self._origin[max(self._pos - n, 0):self._pos]

    def startswith(self, prefix: str) -> bool:
        return self._origin.startswith(prefix, self._pos)

    def at_end(self) -> bool:
        return self._pos >= len(self._origin)

    def __len__(self) -> int:
        return len(self._origin) - self._pos

    def __bool__(self) -> bool:
        return not self.at_end()

    def __str__(self) -> str:
        return self.remaining()

    def __repr__(self) -> str:
        return f"Ribbon(pos={self._pos}, remaining={len(self)})"
