"""Parser configuration, loadable from JSON."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from wspan_dir.io_utils import load_json


DEFAULT_MAX_DEPTH = 64


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Knobs for the section and message parsers.

    ``strict`` turns truncated reads, non-numeric lengths and short arrays
    into exceptions. With ``strict=False`` they become diagnostics on the
    parse result and decoding continues best-effort.
    """

    strict: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH     # nested array sections
    array_markers: tuple[str, ...] = ("*", ".")
    terminators: tuple[str, ...] = (">", "0")
    id_separator: str = "/"

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")
        for name in ("array_markers", "terminators"):
            chars = getattr(self, name)
            if not chars:
                raise ValueError(f"{name} cannot be empty")
            for ch in chars:
                if len(ch) != 1:
                    raise ValueError(f"{name} entries must be single characters, got {ch!r}")
        if set(self.array_markers) & set(self.terminators):
            raise ValueError("array_markers and terminators must not overlap")
        if not self.id_separator:
            raise ValueError("id_separator cannot be empty")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ParseOptions:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown parse option(s): {', '.join(unknown)}")
        kwargs: dict[str, Any] = dict(data)
        for name in ("array_markers", "terminators"):
            if name in kwargs:
                kwargs[name] = tuple(kwargs[name])
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: Path) -> ParseOptions:
        """Load from a JSON object of option names to values."""
        data = load_json(path)
        if not isinstance(data, dict):
            raise ValueError(f"Options file must contain a JSON object: {path}")
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "strict": self.strict,
            "max_depth": self.max_depth,
            "array_markers": list(self.array_markers),
            "terminators": list(self.terminators),
            "id_separator": self.id_separator,
        }


DEFAULT_OPTIONS = ParseOptions()
