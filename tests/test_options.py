"""Tests for wspan_dir.options and wspan_dir.io_utils."""
from __future__ import annotations

from pathlib import Path

import pytest

from wspan_dir.io_utils import dumps_json, dumps_jsonl, load_json, save_json
from wspan_dir.options import DEFAULT_MAX_DEPTH, ParseOptions


class TestParseOptions:
    def test_defaults(self) -> None:
        options = ParseOptions()
        assert options.strict is True
        assert options.max_depth == DEFAULT_MAX_DEPTH
        assert options.array_markers == ("*", ".")
        assert options.terminators == (">", "0")
        assert options.id_separator == "/"

    def test_from_dict_converts_lists(self) -> None:
        options = ParseOptions.from_dict({"array_markers": ["#"], "strict": False})
        assert options.array_markers == ("#",)
        assert options.strict is False

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(ValueError, match="Unknown parse option"):
            ParseOptions.from_dict({"strictness": True})

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"max_depth": 0}, "max_depth"),
            ({"array_markers": ()}, "cannot be empty"),
            ({"terminators": ("ab",)}, "single characters"),
            ({"array_markers": (">",)}, "must not overlap"),
            ({"id_separator": ""}, "id_separator"),
        ],
    )
    def test_validation(self, kwargs: dict[str, object], message: str) -> None:
        with pytest.raises(ValueError, match=message):
            ParseOptions(**kwargs)  # type: ignore[arg-type]

    def test_json_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "config" / "options.json"
        original = ParseOptions(strict=False, max_depth=8, id_separator=":")
        save_json(original.to_dict(), path)
        assert ParseOptions.from_json(path) == original

    def test_from_json_requires_object(self, tmp_path: Path) -> None:
        path = tmp_path / "options.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError, match="JSON object"):
            ParseOptions.from_json(path)


class TestJsonHelpers:
    def test_dumps_json_sorted_and_indented(self) -> None:
        assert dumps_json({"b": 1, "a": [1]}) == b'{\n  "a": [\n    1\n  ],\n  "b": 1\n}'
        assert dumps_json({"b": 1, "a": 2}, pretty=False) == b'{"a":2,"b":1}'

    def test_dumps_jsonl(self) -> None:
        assert dumps_jsonl([{"a": 1}, {"b": 2}]) == b'{"a":1}\n{"b":2}\n'
        assert dumps_jsonl([]) == b""

    def test_save_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "out.json"
        save_json({"x": "y"}, path)
        assert load_json(path) == {"x": "y"}
