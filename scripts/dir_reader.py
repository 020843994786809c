#!/usr/bin/env python3
"""Decode DIR messages and render them as text, XML or JSON.

Usage:
    # Indented listing of one message read from a file
    python3 scripts/dir_reader.py response.txt

    # XML from stdin
    cat response.txt | python3 scripts/dir_reader.py --format xml

    # One message per line, JSONL out, best-effort decoding
    python3 scripts/dir_reader.py feed.txt --lines --format json --lenient

Structured output goes to stdout; log messages go to stderr.
Exit status: 0 ok, 1 a message failed to decode, 2 bad input or options.
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from wspan_dir.errors import DirParseError
from wspan_dir.io_utils import dumps_json, dumps_jsonl
from wspan_dir.message import DirParseResult, parse_dir
from wspan_dir.options import ParseOptions

log = logging.getLogger("dir_reader")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Decode DIR messages and render them as text, XML or JSON."
    )
    parser.add_argument(
        "path",
        nargs="?",
        default="-",
        help="Input file ('-' or omitted reads stdin)",
    )
    parser.add_argument(
        "--format",
        choices=("text", "xml", "json"),
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--lines",
        action="store_true",
        help="Treat each non-blank input line as a separate message.",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Keep decoding past malformed lengths and report diagnostics.",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum nesting of array sections.",
    )
    parser.add_argument(
        "--options",
        type=Path,
        default=None,
        help="JSON file with ParseOptions fields; flags override it.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose logging",
    )
    return parser


def load_options(args: argparse.Namespace) -> ParseOptions:
    options = ParseOptions.from_json(args.options) if args.options else ParseOptions()
    overrides: dict[str, object] = {}
    if args.lenient:
        overrides["strict"] = False
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    return dataclasses.replace(options, **overrides) if overrides else options


def render(result: DirParseResult, fmt: str) -> str:
    if fmt == "xml":
        return result.tree.to_xml()
    return result.tree.to_text()


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        options = load_options(args)
    except (OSError, ValueError) as exc:
        print(f"Error: invalid options: {exc}", file=sys.stderr)
        return 2

    try:
        raw = _read_input(args.path)
    except OSError as exc:
        print(f"Error: cannot read input: {exc}", file=sys.stderr)
        return 2

    messages = [line for line in raw.splitlines() if line.strip()] if args.lines else [raw]
    results: list[DirParseResult] = []
    failures = 0
    for index, text in enumerate(messages, start=1):
        try:
            results.append(parse_dir(text, options))
        except DirParseError as exc:
            failures += 1
            print(f"Error: message {index}: {exc} (offset {exc.position})", file=sys.stderr)

    log.debug("decoded %d of %d messages", len(results), len(messages))

    if args.format == "json":
        if args.lines:
            sys.stdout.buffer.write(dumps_jsonl([r.to_dict() for r in results]))
        else:
            for result in results:
                sys.stdout.buffer.write(dumps_json(result.to_dict()))
                sys.stdout.buffer.write(b"\n")
        sys.stdout.flush()
    else:
        for result in results:
            print(render(result, args.format))

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
