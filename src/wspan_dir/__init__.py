"""DIR message decoding: text -> tree -> text/XML."""

from wspan_dir.errors import (
    Diagnostic,
    DirError,
    DirParseError,
    HeaderNotFoundError,
    IncompleteArrayError,
    InvalidLengthPrefixError,
    RibbonError,
    SectionDepthError,
    TreeMutationError,
    TruncatedReadError,
)
from wspan_dir.message import (
    DirParseResult,
    encode_array_section,
    encode_message,
    encode_section,
    parse_dir,
    parse_dir_message,
)
from wspan_dir.options import ParseOptions
from wspan_dir.ribbon import Ribbon
from wspan_dir.sections import SectionParser, parse_section
from wspan_dir.tree import DIRTree, render_text, render_xml
from wspan_dir.varlen import (
    Digit,
    NonDigit,
    decode_marker,
    encode_var_number,
    encode_var_string,
    read_var_number,
    read_var_string,
)

__all__ = [
    "DIRTree",
    "Diagnostic",
    "Digit",
    "DirError",
    "DirParseError",
    "DirParseResult",
    "HeaderNotFoundError",
    "IncompleteArrayError",
    "InvalidLengthPrefixError",
    "NonDigit",
    "ParseOptions",
    "Ribbon",
    "RibbonError",
    "SectionDepthError",
    "SectionParser",
    "TreeMutationError",
    "TruncatedReadError",
    "decode_marker",
    "encode_array_section",
    "encode_message",
    "encode_section",
    "encode_var_number",
    "encode_var_string",
    "parse_dir",
    "parse_dir_message",
    "parse_section",
    "read_var_number",
    "read_var_string",
    "render_text",
    "render_xml",
]

__version__ = "0.1.0"
