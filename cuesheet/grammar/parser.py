"""Match CUE sheet text against the grammar and build the syntax tree."""

from __future__ import annotations

import logging
import re
from importlib import resources
from typing import Any

from lark import (
    Lark,
    Token,
    Transformer,
    UnexpectedCharacters,
    UnexpectedInput,
    UnexpectedToken,
)

from cuesheet.exceptions import CueSyntaxError, Position
from cuesheet.grammar.syntax_nodes import RawTime, SheetSyntax, Statement, TrackBlock

logger = logging.getLogger(__name__)

# Keyword aliases folded into their canonical spelling
_KEYWORD_ALIASES: dict[str, str] = {
    "UPC_EAN": "CATALOG",
}

# How terminals are named in error messages
_TERMINAL_NAMES: dict[str, str] = {
    "STRING": "quoted string",
    "INT": "number",
    "MSF_TIME": "time (mm:ss:ff)",
    "CODE": "code",
    "REM_TEXT": "comment text",
    "TRACK_MODE": "track mode",
    "FILE_FORMAT": "file format",
    "FLAG": "track flag",
    "_NL": "end of line",
    "$END": "end of input",
    "<END-OF-FILE>": "end of input",
}

_WORD = re.compile(r"\S+")


def _load_grammar() -> str:
    """Load the Lark grammar from the package resources."""
    return resources.files("cuesheet.grammar").joinpath("cue.lark").read_text()


_GRAMMAR_TEXT = _load_grammar()

_parser = Lark(
    _GRAMMAR_TEXT,
    parser="lalr",
    lexer="contextual",
    start="cue",
    maybe_placeholders=True,
)


class _SheetTransformer(Transformer):
    """Transform the Lark parse tree into syntax node data classes."""

    def cue(self, items: list[Any]) -> SheetSyntax:
        return SheetSyntax(global_statements=items[0], tracks=items[1])

    def global_section(self, items: list[Any]) -> list[Statement]:
        return list(items)

    def track_list(self, items: list[Any]) -> list[TrackBlock]:
        return list(items)

    def track(self, items: list[Any]) -> TrackBlock:
        return TrackBlock(command=items[0], statements=list(items[1:]))

    def track_command(self, items: list[Any]) -> Statement:
        keyword, number, mode = items
        return _statement(keyword, number, mode)

    def catalog(self, items: list[Any]) -> Statement:
        return _statement(items[0], items[1])

    def cd_text_file(self, items: list[Any]) -> Statement:
        return _statement(items[0], items[1])

    def file(self, items: list[Any]) -> Statement:
        keyword, path, file_format = items
        return _statement(keyword, path, file_format)

    def performer(self, items: list[Any]) -> Statement:
        return _statement(items[0], items[1])

    def songwriter(self, items: list[Any]) -> Statement:
        return _statement(items[0], items[1])

    def title(self, items: list[Any]) -> Statement:
        return _statement(items[0], items[1])

    def arranger(self, items: list[Any]) -> Statement:
        return _statement(items[0], items[1])

    def rem(self, items: list[Any]) -> Statement:
        # Free text; an empty REM line yields an empty comment
        return _statement(items[0], items[1] or "")

    def flags(self, items: list[Any]) -> Statement:
        return _statement(items[0], *items[1:])

    def index(self, items: list[Any]) -> Statement:
        keyword, number, time = items
        return _statement(keyword, number, _as_time(time))

    def isrc(self, items: list[Any]) -> Statement:
        return _statement(items[0], items[1])

    def pregap(self, items: list[Any]) -> Statement:
        return _statement(items[0], _as_time(items[1]))

    def postgap(self, items: list[Any]) -> Statement:
        return _statement(items[0], _as_time(items[1]))

    # Terminals

    def STRING(self, token: Token) -> str:
        return str(token)[1:-1]

    def INT(self, token: Token) -> int:
        return int(token)

    def MSF_TIME(self, token: Token) -> RawTime:
        minutes, seconds, frames = (int(part) for part in str(token).split(":"))
        return RawTime(text=str(token), components=(minutes, seconds, frames))

    def CODE(self, token: Token) -> str:
        return str(token)

    def REM_TEXT(self, token: Token) -> str:
        # Drop the separator after REM; the rest of the line is kept as is
        return str(token).lstrip(" \t")

    def TRACK_MODE(self, token: Token) -> str:
        return str(token)

    def FILE_FORMAT(self, token: Token) -> str:
        return str(token)

    def FLAG(self, token: Token) -> str:
        return str(token)


_transformer = _SheetTransformer()


def _statement(keyword: Token, *args: Any) -> Statement:
    name = str(keyword)
    return Statement(
        keyword=_KEYWORD_ALIASES.get(name, name),
        args=args,
        line=keyword.line,
        column=keyword.column,
        offset=keyword.start_pos,
    )


def _as_time(value: RawTime | int | None) -> RawTime | None:
    """Normalize the two time forms; a bare integer is a frame count."""
    if value is None or isinstance(value, RawTime):
        return value
    return RawTime(text=str(value), frames=value)


def position_at(text: str, offset: int) -> Position:
    """Compute the 1-based line and column of a character offset."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return Position(line=line, column=offset - line_start + 1, offset=offset)


def _describe_expected(names: set[str] | frozenset[str] | None) -> frozenset[str]:
    described = set()
    for name in names or ():
        # Skip lark's internal names (ignored whitespace etc.)
        if name.startswith("__"):
            continue
        described.add(_TERMINAL_NAMES.get(name, name))
    return frozenset(described)


def _found_at(text: str, offset: int) -> str:
    if offset >= len(text):
        return ""
    if text[offset] in "\r\n":
        return "end of line"
    match = _WORD.match(text, offset)
    return match.group(0) if match else text[offset]


def _syntax_error(text: str, exc: UnexpectedInput) -> CueSyntaxError:
    """Convert a Lark failure into a positioned CueSyntaxError."""
    if isinstance(exc, UnexpectedToken):
        expected = exc.expected
        if exc.token.type == "$END":
            position = position_at(text, len(text))
            return CueSyntaxError(position, _describe_expected(expected), "unexpected_end")
        kind = "unexpected_token"
        offset = exc.token.start_pos
    elif isinstance(exc, UnexpectedCharacters):
        expected = exc.allowed
        kind = "unexpected_character"
        offset = exc.pos_in_stream
    else:
        expected = getattr(exc, "expected", None)
        kind = "unexpected_end"
        offset = len(text)

    if offset is None:
        offset = len(text)
    if offset >= len(text):
        kind = "unexpected_end"
    elif text[offset] == '"' and "STRING" in (expected or ()):
        kind = "unterminated_string"

    return CueSyntaxError(
        position_at(text, offset),
        _describe_expected(expected),
        kind,
        _found_at(text, offset),
    )


def parse_syntax(text: str) -> SheetSyntax:
    """Match a CUE sheet against the grammar.

    Args:
        text: Complete sheet text.

    Returns:
        The syntax tree: global statements followed by track blocks.

    Raises:
        CueSyntaxError: At the first position where the text diverges
            from the grammar.
    """
    # Every statement ends with a line break; the last one may omit it.
    source = text if text.endswith("\n") else text + "\n"

    try:
        tree = _parser.parse(source)
    except UnexpectedInput as e:
        raise _syntax_error(text, e) from e

    syntax = _transformer.transform(tree)
    logger.debug(
        "Matched %d global statement(s) and %d track block(s)",
        len(syntax.global_statements),
        len(syntax.tracks),
    )
    return syntax
