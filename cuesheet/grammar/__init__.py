"""CUE sheet grammar: lexical and syntactic tiers."""

from cuesheet.grammar.parser import parse_syntax
from cuesheet.grammar.syntax_nodes import (
    RawTime,
    SheetSyntax,
    Statement,
    TrackBlock,
)

__all__ = [
    "RawTime",
    "SheetSyntax",
    "Statement",
    "TrackBlock",
    "parse_syntax",
]
