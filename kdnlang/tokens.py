"""Token definitions for KdnLang.

A token is a tagged kind plus the half-open source range it was read
from. Literal tokens carry their decoded payload in `value`; the
synthetic INDENT and DEDENT tokens carry the absolute column width of
the block level they open or close.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, List, Optional, Tuple

# Line breaks as the lexer sees them: CRLF, LF, or a lone CR.
LINE_BREAK = re.compile(r'\r\n|\r|\n')


def line_starts(source: str) -> List[int]:
    """Offsets at which each line of `source` begins."""
    return [0] + [m.end() for m in LINE_BREAK.finditer(source)]


def line_text(source: str, line: int) -> str:
    """Text of the 1-based `line` without its line break; '' past the end."""
    starts = line_starts(source)
    if line < 1 or line > len(starts):
        return ''
    end = starts[line] if line < len(starts) else len(source)
    return source[starts[line - 1]:end].rstrip('\r\n')


@dataclass(frozen=True)
class Span:
    """Half-open range of character offsets into the source text."""
    start: int
    end: int

    def __len__(self) -> int:
        return max(self.end - self.start, 0)

    def text(self, source: str) -> str:
        return source[self.start:self.end]

    def line_col(self, source: str) -> Tuple[int, int]:
        """Return the 1-based (line, column) of `start` within `source`."""
        offset = min(self.start, len(source))
        starts = line_starts(source)
        line = bisect_right(starts, offset)
        return line, offset - starts[line - 1] + 1


class TokenKind(Enum):
    EOF = auto()

    # Literals
    IDENTIFIER = auto()
    NUMBER = auto()
    STRING = auto()

    # Structure
    NEWLINE = auto()
    INDENT = auto()
    DEDENT = auto()

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Comparison and assignment
    EQUALS = auto()
    DOUBLE_EQUALS = auto()
    GREATER_THAN = auto()
    GREATER_THAN_EQUALS = auto()
    LESS_THAN = auto()
    LESS_THAN_EQUALS = auto()

    # Boolean
    AND = auto()
    OR = auto()
    NOT = auto()

    # Delimiters
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACKET = auto()
    RIGHT_BRACKET = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    SEMICOLON = auto()
    COLON = auto()
    COMMA = auto()


SYMBOLS = {
    TokenKind.PLUS: '+',
    TokenKind.MINUS: '-',
    TokenKind.STAR: '*',
    TokenKind.SLASH: '/',
    TokenKind.EQUALS: '=',
    TokenKind.DOUBLE_EQUALS: '==',
    TokenKind.GREATER_THAN: '>',
    TokenKind.GREATER_THAN_EQUALS: '>=',
    TokenKind.LESS_THAN: '<',
    TokenKind.LESS_THAN_EQUALS: '<=',
    TokenKind.AND: '&&',
    TokenKind.OR: '||',
    TokenKind.NOT: '!',
    TokenKind.LEFT_PAREN: '(',
    TokenKind.RIGHT_PAREN: ')',
    TokenKind.LEFT_BRACKET: '[',
    TokenKind.RIGHT_BRACKET: ']',
    TokenKind.LEFT_BRACE: '{',
    TokenKind.RIGHT_BRACE: '}',
    TokenKind.SEMICOLON: ';',
    TokenKind.COLON: ':',
    TokenKind.COMMA: ',',
}

# Characters that always form a token on their own.
SINGLE_CHAR_TOKENS = {
    '+': TokenKind.PLUS,
    '-': TokenKind.MINUS,
    '*': TokenKind.STAR,
    '/': TokenKind.SLASH,
    '!': TokenKind.NOT,
    '(': TokenKind.LEFT_PAREN,
    ')': TokenKind.RIGHT_PAREN,
    '[': TokenKind.LEFT_BRACKET,
    ']': TokenKind.RIGHT_BRACKET,
    '{': TokenKind.LEFT_BRACE,
    '}': TokenKind.RIGHT_BRACE,
    ';': TokenKind.SEMICOLON,
    ':': TokenKind.COLON,
    ',': TokenKind.COMMA,
}


def describe_kind(kind: TokenKind) -> str:
    """Human readable name of a token kind, used for `expected` texts."""
    if kind in SYMBOLS:
        return repr(SYMBOLS[kind])
    if kind == TokenKind.EOF:
        return 'end of input'
    return kind.name.lower().replace('_', ' ')


@dataclass
class Token:
    kind: TokenKind
    span: Span
    value: Any = None

    def is_identifier(self, name: Optional[str] = None) -> bool:
        if self.kind != TokenKind.IDENTIFIER:
            return False
        return name is None or self.value == name

    def describe(self) -> str:
        if self.kind == TokenKind.IDENTIFIER:
            return f"identifier {self.value!r}"
        if self.kind == TokenKind.NUMBER:
            return f"number {self.value}"
        if self.kind == TokenKind.STRING:
            return f"string {self.value!r}"
        if self.kind in (TokenKind.INDENT, TokenKind.DEDENT):
            return f"{self.kind.name.lower()}({self.value})"
        return describe_kind(self.kind)

    def __repr__(self) -> str:
        if self.value is not None:
            return f"{self.kind.name}({self.value!r}) @{self.span.start}..{self.span.end}"
        return f"{self.kind.name} @{self.span.start}..{self.span.end}"
