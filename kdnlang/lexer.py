"""Indentation-aware lexer for KdnLang.

The lexer is pull based: every call to `next_token` scans just enough of
the source to produce one token. Leading spaces are measured at the start
of each non-blank line and compared with a stack of open block widths;
growing the width emits INDENT, shrinking it emits one DEDENT per closed
level. When a single line closes several levels at once the extra
DEDENT tokens wait in a FIFO queue and are handed out before any new
scanning happens. At end of input every still-open level is closed with
a DEDENT before EOF is returned, and EOF is returned forever after.

Keywords are not reserved here; `if`, `while`, `for`, `print`, `else`
and `to` come out as ordinary identifiers and are recognised by the
parser.
"""

from __future__ import annotations

import string
from collections import deque
from typing import Deque, List, Optional

from .errors import LexerError
from .tokens import SINGLE_CHAR_TOKENS, Span, Token, TokenKind

I64_MAX = 2 ** 63 - 1

ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    '\\': '\\',
    '"': '"',
}

# Operators whose meaning changes when followed by '='.
WITH_EQUALS = {
    '=': (TokenKind.EQUALS, TokenKind.DOUBLE_EQUALS),
    '>': (TokenKind.GREATER_THAN, TokenKind.GREATER_THAN_EQUALS),
    '<': (TokenKind.LESS_THAN, TokenKind.LESS_THAN_EQUALS),
}

DOUBLED = {
    '&': TokenKind.AND,
    '|': TokenKind.OR,
}


def is_ident_start(c: str) -> bool:
    return c.isascii() and (c.isalpha() or c == '_')


def is_ident_char(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c == '_')


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line_start = True
        self.indent_stack: List[int] = [0]
        self.pending: Deque[Token] = deque()

    # Character helpers
    def peek(self, offset: int = 0) -> Optional[str]:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return None

    def error(self, kind: str, message: str, start: int, end: int) -> LexerError:
        return LexerError(kind, message, Span(start, end), self.source)

    def make(self, kind: TokenKind, start: int, value=None) -> Token:
        return Token(kind, Span(start, self.pos), value)

    def next_token(self) -> Token:
        if self.pending:
            return self.pending.popleft()
        while True:
            if self.line_start and self.pos < len(self.source):
                token = self.handle_indentation()
                if token is not None:
                    return token
                if self.line_start:
                    # blank or comment-only line was skipped
                    continue
            c = self.peek()
            if c is None:
                return self.handle_eof()
            if c in '\r\n':
                return self.read_newline()
            if c.isspace():
                self.pos += 1
                continue
            if c == '#':
                self.skip_comment()
                continue
            if c in string.digits:
                return self.read_number()
            if is_ident_start(c):
                return self.read_identifier()
            if c == '"':
                return self.read_string()
            return self.read_operator()

    def handle_indentation(self) -> Optional[Token]:
        """Measure leading spaces and emit INDENT/DEDENT as needed.

        Returns None when the line keeps the current level, or when the
        line is blank or holds only a comment; in the latter case the
        whole line is consumed and `line_start` stays set.
        """
        start = self.pos
        while self.peek() == ' ':
            self.pos += 1
        width = self.pos - start

        c = self.peek()
        if c is None:
            # trailing spaces before end of input
            self.line_start = False
            return None
        if c in '\r\n' or c == '#':
            self.skip_comment()
            self.consume_line_break()
            return None

        self.line_start = False
        current = self.indent_stack[-1]
        if width > current:
            self.indent_stack.append(width)
            return Token(TokenKind.INDENT, Span(start, self.pos), width)
        if width == current:
            return None

        closed: List[int] = []
        while width < self.indent_stack[-1]:
            closed.append(self.indent_stack.pop())
        if width != self.indent_stack[-1]:
            raise self.error(
                'IndentationError',
                f"Indentation error: width {width} does not match any enclosing block level",
                start, self.pos,
            )
        for level in closed[1:]:
            self.pending.append(Token(TokenKind.DEDENT, Span(start, self.pos), level))
        return Token(TokenKind.DEDENT, Span(start, self.pos), closed[0])

    def handle_eof(self) -> Token:
        if len(self.indent_stack) > 1:
            level = self.indent_stack.pop()
            return Token(TokenKind.DEDENT, Span(self.pos, self.pos), level)
        return Token(TokenKind.EOF, Span(self.pos, self.pos))

    def skip_comment(self):
        while self.peek() is not None and self.peek() not in '\r\n':
            self.pos += 1

    def consume_line_break(self):
        if self.peek() == '\r':
            self.pos += 1
            if self.peek() == '\n':
                self.pos += 1
        elif self.peek() == '\n':
            self.pos += 1

    def read_newline(self) -> Token:
        start = self.pos
        self.consume_line_break()
        self.line_start = True
        return self.make(TokenKind.NEWLINE, start)

    def read_number(self) -> Token:
        start = self.pos
        while self.peek() is not None and self.peek() in string.digits:
            self.pos += 1
        lexeme = self.source[start:self.pos]
        value = int(lexeme)
        if value > I64_MAX:
            raise self.error('InvalidNumber', f"Invalid number '{lexeme}'", start, self.pos)
        return self.make(TokenKind.NUMBER, start, value)

    def read_identifier(self) -> Token:
        start = self.pos
        while self.peek() is not None and is_ident_char(self.peek()):
            self.pos += 1
        return self.make(TokenKind.IDENTIFIER, start, self.source[start:self.pos])

    def read_string(self) -> Token:
        start = self.pos
        self.pos += 1  # opening quote
        chars: List[str] = []
        while True:
            c = self.peek()
            if c is None or c in '\r\n':
                raise self.error('UnterminatedString', 'Unterminated string literal', start, self.pos)
            if c == '"':
                self.pos += 1
                return self.make(TokenKind.STRING, start, ''.join(chars))
            if c == '\\':
                esc = self.peek(1)
                if esc is None:
                    self.pos += 1
                    raise self.error('UnterminatedString', 'Unterminated string literal', start, self.pos)
                if esc not in ESCAPES:
                    raise self.error(
                        'InvalidEscapeSequence', f"Invalid escape sequence '\\{esc}'",
                        self.pos, self.pos + 2,
                    )
                chars.append(ESCAPES[esc])
                self.pos += 2
                continue
            chars.append(c)
            self.pos += 1

    def read_operator(self) -> Token:
        start = self.pos
        c = self.source[start]
        if c in WITH_EQUALS:
            single, double = WITH_EQUALS[c]
            self.pos += 1
            if self.peek() == '=':
                self.pos += 1
                return self.make(double, start)
            return self.make(single, start)
        if c in DOUBLED:
            if self.peek(1) == c:
                self.pos += 2
                return self.make(DOUBLED[c], start)
            raise self.error('UnexpectedCharacter', f"Unexpected character '{c}'", start, start + 1)
        if c in SINGLE_CHAR_TOKENS:
            self.pos += 1
            return self.make(SINGLE_CHAR_TOKENS[c], start)
        raise self.error('UnexpectedCharacter', f"Unexpected character '{c}'", start, start + 1)

    def __iter__(self):
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenKind.EOF:
                return


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens ending with EOF."""
    return list(Lexer(source))
