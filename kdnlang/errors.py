import re
from typing import Optional, Tuple

from kdnlang.tokens import Span


class KdnLangError(Exception):
    """Base for every error raised while lexing, parsing or running a program.

    Each layer has one subclass; the specific failure is named by `kind`,
    which must be one of the subclass's `KINDS`. The full source text is
    kept so the offending fragment can be shown without re-deriving it.
    """
    layer = 'kdnlang'
    KINDS: Tuple[str, ...] = ()

    def __init__(self, kind: str, message: str, span: Optional[Span] = None, src: str = ''):
        if kind not in self.KINDS:
            raise ValueError(f"unknown {type(self).__name__} kind {kind!r}")
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.span = span
        self.src = src

    @property
    def code(self) -> str:
        snake = re.sub(r'(?<=[a-z0-9])(?=[A-Z])', '_', self.kind).lower()
        return f"{self.layer}::{snake}"

    @property
    def snippet(self) -> str:
        if self.span is None:
            return ''
        return self.span.text(self.src)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind}: {self.message})"


class LexerError(KdnLangError):
    layer = 'lexer'
    KINDS = (
        'UnexpectedCharacter',
        'InvalidNumber',
        'UnterminatedString',
        'IndentationError',
        'InvalidEscapeSequence',
    )


class ParserError(KdnLangError):
    layer = 'parser'
    KINDS = ('UnexpectedToken', 'MissingToken', 'UnexpectedEOF')

    def __init__(self, kind: str, message: str, span: Optional[Span] = None, src: str = '',
                 expected: Optional[str] = None, found: Optional[str] = None):
        super().__init__(kind, message, span, src)
        self.expected = expected
        self.found = found

    @classmethod
    def unexpected_token(cls, expected: str, found: str, span: Optional[Span], src: str) -> 'ParserError':
        return cls('UnexpectedToken', f"Unexpected token: expected {expected}, found {found}",
                   span, src, expected=expected, found=found)

    @classmethod
    def missing_token(cls, expected: str, span: Optional[Span], src: str) -> 'ParserError':
        return cls('MissingToken', f"Missing token: expected {expected}", span, src, expected=expected)

    @classmethod
    def unexpected_eof(cls, expected: str, span: Optional[Span], src: str) -> 'ParserError':
        return cls('UnexpectedEOF', f"Unexpected end of file: expected {expected}",
                   span, src, expected=expected, found='end of input')


class InterpreterError(KdnLangError):
    layer = 'interpreter'
    KINDS = ('UndefinedVariable', 'TypeError', 'RuntimeError')
