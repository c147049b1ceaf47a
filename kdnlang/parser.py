"""Recursive-descent parser for KdnLang.

The parser pulls tokens from a `Lexer` one at a time and keeps a single
current token. Block structure comes entirely from the lexer's INDENT
and DEDENT tokens; the parser never measures whitespace itself. The
width of the enclosing block is threaded through the statement methods
as `level` so that blocks which do not open a new indentation level can
still record the width they run at.

Grammar (informal):

    program     := statement*
    statement   := if | for | while | print | assignment | INDENT block
    if          := "if" expression block ["else" block]
    for         := "for" IDENT "=" expression "to" expression block
    while       := "while" expression block
    print       := "print" "(" [expression ("," expression)*] ")"
    assignment  := IDENT "=" expression
    expression  := additive (("==" | ">" | ">=" | "<" | "<=") additive)*
    additive    := term (("+" | "-") term)*
    term        := primary (("*" | "/") primary)*
    primary     := NUMBER | STRING | IDENT ["(" args ")"] | "(" expression ")"

The first error aborts the parse; there is no recovery.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .ast import (
    Assignment, BinaryOp, BinaryOperator, Block, Expression, ForLoop,
    FunctionCall, Identifier, If, Number, Program, Statement, String, While,
)
from .errors import LexerError, ParserError
from .lexer import Lexer
from .tokens import Span, Token, TokenKind, describe_kind

COMPARISON_OPERATORS = {
    TokenKind.DOUBLE_EQUALS: BinaryOperator.Equals,
    TokenKind.GREATER_THAN: BinaryOperator.GreaterThan,
    TokenKind.GREATER_THAN_EQUALS: BinaryOperator.GreaterThanEquals,
    TokenKind.LESS_THAN: BinaryOperator.LessThan,
    TokenKind.LESS_THAN_EQUALS: BinaryOperator.LessThanEquals,
}

ADDITIVE_OPERATORS = {
    TokenKind.PLUS: BinaryOperator.Add,
    TokenKind.MINUS: BinaryOperator.Subtract,
}

MULTIPLICATIVE_OPERATORS = {
    TokenKind.STAR: BinaryOperator.Multiply,
    TokenKind.SLASH: BinaryOperator.Divide,
}

# Tokens that may follow a simple statement.
STATEMENT_END = (TokenKind.NEWLINE, TokenKind.DEDENT, TokenKind.EOF)

ORPHAN_ELSE = "'else' without a matching 'if'"


def join(first: Optional[Span], last: Optional[Span]) -> Optional[Span]:
    if first is None or last is None:
        return first or last
    return Span(first.start, last.end)


class Parser:
    def __init__(self, lexer: Lexer, source: str):
        self.lexer = lexer
        self.source = source
        self.current: Optional[Token] = None
        self.advance()

    # Token helpers
    def advance(self) -> Token:
        """Move to the next token and return the one just consumed."""
        previous = self.current
        try:
            self.current = self.lexer.next_token()
        except LexerError as err:
            raise ParserError.unexpected_token(
                'any token', f"error: {err.message}", err.span, self.source,
            ) from err
        return previous

    def check(self, kind: TokenKind) -> bool:
        return self.current.kind == kind

    def check_identifier(self, name: str) -> bool:
        return self.current.is_identifier(name)

    def mismatch(self, expected: str) -> ParserError:
        token = self.current
        if token.kind == TokenKind.EOF:
            return ParserError.unexpected_eof(expected, token.span, self.source)
        return ParserError.unexpected_token(expected, token.describe(), token.span, self.source)

    def expect(self, kind: TokenKind, expected: Optional[str] = None) -> Token:
        if self.check(kind):
            return self.advance()
        raise self.mismatch(expected or describe_kind(kind))

    def skip_newlines(self):
        while self.check(TokenKind.NEWLINE):
            self.advance()

    def end_statement(self):
        if self.current.kind not in STATEMENT_END:
            raise self.mismatch('newline')

    # Program and statements
    def parse_program(self) -> Program:
        statements: List[Statement] = []
        while True:
            self.skip_newlines()
            if self.check(TokenKind.EOF):
                break
            statements.append(self.parse_statement(0))
        return Program(statements)

    def parse_statement(self, level: int) -> Statement:
        token = self.current
        if token.kind == TokenKind.INDENT:
            return self.parse_nested_block()
        if token.kind != TokenKind.IDENTIFIER:
            raise self.mismatch('statement')
        if token.value == 'if':
            return self.parse_if(level)
        if token.value == 'for':
            return self.parse_for(level)
        if token.value == 'while':
            return self.parse_while(level)
        if token.value == 'print':
            return self.parse_print()
        if token.value == 'else':
            raise ParserError.unexpected_token('statement', ORPHAN_ELSE, token.span, self.source)
        return self.parse_assignment()

    def parse_block(self, level: int, allow_else: bool = False) -> Tuple[Block, bool]:
        """Parse the body that follows a block header.

        If the body starts with INDENT the block owns that level and ends
        by consuming its DEDENT. Otherwise it runs at `level` until a
        DEDENT that belongs to an enclosing block, or end of input.
        """
        self.skip_newlines()
        if self.check(TokenKind.INDENT):
            indent = self.advance()
            return self.parse_block_body(indent.value, True, allow_else)
        return self.parse_block_body(level, False, allow_else)

    def parse_block_body(self, indentation: int, owns_dedent: bool, allow_else: bool) -> Tuple[Block, bool]:
        """Parse statements until the end of the block.

        Returns the block and whether it stopped at an `else` while its
        closing DEDENT is still outstanding; whoever takes that `else`
        must then consume the DEDENT.
        """
        statements: List[Statement] = []
        pending = False
        while True:
            self.skip_newlines()
            if self.check(TokenKind.DEDENT):
                if owns_dedent:
                    self.advance()
                break
            if self.check(TokenKind.EOF):
                break
            if self.check_identifier('else'):
                if owns_dedent and not allow_else:
                    raise ParserError.unexpected_token(
                        'statement', ORPHAN_ELSE, self.current.span, self.source,
                    )
                pending = owns_dedent
                break
            statements.append(self.parse_statement(indentation))
        if not statements:
            if self.check(TokenKind.EOF):
                raise ParserError.unexpected_eof('indented block', self.current.span, self.source)
            raise ParserError.missing_token('indented block', self.current.span, self.source)
        span = join(statements[0].span, statements[-1].span)
        return Block(statements, indentation, span), pending

    def parse_nested_block(self) -> Block:
        indent = self.advance()
        block, _ = self.parse_block_body(indent.value, True, False)
        return block

    def parse_if(self, level: int) -> If:
        keyword = self.advance()
        condition = self.parse_expression()
        then_branch, pending = self.parse_block(level, allow_else=True)
        else_branch: Optional[Block] = None
        if self.check_identifier('else'):
            self.advance()
            if pending:
                # `else` sat at the body's own level; this branch closes that level
                else_branch, _ = self.parse_block_body(then_branch.indentation, True, False)
            else:
                else_branch, _ = self.parse_block(level)
        last = else_branch if else_branch is not None else then_branch
        return If(condition, then_branch, else_branch, join(keyword.span, last.span))

    def parse_while(self, level: int) -> While:
        keyword = self.advance()
        condition = self.parse_expression()
        body, _ = self.parse_block(level)
        return While(condition, body, join(keyword.span, body.span))

    def parse_for(self, level: int) -> ForLoop:
        keyword = self.advance()
        if not self.check(TokenKind.IDENTIFIER):
            raise self.mismatch('identifier')
        variable = self.advance().value
        self.expect(TokenKind.EQUALS)
        start = self.parse_expression()
        if not self.check_identifier('to'):
            raise self.mismatch("'to'")
        self.advance()
        end = self.parse_expression()
        body, _ = self.parse_block(level)
        return ForLoop(variable, start, end, body, join(keyword.span, body.span))

    def parse_print(self) -> FunctionCall:
        name = self.advance()
        self.expect(TokenKind.LEFT_PAREN)
        arguments = self.parse_arguments()
        close = self.expect(TokenKind.RIGHT_PAREN)
        self.end_statement()
        return FunctionCall(name.value, arguments, join(name.span, close.span))

    def parse_assignment(self) -> Assignment:
        name = self.advance()
        if self.check(TokenKind.EQUALS):
            self.advance()
            expression = self.parse_expression()
            self.end_statement()
            return Assignment(name.value, expression, join(name.span, expression.span))
        if self.check(TokenKind.LEFT_PAREN):
            raise ParserError.unexpected_token(
                "'='",
                f"call to {name.value!r} (function call statements are not yet supported)",
                join(name.span, self.current.span), self.source,
            )
        raise self.mismatch("'=' or '('")

    def parse_arguments(self) -> List[Expression]:
        arguments: List[Expression] = []
        if self.check(TokenKind.RIGHT_PAREN):
            return arguments
        arguments.append(self.parse_expression())
        while self.check(TokenKind.COMMA):
            self.advance()
            arguments.append(self.parse_expression())
        return arguments

    # Expression parsing (precedence climbing, left associative)
    def parse_expression(self) -> Expression:
        return self.parse_comparison()

    def parse_comparison(self) -> Expression:
        node = self.parse_additive()
        while self.current.kind in COMPARISON_OPERATORS:
            operator = COMPARISON_OPERATORS[self.advance().kind]
            right = self.parse_additive()
            node = BinaryOp(node, operator, right, join(node.span, right.span))
        return node

    def parse_additive(self) -> Expression:
        node = self.parse_multiplicative()
        while self.current.kind in ADDITIVE_OPERATORS:
            operator = ADDITIVE_OPERATORS[self.advance().kind]
            right = self.parse_multiplicative()
            node = BinaryOp(node, operator, right, join(node.span, right.span))
        return node

    def parse_multiplicative(self) -> Expression:
        node = self.parse_primary()
        while self.current.kind in MULTIPLICATIVE_OPERATORS:
            operator = MULTIPLICATIVE_OPERATORS[self.advance().kind]
            right = self.parse_primary()
            node = BinaryOp(node, operator, right, join(node.span, right.span))
        return node

    def parse_primary(self) -> Expression:
        token = self.current
        if token.kind == TokenKind.NUMBER:
            self.advance()
            return Number(token.value, token.span)
        if token.kind == TokenKind.STRING:
            self.advance()
            return String(token.value, token.span)
        if token.kind == TokenKind.IDENTIFIER:
            self.advance()
            if self.check(TokenKind.LEFT_PAREN):
                self.advance()
                arguments = self.parse_arguments()
                close = self.expect(TokenKind.RIGHT_PAREN)
                return FunctionCall(token.value, arguments, join(token.span, close.span))
            return Identifier(token.value, token.span)
        if token.kind == TokenKind.LEFT_PAREN:
            self.advance()
            expr = self.parse_expression()
            self.expect(TokenKind.RIGHT_PAREN)
            return expr
        raise self.mismatch('expression')


def parse_program(source: str) -> Program:
    """Parse KdnLang source code into a Program AST."""
    parser = Parser(Lexer(source), source)
    return parser.parse_program()
