"""Abstract Syntax Tree (AST) definitions for KdnLang.

A `Program` is an ordered list of statements. Compound statements own
their bodies as `Block` nodes; expressions own their operands. Nodes are
built once by the parser and never mutated afterwards. Every node keeps
the source span it was parsed from so runtime errors can point back at
the offending code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .tokens import Span


class BinaryOperator(Enum):
    Add = '+'
    Subtract = '-'
    Multiply = '*'
    Divide = '/'
    Equals = '=='
    GreaterThan = '>'
    GreaterThanEquals = '>='
    LessThan = '<'
    LessThanEquals = '<='
    And = '&&'
    Or = '||'

    @property
    def is_arithmetic(self) -> bool:
        return self in ARITHMETIC

    @property
    def is_comparison(self) -> bool:
        return self in COMPARISON


ARITHMETIC = frozenset({
    BinaryOperator.Add, BinaryOperator.Subtract, BinaryOperator.Multiply, BinaryOperator.Divide,
})
COMPARISON = frozenset({
    BinaryOperator.Equals, BinaryOperator.GreaterThan, BinaryOperator.GreaterThanEquals,
    BinaryOperator.LessThan, BinaryOperator.LessThanEquals,
})


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions

@dataclass
class Identifier(Node):
    name: str
    span: Optional[Span] = field(default=None, compare=False)


@dataclass
class Number(Node):
    value: int
    span: Optional[Span] = field(default=None, compare=False)


@dataclass
class String(Node):
    value: str
    span: Optional[Span] = field(default=None, compare=False)


@dataclass
class BinaryOp(Node):
    left: 'Expression'
    operator: BinaryOperator
    right: 'Expression'
    span: Optional[Span] = field(default=None, compare=False)


@dataclass
class FunctionCall(Node):
    """A call `name(arg, ...)`; used both as an expression and as a statement."""
    name: str
    arguments: List['Expression']
    span: Optional[Span] = field(default=None, compare=False)


Expression = Union[Identifier, Number, String, BinaryOp, FunctionCall]


# Statements

@dataclass
class Assignment(Node):
    identifier: str
    expression: Expression
    span: Optional[Span] = field(default=None, compare=False)


@dataclass
class Block(Node):
    statements: List['Statement']
    indentation: int = 0  # column width that opened the block
    span: Optional[Span] = field(default=None, compare=False)


@dataclass
class While(Node):
    condition: Expression
    body: Block
    span: Optional[Span] = field(default=None, compare=False)


@dataclass
class ForLoop(Node):
    variable: str
    start: Expression
    end: Expression
    body: Block
    span: Optional[Span] = field(default=None, compare=False)


@dataclass
class If(Node):
    condition: Expression
    then_branch: Block
    else_branch: Optional[Block] = None
    span: Optional[Span] = field(default=None, compare=False)


Statement = Union[Assignment, Block, While, ForLoop, If, FunctionCall]


@dataclass
class Program(Node):
    statements: List[Statement]
