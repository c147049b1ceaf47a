"""Tree-walking interpreter for KdnLang.

The interpreter executes a parsed `Program` statement by statement
against a single flat `Environment`. The only observable effect of a run
is the text written by `print`. Execution stops at the first error,
which is raised as an `InterpreterError` carrying the span of the
offending node.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .ast import (
    Assignment, BinaryOp, BinaryOperator, Block, ForLoop, FunctionCall,
    Identifier, If, Node, Number, Program, String, While,
)
from .environment import Environment
from .errors import InterpreterError
from .parser import parse_program
from .tokens import Span
from .values import (
    in_i64_range, is_number, is_truthy, to_display, truncating_divide, type_name,
)


class Interpreter:
    """Core interpreter that executes a KdnLang AST."""
    def __init__(self, source: str = '', debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.source = source
        self.environment = Environment()
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def error(self, kind: str, message: str, span: Optional[Span]) -> InterpreterError:
        return InterpreterError(kind, message, span, self.source)

    # Public API
    def interpret(self, program: Program):
        if self.debug_level > 0 and self.debug_fp is None:
            # a later run on the same interpreter continues the trace
            self.debug_fp = open(self.debug_file, 'a')
        try:
            for statement in program.statements:
                if self.debug_level >= 1:
                    self.debug(f"exec {type(statement).__name__}")
                self.execute(statement)
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    # Statements
    def execute(self, node: Node):
        if isinstance(node, Assignment):
            value = self.evaluate(node.expression)
            self.environment.define(node.identifier, value)
            if self.debug_level >= 2:
                self.debug(f"bind {node.identifier}: {type_name(value)} = {to_display(value)}")
            return
        if isinstance(node, Block):
            for stmt in node.statements:
                self.execute(stmt)
            return
        if isinstance(node, While):
            while True:
                cond = self.evaluate(node.condition)
                truthy = is_truthy(cond)
                if self.debug_level >= 3:
                    self.debug(f"while condition {to_display(cond)} -> {truthy}")
                if not truthy:
                    break
                self.execute(node.body)
            return
        if isinstance(node, ForLoop):
            self.execute_for(node)
            return
        if isinstance(node, If):
            cond = self.evaluate(node.condition)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_display(cond)} -> {truthy}")
            if truthy:
                self.execute(node.then_branch)
            elif node.else_branch is not None:
                self.execute(node.else_branch)
            return
        if isinstance(node, FunctionCall):
            self.call_statement(node)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_for(self, node: ForLoop):
        start = self.evaluate(node.start)
        if not is_number(start):
            raise self.error('TypeError', 'For loop start value must be a number', node.start.span)
        end = self.evaluate(node.end)
        if not is_number(end):
            raise self.error('TypeError', 'For loop end value must be a number', node.end.span)
        for i in range(start, end + 1):
            if self.debug_level >= 3:
                self.debug(f"for {node.variable} = {i}")
            self.environment.define(node.variable, i)
            self.execute(node.body)

    def call_statement(self, node: FunctionCall):
        if node.name != 'print':
            raise self.error('RuntimeError', f"Unknown function: {node.name}", node.span)
        values: List[Any] = [self.evaluate(arg) for arg in node.arguments]
        print(' '.join(to_display(v) for v in values))

    # Expressions
    def evaluate(self, node: Node) -> Any:
        if isinstance(node, Number):
            return node.value
        if isinstance(node, String):
            return node.value
        if isinstance(node, Identifier):
            if node.name not in self.environment:
                raise self.error('UndefinedVariable', f"Undefined variable '{node.name}'", node.span)
            return self.environment.get(node.name)
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node, left, right)
        if isinstance(node, FunctionCall):
            raise self.error(
                'RuntimeError', f"Function calls not supported in expressions: {node.name}", node.span,
            )
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def apply_binary_op(self, node: BinaryOp, a: Any, b: Any) -> Any:
        op = node.operator
        if is_number(a) and is_number(b):
            if op.is_comparison:
                return self.compare(op, a, b)
            if op.is_arithmetic:
                return self.arithmetic(node, a, b)
        if op == BinaryOperator.Add:
            # one-sided coercion: a String operand turns the other into its display text
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            if isinstance(a, str):
                return a + to_display(b)
            if isinstance(b, str):
                return to_display(a) + b
        raise self.error(
            'TypeError',
            f"Cannot apply operator {op.name} ('{op.value}') to {type_name(a)} and {type_name(b)}",
            node.span,
        )

    def compare(self, op: BinaryOperator, a: int, b: int) -> bool:
        if op == BinaryOperator.Equals:
            return a == b
        if op == BinaryOperator.GreaterThan:
            return a > b
        if op == BinaryOperator.GreaterThanEquals:
            return a >= b
        if op == BinaryOperator.LessThan:
            return a < b
        return a <= b

    def arithmetic(self, node: BinaryOp, a: int, b: int) -> int:
        op = node.operator
        if op == BinaryOperator.Add:
            result = a + b
        elif op == BinaryOperator.Subtract:
            result = a - b
        elif op == BinaryOperator.Multiply:
            result = a * b
        else:
            if b == 0:
                raise self.error('RuntimeError', 'Division by zero', node.span)
            result = truncating_divide(a, b)
        if not in_i64_range(result):
            raise self.error('RuntimeError', 'Integer overflow', node.span)
        return result


def run_program(source: str, debug_level: int = 0) -> Interpreter:
    """Parse and execute KdnLang source, returning the finished interpreter."""
    program = parse_program(source)
    interpreter = Interpreter(source, debug_level=debug_level)
    interpreter.interpret(program)
    return interpreter
