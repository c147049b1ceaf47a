"""JSON serialization/deserialization for the KdnLang AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Every node becomes a dict tagged
with its class name under "type"; spans become `[start, end]` pairs and
operators are stored by name.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .ast import (
    Assignment,
    BinaryOp,
    BinaryOperator,
    Block,
    ForLoop,
    FunctionCall,
    Identifier,
    If,
    Number,
    Program,
    String,
    While,
)
from .tokens import Span


def span_to_obj(span: Optional[Span]) -> Optional[List[int]]:
    if span is None:
        return None
    return [span.start, span.end]


def span_from_obj(o: Optional[List[int]]) -> Optional[Span]:
    if o is None:
        return None
    start, end = o
    return Span(start, end)


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Program):
        return {"type": "Program", "statements": [ast_to_obj(s) for s in node.statements]}

    obj: Dict[str, Any]
    if isinstance(node, Assignment):
        obj = {"type": "Assignment", "identifier": node.identifier, "expression": ast_to_obj(node.expression)}
    elif isinstance(node, Block):
        obj = {
            "type": "Block",
            "statements": [ast_to_obj(s) for s in node.statements],
            "indentation": node.indentation,
        }
    elif isinstance(node, While):
        obj = {"type": "While", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    elif isinstance(node, ForLoop):
        obj = {
            "type": "ForLoop",
            "variable": node.variable,
            "start": ast_to_obj(node.start),
            "end": ast_to_obj(node.end),
            "body": ast_to_obj(node.body),
        }
    elif isinstance(node, If):
        obj = {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    elif isinstance(node, FunctionCall):
        obj = {"type": "FunctionCall", "name": node.name, "arguments": [ast_to_obj(a) for a in node.arguments]}
    elif isinstance(node, Identifier):
        obj = {"type": "Identifier", "name": node.name}
    elif isinstance(node, Number):
        obj = {"type": "Number", "value": node.value}
    elif isinstance(node, String):
        obj = {"type": "String", "value": node.value}
    elif isinstance(node, BinaryOp):
        obj = {
            "type": "BinaryOp",
            "operator": node.operator.name,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    else:
        raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")

    obj["span"] = span_to_obj(node.span)
    return obj


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    span = span_from_obj(obj.get("span"))
    if t == "Program":
        return Program(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "Assignment":
        return Assignment(identifier=obj["identifier"], expression=ast_from_obj(obj["expression"]), span=span)
    if t == "Block":
        return Block(
            statements=[ast_from_obj(s) for s in obj["statements"]],
            indentation=int(obj.get("indentation", 0)),
            span=span,
        )
    if t == "While":
        return While(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]), span=span)
    if t == "ForLoop":
        return ForLoop(
            variable=obj["variable"],
            start=ast_from_obj(obj["start"]),
            end=ast_from_obj(obj["end"]),
            body=ast_from_obj(obj["body"]),
            span=span,
        )
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then_branch=ast_from_obj(obj["then_branch"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
            span=span,
        )
    if t == "FunctionCall":
        return FunctionCall(name=obj["name"], arguments=[ast_from_obj(a) for a in obj["arguments"]], span=span)
    if t == "Identifier":
        return Identifier(name=obj["name"], span=span)
    if t == "Number":
        return Number(value=int(obj["value"]), span=span)
    if t == "String":
        return String(value=obj["value"], span=span)
    if t == "BinaryOp":
        return BinaryOp(
            left=ast_from_obj(obj["left"]),
            operator=BinaryOperator[obj["operator"]],
            right=ast_from_obj(obj["right"]),
            span=span,
        )

    raise ValueError(f"Unknown AST node type: {t}")
