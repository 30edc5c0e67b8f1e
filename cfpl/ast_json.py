"""JSON serialization/deserialization for CFPL ASTs.

This module converts between the CFPL AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Tokens and runtime
values embedded in the tree are serialized as well, so a parsed program
can be written out with `--emit-ast` and executed later with `--ast`.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List

from .ast import (
    Literal,
    Grouping,
    Unary,
    Binary,
    Logical,
    Variable,
    Assign,
    Expression,
    Print,
    Var,
    Block,
    Input,
    If,
    While,
)
from .tokens import Token, TokenType
from .types import Kind, Value


def value_to_obj(v: Value) -> Dict[str, Any]:
    data = v.data
    # JSON has no inf/nan
    if v.kind is Kind.FLOAT and not math.isfinite(data):
        data = repr(data)
    return {"kind": v.kind.name, "data": data}


def value_from_obj(o: Dict[str, Any]) -> Value:
    kind = Kind[o["kind"]]
    data = o.get("data")
    if kind is Kind.FLOAT:
        data = float(data)
    return Value(kind, data)


def token_to_obj(t: Token) -> Dict[str, Any]:
    return {
        "type": t.type.name,
        "lexeme": t.lexeme,
        "literal": value_to_obj(t.literal) if t.literal is not None else None,
        "line": t.line,
    }


def token_from_obj(o: Dict[str, Any]) -> Token:
    literal = o.get("literal")
    return Token(
        TokenType[o["type"]],
        o["lexeme"],
        value_from_obj(literal) if literal is not None else None,
        o["line"],
    )


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]

    # Statements
    if isinstance(node, Expression):
        return {"type": "Expression", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Print):
        return {"type": "Print", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Var):
        return {
            "type": "Var",
            "name": token_to_obj(node.name),
            "initializer": ast_to_obj(node.initializer),
            "data_type": token_to_obj(node.data_type) if node.data_type is not None else None,
        }
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, Input):
        return {"type": "Input", "names": [token_to_obj(t) for t in node.names]}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, While):
        return {"type": "While", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}

    # Expressions
    if isinstance(node, Literal):
        return {"type": "Literal", "value": value_to_obj(node.value)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Unary):
        return {"type": "Unary", "operator": token_to_obj(node.operator), "right": ast_to_obj(node.right)}
    if isinstance(node, (Binary, Logical)):
        return {
            "type": type(node).__name__,
            "left": ast_to_obj(node.left),
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Variable):
        return {"type": "Variable", "name": token_to_obj(node.name)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": token_to_obj(node.name), "value": ast_to_obj(node.value)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Expression":
        return Expression(expression=ast_from_obj(obj["expression"]))
    if t == "Print":
        return Print(expression=ast_from_obj(obj["expression"]))
    if t == "Var":
        data_type = obj.get("data_type")
        return Var(
            name=token_from_obj(obj["name"]),
            initializer=ast_from_obj(obj.get("initializer")),
            data_type=token_from_obj(data_type) if data_type is not None else None,
        )
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "Input":
        return Input(names=[token_from_obj(n) for n in obj["names"]])
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then_branch=ast_from_obj(obj["then_branch"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
        )
    if t == "While":
        return While(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "Literal":
        return Literal(value=value_from_obj(obj["value"]))
    if t == "Grouping":
        return Grouping(expression=ast_from_obj(obj["expression"]))
    if t == "Unary":
        return Unary(operator=token_from_obj(obj["operator"]), right=ast_from_obj(obj["right"]))
    if t == "Binary":
        return Binary(
            left=ast_from_obj(obj["left"]),
            operator=token_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Logical":
        return Logical(
            left=ast_from_obj(obj["left"]),
            operator=token_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Variable":
        return Variable(name=token_from_obj(obj["name"]))
    if t == "Assign":
        return Assign(name=token_from_obj(obj["name"]), value=ast_from_obj(obj["value"]))

    raise ValueError(f"Unknown AST node type: {t}")


def program_to_obj(statements: List[Any]) -> Dict[str, Any]:
    return {"type": "Program", "body": [ast_to_obj(s) for s in statements]}


def program_from_obj(obj: Dict[str, Any]) -> List[Any]:
    if obj.get("type") != "Program":
        raise ValueError("AST file does not hold a Program")
    return [ast_from_obj(s) for s in obj["body"]]
