"""Abstract Syntax Tree (AST) definitions for the CFPL language.

Two closed families of dataclasses describe a parsed program:
expressions (subclasses of `Expr`) and statements (subclasses of `Stmt`).
The parser builds them, the interpreter walks them with `isinstance`
dispatch. Nodes keep the tokens they were built from so runtime errors
can point at a source line.

There is no `for` node: the parser rewrites a `FOR` loop into a `Block`
holding the initializer and a `While` whose body ends with the
increment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .tokens import Token
from .types import Value


@dataclass
class Expr:
    """Base class for expression nodes."""
    pass


@dataclass
class Literal(Expr):
    value: Value


@dataclass
class Grouping(Expr):
    expression: Expr


@dataclass
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Variable(Expr):
    name: Token


@dataclass
class Assign(Expr):
    name: Token
    value: Expr


@dataclass
class Stmt:
    """Base class for statement nodes."""
    pass


@dataclass
class Expression(Stmt):
    expression: Expr


@dataclass
class Print(Stmt):
    expression: Expr


@dataclass
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]
    # stamped after construction when one AS clause covers several names
    data_type: Optional[Token] = None


@dataclass
class Block(Stmt):
    statements: List[Stmt]


@dataclass
class Input(Stmt):
    names: List[Token]


@dataclass
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass
class While(Stmt):
    condition: Expr
    body: Stmt
