"""Token definitions for the CFPL language.

The scanner turns source text into a flat list of `Token` objects. Each
token records its lexical category (`TokenType`), the exact source text
it was read from, an optional decoded literal value and the source line
used for diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional


class TokenType(Enum):
    # Single-character punctuation.
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    SEMICOLON = auto()

    # Operators.
    MINUS = auto()
    PLUS = auto()
    SLASH = auto()
    STAR = auto()
    MODULO = auto()
    AMPERSAND = auto()
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    INCREMENT = auto()
    DECREMENT = auto()

    # Literals.
    IDENTIFIER = auto()
    NUMBER = auto()
    STRING_LIT = auto()
    CHAR_LIT = auto()
    NEXT_LINE = auto()

    # Keywords.
    VAR = auto()
    AS = auto()
    PRINT = auto()
    INPUT = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    FOR = auto()
    AND = auto()
    OR = auto()
    NOT = auto()
    TRUE = auto()
    FALSE = auto()

    # Data type names.
    INT = auto()
    CHAR = auto()
    BOOL = auto()
    FLOAT = auto()
    STRING = auto()

    # Block markers.
    START = auto()
    STOP = auto()

    NEWLINE = auto()
    EOF = auto()


KEYWORDS: Dict[str, TokenType] = {
    'INT': TokenType.INT,
    'CHAR': TokenType.CHAR,
    'BOOL': TokenType.BOOL,
    'FLOAT': TokenType.FLOAT,
    'STRING': TokenType.STRING,
    'START': TokenType.START,
    'STOP': TokenType.STOP,
    'VAR': TokenType.VAR,
    'OUTPUT:': TokenType.PRINT,
    'INPUT:': TokenType.INPUT,
    'AS': TokenType.AS,
    'TRUE': TokenType.TRUE,
    'FALSE': TokenType.FALSE,
    'AND': TokenType.AND,
    'OR': TokenType.OR,
    'NOT': TokenType.NOT,
    'IF': TokenType.IF,
    'ELSE': TokenType.ELSE,
    'WHILE': TokenType.WHILE,
    'FOR': TokenType.FOR,
}

DATA_TYPES = frozenset({
    TokenType.INT,
    TokenType.CHAR,
    TokenType.BOOL,
    TokenType.FLOAT,
    TokenType.STRING,
})


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    literal: Optional[Any]
    line: int

    def __repr__(self) -> str:
        if self.literal is not None or self.type == TokenType.IDENTIFIER:
            return f"{self.type.name}({self.lexeme})"
        return self.type.name
