from typing import Dict, Optional

from cfpl.errors import CfplRuntimeError
from cfpl.tokens import Token
from cfpl.types import Kind, Value


class Environment:
    """One scope of the CFPL variable chain, mapping names to values."""
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Value] = {}

    def define(self, name: str, value: Value) -> None:
        # redefinition in the same scope replaces the old value
        self.values[name] = value

    def get(self, name: Token) -> Value:
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.parent is not None:
            return self.parent.get(name)
        raise CfplRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Value) -> None:
        """Rebind `name` in the nearest scope that defines it.

        A variable keeps the kind of the value it was defined with; only a
        variable currently holding ABSENT may take a value of any kind.
        """
        if name.lexeme in self.values:
            current = self.values[name.lexeme]
            if current.kind is not Kind.ABSENT and current.kind is not value.kind:
                raise CfplRuntimeError(
                    name,
                    f"{name.lexeme} expects {current.kind} but received {value.kind} instead.",
                )
            self.values[name.lexeme] = value
            return
        if self.parent is not None:
            self.parent.assign(name, value)
            return
        raise CfplRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def child(self) -> 'Environment':
        return Environment(parent=self)
