"""Interpreter for the CFPL language.

This module ties the toolchain together: `parse_program` runs the
scanner and parser over a source string, and `Interpreter` walks the
resulting statements directly. The active scope is passed explicitly to
every `execute`/`evaluate` call, so leaving a block (normally or through
a runtime error) simply drops the child `Environment` and the caller's
scope is in effect again.

Runtime faults raise `CfplRuntimeError`. `Interpreter.run` catches it,
reports it and stops the program; nothing after the failing statement
runs. Declaration and INPUT: problems are reported without stopping.
"""

from __future__ import annotations

from typing import List, Optional, TextIO

from .ast import (
    Expr, Literal, Grouping, Unary, Binary, Logical, Variable, Assign,
    Stmt, Expression, Print, Var, Block, Input, If, While,
)
from .console import Console
from .environment import Environment
from .errors import CfplRuntimeError, ErrorReporter
from .parser import parse
from .scanner import scan
from .tokens import Token, TokenType
from .types import (
    ABSENT, DECLARED_KINDS, Kind, Value,
    convert_input, float_divide, is_truthy, reclassify_input, to_string, to_text,
    truncate_divide, truncate_modulo, zero_value,
)


COMPARISON_OPERATORS = frozenset({
    TokenType.GREATER,
    TokenType.GREATER_EQUAL,
    TokenType.LESS,
    TokenType.LESS_EQUAL,
})


def parse_program(source: str, reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Scan and parse CFPL source into a list of statements."""
    if reporter is None:
        reporter = ErrorReporter()
    tokens = scan(source, reporter)
    return parse(tokens, reporter)


def split_input_line(line: str) -> List[str]:
    # trailing empty fields are dropped, so "7," holds a single value
    fields = line.split(',')
    if line:
        while fields and fields[-1] == '':
            fields.pop()
    return fields


class Interpreter:
    """Core interpreter that executes CFPL statements."""
    def __init__(self, console: Optional[Console] = None,
                 reporter: Optional[ErrorReporter] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.globals = Environment()
        self.console = console if console is not None else Console()
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[TextIO] = None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp is None:
                self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    # Public API
    def run(self, statements: List[Stmt], env: Optional[Environment] = None) -> bool:
        """Execute `statements`; return False if a runtime error stopped them."""
        if env is None:
            env = self.globals
        try:
            self.execute_block(statements, env)
            return True
        except CfplRuntimeError as error:
            self.debug(f"halt: {error.message}")
            self.reporter.runtime_error(error)
            return False
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def execute_block(self, statements: List[Stmt], env: Environment) -> None:
        for stmt in statements:
            self.execute(stmt, env)

    def execute(self, node: Stmt, env: Environment) -> None:
        if self.debug_level >= 1:
            self.debug(f"execute {type(node).__name__}")
        if isinstance(node, Expression):
            self.evaluate(node.expression, env)
            return
        if isinstance(node, Print):
            value = self.evaluate(node.expression, env)
            self.console.write_line(to_string(value))
            return
        if isinstance(node, Var):
            self.execute_var(node, env)
            return
        if isinstance(node, Block):
            self.execute_block(node.statements, env.child())
            return
        if isinstance(node, Input):
            self.execute_input(node, env)
            return
        if isinstance(node, If):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {cond!r} -> {truthy}")
            if truthy:
                self.execute(node.then_branch, env)
            elif node.else_branch is not None:
                self.execute(node.else_branch, env)
            return
        if isinstance(node, While):
            while True:
                cond = self.evaluate(node.condition, env)
                if self.debug_level >= 3:
                    self.debug(f"while condition {cond!r}")
                if not is_truthy(cond):
                    break
                self.execute(node.body, env)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_var(self, node: Var, env: Environment) -> None:
        name = node.name.lexeme
        data_type = node.data_type
        if node.initializer is None:
            value = zero_value(data_type.type)
            if value is None:
                self.reporter.error(data_type, f"Incorrect datatype: {name} needs an initial {data_type.lexeme} value.")
                value = ABSENT
        else:
            value = self.evaluate(node.initializer, env)
            if value.kind is not DECLARED_KINDS[data_type.type]:
                self.reporter.error(
                    data_type,
                    f"Incorrect datatype: {name} expects {data_type.lexeme} but received {value.kind} instead.",
                )
                value = zero_value(data_type.type) or ABSENT
        env.define(name, value)
        if self.debug_level >= 2:
            self.debug(f"define {name} = {value!r}")

    def execute_input(self, node: Input, env: Environment) -> None:
        line = self.console.read_line()
        fields = [] if line is None else split_input_line(line)
        if len(fields) != len(node.names):
            self.reporter.error(
                node.names[0],
                f"Missing values: expected {len(node.names)} but received {len(fields)}.",
            )
            return
        for name, text in zip(node.names, fields):
            current = env.get(name)
            try:
                value = convert_input(text, current.kind)
            except ValueError:
                self.reporter.error(name, f"Incorrect datatype: {name.lexeme} expects {current.kind}.")
                value = reclassify_input(text)
                try:
                    env.assign(name, value)
                except CfplRuntimeError as error:
                    self.reporter.error(name, error.message)
                continue
            env.assign(name, value)
            if self.debug_level >= 2:
                self.debug(f"input {name.lexeme} = {value!r}")

    def evaluate(self, node: Expr, env: Environment) -> Value:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return env.get(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name.lexeme} = {value!r}")
            return value
        if isinstance(node, Unary):
            right = self.evaluate(node.right, env)
            if node.operator.type in (TokenType.NOT, TokenType.BANG):
                return Value.boolean(not is_truthy(right))
            if node.operator.type == TokenType.MINUS:
                if right.kind is Kind.INTEGER:
                    return Value.integer(-right.data)
                if right.kind is Kind.FLOAT:
                    return Value.float_(-right.data)
                raise CfplRuntimeError(node.operator, 'Operand must be a number.')
            raise CfplRuntimeError(node.operator, f"Unsupported unary operator '{node.operator.lexeme}'.")
        if isinstance(node, Logical):
            left = self.evaluate(node.left, env)
            if node.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right, env)
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.operator, left, right)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def apply_binary_op(self, operator: Token, a: Value, b: Value) -> Value:
        op = operator.type
        if op == TokenType.EQUAL_EQUAL:
            return Value.boolean(self.equal_values(a, b))
        if op == TokenType.BANG_EQUAL:
            return Value.boolean(not self.equal_values(a, b))
        if op == TokenType.AMPERSAND:
            return Value.string(to_text(a) + to_text(b))
        if op == TokenType.MODULO:
            if a.kind is Kind.INTEGER and b.kind is Kind.INTEGER:
                if b.data == 0:
                    raise CfplRuntimeError(operator, 'Division by zero.')
                return Value.integer(truncate_modulo(a.data, b.data))
            raise CfplRuntimeError(operator, 'Modulo only accepts two integers.')
        if op in COMPARISON_OPERATORS:
            self.check_number_operands(operator, a, b)
            x, y = float(a.data), float(b.data)
            if op == TokenType.GREATER:
                return Value.boolean(x > y)
            if op == TokenType.GREATER_EQUAL:
                return Value.boolean(x >= y)
            if op == TokenType.LESS:
                return Value.boolean(x < y)
            return Value.boolean(x <= y)
        if op == TokenType.PLUS:
            if a.is_number and b.is_number:
                return self.arithmetic(operator, a, b)
            if a.kind is Kind.STRING and b.kind is Kind.STRING:
                return Value.string(a.data + b.data)
            raise CfplRuntimeError(operator, 'Operands must be a number or a string.')
        if op in (TokenType.MINUS, TokenType.STAR, TokenType.SLASH):
            self.check_number_operands(operator, a, b)
            return self.arithmetic(operator, a, b)
        raise CfplRuntimeError(operator, f"Unknown operator '{operator.lexeme}'.")

    def arithmetic(self, operator: Token, a: Value, b: Value) -> Value:
        op = operator.type
        if a.kind is Kind.INTEGER and b.kind is Kind.INTEGER:
            if op == TokenType.PLUS:
                return Value.integer(a.data + b.data)
            if op == TokenType.MINUS:
                return Value.integer(a.data - b.data)
            if op == TokenType.STAR:
                return Value.integer(a.data * b.data)
            if b.data == 0:
                raise CfplRuntimeError(operator, 'Division by zero.')
            return Value.integer(truncate_divide(a.data, b.data))
        # mixed or float operands widen to Float
        x, y = float(a.data), float(b.data)
        if op == TokenType.PLUS:
            return Value.float_(x + y)
        if op == TokenType.MINUS:
            return Value.float_(x - y)
        if op == TokenType.STAR:
            return Value.float_(x * y)
        return Value.float_(float_divide(x, y))

    def check_number_operands(self, operator: Token, a: Value, b: Value) -> None:
        if a.is_number and b.is_number:
            return
        raise CfplRuntimeError(operator, 'Operand must be a number.')

    def equal_values(self, a: Value, b: Value) -> bool:
        # nil never equals anything, not even nil
        if a.kind is Kind.ABSENT:
            return False
        return a.kind is b.kind and a.data == b.data


def run_program(source: str, console: Optional[Console] = None,
                reporter: Optional[ErrorReporter] = None,
                debug_level: int = 0) -> Interpreter:
    """Convenience function to scan, parse and run a CFPL program.

    The program is not executed when scanning or parsing reported errors.
    Returns the interpreter so callers can inspect its reporter and globals.
    """
    if reporter is None:
        reporter = ErrorReporter()
    statements = parse_program(source, reporter)
    interpreter = Interpreter(console=console, reporter=reporter, debug_level=debug_level)
    if not reporter.had_error:
        interpreter.run(statements)
    return interpreter
