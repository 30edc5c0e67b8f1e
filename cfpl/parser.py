"""Recursive-descent parser for the CFPL language.

The parser consumes the token stream produced by `cfpl.scanner` and
returns the program as a list of top-level statements. Statements are
terminated by `NEWLINE` tokens; the only construct using semicolons is
the header of a `FOR` loop.

Syntax errors never abort the parse. The offending token is reported
through the `ErrorReporter` and a `ParseError` unwinds to the nearest
declaration, which synchronizes on the next statement boundary and
yields nothing for the broken statement. A single source file can
therefore produce several independent syntax diagnostics.

Expression precedence, lowest first::

    assignment -> OR -> AND -> == != -> > >= < <= & -> + - -> * / % -> unary -> primary
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Expr, Literal, Grouping, Unary, Binary, Logical, Variable, Assign,
    Stmt, Expression, Print, Var, Block, Input, If, While,
)
from .errors import ErrorReporter, ParseError
from .tokens import DATA_TYPES, Token, TokenType
from .types import TRUE, FALSE


# Tokens that can begin a statement; synchronize() stops in front of them.
STATEMENT_KEYWORDS = frozenset({
    TokenType.VAR,
    TokenType.PRINT,
    TokenType.INPUT,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.FOR,
    TokenType.START,
})


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        self.tokens = tokens
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.current = 0

    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            declared = self.declaration()
            if declared is not None:
                statements.extend(declared)
        return statements

    # Declarations and statements
    def declaration(self) -> Optional[List[Stmt]]:
        """Parse one declaration; None means it was broken and skipped."""
        try:
            if self.match(TokenType.VAR):
                return self.var_declarations(TokenType.NEWLINE)
            return [self.statement()]
        except ParseError:
            self.synchronize()
            return None

    def var_declarations(self, terminator: TokenType) -> List[Stmt]:
        # VAR a, b = 1, c AS INT
        stmts = [self.var_item()]
        while self.match(TokenType.COMMA):
            stmts.append(self.var_item())
        self.consume(TokenType.AS, "Expect 'AS' after variable declaration.")
        data_type = self.data_type()
        for stmt in stmts:
            stmt.data_type = data_type
        if terminator == TokenType.SEMICOLON:
            self.consume(TokenType.SEMICOLON, "Expect ';' after loop variable declaration.")
        else:
            self.end_of_line('Expect line break after variable declaration.')
        return stmts

    def var_item(self) -> Var:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()
        return Var(name, initializer)

    def data_type(self) -> Token:
        if self.peek().type in DATA_TYPES:
            return self.advance()
        raise self.error(self.peek(), "Expect data type after 'AS'.")

    def statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.INPUT):
            return self.input_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.START):
            return Block(self.block())
        return self.expression_statement()

    def print_statement(self) -> Stmt:
        value = self.expression()
        self.end_of_line("Expect line break after 'OUTPUT:' expression.")
        return Print(value)

    def input_statement(self) -> Stmt:
        names = [self.consume(TokenType.IDENTIFIER, "Expect variable name after 'INPUT:'.")]
        while self.match(TokenType.COMMA):
            names.append(self.consume(TokenType.IDENTIFIER, "Expect variable name after ','."))
        self.end_of_line("Expect line break after 'INPUT:' variables.")
        return Input(names)

    def expression_statement(self) -> Stmt:
        expr = self.expression()
        self.end_of_line('Expect line break after expression.')
        return Expression(expr)

    def block(self) -> List[Stmt]:
        self.end_of_line("Expect line break after 'START'.")
        statements: List[Stmt] = []
        while not self.check(TokenType.STOP) and not self.is_at_end():
            declared = self.declaration()
            if declared is not None:
                statements.extend(declared)
        self.consume(TokenType.STOP, "Expect 'STOP' after block.")
        self.end_of_line("Expect line break after 'STOP'.")
        return statements

    def if_statement(self) -> Stmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'IF'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        self.consume(TokenType.NEWLINE, 'Expect line break after if condition.')
        then_branch = self.statement()
        else_branch: Optional[Stmt] = None
        if self.match(TokenType.ELSE):
            self.consume(TokenType.NEWLINE, "Expect line break after 'ELSE'.")
            else_branch = self.statement()
        return If(condition, then_branch, else_branch)

    def while_statement(self) -> Stmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'WHILE'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after while condition.")
        self.consume(TokenType.NEWLINE, 'Expect line break after while condition.')
        body = self.statement()
        return While(condition, body)

    def for_statement(self) -> Stmt:
        """Parse a FOR loop and rewrite it as a block and a while loop.

        ``FOR (init; cond; incr)`` becomes::

            Block([init, While(cond, Block([body, Expression(incr)]))])

        A missing condition loops forever; a missing initializer or
        increment is simply left out.
        """
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'FOR'.")
        initializer: List[Stmt]
        if self.match(TokenType.SEMICOLON):
            initializer = []
        elif self.match(TokenType.VAR):
            initializer = self.var_declarations(TokenType.SEMICOLON)
        else:
            init_expr = self.expression()
            self.consume(TokenType.SEMICOLON, "Expect ';' after loop initializer.")
            initializer = [Expression(init_expr)]

        condition: Optional[Expr] = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
            # FOR (...; i = i + 1;) is accepted as well
            self.match(TokenType.SEMICOLON)
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")
        self.consume(TokenType.NEWLINE, 'Expect line break after for clauses.')

        body = self.statement()
        if increment is not None:
            body = Block([body, Expression(increment)])
        if condition is None:
            condition = Literal(TRUE)
        body = While(condition, body)
        if initializer:
            body = Block(initializer + [body])
        return body

    # Expression parsing
    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # reported, but not worth synchronizing over
            self.error(equals, 'Invalid assignment target.')
        return expr

    def logic_or(self) -> Expr:
        expr = self.logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            right = self.logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def logic_and(self) -> Expr:
        expr = self.equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            right = self.equality()
            expr = Logical(expr, operator, right)
        return expr

    def equality(self) -> Expr:
        expr = self.comparison()
        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self.comparison()
            expr = Binary(expr, operator, right)
        return expr

    def comparison(self) -> Expr:
        expr = self.term()
        while self.match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                         TokenType.LESS, TokenType.LESS_EQUAL, TokenType.AMPERSAND):
            operator = self.previous()
            right = self.term()
            expr = Binary(expr, operator, right)
        return expr

    def term(self) -> Expr:
        expr = self.factor()
        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.factor()
            expr = Binary(expr, operator, right)
        return expr

    def factor(self) -> Expr:
        expr = self.unary()
        while self.match(TokenType.SLASH, TokenType.STAR, TokenType.MODULO):
            operator = self.previous()
            right = self.unary()
            expr = Binary(expr, operator, right)
        return expr

    def unary(self) -> Expr:
        if self.match(TokenType.NOT, TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)
        return self.primary()

    def primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(FALSE)
        if self.match(TokenType.TRUE):
            return Literal(TRUE)
        if self.match(TokenType.NUMBER, TokenType.STRING_LIT, TokenType.CHAR_LIT, TokenType.NEXT_LINE):
            return Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), 'Expect expression.')

    # Token helpers
    def consume(self, type_: TokenType, message: str) -> Token:
        if self.check(type_):
            return self.advance()
        raise self.error(self.peek(), message)

    def end_of_line(self, message: str) -> None:
        # the last line of a file may omit its line break
        if self.match(TokenType.NEWLINE) or self.is_at_end():
            return
        raise self.error(self.peek(), message)

    def match(self, *types: TokenType) -> bool:
        for type_ in types:
            if self.check(type_):
                self.advance()
                return True
        return False

    def check(self, type_: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == type_

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        return self.tokens[self.current]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def error(self, token: Token, message: str) -> ParseError:
        self.reporter.error(token, message)
        return ParseError(message)

    def synchronize(self) -> None:
        """Discard tokens up to the next statement boundary."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.NEWLINE:
                return
            if self.peek().type in STATEMENT_KEYWORDS:
                return
            self.advance()


def parse(tokens: List[Token], reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Parse a token stream into a list of top-level statements."""
    return Parser(tokens, reporter).parse()
