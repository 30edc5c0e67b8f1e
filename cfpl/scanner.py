"""Scanner for the CFPL language.

The scanner walks the raw source once and produces the token stream the
parser consumes. It never raises for malformed input: every lexical
problem is reported through the `ErrorReporter` and scanning carries on,
so a single run can surface several lexical diagnostics. The token list
always ends with an `EOF` token.

Newlines are significant in CFPL (they terminate statements), but a
`NEWLINE` token is only emitted when the previous token is something
other than a newline. Blank lines, comment-only lines and leading
newlines therefore never produce empty statements.
"""

from __future__ import annotations

from typing import List, Optional

from .errors import ErrorReporter
from .tokens import KEYWORDS, Token, TokenType
from .types import Value, parse_int32


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    '%': TokenType.MODULO,
    '&': TokenType.AMPERSAND,
}


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def is_alnum(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Scanner:
    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self) -> List[Token]:
        while not self.is_at_end():
            # beginning of the next lexeme
            self.start = self.current
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, '', None, self.line))
        return self.tokens

    def scan_token(self) -> None:
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
        elif c == '-':
            self.add_token(TokenType.DECREMENT if self.match('-') else TokenType.MINUS)
        elif c == '+':
            self.add_token(TokenType.INCREMENT if self.match('+') else TokenType.PLUS)
        elif c == '*':
            if self.star_starts_comment():
                self.skip_line()
            else:
                self.add_token(TokenType.STAR)
        elif c == '!':
            self.add_token(TokenType.BANG_EQUAL if self.match('=') else TokenType.BANG)
        elif c == '=':
            self.add_token(TokenType.EQUAL_EQUAL if self.match('=') else TokenType.EQUAL)
        elif c == '<':
            if self.match('='):
                self.add_token(TokenType.LESS_EQUAL)
            elif self.match('>'):
                self.add_token(TokenType.BANG_EQUAL)
            else:
                self.add_token(TokenType.LESS)
        elif c == '>':
            self.add_token(TokenType.GREATER_EQUAL if self.match('=') else TokenType.GREATER)
        elif c == '/':
            if self.match('/'):
                self.skip_line()
            else:
                self.add_token(TokenType.SLASH)
        elif c in ' \r\t':
            pass
        elif c == '\n':
            if self.tokens and self.tokens[-1].type != TokenType.NEWLINE:
                self.add_token(TokenType.NEWLINE)
            self.line += 1
        elif c == '"':
            if self.peek() == '[':
                self.escape_code()
            else:
                self.string()
        elif c == '#':
            self.add_token(TokenType.NEXT_LINE, Value.character('\n'))
        elif c == '\'':
            self.character()
        elif is_digit(c):
            self.number()
        elif is_alpha(c):
            self.identifier()
        else:
            self.reporter.error(self.line, 'Unexpected character.')

    # Character helpers
    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def add_token(self, type_: TokenType, literal: Optional[Value] = None) -> None:
        text = self.source[self.start:self.current]
        self.tokens.append(Token(type_, text, literal, self.line))

    def skip_line(self) -> None:
        while self.peek() != '\n' and not self.is_at_end():
            self.advance()

    def star_starts_comment(self) -> bool:
        """Decide whether the `*` just consumed opens a line comment.

        Walk backward from the character before the `*`, skipping anything
        that is neither alphanumeric nor a newline. Landing on an
        alphanumeric character means an operand precedes the star, so it
        is multiplication. Landing on a newline or running off the start
        of the source makes it a comment marker.
        """
        i = self.current - 2
        while i >= 0 and not is_alnum(self.source[i]) and self.source[i] != '\n':
            i -= 1
        return i < 0 or not is_alnum(self.source[i])

    # Literal scanners
    def string(self) -> None:
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            self.reporter.error(self.line, 'Unterminated string.')
            return
        self.advance()  # closing quote
        value = self.source[self.start + 1:self.current - 1]
        # "TRUE", "FALSE" and "#" are spelled as strings in CFPL programs
        if value == 'TRUE':
            self.add_token(TokenType.TRUE)
        elif value == 'FALSE':
            self.add_token(TokenType.FALSE)
        elif value == '#':
            self.add_token(TokenType.NEXT_LINE, Value.character('\n'))
        else:
            self.add_token(TokenType.STRING_LIT, Value.string(value))

    def escape_code(self) -> None:
        while self.peek() != ']' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        # "[]]" escapes the closing bracket itself
        if self.peek_next() == ']':
            self.advance()
        if self.is_at_end():
            self.reporter.error(self.line, 'Unterminated escape code.')
            return
        self.advance()  # ']'
        value = self.source[self.start + 2:self.current - 1]
        if self.peek() == '"':
            self.advance()
        else:
            self.reporter.error(self.line, 'Expected \'"\' after escape code.')
        if len(value) != 1:
            self.reporter.error(self.line, f"{value} is not a character")
        self.add_token(TokenType.STRING_LIT, Value.string(value))

    def character(self) -> None:
        while self.peek() != '\'' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            self.reporter.error(self.line, 'Unterminated character.')
            return
        self.advance()  # closing quote
        value = self.source[self.start + 1:self.current - 1]
        if len(value) != 1:
            self.reporter.error(self.line, f"{value} is not a character")
        self.add_token(TokenType.CHAR_LIT, Value.character(value[0] if value else '\0'))

    def number(self) -> None:
        while is_digit(self.peek()):
            self.advance()
        if self.peek() == '.' and is_digit(self.peek_next()):
            self.advance()  # '.'
            while is_digit(self.peek()):
                self.advance()
        text = self.source[self.start:self.current]
        if '.' in text:
            self.add_token(TokenType.NUMBER, Value.float_(float(text)))
        else:
            try:
                self.add_token(TokenType.NUMBER, Value.integer(parse_int32(text)))
            except ValueError as error:
                self.reporter.error(self.line, str(error))
                # keeps the parser going
                self.add_token(TokenType.NUMBER, Value.integer(0))

    def identifier(self) -> None:
        while is_alnum(self.peek()):
            self.advance()
        # OUTPUT: and INPUT: carry their colon
        if self.peek() == ':':
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))


def scan(source: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    """Tokenize CFPL source text, reporting lexical errors to `reporter`."""
    return Scanner(source, reporter).scan_tokens()
