import sys
from dataclasses import dataclass, field
from typing import List, Optional, Union

from cfpl.tokens import Token, TokenType


class CfplRuntimeError(Exception):
    """Exception type used to halt a CFPL program on a runtime fault."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class ParseError(Exception):
    """Internal signal telling the parser to synchronize."""
    pass


@dataclass
class Diagnostic:
    line: int
    where: str
    message: str
    runtime: bool = False

    def __str__(self) -> str:
        if self.runtime:
            return f"{self.message}\n[line {self.line}]"
        return f"[line {self.line}] Error{self.where}: {self.message}"


@dataclass
class ErrorReporter:
    """Collects diagnostics from every stage and echoes them to stderr."""
    echo: bool = True
    diagnostics: List[Diagnostic] = field(default_factory=list)
    had_error: bool = False
    had_runtime_error: bool = False

    def error(self, location: Union[int, Token], message: str) -> None:
        if isinstance(location, Token):
            if location.type == TokenType.EOF:
                self.report(location.line, ' at end', message)
            else:
                self.report(location.line, f" at '{location.lexeme}'", message)
        else:
            self.report(location, '', message)

    def report(self, line: int, where: str, message: str) -> None:
        self._emit(Diagnostic(line, where, message))
        self.had_error = True

    def runtime_error(self, error: CfplRuntimeError) -> None:
        self._emit(Diagnostic(error.token.line, '', error.message, runtime=True))
        self.had_runtime_error = True

    def messages(self) -> List[str]:
        return [d.message for d in self.diagnostics]

    def last(self) -> Optional[Diagnostic]:
        return self.diagnostics[-1] if self.diagnostics else None

    def _emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self.echo:
            print(str(diagnostic), file=sys.stderr)
