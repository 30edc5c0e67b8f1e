# CFPL language package
# This package provides a scanner, parser and tree-walking interpreter for CFPL.
from .errors import CfplRuntimeError, ErrorReporter
from .interpreter import parse_program, run_program, Interpreter
from .scanner import scan
from .parser import parse

__all__ = [
    'parse_program',
    'run_program',
    'Interpreter',
    'CfplRuntimeError',
    'ErrorReporter',
    'scan',
    'parse',
]
