"""CLI entry point for the CFPL interpreter.

Usage:
    python -m cfpl [-v|-vv|-vvv] <program_file>
    python -m cfpl [-v...] --emit-ast <program_file>
    python -m cfpl [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .cfpl file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Exit status is 65 when the program has
syntax or lexical errors, 70 when it stopped on a runtime error and 1
when the input file is missing.
"""

import argparse
import json
import sys
from pathlib import Path
from .ast_json import program_to_obj, program_from_obj
from .errors import ErrorReporter
from .interpreter import parse_program, Interpreter

EXIT_DATAERR = 65
EXIT_SOFTWARE = 70


def read_file(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="CFPL language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='CFPL_FILE', help='emit AST JSON for the given .cfpl file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='CFPL program file (.cfpl) to execute')
    args = parser.parse_args(argv)
    reporter = ErrorReporter()

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        statements = parse_program(read_file(program_file), reporter)
        if reporter.had_error:
            sys.exit(EXIT_DATAERR)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        statements = program_from_obj(json.loads(read_file(ast_path)))
    else:
        if not args.program:
            parser.error('missing program file; or use --emit-ast/--ast')
        statements = parse_program(read_file(Path(args.program)), reporter)
        if reporter.had_error:
            sys.exit(EXIT_DATAERR)

    interpreter = Interpreter(reporter=reporter, debug_level=args.v)
    if not interpreter.run(statements):
        sys.exit(EXIT_SOFTWARE)


if __name__ == '__main__':
    main()
