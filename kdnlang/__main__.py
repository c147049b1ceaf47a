"""CLI entry point for the KdnLang interpreter.

Usage:
    python -m kdnlang [-v|-vv|-vvv] <program_file>
    python -m kdnlang --tokens <program_file>
    python -m kdnlang [-v...] --emit-ast <program_file>
    python -m kdnlang [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Print the token stream of the given program, one per line
  --emit-ast    Parse the given program and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Errors are reported on stderr with the
offending source line and the process exits with status 1.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .diagnostics import render
from .errors import KdnLangError
from .interpreter import Interpreter
from .lexer import tokenize
from .parser import parse_program


def read_source(path: Path) -> Optional[str]:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        return None
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def load_ast(path: Path) -> Optional[Program]:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            program = ast_from_obj(json.load(f))
    except (ValueError, KeyError, TypeError) as e:
        print(f"Error: invalid AST file {path}: {e}", file=sys.stderr)
        return None
    if not isinstance(program, Program):
        print(f"Error: invalid AST file {path}: expected a Program node", file=sys.stderr)
        return None
    return program


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(prog='kdnlang', description="KdnLang language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='KDN_FILE', help='print the token stream for the given file')
    group.add_argument('--emit-ast', metavar='KDN_FILE', help='emit AST JSON for the given .kdn file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='KdnLang program file (.kdn) to execute')
    args = parser.parse_args(argv)

    path = None
    try:
        # Token dump mode
        if args.tokens:
            path = Path(args.tokens)
            source = read_source(path)
            if source is None:
                return 1
            for token in tokenize(source):
                print(repr(token))
            return 0

        # Emit AST mode
        if args.emit_ast:
            path = Path(args.emit_ast)
            source = read_source(path)
            if source is None:
                return 1
            obj = ast_to_obj(parse_program(source))
            out_path = path.with_name(path.name + '.ast.json')
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(obj, out, ensure_ascii=False, indent=2)
            print(str(out_path))
            return 0

        # Execute from AST JSON
        if args.ast:
            program = load_ast(Path(args.ast))
            if program is None:
                return 1
            Interpreter(debug_level=args.v).interpret(program)
            return 0

        # Default: execute source file
        if not args.program:
            parser.error('missing program file; or use --tokens/--emit-ast/--ast')
        path = Path(args.program)
        source = read_source(path)
        if source is None:
            return 1
        program = parse_program(source)
        Interpreter(source, debug_level=args.v).interpret(program)
        return 0
    except KdnLangError as e:
        print(render(e, str(path) if path else None), file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
