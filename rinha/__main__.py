"""CLI entry point for the Rinha interpreter.

Usage:
    python -m rinha [-v|-vv|-vvv] [--recursion-limit N] <program_file>
    python -m rinha [-v...] --emit-ast <source_file>
    python -m rinha [-v...] --ast <ast_json_file>

Options:
  -v                 Increase debug verbosity (can be repeated)
  --emit-ast         Parse the given source file and emit an AST JSON file
  --ast              Execute a JSON AST file regardless of its extension
  --recursion-limit  Python recursion limit used while evaluating

A program file ending in `.json` is read as a JSON AST, anything else is
parsed as source text. Debug information is written to `debug.txt` in the
current directory when verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, load_file
from .errors import ParseError, RinhaError
from .interpreter import Interpreter, load_program
from .parser import parse_program


def main(argv: list = None) -> None:
    parser = argparse.ArgumentParser(prog='rinha', description="Rinha language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--recursion-limit', type=int, default=20000, metavar='N',
                        help='Python recursion limit for deeply recursive programs')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='SOURCE_FILE', help='emit AST JSON for the given source file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='program file (.json AST or source) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        if not program_file.exists():
            print(f"Error: file {program_file} not found", file=sys.stderr)
            sys.exit(1)
        with open(program_file, 'r', encoding='utf-8') as f:
            source = f.read()
        try:
            program = parse_program(source, program_file.name)
        except ParseError as e:
            print(f"Parse error: {e}", file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    if args.ast:
        program_file = Path(args.ast)
    elif args.program:
        program_file = Path(args.program)
    else:
        parser.error('missing program file; or use --emit-ast/--ast')
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)

    try:
        program = load_file(program_file) if args.ast else load_program(program_file)
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError too
        print(f"Invalid AST: {e}", file=sys.stderr)
        sys.exit(1)

    sys.setrecursionlimit(max(args.recursion_limit, sys.getrecursionlimit()))
    interpreter = Interpreter(debug_level=args.v)
    try:
        interpreter.run(program)
    except RinhaError as e:
        sys.stdout.flush()
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    except RecursionError:
        sys.stdout.flush()
        print("Runtime error: stack overflow", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
