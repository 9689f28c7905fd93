"""CLI entry point for the Toys interpreter.

Usage:
    python -m toys [-v|-vv|-vvv|-vvvv] [--lines] [--print-result] <program_file>
    python -m toys [-v...] [--lines] --emit-ast <program_file>
    python -m toys [-v...] [--print-result] --ast <ast_json_file>

Options:
  -v                  Increase debug verbosity (can be repeated)
  --lines             Treat the file as a bare sequence of lines instead of
                      a program with a main function
  --print-result      Print the integer result of the run
  --recursion-limit   Host recursion limit while running (default 10000)
  --emit-ast          Parse the given file and emit an AST JSON file
  --ast               Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from .interpreter import parse_program, parse_lines, Interpreter, DEFAULT_RECURSION_LIMIT
from .ast_json import ast_to_obj, ast_from_obj
from .errors import ToysError, ParseError


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_source(source: str, lines: bool):
    try:
        return parse_lines(source) if lines else parse_program(source)
    except ParseError as e:
        print(f"Syntax error: {e.message}", file=sys.stderr)
        sys.exit(1)


def execute(ast, debug_level: int, print_result: bool,
            recursion_limit: int = DEFAULT_RECURSION_LIMIT) -> None:
    interpreter = Interpreter(debug_level=debug_level, recursion_limit=recursion_limit)
    try:
        if isinstance(ast, tuple):
            result = interpreter.interpret_lines(ast)
        else:
            result = interpreter.call_main(ast)
    except ToysError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    if print_result:
        print(result)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Toys language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--lines', action='store_true', help='read the file as a sequence of lines')
    parser.add_argument('--print-result', action='store_true', help='print the integer result')
    parser.add_argument('--recursion-limit', type=int, metavar='N', default=DEFAULT_RECURSION_LIMIT,
                        help='host recursion limit while running (default: %(default)s)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='TOYS_FILE', help='emit AST JSON for the given .toys file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Toys program file (.toys) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast = parse_source(read_source(program_file), args.lines)
        obj = ast_to_obj(ast)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        source = read_source(ast_path)
        try:
            ast = ast_from_obj(json.loads(source))
        except (TypeError, ValueError, KeyError) as e:
            print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        execute(ast, args.v, args.print_result, args.recursion_limit)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast')
    ast = parse_source(read_source(Path(args.program)), args.lines)
    execute(ast, args.v, args.print_result, args.recursion_limit)


if __name__ == '__main__':
    main()
