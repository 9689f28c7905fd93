# Toys language package
# This package provides a parser and a tree-walking interpreter for the Toys language.
from .interpreter import run_program, run_lines, compile_module, Interpreter
from .parser import parse_program, parse_lines
from .errors import ToysError

__all__ = [
    'run_program',
    'run_lines',
    'compile_module',
    'Interpreter',
    'parse_program',
    'parse_lines',
    'ToysError',
]
