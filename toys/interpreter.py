"""Interpreter for the Toys language.

This module holds the tree-walking evaluator and the program driver.
A program is run in two phases: LOAD walks the top-level declarations in
source order, registering functions and evaluating globals into the root
frame; RUN evaluates the body of `main` directly in the root frame.

Calls follow a non-standard binding protocol that existing Toys programs
rely on: arguments are evaluated in the caller's frame and the formal
parameters are then written into that same caller frame before a child
frame is created for the callee body. Parameter bindings therefore remain
visible to the caller after the call returns, and nested calls see every
ancestor's bindings through the parent chain.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, TextIO

from .ast import (
    Expression, IntegerLiteral, Identifier, BinaryExpression, Assignment,
    BlockExpression, IfExpression, WhileExpression, FunctionCall,
    LabelledCall, Println, FunctionDefinition, GlobalVariableDefinition,
    Program, Operator,
)
from .environment import Environment
from .errors import (
    ToysError, ArityError, MissingMainError, StackExhaustionError,
    UnknownLabelError,
)
from .function_table import FunctionTable
from .parser import parse_program, parse_lines
from .types import wrap_int32, truncating_div, is_truthy, to_string


class Phase(Enum):
    READY = 'ready'
    LOADED = 'loaded'
    RAN = 'ran'


DEFAULT_RECURSION_LIMIT = 10000


@contextmanager
def stack_guard(limit: int = DEFAULT_RECURSION_LIMIT) -> Iterator[None]:
    """Run with at least `limit` host frames; report overflow as a Toys error.

    A Toys call costs several Python frames, so the interpreter default is
    well above Python's own. The previous limit is restored on exit.
    """
    saved = sys.getrecursionlimit()
    if limit > saved:
        sys.setrecursionlimit(limit)
    try:
        yield
    except RecursionError:
        raise StackExhaustionError('maximum recursion depth exceeded') from None
    finally:
        sys.setrecursionlimit(saved)


class Interpreter:
    """Core interpreter that evaluates Toys ASTs."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 out: Optional[TextIO] = None,
                 recursion_limit: int = DEFAULT_RECURSION_LIMIT):
        self.global_env = Environment()
        self.functions = FunctionTable()
        self.phase = Phase.READY
        self.result: Optional[int] = None
        # None means "whatever sys.stdout is when println runs"
        self.out = out
        self.recursion_limit = recursion_limit
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0 and self.debug_fp and not self.debug_fp.closed:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()

    # Program driver
    def call_main(self, program: Program) -> int:
        """Load `program` and run its `main` function."""
        try:
            self.load(program)
            return self.run()
        finally:
            self.close()

    def load(self, program: Program) -> None:
        if self.phase is not Phase.READY:
            raise ToysError(f'cannot load a program in phase {self.phase.value}')
        self.debug(f"LOAD {len(program.definitions)} definitions")
        with stack_guard(self.recursion_limit):
            for definition in program.definitions:
                if isinstance(definition, FunctionDefinition):
                    self.functions.register(definition)
                    if self.debug_level >= 2:
                        self.debug(f"define function {definition.name}({', '.join(definition.params)})")
                elif isinstance(definition, GlobalVariableDefinition):
                    value = self.evaluate(definition.initializer, self.global_env)
                    self.global_env.set(definition.name, value)
                    if self.debug_level >= 2:
                        self.debug(f"global {definition.name} = {value}")
                else:
                    raise NotImplementedError(f"load: unexpected node type {type(definition)}")
        self.functions.freeze()
        self.phase = Phase.LOADED

    def run(self) -> int:
        if self.phase is not Phase.LOADED:
            raise ToysError(f'cannot run in phase {self.phase.value}')
        if 'main' not in self.functions:
            raise MissingMainError("program doesn't have a main function")
        main = self.functions.get('main')
        self.debug("RUN main")
        try:
            with stack_guard(self.recursion_limit):
                # main shares the root frame; it is not entered through a call
                self.result = self.evaluate(main.body, self.global_env)
        finally:
            self.phase = Phase.RAN
        self.debug(f"main -> {self.result}")
        return self.result

    def interpret(self, expression: Expression) -> int:
        """Evaluate one expression against the root frame."""
        with stack_guard(self.recursion_limit):
            return self.evaluate(expression, self.global_env)

    def interpret_lines(self, expressions: Iterable[Expression]) -> int:
        """Line mode: evaluate expressions in order in one shared frame."""
        self.debug("RUN lines")
        value = 0
        try:
            for expression in expressions:
                value = self.interpret(expression)
        finally:
            self.close()
        self.result = value
        return value

    # Evaluation
    def evaluate(self, node: Expression, env: Environment) -> int:
        """Compute the value of `node` in `env`.

        Host recursion overflow surfaces here as a raw `RecursionError`; only
        the driver entry points (`load`, `run`, `interpret`) convert it to
        `StackExhaustionError`.
        """
        if isinstance(node, IntegerLiteral):
            return node.value
        if isinstance(node, Identifier):
            return env.get(node.name)
        if isinstance(node, BinaryExpression):
            lhs = self.evaluate(node.lhs, env)
            rhs = self.evaluate(node.rhs, env)
            result = self.apply_binary_op(node.operator, lhs, rhs)
            if self.debug_level >= 3:
                self.debug(f"{lhs} {node.operator.value} {rhs} -> {result}")
            return result
        if isinstance(node, Assignment):
            value = self.evaluate(node.expr, env)
            env.set(node.name, value)
            if self.debug_level >= 4:
                self.debug(f"assign {node.name} = {value} at depth {env.depth}")
            return value
        if isinstance(node, BlockExpression):
            value = 0
            for element in node.elements:
                value = self.evaluate(element, env)
            return value
        if isinstance(node, IfExpression):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {cond} -> {truthy}")
            if truthy:
                return self.evaluate(node.then_clause, env)
            if node.else_clause is not None:
                return self.evaluate(node.else_clause, env)
            return 1
        if isinstance(node, WhileExpression):
            while True:
                cond = self.evaluate(node.condition, env)
                if self.debug_level >= 3:
                    self.debug(f"while condition {cond}")
                if not is_truthy(cond):
                    break
                self.evaluate(node.body, env)
            return 1
        if isinstance(node, FunctionCall):
            definition = self.functions.get(node.name)
            values = [self.evaluate(arg, env) for arg in node.args]
            if len(values) < len(definition.params):
                raise ArityError(
                    f"{node.name} expects {len(definition.params)} arguments, got {len(values)}")
            return self.call_function(definition, values, env)
        if isinstance(node, LabelledCall):
            definition = self.functions.get(node.name)
            # every labelled argument runs left to right; binding follows the formals
            labelled = {}
            for label, expr in node.args:
                value = self.evaluate(expr, env)
                labelled.setdefault(label, value)
            values = []
            for param in definition.params:
                if param not in labelled:
                    raise UnknownLabelError(f"call to {node.name} has no argument labelled {param}")
                values.append(labelled[param])
            return self.call_function(definition, values, env)
        if isinstance(node, Println):
            value = self.evaluate(node.body, env)
            print(to_string(value), file=self.out, flush=True)
            return 0
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def call_function(self, definition: FunctionDefinition, values: Sequence[int],
                      env: Environment) -> int:
        # Parameters land in the caller's frame, not in the callee's.
        for param, value in zip(definition.params, values):
            env.set(param, value)
            if self.debug_level >= 4:
                self.debug(f"bind {param} = {value} at depth {env.depth}")
        if self.debug_level >= 2:
            self.debug(f"call {definition.name}({', '.join(str(v) for v in values)})")
        result = self.evaluate(definition.body, env.new_child())
        if self.debug_level >= 2:
            self.debug(f"return {definition.name} -> {result}")
        return result

    def apply_binary_op(self, op: Operator, a: int, b: int) -> int:
        if op is Operator.ADD:
            return wrap_int32(a + b)
        if op is Operator.SUB:
            return wrap_int32(a - b)
        if op is Operator.MUL:
            return wrap_int32(a * b)
        if op is Operator.DIV:
            return truncating_div(a, b)
        if op is Operator.LT:
            return 1 if a < b else 0
        if op is Operator.LE:
            return 1 if a <= b else 0
        if op is Operator.GT:
            return 1 if a > b else 0
        if op is Operator.GE:
            return 1 if a >= b else 0
        if op is Operator.EQ:
            return 1 if a == b else 0
        if op is Operator.NE:
            return 1 if a != b else 0
        raise NotImplementedError(f"unknown operator {op}")


def run_program(source: str, debug_level: int = 0) -> int:
    """Convenience function to parse and run a Toys program from source string."""
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.call_main(program)


def run_lines(source: str, debug_level: int = 0) -> int:
    """Parse `source` as a bare sequence of lines and evaluate them in order."""
    lines: List[Expression] = list(parse_lines(source))
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.interpret_lines(lines)


def compile_module(file_path: str, debug_level: int = 0) -> Interpreter:
    """Parse and run a Toys file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    interpreter.call_main(program)
    return interpreter
