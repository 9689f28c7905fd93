"""Parser for the Toys language.

Source text is parsed by a Lark LALR parser configured with the grammar
below, and the resulting parse tree is transformed into the AST node
types of `toys.ast` by `ASTTransformer`.

Two entry points share one grammar:

* `parse_program` reads a sequence of top-level declarations
  (`define` and `global`).
* `parse_lines` reads a bare sequence of lines, as used by line mode.

The only structural rewriting done here is operator precedence grouping
and the `for` loop, which becomes an assignment followed by a `while`
loop that increments the loop variable after the body.
"""

from __future__ import annotations

from typing import Tuple

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput, VisitError

from .ast import (
    Program, FunctionDefinition, GlobalVariableDefinition, Expression,
    IntegerLiteral, Identifier, BinaryExpression, Assignment,
    BlockExpression, IfExpression, WhileExpression, FunctionCall,
    LabelledCall, Println, Operator,
)
from .errors import ParseError


TOYS_GRAMMAR = r"""
    program: top_level*
    lines: line*

    ?top_level: function_definition
              | global_definition

    function_definition: "define" IDENT "(" [param_list] ")" block
    param_list: IDENT ("," IDENT)*
    global_definition: "global" IDENT "=" expression ";"

    ?line: if_expression
         | while_expression
         | for_expression
         | block
         | assignment
         | expression_line

    block: "{" line* "}"
    if_expression: "if" "(" expression ")" block ["else" (block | if_expression)]
    while_expression: "while" "(" expression ")" block
    for_expression: "for" "(" IDENT "in" expression "to" expression ")" block
    assignment: IDENT "=" expression ";"
    ?expression_line: expression ";"

    // Comparison does not chain: a < b < c is a syntax error.
    ?expression: comparative
    ?comparative: additive (COMPARE_OP additive)?
    ?additive: multitive (ADD_OP multitive)*
    ?multitive: primary (MUL_OP primary)*

    ?primary: "(" expression ")"
            | integer
            | println
            | function_call
            | labelled_call
            | identifier

    integer: INTEGER
    identifier: IDENT
    println: "println" "(" expression ")"
    function_call: IDENT "(" [arg_list] ")"
    arg_list: expression ("," expression)*
    labelled_call: IDENT "[" [labelled_arg ("," labelled_arg)*] "]"
    labelled_arg: IDENT "=" expression

    COMPARE_OP: "<=" | ">=" | "==" | "!=" | "<" | ">"
    ADD_OP: "+" | "-"
    MUL_OP: "*" | "/"
    INTEGER: /-?[0-9]+/

    %import common.CNAME -> IDENT
    %import common.WS
    %ignore WS

    LINE_COMMENT: /\/\/[^\n]*/
    %ignore LINE_COMMENT
"""


TOYS_PARSER = Lark(
    TOYS_GRAMMAR,
    start=['program', 'lines'],
    parser='lalr',
    lexer='contextual',
    propagate_positions=True,
    maybe_placeholders=False,
)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def program(self, items):
        return Program(definitions=tuple(items))

    def lines(self, items):
        return tuple(items)

    def function_definition(self, items):
        name = str(items[0])
        if len(items) == 3:
            params = items[1]
            body = items[2]
        else:
            params = ()
            body = items[1]
        return FunctionDefinition(name=name, params=params, body=body)

    def param_list(self, items):
        return tuple(str(item) for item in items)

    @v_args(inline=True)
    def global_definition(self, name, initializer):
        return GlobalVariableDefinition(name=str(name), initializer=initializer)

    def block(self, items):
        return BlockExpression(elements=tuple(items))

    def if_expression(self, items):
        condition = items[0]
        then_clause = items[1]
        else_clause = items[2] if len(items) > 2 else None
        return IfExpression(condition, then_clause, else_clause)

    @v_args(inline=True)
    def while_expression(self, condition, body):
        return WhileExpression(condition, body)

    @v_args(inline=True)
    def for_expression(self, name, start, end, body):
        # for (v in a to b) body  =>  v = a; while (v <= b) { body; v = v + 1; }
        var = str(name)
        step = Assignment(var, BinaryExpression(Operator.ADD, Identifier(var), IntegerLiteral(1)))
        loop = WhileExpression(
            BinaryExpression(Operator.LE, Identifier(var), end),
            BlockExpression((body, step)),
        )
        return BlockExpression((Assignment(var, start), loop))

    @v_args(inline=True)
    def assignment(self, name, expr):
        return Assignment(str(name), expr)

    # Expressions
    def binary_expr(self, items):
        # items pattern: expr (op expr)*, folded left-associatively
        left = items[0]
        i = 1
        while i < len(items):
            operator = Operator(str(items[i]))
            right = items[i + 1]
            left = BinaryExpression(operator, left, right)
            i += 2
        return left

    def comparative(self, items):
        return self.binary_expr(items)

    def additive(self, items):
        return self.binary_expr(items)

    def multitive(self, items):
        return self.binary_expr(items)

    @v_args(inline=True)
    def integer(self, token):
        try:
            return IntegerLiteral(int(token))
        except ValueError as e:
            raise ParseError(f"{e} at {token.line}:{token.column}")

    @v_args(inline=True)
    def identifier(self, token):
        return Identifier(str(token))

    @v_args(inline=True)
    def println(self, body):
        return Println(body)

    def function_call(self, items):
        name = str(items[0])
        args = items[1] if len(items) > 1 else ()
        return FunctionCall(name, args)

    def arg_list(self, items):
        return tuple(items)

    def labelled_call(self, items):
        name = str(items[0])
        return LabelledCall(name, tuple(items[1:]))

    @v_args(inline=True)
    def labelled_arg(self, label, value) -> Tuple[str, Expression]:
        return (str(label), value)


def _transform(tree):
    try:
        return ASTTransformer().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from None
        raise


def _parse(source: str, start: str):
    try:
        tree = TOYS_PARSER.parse(source, start=start)
    except UnexpectedInput as e:
        raise ParseError(f"unexpected input at {e.line}:{e.column}") from e
    return _transform(tree)


def parse_program(source: str) -> Program:
    """Parse Toys source code into a Program AST.

    Any syntax errors are raised as `ParseError`.
    """
    return _parse(source, 'program')


def parse_lines(source: str) -> Tuple[Expression, ...]:
    """Parse a bare sequence of lines into a tuple of expressions."""
    return _parse(source, 'lines')
