"""Abstract Syntax Tree (AST) definitions for the Toys language.

Every node is a frozen dataclass: once the parser (or a builder below)
has produced a tree, nothing mutates it. Expressions evaluate to a
32-bit integer; top-level nodes are function definitions and global
variable definitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .types import check_int32


class Operator(str, Enum):
    """Binary operators, valued by their surface symbol."""
    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'
    LT = '<'
    LE = '<='
    GT = '>'
    GE = '>='
    EQ = '=='
    NE = '!='


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Expression(Node):
    pass


@dataclass(frozen=True)
class TopLevel(Node):
    pass


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __post_init__(self):
        check_int32(self.value)


@dataclass(frozen=True)
class Identifier(Expression):
    name: str


@dataclass(frozen=True)
class BinaryExpression(Expression):
    operator: Operator
    lhs: Expression
    rhs: Expression


@dataclass(frozen=True)
class Assignment(Expression):
    name: str
    expr: Expression


@dataclass(frozen=True)
class BlockExpression(Expression):
    elements: Tuple[Expression, ...]


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    then_clause: Expression
    else_clause: Optional[Expression] = None


@dataclass(frozen=True)
class WhileExpression(Expression):
    condition: Expression
    body: Expression


@dataclass(frozen=True)
class FunctionCall(Expression):
    name: str
    args: Tuple[Expression, ...]


@dataclass(frozen=True)
class LabelledCall(Expression):
    name: str
    args: Tuple[Tuple[str, Expression], ...]  # (label, value) pairs


@dataclass(frozen=True)
class Println(Expression):
    body: Expression


@dataclass(frozen=True)
class FunctionDefinition(TopLevel):
    name: str
    params: Tuple[str, ...]
    body: Expression


@dataclass(frozen=True)
class GlobalVariableDefinition(TopLevel):
    name: str
    initializer: Expression


@dataclass(frozen=True)
class Program(Node):
    definitions: Tuple[TopLevel, ...]


# Builders. Tests and embedders use these to assemble trees without going
# through the parser; sequences may be passed as lists.

def integer(value: int) -> IntegerLiteral:
    return IntegerLiteral(value)


def symbol(name: str) -> Identifier:
    return Identifier(name)


def binary(op: str, lhs: Expression, rhs: Expression) -> BinaryExpression:
    return BinaryExpression(Operator(op), lhs, rhs)


def add(lhs: Expression, rhs: Expression) -> BinaryExpression:
    return BinaryExpression(Operator.ADD, lhs, rhs)


def subtract(lhs: Expression, rhs: Expression) -> BinaryExpression:
    return BinaryExpression(Operator.SUB, lhs, rhs)


def multiply(lhs: Expression, rhs: Expression) -> BinaryExpression:
    return BinaryExpression(Operator.MUL, lhs, rhs)


def divide(lhs: Expression, rhs: Expression) -> BinaryExpression:
    return BinaryExpression(Operator.DIV, lhs, rhs)


def assign(name: str, expr: Expression) -> Assignment:
    return Assignment(name, expr)


def block(*elements: Expression) -> BlockExpression:
    return BlockExpression(tuple(elements))


def if_expr(condition: Expression, then_clause: Expression,
            else_clause: Optional[Expression] = None) -> IfExpression:
    return IfExpression(condition, then_clause, else_clause)


def while_expr(condition: Expression, body: Expression) -> WhileExpression:
    return WhileExpression(condition, body)


def call(name: str, *args: Expression) -> FunctionCall:
    return FunctionCall(name, tuple(args))


def labelled_call(name: str, **args: Expression) -> LabelledCall:
    return LabelledCall(name, tuple(args.items()))


def println(body: Expression) -> Println:
    return Println(body)


def define_function(name: str, params, body: Expression) -> FunctionDefinition:
    return FunctionDefinition(name, tuple(params), body)


def define_global(name: str, initializer: Expression) -> GlobalVariableDefinition:
    return GlobalVariableDefinition(name, initializer)


def program(*definitions: TopLevel) -> Program:
    return Program(tuple(definitions))
