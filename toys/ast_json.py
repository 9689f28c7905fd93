"""JSON serialization/deserialization for Toys AST.

This module converts between Toys AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types, for `Program`, and for the bare line
sequences produced by `parse_lines`.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Program,
    FunctionDefinition,
    GlobalVariableDefinition,
    IntegerLiteral,
    Identifier,
    BinaryExpression,
    Assignment,
    BlockExpression,
    IfExpression,
    WhileExpression,
    FunctionCall,
    LabelledCall,
    Println,
    Operator,
)


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    # Line sequences
    if isinstance(node, (tuple, list)):
        return {"type": "Lines", "body": [ast_to_obj(n) for n in node]}

    if isinstance(node, Program):
        return {"type": "Program", "definitions": [ast_to_obj(d) for d in node.definitions]}
    if isinstance(node, FunctionDefinition):
        return {
            "type": "FunctionDefinition",
            "name": node.name,
            "params": list(node.params),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, GlobalVariableDefinition):
        return {
            "type": "GlobalVariableDefinition",
            "name": node.name,
            "initializer": ast_to_obj(node.initializer),
        }
    if isinstance(node, IntegerLiteral):
        return {"type": "IntegerLiteral", "value": node.value}
    if isinstance(node, Identifier):
        return {"type": "Identifier", "name": node.name}
    if isinstance(node, BinaryExpression):
        return {
            "type": "BinaryExpression",
            "operator": node.operator.value,
            "lhs": ast_to_obj(node.lhs),
            "rhs": ast_to_obj(node.rhs),
        }
    if isinstance(node, Assignment):
        return {"type": "Assignment", "name": node.name, "expr": ast_to_obj(node.expr)}
    if isinstance(node, BlockExpression):
        return {"type": "BlockExpression", "elements": [ast_to_obj(e) for e in node.elements]}
    if isinstance(node, IfExpression):
        return {
            "type": "IfExpression",
            "condition": ast_to_obj(node.condition),
            "then_clause": ast_to_obj(node.then_clause),
            "else_clause": ast_to_obj(node.else_clause),
        }
    if isinstance(node, WhileExpression):
        return {"type": "WhileExpression", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, FunctionCall):
        return {"type": "FunctionCall", "name": node.name, "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, LabelledCall):
        return {
            "type": "LabelledCall",
            "name": node.name,
            "args": [[label, ast_to_obj(value)] for (label, value) in node.args],
        }
    if isinstance(node, Println):
        return {"type": "Println", "body": ast_to_obj(node.body)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Dict[str, Any]) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Lines":
        return tuple(ast_from_obj(n) for n in obj["body"])
    if t == "Program":
        return Program(definitions=tuple(ast_from_obj(d) for d in obj["definitions"]))
    if t == "FunctionDefinition":
        return FunctionDefinition(
            name=obj["name"],
            params=tuple(obj["params"]),
            body=ast_from_obj(obj["body"]),
        )
    if t == "GlobalVariableDefinition":
        return GlobalVariableDefinition(name=obj["name"], initializer=ast_from_obj(obj["initializer"]))
    if t == "IntegerLiteral":
        return IntegerLiteral(value=obj["value"])
    if t == "Identifier":
        return Identifier(name=obj["name"])
    if t == "BinaryExpression":
        return BinaryExpression(
            operator=Operator(obj["operator"]),
            lhs=ast_from_obj(obj["lhs"]),
            rhs=ast_from_obj(obj["rhs"]),
        )
    if t == "Assignment":
        return Assignment(name=obj["name"], expr=ast_from_obj(obj["expr"]))
    if t == "BlockExpression":
        return BlockExpression(elements=tuple(ast_from_obj(e) for e in obj["elements"]))
    if t == "IfExpression":
        return IfExpression(
            condition=ast_from_obj(obj["condition"]),
            then_clause=ast_from_obj(obj["then_clause"]),
            else_clause=ast_from_obj(obj.get("else_clause")),
        )
    if t == "WhileExpression":
        return WhileExpression(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "FunctionCall":
        return FunctionCall(name=obj["name"], args=tuple(ast_from_obj(a) for a in obj["args"]))
    if t == "LabelledCall":
        return LabelledCall(
            name=obj["name"],
            args=tuple((label, ast_from_obj(value)) for (label, value) in obj["args"]),
        )
    if t == "Println":
        return Println(body=ast_from_obj(obj["body"]))

    raise ValueError(f"Unknown AST node type: {t}")
