"""
Defines the abstract syntax tree (AST) node structure for the gopherlang programming language.

The grammar's node kinds form a closed set, so each kind is its own frozen
dataclass and the two families are plain unions:

    Statement:
        LetStatement, ReturnStatement, ExpressionStatement, BlockStatement

    Expression:
        Identifier, IntegerLiteral, StringLiteral, BooleanLiteral,
        PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
        CallExpression

    Program:
        The root node, an ordered list of top-level statements.

A parenthesised expression has no node of its own; it collapses to the
expression it wraps.

Each node tracks:
    line (int): Source line of the node's main token (the operator for infix
        expressions, the `(` for calls, otherwise the first token).
    col (int): Source column of the same token.

Positions are informational and do not take part in equality, so two trees
compare equal exactly when they have the same shape and values.

Usage:
    str(node) renders the canonical, fully parenthesised source form, and
    node.to_dict() produces a plain dictionary suitable for JSON output or
    debugging.

Example:
    >>> str(InfixExpression("+", Identifier("a"), IntegerLiteral(1)))
    '(a + 1)'
"""

from collections.abc import Sequence
from dataclasses import dataclass, field, fields
from typing import Any, Union

ASTDict = dict[str, Any]


def _serialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class Node:
    """Base class shared by every statement and expression node."""

    line: int = field(default=0, compare=False, kw_only=True)
    col: int = field(default=0, compare=False, kw_only=True)

    def to_dict(self) -> ASTDict:
        """Converts the node (and all descendants) into a nested dictionary.

        The dictionary always has `kind`, `line` and `col` keys, followed by one
        key per node field.
        """
        out: ASTDict = {"kind": type(self).__name__, "line": self.line, "col": self.col}
        for f in fields(self):
            if f.name in ("line", "col"):
                continue
            out[f.name] = _serialize(getattr(self, f.name))
        return out


# Expressions


@dataclass(frozen=True)
class Identifier(Node):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class IntegerLiteral(Node):
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class PrefixExpression(Node):
    """A unary operator applied to one operand, e.g. `-x` or `!ok`."""

    operator: str
    operand: "Expression"

    def __str__(self) -> str:
        return f"({self.operator}{self.operand})"


@dataclass(frozen=True)
class InfixExpression(Node):
    """A binary operator between two operands, e.g. `a + b`."""

    operator: str
    left: "Expression"
    right: "Expression"

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Node):
    condition: "Expression"
    consequence: "BlockStatement"
    alternative: "BlockStatement | None" = None

    def __str__(self) -> str:
        # Infix and prefix forms already render inside parentheses
        cond = str(self.condition)
        if not isinstance(self.condition, (InfixExpression, PrefixExpression)):
            cond = f"({cond})"
        out = f"if {cond} {self.consequence}"
        if self.alternative is not None:
            out += f" else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Node):
    parameters: tuple[Identifier, ...]
    body: "BlockStatement"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Node):
    """Application of `function` (an identifier or function literal) to arguments."""

    function: "Expression"
    arguments: tuple["Expression", ...]

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


# Statements


@dataclass(frozen=True)
class LetStatement(Node):
    name: Identifier
    value: "Expression"

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement(Node):
    value: "Expression"

    def __str__(self) -> str:
        return f"return {self.value};"


@dataclass(frozen=True)
class ExpressionStatement(Node):
    value: "Expression"

    def __str__(self) -> str:
        return str(self.value)


def join_statements(statements: Sequence["Statement"]) -> str:
    """Renders a statement sequence so that it parses back into the same statements.

    An expression statement followed by another statement gets a `;`, otherwise
    `a; -b` would render as `a (-b)` and read back as a call.
    """
    parts: list[str] = []
    for i, stmt in enumerate(statements):
        text = str(stmt)
        if isinstance(stmt, ExpressionStatement) and i < len(statements) - 1:
            text += ";"
        parts.append(text)
    return " ".join(parts)


@dataclass(frozen=True)
class BlockStatement(Node):
    statements: tuple["Statement", ...] = ()

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + join_statements(self.statements) + " }"


Expression = Union[
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
]

Statement = Union[LetStatement, ReturnStatement, ExpressionStatement, BlockStatement]


@dataclass
class Program:
    """
    Root of the AST: the program's top-level statements in source order.

    The parser appends to `statements` while it runs and hands the finished
    Program to the caller; nothing else holds a reference to it afterwards.
    """

    statements: list[Statement] = field(default_factory=list)

    def __str__(self) -> str:
        return join_statements(self.statements)

    def to_dict(self) -> ASTDict:
        return {
            "kind": "Program",
            "statements": [s.to_dict() for s in self.statements],
        }


__all__ = [
    "ASTDict",
    "BlockStatement",
    "BooleanLiteral",
    "CallExpression",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "Identifier",
    "IfExpression",
    "InfixExpression",
    "IntegerLiteral",
    "LetStatement",
    "Node",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
    "StringLiteral",
]
