"""Syntax tree for stencil programs and a plain-text tree dump."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, List, Optional, TextIO

__all__ = [
    "NodeType",
    "OpType",
    "Node",
    "Program",
    "Number",
    "Identifier",
    "BinaryOp",
    "UnaryOp",
    "Assignment",
    "VarDec",
    "Block",
    "If",
    "FuncDec",
    "FuncCall",
    "Stencil",
    "Apply",
    "Paint",
    "Return",
    "Coordinate",
    "NodeList",
    "LocationDirective",
    "SizeDirective",
    "format_ast",
    "print_ast",
]

_INDENT = "  "


class NodeType(Enum):
    """Kind of a syntax tree node."""

    PROGRAM = auto()
    NUMBER = auto()
    IDENTIFIER = auto()
    BINARY_OP = auto()
    UNARY_OP = auto()
    ASSIGNMENT = auto()
    VAR_DEC = auto()
    BLOCK = auto()
    IF = auto()
    FUNC_DEC = auto()
    FUNC_CALL = auto()
    STENCIL = auto()
    APPLY = auto()
    PAINT = auto()
    RETURN = auto()
    COORDINATE = auto()
    STATEMENT_LIST = auto()
    EXPRESSION_LIST = auto()
    PARAMETER_LIST = auto()
    DIRECTIVE_LIST = auto()
    LOCATION_DIRECTIVE = auto()
    SIZE_DIRECTIVE = auto()


LIST_TYPES = frozenset(
    {
        NodeType.STATEMENT_LIST,
        NodeType.EXPRESSION_LIST,
        NodeType.PARAMETER_LIST,
        NodeType.DIRECTIVE_LIST,
    }
)


class OpType(Enum):
    """Unary and binary operators."""

    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIVIDE = "/"
    EQUALS = "=="
    GREATER = ">"
    LESS = "<"
    AND = "&&"
    OR = "||"
    NOT = "!"

    def symbol(self) -> str:
        """The operator as written in source."""
        return self.value


def _write(node: Optional["Node"], indent: int, parts: List[str]) -> None:
    if node is None:
        return
    parts.append(_INDENT * indent)
    node._format(indent, parts)


def _label(indent: int, text: str, parts: List[str]) -> None:
    parts.append(f"{_INDENT * indent}{text}\n")


class Node(ABC):
    """Base of all syntax tree nodes."""

    NODE_TYPE: ClassVar[NodeType]

    @property
    def node_type(self) -> NodeType:
        return type(self).NODE_TYPE

    @abstractmethod
    def _format(self, indent: int, parts: List[str]) -> None:
        """Append this node's dump; the leading indent is already written."""


@dataclass
class Program(Node):
    body: Optional[Node] = None

    NODE_TYPE: ClassVar[NodeType] = NodeType.PROGRAM

    def _format(self, indent, parts):
        parts.append("Program\n")
        _write(self.body, indent + 1, parts)


@dataclass
class Number(Node):
    value: int

    NODE_TYPE: ClassVar[NodeType] = NodeType.NUMBER

    def _format(self, indent, parts):
        parts.append(f"Number: {self.value}\n")


@dataclass
class Identifier(Node):
    name: str

    NODE_TYPE: ClassVar[NodeType] = NodeType.IDENTIFIER

    def _format(self, indent, parts):
        parts.append(f"Identifier: {self.name}\n")


@dataclass
class BinaryOp(Node):
    op: OpType
    left: Optional[Node]
    right: Optional[Node]

    NODE_TYPE: ClassVar[NodeType] = NodeType.BINARY_OP

    def _format(self, indent, parts):
        parts.append(f"BinaryOp: {self.op.symbol()}\n")
        _write(self.left, indent + 1, parts)
        _write(self.right, indent + 1, parts)


@dataclass
class UnaryOp(Node):
    op: OpType
    operand: Optional[Node]

    NODE_TYPE: ClassVar[NodeType] = NodeType.UNARY_OP

    def _format(self, indent, parts):
        parts.append(f"UnaryOp: {self.op.symbol()}\n")
        _write(self.operand, indent + 1, parts)


@dataclass
class Assignment(Node):
    name: str
    value: Optional[Node]

    NODE_TYPE: ClassVar[NodeType] = NodeType.ASSIGNMENT

    def _format(self, indent, parts):
        parts.append(f"Assignment: {self.name}\n")
        _write(self.value, indent + 1, parts)


@dataclass
class VarDec(Node):
    name: str
    value: Optional[Node] = None

    NODE_TYPE: ClassVar[NodeType] = NodeType.VAR_DEC

    def _format(self, indent, parts):
        parts.append(f"VarDeclaration: {self.name}\n")
        _write(self.value, indent + 1, parts)


@dataclass
class Block(Node):
    statements: Optional[Node] = None

    NODE_TYPE: ClassVar[NodeType] = NodeType.BLOCK

    def _format(self, indent, parts):
        parts.append("Block\n")
        _write(self.statements, indent + 1, parts)


@dataclass
class If(Node):
    condition: Optional[Node]
    then_stmt: Optional[Node]
    else_stmt: Optional[Node] = None

    NODE_TYPE: ClassVar[NodeType] = NodeType.IF

    def _format(self, indent, parts):
        parts.append("If\n")
        _label(indent + 1, "Condition:", parts)
        _write(self.condition, indent + 2, parts)
        _label(indent + 1, "Then:", parts)
        _write(self.then_stmt, indent + 2, parts)
        if self.else_stmt is not None:
            _label(indent + 1, "Else:", parts)
            _write(self.else_stmt, indent + 2, parts)


@dataclass
class FuncDec(Node):
    name: str
    params: Optional[Node]
    body: Optional[Node]

    NODE_TYPE: ClassVar[NodeType] = NodeType.FUNC_DEC

    def _format(self, indent, parts):
        parts.append(f"FunctionDeclaration: {self.name}\n")
        if self.params is not None:
            _label(indent + 1, "Parameters:", parts)
            _write(self.params, indent + 2, parts)
        _label(indent + 1, "Body:", parts)
        _write(self.body, indent + 2, parts)


@dataclass
class FuncCall(Node):
    name: str
    args: Optional[Node] = None

    NODE_TYPE: ClassVar[NodeType] = NodeType.FUNC_CALL

    def _format(self, indent, parts):
        parts.append(f"FunctionCall: {self.name}\n")
        _write(self.args, indent + 1, parts)


@dataclass
class Stencil(Node):
    name: str
    body: Optional[Node]

    NODE_TYPE: ClassVar[NodeType] = NodeType.STENCIL

    def _format(self, indent, parts):
        parts.append(f"Stencil: {self.name}\n")
        _write(self.body, indent + 1, parts)


@dataclass
class Apply(Node):
    name: str
    directives: Optional[Node] = None

    NODE_TYPE: ClassVar[NodeType] = NodeType.APPLY

    def _format(self, indent, parts):
        parts.append(f"Apply: {self.name}\n")
        _write(self.directives, indent + 1, parts)


@dataclass
class Paint(Node):
    value: Optional[Node]

    NODE_TYPE: ClassVar[NodeType] = NodeType.PAINT

    def _format(self, indent, parts):
        parts.append("Paint\n")
        _write(self.value, indent + 1, parts)


@dataclass
class Return(Node):
    value: Optional[Node]

    NODE_TYPE: ClassVar[NodeType] = NodeType.RETURN

    def _format(self, indent, parts):
        parts.append("Return\n")
        _write(self.value, indent + 1, parts)


@dataclass
class Coordinate(Node):
    x: Optional[Node]
    y: Optional[Node]

    NODE_TYPE: ClassVar[NodeType] = NodeType.COORDINATE

    def _format(self, indent, parts):
        parts.append("Coordinate\n")
        _write(self.x, indent + 1, parts)
        _write(self.y, indent + 1, parts)


@dataclass
class NodeList(Node):
    """A cons cell: ``head`` is an item, ``tail`` the rest of the list or a last item."""

    head: Optional[Node]
    tail: Optional[Node] = None
    kind: NodeType = NodeType.STATEMENT_LIST

    def __post_init__(self) -> None:
        if self.kind not in LIST_TYPES:
            raise ValueError(f"{self.kind.name} is not a list node type")

    @property
    def node_type(self) -> NodeType:
        return self.kind

    def _format(self, indent, parts):
        _write(self.head, indent, parts)
        _write(self.tail, indent, parts)


@dataclass
class LocationDirective(Node):
    coordinate: Optional[Node]

    NODE_TYPE: ClassVar[NodeType] = NodeType.LOCATION_DIRECTIVE

    def _format(self, indent, parts):
        parts.append("LocationDirective\n")
        _write(self.coordinate, indent + 1, parts)


@dataclass
class SizeDirective(Node):
    size: Optional[Node]

    NODE_TYPE: ClassVar[NodeType] = NodeType.SIZE_DIRECTIVE

    def _format(self, indent, parts):
        parts.append("SizeDirective\n")
        _write(self.size, indent + 1, parts)


def format_ast(node: Optional[Node], indent: int = 0) -> str:
    """Return an indented, one-node-per-line dump of the tree."""
    parts: List[str] = []
    _write(node, indent, parts)
    return "".join(parts)


def print_ast(node: Optional[Node], indent: int = 0, file: Optional[TextIO] = None) -> None:
    """Write the tree dump to ``file`` (standard output by default)."""
    (file if file is not None else sys.stdout).write(format_ast(node, indent))