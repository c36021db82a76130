"""Abstract Syntax Tree (AST) definitions for the Rinha language.

The classes in this module mirror the term kinds of the JSON AST format.
A program is a `File` whose `expression` is a single term; the whole
language is expression based, so `let` carries the term that follows it
in its `next` field. Every node records the `Location` of the source span
it came from, which is only used for error reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List


@dataclass(frozen=True)
class Location:
    start: int = 0
    end: int = 0
    filename: str = ''

    def __str__(self) -> str:
        return f"{self.filename or '<unknown>'}:{self.start}:{self.end}"


BINARY_OPS = (
    'Add', 'Sub', 'Mul', 'Div', 'Rem',
    'Eq', 'Neq', 'Lt', 'Gt', 'Lte', 'Gte',
    'And', 'Or',
)


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Parameter:
    """A binding name: a function parameter or the name of a `let`."""
    text: str
    location: Location = field(default_factory=Location)


@dataclass
class Int(Node):
    value: int
    location: Location = field(default_factory=Location)


@dataclass
class Bool(Node):
    value: bool
    location: Location = field(default_factory=Location)


@dataclass
class Str(Node):
    value: str
    location: Location = field(default_factory=Location)


@dataclass
class Var(Node):
    text: str
    location: Location = field(default_factory=Location)


@dataclass
class Function(Node):
    parameters: List[Parameter]
    value: Node  # body
    location: Location = field(default_factory=Location)


@dataclass
class Call(Node):
    callee: Node
    arguments: List[Node]
    location: Location = field(default_factory=Location)


@dataclass
class Binary(Node):
    lhs: Node
    op: str  # one of BINARY_OPS
    rhs: Node
    location: Location = field(default_factory=Location)


@dataclass
class If(Node):
    condition: Node
    then: Node
    otherwise: Node
    location: Location = field(default_factory=Location)


@dataclass
class Let(Node):
    name: Parameter
    value: Node
    next: Node
    location: Location = field(default_factory=Location)


@dataclass
class Tuple(Node):
    first: Node
    second: Node
    location: Location = field(default_factory=Location)


@dataclass
class First(Node):
    value: Node
    location: Location = field(default_factory=Location)


@dataclass
class Second(Node):
    value: Node
    location: Location = field(default_factory=Location)


@dataclass
class Print(Node):
    value: Node
    location: Location = field(default_factory=Location)


@dataclass
class File:
    """Root of a program: the source name and its single expression."""
    name: str
    expression: Any
    location: Location = field(default_factory=Location)
