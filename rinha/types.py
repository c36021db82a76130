"""Runtime value model for the Rinha evaluator.

Integers, booleans and text are represented by the native Python types
`int`, `bool` and `str`. Because `bool` is a subclass of `int`, every
type test in this module checks for `bool` first. Tuples and closures
get their own classes below.

Helpers in this module raise plain Python `TypeError`/`ZeroDivisionError`
rather than Rinha errors; the interpreter catches those and attaches the
location of the term being evaluated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List

from .ast import Location, Node


INT_BITS = 64
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1


class Reason(str, Enum):
    """Tag identifying the kind of a runtime failure."""
    TYPE_MISMATCH = 'TypeMismatch'
    UNDEFINED_VARIABLE = 'UndefinedVariable'
    ARITY_MISMATCH = 'ArityMismatch'
    DIVISION_BY_ZERO = 'DivisionByZero'
    NOT_CALLABLE = 'NotCallable'
    NOT_A_TUPLE = 'NotATuple'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ErrorVal:
    """Represents a Rinha runtime failure.

    It carries the reason tag, a human readable message and the location
    of the term whose preconditions were violated.
    """
    reason: Reason
    message: str
    location: Location = Location()

    def __str__(self) -> str:
        return f"{self.reason}: {self.message} ({self.location})"


@dataclass(frozen=True)
class TupleVal:
    """A pair of values. Rinha tuples always have exactly two elements."""
    first: Any
    second: Any

    def __repr__(self) -> str:
        return f"Tuple({self.first!r}, {self.second!r})"


class Closure:
    """A function value.

    Holds the parameter names, a reference to the body term and the
    environment that was current when the function literal was evaluated.
    Calling a closure never mutates the captured environment. Two closures
    are only ever equal if they are the same object.
    """
    __slots__ = ('parameters', 'body', 'env')

    def __init__(self, parameters: List[str], body: Node, env: Any):
        self.parameters = tuple(parameters)
        self.body = body
        self.env = env

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def __repr__(self) -> str:
        return f"<closure ({', '.join(self.parameters)})>"


def wrap_int(value: int) -> int:
    """Reduce an integer to signed 64-bit two's complement."""
    value &= (1 << INT_BITS) - 1
    if value > INT_MAX:
        value -= 1 << INT_BITS
    return value


def int_div(a: int, b: int) -> int:
    """Integer division truncating toward zero.

    Raises ZeroDivisionError when `b` is zero. `INT_MIN / -1` wraps
    around to `INT_MIN`.
    """
    if b == 0:
        raise ZeroDivisionError('division by zero')
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return wrap_int(q)


def int_rem(a: int, b: int) -> int:
    """Remainder matching `int_div`: the result has the sign of `a`."""
    if b == 0:
        raise ZeroDivisionError('remainder by zero')
    r = abs(a) % abs(b)
    return wrap_int(-r if a < 0 else r)


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    """Return the Rinha type name of a runtime value."""
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, int):
        return 'Int'
    if isinstance(value, str):
        return 'Str'
    if isinstance(value, TupleVal):
        return 'Tuple'
    if isinstance(value, Closure):
        return 'Function'
    return type(value).__name__


def to_string(value: Any) -> str:
    """Convert a value to the text written by `print`."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, TupleVal):
        return f"({to_string(value.first)}, {to_string(value.second)})"
    if isinstance(value, Closure):
        return '<#closure>'
    raise TypeError(f"cannot display {type(value).__name__}")


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality between two values of the same type.

    Tuples compare element-wise, recursively. Raises TypeError when the
    operands have different types or when either side is a closure.
    """
    if isinstance(a, Closure) or isinstance(b, Closure):
        raise TypeError('functions cannot be compared')
    if type_name(a) != type_name(b):
        raise TypeError(f"cannot compare {type_name(a)} with {type_name(b)}")
    if isinstance(a, TupleVal):
        # Both components are checked so a type clash in the second
        # element is reported even when the first elements differ.
        first = values_equal(a.first, b.first)
        second = values_equal(a.second, b.second)
        return first and second
    return a == b
