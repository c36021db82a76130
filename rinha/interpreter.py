"""Evaluator for the Rinha language.

The interpreter walks the AST recursively. `evaluate` maps a term and an
environment to a value; every failure is raised as a `RinhaError` and is
never caught inside the evaluator, so the first violated precondition
aborts the whole program. The only side effect is `print`, which writes
one line per call to the output stream in evaluation order.
"""

from __future__ import annotations

import pathlib
import sys
from typing import Any, Callable, Dict, List, Optional, TextIO, Union

from .ast import (
    Node, File, Int, Bool, Str, Var, Function, Call, Binary,
    If, Let, Tuple, First, Second, Print,
)
from .ast_json import load_file
from .environment import Environment
from .errors import RinhaError
from .parser import parse_program
from .types import (
    Closure, ErrorVal, Reason, TupleVal,
    int_div, int_rem, is_int, to_string, type_name, values_equal, wrap_int,
)


ARITHMETIC: Dict[str, Callable[[int, int], int]] = {
    'Add': lambda a, b: wrap_int(a + b),
    'Sub': lambda a, b: wrap_int(a - b),
    'Mul': lambda a, b: wrap_int(a * b),
    'Div': int_div,
    'Rem': int_rem,
}

COMPARISON: Dict[str, Callable[[int, int], bool]] = {
    'Lt': lambda a, b: a < b,
    'Gt': lambda a, b: a > b,
    'Lte': lambda a, b: a <= b,
    'Gte': lambda a, b: a >= b,
}


def _fail(reason: Reason, message: str, node: Node) -> RinhaError:
    return RinhaError(ErrorVal(reason, message, node.location))


class Interpreter:
    """Core interpreter that evaluates Rinha terms."""
    def __init__(self, output: Optional[TextIO] = None, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.output = output
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[TextIO] = None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    # Public API
    def run(self, program: Union[File, Node], env: Optional[Environment] = None) -> Any:
        if env is None:
            env = Environment.empty()
        term = program.expression if isinstance(program, File) else program
        name = program.name if isinstance(program, File) else '<term>'
        if self.debug_level > 0:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        self.debug(f"run {name}")
        try:
            result = self.evaluate(term, env)
            self.debug(f"result {to_string(result)}")
            return result
        except RinhaError as e:
            self.debug(f"error {e.err}")
            raise
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def print_value(self, value: Any) -> None:
        out = self.output if self.output is not None else sys.stdout
        out.write(to_string(value) + '\n')
        out.flush()

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Int):
            return wrap_int(node.value)
        if isinstance(node, (Bool, Str)):
            return node.value
        if isinstance(node, Var):
            return env.lookup(node.text, node.location)
        if isinstance(node, Function):
            return Closure([p.text for p in node.parameters], node.value, env)
        if isinstance(node, Call):
            func = self.evaluate(node.callee, env)
            if not isinstance(func, Closure):
                raise _fail(Reason.NOT_CALLABLE, f'{type_name(func)} is not callable', node)
            args = [self.evaluate(arg, env) for arg in node.arguments]
            return self.call_function(func, args, node)
        if isinstance(node, Binary):
            lhs = self.evaluate(node.lhs, env)
            rhs = self.evaluate(node.rhs, env)
            return self.apply_binary_op(node.op, lhs, rhs, node)
        if isinstance(node, If):
            cond = self.evaluate(node.condition, env)
            if not isinstance(cond, bool):
                raise _fail(Reason.TYPE_MISMATCH, f'if condition must be Bool, got {type_name(cond)}', node.condition)
            if self.debug_level >= 3:
                self.debug(f"if condition -> {to_string(cond)}")
            return self.evaluate(node.then if cond else node.otherwise, env)
        if isinstance(node, Let):
            return self.evaluate(node.next, self.bind_let(node, env))
        if isinstance(node, Tuple):
            first = self.evaluate(node.first, env)
            second = self.evaluate(node.second, env)
            return TupleVal(first, second)
        if isinstance(node, (First, Second)):
            value = self.evaluate(node.value, env)
            if not isinstance(value, TupleVal):
                which = 'first' if isinstance(node, First) else 'second'
                raise _fail(Reason.NOT_A_TUPLE, f'{which} expects a Tuple, got {type_name(value)}', node)
            return value.first if isinstance(node, First) else value.second
        if isinstance(node, Print):
            value = self.evaluate(node.value, env)
            if self.debug_level >= 3:
                self.debug(f"print {to_string(value)}")
            self.print_value(value)
            return value
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def bind_let(self, node: Let, env: Environment) -> Environment:
        """Return the environment in which the body of a `let` runs.

        A function literal is evaluated inside a frame whose slot for the
        bound name is still pending, and the slot is filled with the new
        closure before anything can call it. That lets the function see
        itself by name without a reference cycle through a mutable map.
        """
        name = node.name.text
        if isinstance(node.value, Function) and name != '_':
            frame = env.bind_pending(name)
            value = self.evaluate(node.value, frame)
            frame.resolve(name, value)
        else:
            value = self.evaluate(node.value, env)
            # `let _ = ...` evaluates for effect only
            frame = env if name == '_' else env.bind(name, value)
        if self.debug_level >= 2:
            self.debug(f"let {name} = {to_string(value)}")
        return frame

    def call_function(self, func: Closure, args: List[Any], node: Node) -> Any:
        if len(args) != func.arity:
            raise _fail(
                Reason.ARITY_MISMATCH,
                f"function expects {func.arity} arguments, got {len(args)}",
                node,
            )
        if self.debug_level >= 2:
            self.debug(f"call ({', '.join(func.parameters)}) with {', '.join(to_string(a) for a in args)}")
        call_env = func.env.bind_all(zip(func.parameters, args))
        if self.debug_level >= 3:
            self.debug(f"scope {', '.join(call_env.names())}")
        return self.evaluate(func.body, call_env)

    def apply_binary_op(self, op: str, a: Any, b: Any, node: Node) -> Any:
        if op in ARITHMETIC:
            if op == 'Add' and isinstance(a, str) and isinstance(b, str):
                return a + b
            if not (is_int(a) and is_int(b)):
                raise _fail(Reason.TYPE_MISMATCH, f'unsupported {op} for {type_name(a)} and {type_name(b)}', node)
            try:
                return ARITHMETIC[op](a, b)
            except ZeroDivisionError as e:
                raise _fail(Reason.DIVISION_BY_ZERO, str(e), node)
        if op in COMPARISON:
            if not (is_int(a) and is_int(b)):
                raise _fail(Reason.TYPE_MISMATCH, f'{op} requires Int operands, got {type_name(a)} and {type_name(b)}', node)
            return COMPARISON[op](a, b)
        if op in ('Eq', 'Neq'):
            try:
                equal = values_equal(a, b)
            except TypeError as e:
                raise _fail(Reason.TYPE_MISMATCH, str(e), node)
            return equal if op == 'Eq' else not equal
        if op in ('And', 'Or'):
            if not (isinstance(a, bool) and isinstance(b, bool)):
                raise _fail(Reason.TYPE_MISMATCH, f'{op} requires Bool operands, got {type_name(a)} and {type_name(b)}', node)
            return (a and b) if op == 'And' else (a or b)
        raise NotImplementedError(f"unsupported binary operator {op}")


def run_program(source: str, filename: str = '<string>', output: Optional[TextIO] = None, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a Rinha program from source text."""
    program = parse_program(source, filename)
    interpreter = Interpreter(output=output, debug_level=debug_level)
    return interpreter.run(program)


def load_program(file_path: Union[str, pathlib.Path]) -> File:
    """Load a program from a `.json` AST file or from source text."""
    path = pathlib.Path(file_path)
    if path.suffix == '.json':
        return load_file(path)
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()
    return parse_program(source, path.name)


def run_file(file_path: Union[str, pathlib.Path], output: Optional[TextIO] = None, debug_level: int = 0) -> Any:
    """Load and run a Rinha file, returning the final value."""
    program = load_program(file_path)
    interpreter = Interpreter(output=output, debug_level=debug_level)
    return interpreter.run(program)
