"""Parser for the Rinha surface syntax.

Source text is fed into a Lark LALR parser configured with the grammar
below, and the resulting parse tree is transformed into the same AST the
JSON loader produces. Every node receives a `Location` spanning the
characters it was parsed from, so runtime errors point back into the
source file.

The `parse_program` function is the public entry point and returns a
`File` whose expression is the whole program.
"""

from __future__ import annotations

import ast as py_ast
from typing import List

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedInput

from .ast import (
    Location, Parameter, File, Int, Bool, Str, Var, Function, Call, Binary,
    If, Let, Tuple, First, Second, Print,
)
from .errors import ParseError


RINHA_GRAMMAR = r"""
    ?start: term ";"?

    ?term: let_expr
         | if_expr
         | fn_expr
         | logic_or

    let_expr: "let" NAME "=" term ";" term
    if_expr: "if" "(" term ")" block "else" block
    fn_expr: "fn" "(" [param_list] ")" "=>"? block
    param_list: NAME ("," NAME)*
    ?block: "{" term "}"

    // Binary operators, loosest first
    ?logic_or: logic_and (OR_OP logic_and)*
    ?logic_and: equality (AND_OP equality)*
    ?equality: compare (EQ_OP compare)*
    ?compare: sum (CMP_OP sum)*
    ?sum: product ((PLUS | MINUS) product)*
    ?product: postfix (MUL_OP postfix)*

    ?postfix: primary
            | call
    call: postfix "(" [arg_list] ")"
    arg_list: term ("," term)*

    ?primary: INT                        -> int_lit
            | MINUS INT                  -> neg_int_lit
            | ESCAPED_STRING             -> str_lit
            | "true"                     -> true_lit
            | "false"                    -> false_lit
            | NAME                       -> var
            | "print" "(" term ")"       -> print_expr
            | "first" "(" term ")"       -> first_expr
            | "second" "(" term ")"      -> second_expr
            | "(" term "," term ")"      -> tuple_expr
            | "(" term ")"

    OR_OP: "||"
    AND_OP: "&&"
    EQ_OP: "==" | "!="
    CMP_OP: "<=" | ">=" | "<" | ">"
    PLUS: "+"
    MINUS: "-"
    MUL_OP: "*" | "/" | "%"

    %import common.CNAME -> NAME
    %import common.INT
    %import common.ESCAPED_STRING
    %import common.WS
    %ignore WS

    // Comments
    LINE_COMMENT: /\/\/[^\n]*/
    %ignore LINE_COMMENT
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//
    %ignore BLOCK_COMMENT
"""


RINHA_PARSER = Lark(
    RINHA_GRAMMAR,
    parser='lalr',
    propagate_positions=True,
    maybe_placeholders=False,
    lexer='contextual',
)


OPERATORS = {
    '||': 'Or',
    '&&': 'And',
    '==': 'Eq',
    '!=': 'Neq',
    '<': 'Lt',
    '>': 'Gt',
    '<=': 'Lte',
    '>=': 'Gte',
    '+': 'Add',
    '-': 'Sub',
    '*': 'Mul',
    '/': 'Div',
    '%': 'Rem',
}


@v_args(meta=True)
class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def __init__(self, filename: str = '', source: str = ''):
        super().__init__()
        self.filename = filename
        # lark positions count characters, locations count UTF-8 bytes
        self.source = None if source.isascii() else source

    def _offset(self, pos: int) -> int:
        if self.source is None:
            return pos
        return len(self.source[:pos].encode('utf-8'))

    def _loc(self, meta) -> Location:
        if getattr(meta, 'empty', True):
            return Location(filename=self.filename)
        return Location(self._offset(meta.start_pos), self._offset(meta.end_pos), self.filename)

    def _token_loc(self, token: Token) -> Location:
        return Location(self._offset(token.start_pos), self._offset(token.end_pos), self.filename)

    def _param(self, token: Token) -> Parameter:
        return Parameter(str(token), self._token_loc(token))

    def _chain(self, items):
        # items pattern: expr (op expr)*, folded left-associatively
        left = items[0]
        i = 1
        while i < len(items):
            op = OPERATORS[str(items[i])]
            right = items[i + 1]
            loc = Location(left.location.start, right.location.end, self.filename)
            left = Binary(lhs=left, op=op, rhs=right, location=loc)
            i += 2
        return left

    def logic_or(self, meta, items):
        return self._chain(items)

    def logic_and(self, meta, items):
        return self._chain(items)

    def equality(self, meta, items):
        return self._chain(items)

    def compare(self, meta, items):
        return self._chain(items)

    def sum(self, meta, items):
        return self._chain(items)

    def product(self, meta, items):
        return self._chain(items)

    def let_expr(self, meta, items):
        name, value, next_term = items
        return Let(name=self._param(name), value=value, next=next_term, location=self._loc(meta))

    def if_expr(self, meta, items):
        condition, then, otherwise = items
        return If(condition=condition, then=then, otherwise=otherwise, location=self._loc(meta))

    def fn_expr(self, meta, items):
        params: List[Parameter] = items[0] if len(items) > 1 else []
        return Function(parameters=params, value=items[-1], location=self._loc(meta))

    def param_list(self, meta, items):
        return [self._param(t) for t in items]

    def call(self, meta, items):
        callee = items[0]
        args = items[1] if len(items) > 1 else []
        return Call(callee=callee, arguments=args, location=self._loc(meta))

    def arg_list(self, meta, items):
        return list(items)

    def int_lit(self, meta, items):
        return Int(int(items[0]), self._loc(meta))

    def neg_int_lit(self, meta, items):
        return Int(-int(items[1]), self._loc(meta))

    def str_lit(self, meta, items):
        # ESCAPED_STRING keeps its quotes; literal_eval unescapes it
        return Str(py_ast.literal_eval(str(items[0])), self._loc(meta))

    def true_lit(self, meta, items):
        return Bool(True, self._loc(meta))

    def false_lit(self, meta, items):
        return Bool(False, self._loc(meta))

    def var(self, meta, items):
        return Var(str(items[0]), self._loc(meta))

    def print_expr(self, meta, items):
        return Print(items[0], self._loc(meta))

    def first_expr(self, meta, items):
        return First(items[0], self._loc(meta))

    def second_expr(self, meta, items):
        return Second(items[0], self._loc(meta))

    def tuple_expr(self, meta, items):
        return Tuple(items[0], items[1], self._loc(meta))


def parse_program(source: str, filename: str = '<string>') -> File:
    """Parse Rinha source code into a `File`.

    Syntax errors are raised as `ParseError` carrying the line and column
    of the offending input.
    """
    try:
        tree = RINHA_PARSER.parse(source)
    except UnexpectedInput as e:
        # the end-of-input error reports line -1
        line = max(getattr(e, 'line', 0) or 0, 0)
        column = max(getattr(e, 'column', 0) or 0, 0)
        raise ParseError(f"syntax error in {filename}", line, column) from None
    expression = ASTTransformer(filename, source).transform(tree)
    return File(name=filename, expression=expression, location=Location(0, len(source.encode('utf-8')), filename))
