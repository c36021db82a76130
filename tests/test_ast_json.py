import json

import pytest

from rinha.ast import Binary, File, Function, Int, Let, Location, Print, Var
from rinha.ast_json import ast_from_obj, ast_to_obj, load_file
from rinha.parser import parse_program


def loc(start=0, end=0):
    return {"start": start, "end": end, "filename": "t.rinha"}


def test_load_file_root(program_path):
    program = load_file(program_path('sum.json'))
    assert isinstance(program, File)
    assert program.name == 'sum.rinha'
    outer = program.expression
    assert isinstance(outer, Let)
    assert outer.name.text == 'x'
    assert outer.value == Int(10, Location(8, 10, 'sum.rinha'))
    body = outer.next.next
    assert isinstance(body, Print)
    assert isinstance(body.value, Binary)
    assert body.value.op == 'Add'


def test_bare_term():
    term = ast_from_obj({
        "kind": "Function",
        "parameters": [{"text": "n", "location": loc(4, 5)}],
        "value": {"kind": "Var", "text": "n", "location": loc(10, 11)},
        "location": loc(0, 12),
    })
    assert isinstance(term, Function)
    assert [p.text for p in term.parameters] == ['n']
    assert term.value == Var('n', Location(10, 11, 't.rinha'))


def test_missing_location_defaults():
    assert ast_from_obj({"kind": "Int", "value": 3}) == Int(3)


def test_emitted_json_matches_input_shape(program_path):
    with open(program_path('sum.json'), encoding='utf-8') as f:
        data = json.load(f)
    assert ast_to_obj(ast_from_obj(data)) == data


def test_parsed_program_survives_serialization():
    program = parse_program('let f = fn (a, b) => { (a, b) }; print(first(f(1, "x")))', 'p.rinha')
    obj = json.loads(json.dumps(ast_to_obj(program)))
    assert ast_from_obj(obj) == program


@pytest.mark.parametrize('obj, message', [
    ({"kind": "Loop", "location": loc()}, 'Unknown AST node type'),
    ({"kind": "Binary", "op": "Pow", "lhs": {"kind": "Int", "value": 1}, "rhs": {"kind": "Int", "value": 2}},
     'Unknown binary operator'),
    ({"kind": "Print"}, 'missing field'),
    ({"kind": "Int", "value": "1"}, 'Int literal'),
    ({"kind": "Bool", "value": 1}, 'Bool literal'),
    ({"kind": "Error", "message": "Unexpected token", "full_text": "at 3"}, 'syntax error'),
    ({"kind": "Call", "callee": {"kind": "Var", "text": "f"}, "arguments": 5}, 'must be a list'),
    ({"kind": "Function", "parameters": {"text": "n"}, "value": {"kind": "Int", "value": 1}}, 'must be a list'),
    ({"kind": "Var", "text": 3}, 'Var name'),
    ({"kind": "Int", "value": 1, "location": {"start": "0", "end": 1}}, 'Invalid location'),
])
def test_invalid_ast(obj, message):
    with pytest.raises(ValueError, match=message):
        ast_from_obj(obj)


def test_non_object_rejected():
    with pytest.raises(ValueError):
        ast_from_obj([1, 2])
