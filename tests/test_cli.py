import json

import pytest

from rinha.__main__ import main


def test_runs_source_file(capsys, program_path):
    main([str(program_path('fib.rinha'))])
    assert capsys.readouterr().out == '55\n'


def test_runs_json_ast(capsys, program_path):
    main([str(program_path('sum.json'))])
    assert capsys.readouterr().out == '30\n'


def test_ast_flag(capsys, program_path):
    main(['--ast', str(program_path('sum.json'))])
    assert capsys.readouterr().out == '30\n'


def test_runtime_error_exits_nonzero(capsys, program_path):
    with pytest.raises(SystemExit) as excinfo:
        main([str(program_path('division_error.rinha'))])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'before\n'
    assert captured.err.startswith('Runtime error: DivisionByZero')
    assert 'division_error.rinha' in captured.err


def test_undefined_variable_reports_location(capsys, program_path):
    with pytest.raises(SystemExit):
        main([str(program_path('undefined.json'))])
    err = capsys.readouterr().err
    assert 'UndefinedVariable' in err
    assert 'undefined.rinha:6:13' in err


def test_missing_file(capsys, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.rinha')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_parse_error(capsys, tmp_path):
    source = tmp_path / 'bad.rinha'
    source.write_text('let = 1')
    with pytest.raises(SystemExit) as excinfo:
        main([str(source)])
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith('Parse error')


def test_invalid_json(capsys, tmp_path):
    ast_file = tmp_path / 'bad.json'
    ast_file.write_text('{"kind": "Nope"}')
    with pytest.raises(SystemExit):
        main([str(ast_file)])
    assert capsys.readouterr().err.startswith('Invalid AST')


def test_emit_ast(capsys, tmp_path):
    source = tmp_path / 'prog.rinha'
    source.write_text('let x = 2; print(x * 21)')
    main(['--emit-ast', str(source)])
    out_path = tmp_path / 'prog.rinha.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    data = json.loads(out_path.read_text())
    assert data['name'] == 'prog.rinha'
    assert data['expression']['kind'] == 'Let'
    main([str(out_path)])
    assert capsys.readouterr().out == '42\n'


def test_verbose_writes_debug_file(capsys, tmp_path, monkeypatch, program_path):
    monkeypatch.chdir(tmp_path)
    main(['-vv', str(program_path('sum.rinha'))])
    assert capsys.readouterr().out == '30\n'
    trace = (tmp_path / 'debug.txt').read_text().splitlines()
    assert trace[0] == 'run sum.rinha'
    assert 'let x = 10' in trace


@pytest.mark.parametrize('ast', [
    {"kind": "Call", "callee": {"kind": "Var", "text": "f"}, "arguments": 5},
    {"kind": "Function", "parameters": "n", "value": {"kind": "Int", "value": 1}},
    {"kind": "Var", "text": 3},
])
def test_malformed_ast_fields(capsys, tmp_path, ast):
    ast_file = tmp_path / 'bad.json'
    ast_file.write_text(json.dumps(ast))
    with pytest.raises(SystemExit) as excinfo:
        main([str(ast_file)])
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith('Invalid AST')
