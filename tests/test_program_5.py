from rinha.interpreter import load_program, Interpreter
from rinha.types import TupleVal


def test_program_5_tuples(capsys, program_path):
    program = load_program(program_path('tuples.rinha'))
    interp = Interpreter()
    result = interp.run(program)
    out = capsys.readouterr().out.splitlines()
    assert out == ['(1, (two, true))', '1', '(2, 1)']
    assert result == TupleVal(2, 1)
