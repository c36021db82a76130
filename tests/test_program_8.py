import pytest

from rinha.errors import RinhaError
from rinha.interpreter import load_program, Interpreter
from rinha.types import Reason


def test_program_8_division_by_zero_keeps_earlier_output(capsys, program_path):
    program = load_program(program_path('division_error.rinha'))
    interp = Interpreter()
    with pytest.raises(RinhaError) as excinfo:
        interp.run(program)
    out = capsys.readouterr().out.splitlines()
    assert out == ['before']
    assert excinfo.value.reason is Reason.DIVISION_BY_ZERO
    assert excinfo.value.location.filename == 'division_error.rinha'
