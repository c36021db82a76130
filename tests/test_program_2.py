from rinha.interpreter import load_program, Interpreter


def test_program_2_fibonacci(capsys, program_path):
    program = load_program(program_path('fib.rinha'))
    interp = Interpreter()
    result = interp.run(program)
    out = capsys.readouterr().out.strip()
    assert out == '55'
    assert result == 55
