from rinha.interpreter import load_program, Interpreter


def test_program_3_factorial(capsys, program_path):
    program = load_program(program_path('factorial.rinha'))
    interp = Interpreter()
    interp.run(program)
    out = capsys.readouterr().out.splitlines()
    assert out == ['3628800', '2432902008176640000']
