from rinha.interpreter import load_program, Interpreter


def test_program_7_strings(capsys, program_path):
    program = load_program(program_path('strings.rinha'))
    interp = Interpreter()
    interp.run(program)
    out = capsys.readouterr().out.splitlines()
    assert out == ['Hello, World!', 'true', 'false']
