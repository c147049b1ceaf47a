from kdnlang.interpreter import parse_program, Interpreter


def test_program_4(capsys, example_source):
    source = example_source('program_4.kdn')
    ast = parse_program(source)
    interp = Interpreter(source)
    interp.interpret(ast)
    out = capsys.readouterr().out.strip()
    assert out == 'n=5'
