from kdnlang.interpreter import parse_program, Interpreter


def test_program_6(capsys, example_source):
    source = example_source('program_6.kdn')
    ast = parse_program(source)
    interp = Interpreter(source)
    interp.interpret(ast)
    # rows keep their trailing space
    out = capsys.readouterr().out.split('\n')
    assert out == ['1 2 3 ', '2 4 6 ', '3 6 9 ', 'total: 36', 'last row 3 last col 3', '']
