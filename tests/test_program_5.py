from kdnlang.interpreter import parse_program, Interpreter


def test_program_5(capsys, example_source):
    source = example_source('program_5.kdn')
    ast = parse_program(source)
    interp = Interpreter(source)
    interp.interpret(ast)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['5 is odd', '4 is even', '3 is odd', '2 is even', '1 is odd', 'liftoff']
    assert interp.environment.get('n') == 0
