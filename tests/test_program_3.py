import pytest

from kdnlang.errors import InterpreterError
from kdnlang.interpreter import parse_program, Interpreter


def test_program_3(capsys, example_source):
    source = example_source('program_3.kdn')
    ast = parse_program(source)
    interp = Interpreter(source)
    with pytest.raises(InterpreterError) as e:
        interp.interpret(ast)
    assert e.value.kind == 'RuntimeError'
    assert e.value.message == 'Division by zero'
    assert e.value.snippet == '10 / 0'
    assert 'y' not in interp.environment
    assert capsys.readouterr().out == ''
