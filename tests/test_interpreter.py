import pytest

from kdnlang.ast import BinaryOp, BinaryOperator, FunctionCall, Number, Program
from kdnlang.errors import InterpreterError
from kdnlang.interpreter import Interpreter, run_program
from kdnlang.parser import parse_program


def output(capsys, source):
    run_program(source)
    return capsys.readouterr().out


def test_division_truncates_toward_zero(capsys):
    assert output(capsys, 'print(7 / 2, 0 - 7 / 2, 7 / (0 - 2), (0 - 7) / (0 - 2))\n') == '3 -3 -3 3\n'


def test_precedence_at_runtime(capsys):
    assert output(capsys, 'print(2 + 3 * 4, (2 + 3) * 4, 10 - 4 - 3)\n') == '14 20 3\n'


def test_comparisons_print_booleans(capsys):
    assert output(capsys, 'print(1 < 2, 2 < 1, 2 <= 2, 3 >= 4, 5 == 5)\n') == 'true false true false true\n'


def test_print_without_arguments(capsys):
    assert output(capsys, 'print()\n') == '\n'


def test_string_coercion(capsys):
    source = (
        'print("a" + "b")\n'
        'print(1 + "x")\n'
        'print("v=" + (1 < 2))\n'
    )
    assert output(capsys, source) == 'ab\n1x\nv=true\n'


def test_number_plus_boolean_is_type_error():
    with pytest.raises(InterpreterError) as e:
        run_program('x = 1 + (1 < 2)\n')
    assert e.value.kind == 'TypeError'
    assert 'Add' in e.value.message
    assert 'Number' in e.value.message
    assert 'Boolean' in e.value.message


def test_strings_do_not_compare():
    with pytest.raises(InterpreterError) as e:
        run_program('x = "a" == "a"\n')
    assert e.value.kind == 'TypeError'


def test_string_minus_number_is_type_error():
    with pytest.raises(InterpreterError) as e:
        run_program('x = "a" - 1\n')
    assert e.value.kind == 'TypeError'


def test_truthiness(capsys):
    source = (
        'if 0\n'
        '  print("zero")\n'
        'else\n'
        '  print("no zero")\n'
        'if ""\n'
        '  print("empty")\n'
        'else\n'
        '  print("no empty")\n'
        'if "s"\n'
        '  print("string")\n'
        'if 1 > 0\n'
        '  print("bool")\n'
    )
    assert output(capsys, source) == 'no zero\nno empty\nstring\nbool\n'


def test_while_loop(capsys):
    source = 'n = 3\nwhile n > 0\n  print(n)\n  n = n - 1\n'
    assert output(capsys, source) == '3\n2\n1\n'


def test_for_loop_is_inclusive_and_keeps_binding(capsys):
    interp = run_program('for i = 2 to 4\n  print(i)\n')
    assert capsys.readouterr().out == '2\n3\n4\n'
    assert interp.environment.get('i') == 4


def test_for_loop_with_end_before_start_never_runs(capsys):
    interp = run_program('for i = 5 to 1\n  print(i)\n')
    assert capsys.readouterr().out == ''
    assert 'i' not in interp.environment


def test_for_bounds_are_evaluated_once(capsys):
    source = 'n = 2\nfor i = 1 to n\n  n = n + 1\n  print(i)\n'
    assert output(capsys, source) == '1\n2\n'


def test_for_bounds_must_be_numbers():
    with pytest.raises(InterpreterError) as e:
        run_program('for i = "a" to 3\n  print(i)\n')
    assert e.value.kind == 'TypeError'
    assert e.value.message == 'For loop start value must be a number'

    with pytest.raises(InterpreterError) as e:
        run_program('for i = 1 to 1 < 2\n  print(i)\n')
    assert e.value.message == 'For loop end value must be a number'


def test_scope_is_flat(capsys):
    source = 'x = 1\nif 1\n  x = 2\n  y = 3\nprint(x, y)\n'
    assert output(capsys, source) == '2 3\n'


def test_undefined_variable():
    source = 'x = 1\nprint(x + z)\n'
    with pytest.raises(InterpreterError) as e:
        run_program(source)
    assert e.value.kind == 'UndefinedVariable'
    assert e.value.message == "Undefined variable 'z'"
    assert e.value.snippet == 'z'
    assert e.value.span.line_col(source) == (2, 11)


def test_error_stops_execution(capsys):
    with pytest.raises(InterpreterError):
        run_program('print(1)\nx = 1 / 0\nprint(2)\n')
    assert capsys.readouterr().out == '1\n'


def test_integer_overflow():
    with pytest.raises(InterpreterError) as e:
        run_program('x = 9223372036854775807 + 1\n')
    assert e.value.kind == 'RuntimeError'
    assert e.value.message == 'Integer overflow'

    with pytest.raises(InterpreterError):
        run_program('x = 3037000500 * 3037000500\n')


def test_call_in_expression_is_runtime_error():
    with pytest.raises(InterpreterError) as e:
        run_program('x = f(1)\n')
    assert e.value.kind == 'RuntimeError'
    assert e.value.message == 'Function calls not supported in expressions: f'


def test_unknown_function_statement():
    program = Program([FunctionCall('shout', [Number(1)])])
    with pytest.raises(InterpreterError) as e:
        Interpreter().interpret(program)
    assert e.value.message == 'Unknown function: shout'


def test_logical_operators_are_type_errors():
    program = Program([FunctionCall('print', [BinaryOp(Number(1), BinaryOperator.And, Number(1))])])
    with pytest.raises(InterpreterError) as e:
        Interpreter().interpret(program)
    assert e.value.kind == 'TypeError'
    assert "'&&'" in e.value.message


def test_debug_trace(tmp_path, capsys):
    debug_file = tmp_path / 'debug.txt'
    interp = Interpreter('x = 5\n', debug_level=2, debug_file=str(debug_file))
    interp.interpret(parse_program('x = 5\n'))
    trace = debug_file.read_text()
    assert 'exec Assignment' in trace
    assert 'bind x: Number = 5' in trace
    assert interp.debug_fp is None


def test_debug_trace_level_three(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    source = 'for i = 1 to 2\n  x = i\n'
    Interpreter(source, debug_level=3, debug_file=str(debug_file)).interpret(parse_program(source))
    lines = debug_file.read_text().splitlines()
    assert 'for i = 1' in lines
    assert 'for i = 2' in lines


def test_second_run_keeps_trace_out_of_stdout(tmp_path, capsys):
    debug_file = tmp_path / 'debug.txt'
    interp = Interpreter('', debug_level=2, debug_file=str(debug_file))
    interp.interpret(parse_program('x = 1\nprint(x)\n'))
    interp.interpret(parse_program('y = 2\nprint(y)\n'))
    assert capsys.readouterr().out == '1\n2\n'
    trace = debug_file.read_text()
    assert 'bind x: Number = 1' in trace
    assert 'bind y: Number = 2' in trace
    assert interp.debug_fp is None
