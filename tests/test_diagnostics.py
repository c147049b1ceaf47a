import re

import pytest

from kdnlang.diagnostics import render
from kdnlang.errors import InterpreterError, KdnLangError
from kdnlang.interpreter import run_program
from kdnlang.parser import parse_program


def plain(text):
    return re.sub(r'\x1b\[[0-9;]*m', '', text)


def failure(source):
    with pytest.raises(KdnLangError) as e:
        run_program(source)
    return e.value


def test_runtime_error_points_at_expression():
    text = plain(render(failure('y = 10 / 0\n')))
    assert text.splitlines() == [
        'interpreter::runtime_error: Division by zero',
        '  --> line 1, column 5',
        '    y = 10 / 0',
        '        ^~~~~~',
    ]


def test_path_is_used_as_location():
    text = plain(render(failure('x = 1\nprint(q)\n'), 'prog.kdn'))
    assert '  --> prog.kdn:2:7' in text
    assert text.splitlines()[-1] == '          ^'


def test_lexer_error_through_parser():
    with pytest.raises(KdnLangError) as e:
        parse_program('s = "abc')
    text = plain(render(e.value))
    assert text.startswith('parser::unexpected_token: Unexpected token: expected any token')
    assert text.splitlines()[-1] == '        ^~~~'


def test_error_at_end_of_input():
    with pytest.raises(KdnLangError) as e:
        parse_program('if x > 3\n')
    lines = plain(render(e.value)).splitlines()
    assert lines[0] == 'parser::unexpected_eof: Unexpected end of file: expected indented block'
    assert lines[1] == '  --> line 2, column 1'


def test_error_without_span():
    text = plain(render(InterpreterError('RuntimeError', 'Unknown function: f')))
    assert text == 'interpreter::runtime_error: Unknown function: f'


def test_lone_carriage_return_ends_a_line():
    text = plain(render(failure('a = 1\rb = c\r')))
    assert text.splitlines() == [
        "interpreter::undefined_variable: Undefined variable 'c'",
        '  --> line 2, column 5',
        '    b = c',
        '        ^',
    ]


def test_carriage_return_before_indented_line():
    text = plain(render(failure('a = 1\r  b = c\r')))
    assert text.splitlines()[1:] == [
        '  --> line 2, column 7',
        '      b = c',
        '          ^',
    ]


def test_form_feed_does_not_split_a_line():
    text = plain(render(failure('a = 1 \x0c\nc = d\n')))
    assert text.splitlines()[1:] == [
        '  --> line 2, column 5',
        '    c = d',
        '        ^',
    ]
