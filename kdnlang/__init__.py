# KdnLang language package
# This package provides an indentation-aware lexer, a recursive-descent
# parser and a tree-walking interpreter for the KdnLang language.
from .errors import KdnLangError, LexerError, ParserError, InterpreterError
from .lexer import Lexer, tokenize
from .parser import Parser, parse_program
from .interpreter import Interpreter, run_program

__all__ = [
    'KdnLangError',
    'LexerError',
    'ParserError',
    'InterpreterError',
    'Lexer',
    'tokenize',
    'Parser',
    'parse_program',
    'Interpreter',
    'run_program',
]
