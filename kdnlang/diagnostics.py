"""Renders KdnLang errors for the terminal.

Every `KdnLangError` carries the source text and the span of the code
that caused it, so a diagnostic can be produced without re-running
anything: the error code and message, the line/column, the source line,
and the offending fragment underlined with a caret.
"""

from typing import Optional

from termcolor import colored

from kdnlang.errors import KdnLangError
from kdnlang.tokens import line_text

ERROR = "red"


def underline(line: str, column: int, length: int) -> str:
    """Returns `line` with the fragment at `column` highlighted, plus a caret line below it."""
    start = column - 1
    end = min(start + max(length, 1), max(len(line), start + 1))
    highlighted = line[:start] + colored(line[start:end], ERROR, attrs=["bold"]) + line[end:]
    caret = " " * start + colored("^" + "~" * (end - start - 1), ERROR, attrs=["bold"])
    return f"    {highlighted}\n    {caret}"


def render(error: KdnLangError, path: Optional[str] = None) -> str:
    header = colored(f"{error.code}: ", ERROR, attrs=["bold"]) + error.message
    if error.span is None or not error.src:
        return header

    line_no, column = error.span.line_col(error.src)
    line = line_text(error.src, line_no)
    # spans that run past the end of the line are cut at the line break
    length = min(len(error.span), max(len(line) - column + 1, 1))

    location = f"line {line_no}, column {column}"
    if path:
        location = f"{path}:{line_no}:{column}"
    return f"{header}\n  --> {location}\n{underline(line, column, length)}"
