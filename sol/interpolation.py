#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Template compiler for print/println string literals.

A template such as "sum: {a + b}!" compiles to the segment list
["sum: ", BinaryOp('+', Name('a'), Name('b')), "!"]. `{{` and `}}` stand for
literal braces. Compilation happens once, when the print statement is parsed.
"""

from typing import Callable, List, Union

from sol.errors import ParseError
from sol.lexer import Token, TokenType
from sol.sol_ast import Node

Segment = Union[str, Node]

# (expression source, line, col) -> parsed expression
FragmentParser = Callable[[str, int, int], Node]


def _error(message: str, text: str, line: int, col: int) -> ParseError:
    return ParseError(message, Token(TokenType.PUNCTUATION, text, line, col))


def compile_template(
    template: str, line: int, col: int, parse_fragment: FragmentParser
) -> List[Segment]:
    """Split a raw template into literal text and compiled expressions.

    line/col locate the opening quote of the literal; the first template
    character sits at col + 1.
    """
    segments: List[Segment] = []
    text: List[str] = []
    i = 0
    n = len(template)
    while i < n:
        ch = template[i]
        if ch == "{":
            if template.startswith("{{", i):
                text.append("{")
                i += 2
                continue
            close = template.find("}", i + 1)
            nested = template.find("{", i + 1)
            if close == -1 or (nested != -1 and nested < close):
                raise _error("Unmatched '{' in template", "{", line, col + 1 + i)
            interior = template[i + 1 : close]
            if not interior.strip():
                raise _error("Empty interpolation in template", "{", line, col + 1 + i)
            if text:
                segments.append("".join(text))
                text = []
            segments.append(parse_fragment(interior, line, col + 2 + i))
            i = close + 1
        elif ch == "}":
            if template.startswith("}}", i):
                text.append("}")
                i += 2
                continue
            raise _error("Unmatched '}' in template", "}", line, col + 1 + i)
        else:
            text.append(ch)
            i += 1
    if text:
        segments.append("".join(text))
    return segments
