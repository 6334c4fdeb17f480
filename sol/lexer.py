#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
sol lexer – converts source text into a stream of tokens.
Handles line and block comments, verbatim string literals, and error reporting.
"""

import string
from enum import IntEnum, auto
from typing import Generator, List, Optional

from sol.errors import SolError


class TokenType(IntEnum):
    """All token kinds produced by the lexer."""

    IDENT = auto()
    INTEGER = auto()
    STRING = auto()
    KEYWORD = auto()
    OPERATOR = auto()
    PUNCTUATION = auto()
    EOF = auto()


class Token:
    """A single token with source location."""

    __slots__ = ("type", "value", "line", "col", "raw")

    def __init__(
        self,
        type: TokenType,
        value: str,
        line: int,
        col: int,
        raw: Optional[str] = None,
    ):
        self.type = type
        self.value = value  # semantic value (e.g., string contents without quotes)
        self.line = line  # 1‑based line number
        self.col = col  # 1‑based column of the first character
        self.raw = raw if raw is not None else value  # original source text

    def is_(self, type: TokenType, value: Optional[str] = None) -> bool:
        """True if the token has the given type (and value, when given)."""
        return self.type == type and (value is None or self.value == value)

    def describe(self) -> str:
        if self.type == TokenType.EOF:
            return "end of input"
        return f"'{self.raw}'"

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.col})"


class LexError(SolError):
    """Raised when the lexer encounters an invalid character or malformed literal."""

    def __init__(self, message: str, line: int, col: int, source_line: str = ""):
        self.source_line = source_line
        super().__init__(message, line, col)

    def _format(self) -> str:
        if not self.source_line:
            return super()._format()
        snippet = self.source_line.rstrip()
        pointer = " " * (self.col - 1) + "^"
        return f"{self.line}:{self.col}: error: {self.message}\n{snippet}\n{pointer}"


class Lexer:
    """sol lexer. Produces tokens via the tokenize() generator."""

    KEYWORDS = {
        "decl",
        "else",
        "for",
        "fun",
        "if",
        "int",
        "none",
        "return",
        "while",
    }

    # Operators (single and multi‑character)
    OPERATORS = {
        "+",
        "-",
        "*",
        "/",
        "=",
        "<",
        ">",
        "!",
        "+=",
        "-=",
        "*=",
        "/=",
        "==",
        "!=",
        "<=",
        ">=",
    }
    OPERATORS_SORTED = sorted(OPERATORS, key=len, reverse=True)

    PUNCTUATION = {"(", ")", "[", "]", "{", "}", ",", ";"}

    WHITESPACE = {" ", "\t", "\r", "\n"}

    # ASCII only: str.isdigit() and str.isalpha() accept far more than sol does.
    DIGITS = frozenset(string.digits)
    IDENT_START = frozenset(string.ascii_letters + "_")
    IDENT_CHARS = IDENT_START | DIGITS

    def __init__(self, source: str, filename: str = "<input>", line: int = 1, col: int = 1):
        self.source = source
        self.filename = filename
        self.pos = 0  # current character index
        self.line = line  # current line (1‑based)
        self.col = col  # current column (1‑based)
        self.len = len(source)
        self._first_line = line

    def _current(self) -> Optional[str]:
        """Return the current character or None if at EOF."""
        if self.pos >= self.len:
            return None
        return self.source[self.pos]

    def _advance(self, n: int = 1) -> None:
        """Advance the position by n characters, updating line/col."""
        for _ in range(n):
            if self.pos >= self.len:
                return
            ch = self.source[self.pos]
            self.pos += 1
            if ch == "\n":
                self.line += 1
                self.col = 1
            else:
                self.col += 1

    def _peek(self, offset: int = 1) -> Optional[str]:
        """Look ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos >= self.len:
            return None
        return self.source[peek_pos]

    def _get_source_line(self, line_no: Optional[int] = None) -> str:
        """Return the source line at the given line number (or current line)."""
        if line_no is None:
            line_no = self.line
        lines = self.source.split("\n")
        idx = line_no - self._first_line
        if 0 <= idx < len(lines):
            return lines[idx]
        return ""

    def _error(self, message: str, line: Optional[int] = None, col: Optional[int] = None) -> LexError:
        line = self.line if line is None else line
        col = self.col if col is None else col
        return LexError(message, line, col, self._get_source_line(line))

    def _skip_whitespace(self) -> None:
        while (ch := self._current()) is not None and ch in self.WHITESPACE:
            self._advance()

    def _skip_line_comment(self) -> None:
        """Skip from // to the end of the line."""
        self._advance(2)  # skip the '//'
        while (ch := self._current()) is not None and ch != "\n":
            self._advance()

    def _skip_block_comment(self) -> None:
        """Skip a /* ... */ comment. Block comments do not nest."""
        start_line, start_col = self.line, self.col
        self._advance(2)  # skip '/*'
        while True:
            ch = self._current()
            if ch is None:
                raise self._error("Unterminated block comment", start_line, start_col)
            if ch == "*" and self._peek() == "/":
                self._advance(2)
                return
            self._advance()

    def _read_number(self) -> Token:
        """Read a decimal integer literal."""
        start_line, start_col = self.line, self.col
        start_pos = self.pos
        while (ch := self._current()) is not None and ch in self.DIGITS:
            self._advance()
        if (ch := self._current()) is not None and ch in self.IDENT_START:
            while (ch := self._current()) is not None and ch in self.IDENT_CHARS:
                self._advance()
            raise self._error(
                f"Invalid integer literal '{self.source[start_pos : self.pos]}'",
                start_line,
                start_col,
            )
        value = self.source[start_pos : self.pos]
        return Token(TokenType.INTEGER, value, start_line, start_col)

    def _read_string(self) -> Token:
        """Read a string literal. The content is kept verbatim; braces are resolved later."""
        start_line, start_col = self.line, self.col
        start_pos = self.pos
        self._advance()  # skip opening quote
        while True:
            ch = self._current()
            if ch is None or ch == "\n":
                raise self._error("Unterminated string literal", start_line, start_col)
            if ch == '"':
                break
            self._advance()
        value = self.source[start_pos + 1 : self.pos]
        self._advance()  # skip closing quote
        raw = self.source[start_pos : self.pos]
        return Token(TokenType.STRING, value, start_line, start_col, raw=raw)

    def _read_identifier_or_keyword(self) -> Token:
        """Read an identifier (or keyword if it matches)."""
        start_line, start_col = self.line, self.col
        start_pos = self.pos
        while (ch := self._current()) is not None and ch in self.IDENT_CHARS:
            self._advance()
        value = self.source[start_pos : self.pos]
        token_type = TokenType.KEYWORD if value in self.KEYWORDS else TokenType.IDENT
        return Token(token_type, value, start_line, start_col)

    def _read_operator(self) -> Optional[Token]:
        """Read an operator (multi‑character if possible)."""
        start_line, start_col = self.line, self.col
        for op in self.OPERATORS_SORTED:
            if self.source.startswith(op, self.pos):
                self._advance(len(op))
                return Token(TokenType.OPERATOR, op, start_line, start_col)
        return None

    def _read_punctuation(self) -> Optional[Token]:
        ch = self._current()
        if ch in self.PUNCTUATION:
            start_line, start_col = self.line, self.col
            self._advance()
            return Token(TokenType.PUNCTUATION, ch, start_line, start_col)
        return None

    def tokenize(self) -> Generator[Token, None, None]:
        """Main lexer entry point: yields tokens until EOF."""
        while True:
            self._skip_whitespace()

            ch = self._current()
            if ch is None:
                break

            if ch == "/":
                next_ch = self._peek()
                if next_ch == "/":
                    self._skip_line_comment()
                    continue
                elif next_ch == "*":
                    self._skip_block_comment()
                    continue

            punct = self._read_punctuation()
            if punct is not None:
                yield punct
                continue

            if ch in self.DIGITS:
                yield self._read_number()
                continue

            if ch == '"':
                yield self._read_string()
                continue

            if ch in self.IDENT_START:
                yield self._read_identifier_or_keyword()
                continue

            op_token = self._read_operator()
            if op_token is not None:
                yield op_token
                continue

            raise self._error(f"Invalid character '{ch}'")

        yield Token(TokenType.EOF, "", self.line, self.col)

    def tokenize_all(self) -> List[Token]:
        """Return a list of all tokens (convenience for testing)."""
        return list(self.tokenize())
