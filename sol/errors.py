#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Error taxonomy shared by every sol phase. Each error carries a message and
the 1-based source position it refers to.
"""


class SolError(Exception):
    """Base class of all diagnostics reported to the host."""

    def __init__(self, message: str, line: int = 0, col: int = 0):
        self.message = message
        self.line = line
        self.col = col
        super().__init__(self._format())

    @property
    def kind(self) -> str:
        return type(self).__name__

    def _format(self) -> str:
        return (
            f"{self.line}:{self.col}: error: {self.message}"
            if self.line
            else f"error: {self.message}"
        )


class ParseError(SolError):
    """Raised when the parser encounters a syntax error."""

    def __init__(self, message: str, token):
        self.token = token
        super().__init__(message, token.line, token.col)


class RedeclarationError(SolError):
    """A name is declared twice in the same scope."""


class UndefinedNameError(SolError):
    """A name does not resolve in any enclosing scope."""


class TypeMismatchError(SolError):
    """Wrong arity, wrong return kind, or a value of the wrong kind."""


class ArrayBoundsError(SolError):
    """An index falls outside 0..length-1."""


class DivisionByZeroError(SolError):
    pass


class StackOverflowError(SolError):
    pass
