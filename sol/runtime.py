#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Runtime values, scopes and built-in functions for the sol interpreter.

Values are plain Python ints (kept inside a fixed signed width), ArrayValue
instances, or None for the result of a `none` function.
"""

import sys
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from sol.errors import RedeclarationError, TypeMismatchError, UndefinedNameError
from sol.sol_ast import Function, Node

DEFAULT_INT_BITS = 64

# Python frames available while parsing or running; one sol call costs a dozen or more.
RECURSION_LIMIT = 200_000


def wrap_int(value: int, bits: int = DEFAULT_INT_BITS) -> int:
    """Wrap an arbitrary Python int to a two's-complement signed value of `bits` width."""
    mask = (1 << bits) - 1
    value &= mask
    if value >> (bits - 1):
        value -= 1 << bits
    return value


@contextmanager
def recursion_limit(limit: int = RECURSION_LIMIT) -> Iterator[None]:
    """Raise the interpreter recursion limit to at least `limit` for the duration of the block."""
    old = sys.getrecursionlimit()
    sys.setrecursionlimit(max(old, limit))
    try:
        yield
    finally:
        sys.setrecursionlimit(old)


def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero, as in C."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


class ArrayValue:
    """Fixed-length array of ints. Elements change in place; the length never does."""

    __slots__ = ("items",)

    def __init__(self, items: Iterable[int]):
        self.items: List[int] = list(items)

    def __len__(self) -> int:
        return len(self.items)

    def copy(self) -> "ArrayValue":
        return ArrayValue(self.items)

    def __eq__(self, other):
        if not isinstance(other, ArrayValue):
            return NotImplemented
        return self.items == other.items

    __hash__ = None

    def __repr__(self):
        return f"ArrayValue({self.items!r})"


class UserFunction:
    """A top-level function bound in the global scope."""

    __slots__ = ("decl", "env")

    def __init__(self, decl: Function, env: "Environment"):
        self.decl = decl
        self.env = env  # defining scope

    @property
    def name(self) -> str:
        return self.decl.name

    @property
    def arity(self) -> int:
        return len(self.decl.params)

    def __repr__(self):
        return f"<fun {self.name}>"


class BuiltinFunction:
    __slots__ = ("name", "arity", "impl")

    def __init__(self, name: str, arity: int, impl: Callable[[List[Any], Node], Any]):
        self.name = name
        self.arity = arity
        self.impl = impl

    def __repr__(self):
        return f"<builtin {self.name}>"


def is_callable(value: Any) -> bool:
    return isinstance(value, (UserFunction, BuiltinFunction))


def kind_of(value: Any) -> str:
    """Name of a value's kind as it appears in diagnostics."""
    if isinstance(value, ArrayValue):
        return "array"
    if value is None:
        return "none"
    if is_callable(value):
        return "function"
    return "int"


def format_value(value: Any, node: Node) -> str:
    """Render a value for print/println."""
    if isinstance(value, ArrayValue):
        return "[" + ", ".join(str(v) for v in value.items) + "]"
    if isinstance(value, int):
        return str(value)
    raise TypeMismatchError(
        f"cannot interpolate a value of kind {kind_of(value)}", node.line, node.col
    )


class Environment:
    """One lexical scope: its own bindings plus a link to the enclosing scope."""

    __slots__ = ("parent", "values")

    def __init__(self, parent: Optional["Environment"] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any, node: Node) -> None:
        """Bind a new name here; the name must not already exist in this scope."""
        if name in self.values:
            raise RedeclarationError(
                f"'{name}' is already declared in this scope", node.line, node.col
            )
        self.values[name] = value

    def find(self, name: str) -> Optional["Environment"]:
        """Return the nearest scope that binds name, or None."""
        env = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def lookup(self, name: str, node: Node) -> Any:
        env = self.find(name)
        if env is None:
            raise UndefinedNameError(f"undefined name '{name}'", node.line, node.col)
        return env.values[name]


def _builtin_length(args: List[Any], node: Node) -> int:
    (value,) = args
    if not isinstance(value, ArrayValue):
        raise TypeMismatchError(
            f"length() expects an array, found {kind_of(value)}", node.line, node.col
        )
    return len(value)


BUILTINS = {
    "length": BuiltinFunction("length", 1, _builtin_length),
}

# Built-ins that exist only as statement forms.
PRINT_BUILTINS = frozenset({"print", "println"})

RESERVED_NAMES = frozenset(BUILTINS) | PRINT_BUILTINS
