#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Abstract Syntax Tree (AST) node definitions for sol.
All nodes store source location (line, col) for error reporting.
Equality is structural and ignores source locations.
"""

from typing import List, Optional, Union


class Node:
    """Base class for all AST nodes."""

    __slots__ = ("line", "col")

    def __init__(self, line: int = 0, col: int = 0):
        self.line = line
        self.col = col

    def fields(self):
        """Names of the node's own attributes, excluding the source location."""
        for cls in reversed(type(self).__mro__):
            for name in cls.__dict__.get("__slots__", ()):
                if name not in ("line", "col"):
                    yield name

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f) for f in self.fields())

    __hash__ = None

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class Block(Node):
    """Braced statement list; opens a new scope when executed."""

    __slots__ = ("statements",)

    def __init__(self, statements: List[Node], line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.statements = statements

    def __repr__(self):
        return f"Block({self.statements!r})"


class Param(Node):
    """Function parameter (always int typed)."""

    __slots__ = ("name",)

    def __init__(self, name: str, line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.name = name

    def __repr__(self):
        return f"Param({self.name!r})"


class Function(Node):
    """Function definition."""

    __slots__ = ("name", "params", "return_type", "body")

    def __init__(
        self,
        name: str,
        params: List[Param],
        return_type: str,
        body: Block,
        line: int = 0,
        col: int = 0,
    ):
        super().__init__(line, col)
        self.name = name
        self.params = params
        self.return_type = return_type  # "int" or "none"
        self.body = body

    def __repr__(self):
        return f"Function({self.name!r}, {self.params!r}, {self.return_type!r}, body=[...])"


class Program(Node):
    """Root node of a sol program."""

    __slots__ = ("functions",)

    def __init__(self, functions: List[Function], line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.functions = functions

    def __repr__(self):
        return f"Program(functions={self.functions!r})"


# ---------- Expressions ----------


class IntLiteral(Node):
    """Integer literal (e.g., 42)."""

    __slots__ = ("value",)

    def __init__(self, value: int, line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.value = value

    def __repr__(self):
        return f"IntLiteral({self.value})"


class Name(Node):
    """Variable reference."""

    __slots__ = ("id",)

    def __init__(self, id: str, line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.id = id

    def __repr__(self):
        return f"Name({self.id!r})"


class BinaryOp(Node):
    """Binary operation: left op right."""

    __slots__ = ("op", "left", "right")

    def __init__(self, op: str, left: Node, right: Node, line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.op = op
        self.left = left
        self.right = right

    def __repr__(self):
        return f"BinaryOp({self.op!r}, {self.left!r}, {self.right!r})"


class UnaryOp(Node):
    """Prefix operation: -x or !x."""

    __slots__ = ("op", "operand")

    def __init__(self, op: str, operand: Node, line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.op = op
        self.operand = operand

    def __repr__(self):
        return f"UnaryOp({self.op!r}, {self.operand!r})"


class Call(Node):
    """Function call: name(args)."""

    __slots__ = ("func", "args")

    def __init__(self, func: str, args: List[Node], line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.func = func
        self.args = args

    def __repr__(self):
        return f"Call({self.func!r}, {self.args!r})"


class ArrayLiteral(Node):
    """Array literal: [expr, expr, ...]."""

    __slots__ = ("elements",)

    def __init__(self, elements: List[Node], line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.elements = elements

    def __repr__(self):
        return f"ArrayLiteral({self.elements!r})"


class Index(Node):
    """Index expression: target[index]."""

    __slots__ = ("target", "index")

    def __init__(self, target: Node, index: Node, line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.target = target
        self.index = index

    def __repr__(self):
        return f"Index({self.target!r}, {self.index!r})"


# ---------- Statements ----------


class Decl(Node):
    """decl name[size] = init; size marks an array binding."""

    __slots__ = ("name", "size", "init")

    def __init__(
        self,
        name: str,
        size: Optional[int],
        init: Optional[Node],
        line: int = 0,
        col: int = 0,
    ):
        super().__init__(line, col)
        self.name = name
        self.size = size
        self.init = init

    @property
    def is_array(self) -> bool:
        return self.size is not None

    def __repr__(self):
        return f"Decl({self.name!r}, {self.size!r}, {self.init!r})"


class Assign(Node):
    """Assignment to a variable or array element, optionally compound (+= etc.)."""

    __slots__ = ("target", "op", "value")

    def __init__(
        self,
        target: Union[Name, Index],
        op: str,
        value: Node,
        line: int = 0,
        col: int = 0,
    ):
        super().__init__(line, col)
        self.target = target
        self.op = op
        self.value = value

    def __repr__(self):
        return f"Assign({self.target!r}, {self.op!r}, {self.value!r})"


class ExprStmt(Node):
    __slots__ = ("expr",)

    def __init__(self, expr: Node, line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.expr = expr

    def __repr__(self):
        return f"ExprStmt({self.expr!r})"


class For(Node):
    """for (init; cond; step) body."""

    __slots__ = ("init", "cond", "step", "body")

    def __init__(
        self,
        init: Optional[Node],
        cond: Node,
        step: Assign,
        body: Block,
        line: int = 0,
        col: int = 0,
    ):
        super().__init__(line, col)
        self.init = init
        self.cond = cond
        self.step = step
        self.body = body

    def __repr__(self):
        return f"For({self.init!r}, {self.cond!r}, {self.step!r}, body=[...])"


class While(Node):
    """While loop."""

    __slots__ = ("cond", "body")

    def __init__(self, cond: Node, body: Block, line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.cond = cond
        self.body = body

    def __repr__(self):
        return f"While({self.cond!r}, body=[...])"


class If(Node):
    """If statement; else_body is a Block, a nested If, or None."""

    __slots__ = ("cond", "then_body", "else_body")

    def __init__(
        self,
        cond: Node,
        then_body: Block,
        else_body: Optional[Node] = None,
        line: int = 0,
        col: int = 0,
    ):
        super().__init__(line, col)
        self.cond = cond
        self.then_body = then_body
        self.else_body = else_body

    def __repr__(self):
        return f"If({self.cond!r}, then=[...], else=[...])"


class Return(Node):
    """Return statement."""

    __slots__ = ("value",)

    def __init__(self, value: Optional[Node], line: int = 0, col: int = 0):
        super().__init__(line, col)
        self.value = value

    def __repr__(self):
        return f"Return({self.value!r})"


class Print(Node):
    """print("...") / println("...") with its compiled interpolation segments."""

    __slots__ = ("builtin", "template", "segments")

    def __init__(
        self,
        builtin: str,
        template: str,
        segments: List[Union[str, Node]],
        line: int = 0,
        col: int = 0,
    ):
        super().__init__(line, col)
        self.builtin = builtin
        self.template = template  # raw literal text, braces included
        self.segments = segments

    def __repr__(self):
        return f"Print({self.builtin!r}, {self.template!r})"
