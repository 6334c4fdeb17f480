#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Declaration-level checks that run before a program executes: function and
parameter uniqueness, the shape of main, and return statements that cannot
match their function's declared type. Name resolution happens at run time.
"""

from typing import Dict, Optional

from sol.errors import RedeclarationError, TypeMismatchError, UndefinedNameError
from sol.runtime import RESERVED_NAMES
from sol.sol_ast import Block, For, Function, If, Node, Program, Return, While


class SemanticAnalyzer:
    def __init__(self):
        self.functions: Dict[str, Function] = {}
        self.current_function: Optional[Function] = None

    def analyze(self, node: Node) -> Node:
        self.visit(node)
        return node

    def visit(self, node: Node):
        method = getattr(self, f"visit_{type(node).__name__}", None)
        if method:
            method(node)
        else:
            for child in self._children(node):
                self.visit(child)

    def _children(self, node: Node) -> list:
        if isinstance(node, Block):
            return node.statements
        if isinstance(node, If):
            return [node.then_body] + ([node.else_body] if node.else_body else [])
        if isinstance(node, (For, While)):
            return [node.body]
        return []

    def visit_Program(self, node: Program):
        self.functions = {}
        for fn in node.functions:
            if fn.name in RESERVED_NAMES:
                raise RedeclarationError(
                    f"`{fn.name}` is a built-in and cannot be redefined", fn.line, fn.col
                )
            if fn.name in self.functions:
                raise RedeclarationError(
                    f"function `{fn.name}` already defined", fn.line, fn.col
                )
            self.functions[fn.name] = fn

        main = self.functions.get("main")
        if main is None:
            raise UndefinedNameError("program has no `main` function", node.line, node.col)
        if main.params:
            raise TypeMismatchError("`main` must not take parameters", main.line, main.col)
        if main.return_type != "none":
            raise TypeMismatchError("`main` must return none", main.line, main.col)

        for fn in node.functions:
            self.visit(fn)

    def visit_Function(self, node: Function):
        seen = set()
        for param in node.params:
            if param.name in seen:
                raise RedeclarationError(
                    f"duplicate parameter name `{param.name}`", param.line, param.col
                )
            seen.add(param.name)

        old_func = self.current_function
        self.current_function = node
        self.visit(node.body)
        self.current_function = old_func

    def visit_Return(self, node: Return):
        fn = self.current_function
        if fn.return_type == "none" and node.value is not None:
            raise TypeMismatchError(
                f"function `{fn.name}` is declared none and cannot return a value",
                node.line,
                node.col,
            )
        if fn.return_type == "int" and node.value is None:
            raise TypeMismatchError(
                f"function `{fn.name}` must return an int value",
                node.line,
                node.col,
            )
