#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
sol interpreter – executes a checked AST by walking it.

Scopes are Environment objects chained to their enclosing scope. The global
scope holds the built-ins and every top-level function and is never
modified once the program has started.
"""

import logging
import sys
from types import MappingProxyType
from typing import Any, List, Optional, TextIO

from sol.errors import (
    ArrayBoundsError,
    DivisionByZeroError,
    StackOverflowError,
    TypeMismatchError,
    UndefinedNameError,
)
from sol.runtime import (
    BUILTINS,
    DEFAULT_INT_BITS,
    ArrayValue,
    BuiltinFunction,
    Environment,
    UserFunction,
    format_value,
    is_callable,
    kind_of,
    recursion_limit,
    trunc_div,
    wrap_int,
)
from sol.sol_ast import (
    ArrayLiteral,
    Assign,
    BinaryOp,
    Block,
    Call,
    Decl,
    ExprStmt,
    For,
    Function,
    If,
    Index,
    IntLiteral,
    Name,
    Node,
    Print,
    Program,
    Return,
    UnaryOp,
    While,
)

logger = logging.getLogger(__name__)

# Deepest chain of active user-function calls before StackOverflowError.
MAX_CALL_DEPTH = 4000


class ReturnSignal(Exception):
    """Unwinds from a return statement to the enclosing call."""

    def __init__(self, value: Any):
        super().__init__()
        self.value = value


class Interpreter:
    """Tree-walking evaluator. Output goes to `out` via one write() per print."""

    def __init__(self, out: Optional[TextIO] = None, int_bits: int = DEFAULT_INT_BITS):
        if int_bits < 2:
            raise ValueError(f"int_bits must be at least 2, got {int_bits}")
        self.out = out if out is not None else sys.stdout
        self.int_bits = int_bits
        self.global_env = Environment()
        self.functions = MappingProxyType({})
        self.frames: List[UserFunction] = []  # active user calls, innermost last

    # ---------- program ----------

    def load(self, program: Program) -> None:
        """Bind built-ins and all top-level functions into the global scope."""
        self.global_env = Environment()
        for name, builtin in BUILTINS.items():
            self.global_env.define(name, builtin, program)
        functions = {}
        for decl in program.functions:
            fn = UserFunction(decl, self.global_env)
            self.global_env.define(decl.name, fn, decl)
            functions[decl.name] = fn
        self.functions = MappingProxyType(functions)

    def run(self, program: Program) -> None:
        """Load the program and call main()."""
        self.load(program)
        main = self.functions.get("main")
        if main is None:
            raise UndefinedNameError("program has no 'main' function", 1, 1)
        logger.debug("running main")
        with recursion_limit():
            self.call_function(main, [], main.decl)

    # ---------- calls ----------

    def call_function(self, fn: Any, args: List[Any], site: Node) -> Any:
        if not is_callable(fn):
            raise TypeMismatchError(
                f"a value of kind {kind_of(fn)} is not callable", site.line, site.col
            )
        if len(args) != fn.arity:
            raise TypeMismatchError(
                f"'{fn.name}' expects {fn.arity} argument(s), got {len(args)}",
                site.line,
                site.col,
            )
        if isinstance(fn, BuiltinFunction):
            return fn.impl(args, site)

        decl: Function = fn.decl
        env = Environment(fn.env)
        for param, arg in zip(decl.params, args):
            if isinstance(arg, ArrayValue):
                arg = arg.copy()
            env.define(param.name, arg, param)

        if len(self.frames) >= MAX_CALL_DEPTH:
            raise StackOverflowError(
                f"maximum call depth of {MAX_CALL_DEPTH} exceeded calling '{fn.name}'",
                site.line,
                site.col,
            )

        logger.debug("call %s%s", fn.name, tuple(args))
        self.frames.append(fn)
        try:
            self.exec_statements(decl.body.statements, env)
            value = None
        except ReturnSignal as ret:
            value = ret.value
        finally:
            self.frames.pop()

        if decl.return_type == "int" and value is None:
            raise TypeMismatchError(
                f"function '{fn.name}' declared int ended without returning a value",
                site.line,
                site.col,
            )
        return value

    # ---------- statements ----------

    def execute(self, node: Node, env: Environment) -> None:
        method = getattr(self, f"exec_{type(node).__name__}", None)
        if method is None:
            raise TypeError(f"cannot execute {type(node).__name__}")
        try:
            method(node, env)
        except RecursionError:
            raise StackOverflowError("statement nested too deeply", node.line, node.col) from None

    def exec_statements(self, statements: List[Node], env: Environment) -> None:
        for stmt in statements:
            self.execute(stmt, env)

    def exec_Block(self, node: Block, env: Environment) -> None:
        self.exec_statements(node.statements, Environment(env))

    def exec_Decl(self, node: Decl, env: Environment) -> None:
        if node.is_array:
            value = self._init_array(node, env)
        elif node.init is None:
            value = 0
        else:
            value = self.evaluate(node.init, env)
            if not isinstance(value, int):
                raise TypeMismatchError(
                    f"cannot initialize int '{node.name}' with a value of kind {kind_of(value)}",
                    node.init.line,
                    node.init.col,
                )
        env.define(node.name, value, node)

    def _init_array(self, node: Decl, env: Environment) -> ArrayValue:
        size = node.size
        if node.init is None:
            return ArrayValue([0] * size)
        elements = [self._expect_int(self.evaluate(e, env), e) for e in node.init.elements]
        if len(elements) == size:
            return ArrayValue(elements)
        if len(elements) == 1:
            # broadcast: one element fills every slot
            return ArrayValue(elements * size)
        raise TypeMismatchError(
            f"array '{node.name}' has size {size} but {len(elements)} initializers",
            node.line,
            node.col,
        )

    def exec_Assign(self, node: Assign, env: Environment) -> None:
        target = node.target
        value = self.evaluate(node.value, env)
        if isinstance(target, Index):
            array = self._expect_array(self.evaluate(target.target, env), target.target)
            idx = self._check_index(array, self.evaluate(target.index, env), target.index)
            if node.op != "=":
                value = self._arith(node.op[0], array.items[idx], value, node)
            array.items[idx] = self._expect_int(value, node.value)
            return

        scope = env.find(target.id)
        if scope is None:
            raise UndefinedNameError(
                f"assignment to undeclared name '{target.id}'", target.line, target.col
            )
        current = scope.values[target.id]
        if is_callable(current):
            raise TypeMismatchError(
                f"cannot assign to function '{target.id}'", target.line, target.col
            )
        if node.op != "=":
            value = self._arith(node.op[0], current, value, node)

        if isinstance(current, ArrayValue):
            if not isinstance(value, ArrayValue) or len(value) != len(current):
                raise TypeMismatchError(
                    f"'{target.id}' is an array of length {len(current)}; "
                    f"cannot assign a value of kind {kind_of(value)}",
                    node.line,
                    node.col,
                )
            value = value.copy()
        else:
            value = self._expect_int(value, node.value)
        scope.values[target.id] = value

    def exec_ExprStmt(self, node: ExprStmt, env: Environment) -> None:
        self.evaluate(node.expr, env)

    def exec_For(self, node: For, env: Environment) -> None:
        loop_env = Environment(env)
        if node.init is not None:
            self.execute(node.init, loop_env)
        while self._truthy(self.evaluate(node.cond, loop_env), node.cond):
            self.exec_statements(node.body.statements, Environment(loop_env))
            self.execute(node.step, loop_env)

    def exec_While(self, node: While, env: Environment) -> None:
        while self._truthy(self.evaluate(node.cond, env), node.cond):
            self.exec_statements(node.body.statements, Environment(env))

    def exec_If(self, node: If, env: Environment) -> None:
        if self._truthy(self.evaluate(node.cond, env), node.cond):
            self.exec_Block(node.then_body, env)
        elif node.else_body is not None:
            self.execute(node.else_body, env)

    def exec_Return(self, node: Return, env: Environment) -> None:
        value = None if node.value is None else self.evaluate(node.value, env)
        fn = self.frames[-1] if self.frames else None
        if fn is not None:
            expected = fn.decl.return_type
            if expected == "int" and not isinstance(value, int):
                raise TypeMismatchError(
                    f"function '{fn.name}' must return int, found {kind_of(value)}",
                    node.line,
                    node.col,
                )
            if expected == "none" and value is not None:
                raise TypeMismatchError(
                    f"function '{fn.name}' is declared none and cannot return a value",
                    node.line,
                    node.col,
                )
        raise ReturnSignal(value)

    def exec_Print(self, node: Print, env: Environment) -> None:
        parts = []
        for segment in node.segments:
            if isinstance(segment, str):
                parts.append(segment)
            else:
                parts.append(format_value(self.evaluate(segment, env), segment))
        if node.builtin == "println":
            parts.append("\n")
        self.out.write("".join(parts))

    # ---------- expressions ----------

    def evaluate(self, node: Node, env: Environment) -> Any:
        method = getattr(self, f"eval_{type(node).__name__}", None)
        if method is None:
            raise TypeError(f"cannot evaluate {type(node).__name__}")
        try:
            return method(node, env)
        except RecursionError:
            raise StackOverflowError("expression nested too deeply", node.line, node.col) from None

    def eval_IntLiteral(self, node: IntLiteral, env: Environment) -> int:
        return wrap_int(node.value, self.int_bits)

    def eval_Name(self, node: Name, env: Environment) -> Any:
        value = env.lookup(node.id, node)
        if is_callable(value):
            raise TypeMismatchError(
                f"function '{node.id}' cannot be used as a value", node.line, node.col
            )
        return value

    def eval_ArrayLiteral(self, node: ArrayLiteral, env: Environment) -> ArrayValue:
        return ArrayValue(self._expect_int(self.evaluate(e, env), e) for e in node.elements)

    def eval_Index(self, node: Index, env: Environment) -> int:
        array = self._expect_array(self.evaluate(node.target, env), node.target)
        idx = self._check_index(array, self.evaluate(node.index, env), node.index)
        return array.items[idx]

    def eval_UnaryOp(self, node: UnaryOp, env: Environment) -> int:
        value = self._expect_int(self.evaluate(node.operand, env), node.operand)
        if node.op == "-":
            return wrap_int(-value, self.int_bits)
        return 1 if value == 0 else 0

    def eval_BinaryOp(self, node: BinaryOp, env: Environment) -> int:
        left = self.evaluate(node.left, env)
        right = self.evaluate(node.right, env)
        return self._arith(node.op, left, right, node)

    def eval_Call(self, node: Call, env: Environment) -> Any:
        args = [self.evaluate(arg, env) for arg in node.args]
        fn = env.lookup(node.func, node)
        return self.call_function(fn, args, node)

    # ---------- helpers ----------

    def _arith(self, op: str, left: Any, right: Any, node: Node) -> int:
        if not isinstance(left, int) or not isinstance(right, int):
            raise TypeMismatchError(
                f"operator '{op}' needs int operands, found {kind_of(left)} and {kind_of(right)}",
                node.line,
                node.col,
            )
        if op == "+":
            result = left + right
        elif op == "-":
            result = left - right
        elif op == "*":
            result = left * right
        elif op == "/":
            if right == 0:
                raise DivisionByZeroError("division by zero", node.line, node.col)
            result = trunc_div(left, right)
        elif op == "==":
            return int(left == right)
        elif op == "!=":
            return int(left != right)
        elif op == "<":
            return int(left < right)
        elif op == "<=":
            return int(left <= right)
        elif op == ">":
            return int(left > right)
        elif op == ">=":
            return int(left >= right)
        else:
            raise TypeError(f"unknown operator {op!r}")
        return wrap_int(result, self.int_bits)

    def _truthy(self, value: Any, node: Node) -> bool:
        if not isinstance(value, int):
            raise TypeMismatchError(
                f"condition must be int, found {kind_of(value)}", node.line, node.col
            )
        return value != 0

    @staticmethod
    def _expect_int(value: Any, node: Node) -> int:
        if not isinstance(value, int):
            raise TypeMismatchError(
                f"expected int, found {kind_of(value)}", node.line, node.col
            )
        return value

    @staticmethod
    def _expect_array(value: Any, node: Node) -> ArrayValue:
        if not isinstance(value, ArrayValue):
            raise TypeMismatchError(
                f"cannot index a value of kind {kind_of(value)}", node.line, node.col
            )
        return value

    @staticmethod
    def _check_index(array: ArrayValue, index: Any, node: Node) -> int:
        if not isinstance(index, int):
            raise TypeMismatchError(
                f"array index must be int, found {kind_of(index)}", node.line, node.col
            )
        if index < 0 or index >= len(array):
            raise ArrayBoundsError(
                f"index {index} out of bounds for array of length {len(array)}",
                node.line,
                node.col,
            )
        return index
