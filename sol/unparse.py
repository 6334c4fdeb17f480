#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Render an AST back to sol source. Parsing the output yields a tree equal to
the input (positions aside). Binary and unary operations are always
parenthesised, so no precedence information is needed.
"""

from typing import List

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


class Unparser:
    INDENT = "    "

    def __init__(self):
        self.lines: List[str] = []
        self.depth = 0

    def emit(self, text: str) -> None:
        self.lines.append(self.INDENT * self.depth + text)

    def unparse(self, node: Node) -> str:
        if isinstance(node, Program):
            for i, fn in enumerate(node.functions):
                if i:
                    self.lines.append("")
                self.function(fn)
            return "\n".join(self.lines) + ("\n" if self.lines else "")
        if isinstance(node, Function):
            self.function(node)
            return "\n".join(self.lines) + "\n"
        if isinstance(node, (Block, Decl, Assign, ExprStmt, For, While, If, Return, Print)):
            self.statement(node)
            return "\n".join(self.lines) + "\n"
        return self.expr(node)

    # ---------- declarations and statements ----------

    def function(self, node: Function) -> None:
        params = ", ".join(p.name for p in node.params)
        self.emit(f"fun {node.name}({params}) {node.return_type} {{")
        self.body(node.body)
        self.emit("}")

    def body(self, block: Block) -> None:
        self.depth += 1
        for stmt in block.statements:
            self.statement(stmt)
        self.depth -= 1

    def statement(self, node: Node) -> None:
        if isinstance(node, Block):
            self.emit("{")
            self.body(node)
            self.emit("}")
        elif isinstance(node, Decl):
            self.emit(self.decl(node))
        elif isinstance(node, Assign):
            self.emit(self.assign(node) + ";")
        elif isinstance(node, ExprStmt):
            self.emit(self.expr(node.expr) + ";")
        elif isinstance(node, Return):
            if node.value is None:
                self.emit("return;")
            else:
                self.emit(f"return {self.expr(node.value)};")
        elif isinstance(node, Print):
            self.emit(f'{node.builtin}("{node.template}");')
        elif isinstance(node, For):
            if node.init is None:
                init = ";"
            elif isinstance(node.init, Decl):
                init = self.decl(node.init)
            else:
                init = self.assign(node.init) + ";"
            self.emit(f"for ({init} {self.expr(node.cond)}; {self.assign(node.step)}) {{")
            self.body(node.body)
            self.emit("}")
        elif isinstance(node, While):
            self.emit(f"while ({self.expr(node.cond)}) {{")
            self.body(node.body)
            self.emit("}")
        elif isinstance(node, If):
            self.if_chain(node, "if")
            self.emit("}")
        else:
            raise TypeError(f"cannot unparse statement {type(node).__name__}")

    def if_chain(self, node: If, keyword: str) -> None:
        self.emit(f"{keyword} ({self.expr(node.cond)}) {{")
        self.body(node.then_body)
        if isinstance(node.else_body, If):
            self.if_chain(node.else_body, "} else if")
        elif node.else_body is not None:
            self.emit("} else {")
            self.body(node.else_body)

    def decl(self, node: Decl) -> str:
        text = f"decl {node.name}"
        if node.size is not None:
            text += f"[{node.size}]"
        if node.init is not None:
            text += f" = {self.expr(node.init)}"
        return text + ";"

    def assign(self, node: Assign) -> str:
        return f"{self.expr(node.target)} {node.op} {self.expr(node.value)}"

    # ---------- expressions ----------

    def expr(self, node: Node) -> str:
        if isinstance(node, IntLiteral):
            return str(node.value)
        if isinstance(node, Name):
            return node.id
        if isinstance(node, BinaryOp):
            return f"({self.expr(node.left)} {node.op} {self.expr(node.right)})"
        if isinstance(node, UnaryOp):
            return f"({node.op}{self.expr(node.operand)})"
        if isinstance(node, Call):
            return f"{node.func}({', '.join(self.expr(a) for a in node.args)})"
        if isinstance(node, ArrayLiteral):
            return f"[{', '.join(self.expr(e) for e in node.elements)}]"
        if isinstance(node, Index):
            return f"{self.expr(node.target)}[{self.expr(node.index)}]"
        raise TypeError(f"cannot unparse expression {type(node).__name__}")


def unparse(node: Node) -> str:
    return Unparser().unparse(node)
