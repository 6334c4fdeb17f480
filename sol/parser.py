#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
sol parser – recursive descent parser that consumes tokens from the lexer
and produces an AST with source locations.
"""

from typing import List, Optional

from sol.errors import ParseError
from sol.interpolation import compile_template
from sol.lexer import LexError, Lexer, Token, TokenType
from sol.runtime import recursion_limit
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
    Param,
    Print,
    Program,
    Return,
    UnaryOp,
    While,
)

__all__ = ["ParseError", "Parser", "parse"]


class Parser:
    """Recursive descent parser for sol."""

    # Precedence levels for binary operators (higher = tighter)
    PRECEDENCE = {
        "==": 5,
        "!=": 5,
        "<": 7,
        "<=": 7,
        ">": 7,
        ">=": 7,
        "+": 10,
        "-": 10,
        "*": 20,
        "/": 20,
    }

    ASSIGN_OPS = {"=", "+=", "-=", "*=", "/="}
    UNARY_OPS = {"-", "!"}
    PRINT_BUILTINS = {"print", "println"}
    RETURN_TYPES = {"int", "none"}

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.tokens = list(lexer.tokenize())  # load all tokens for easy lookahead
        self.pos = 0
        self.current = self.tokens[0]

    def _advance(self) -> None:
        """Move to the next token; the trailing EOF token is never passed."""
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        self.current = self.tokens[self.pos]

    def peek_token(self, offset: int = 0) -> Token:
        """Peek ahead without consuming."""
        idx = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def check(self, type: TokenType, value: Optional[str] = None) -> bool:
        return self.current.is_(type, value)

    def consume(self, expected_type: TokenType, value: Optional[str] = None) -> Token:
        """If the current token matches, consume it and return it; otherwise raise ParseError."""
        if self.current.is_(expected_type, value):
            token = self.current
            self._advance()
            return token
        if value is not None:
            self._expected(f"'{value}'")
        self._expected(self._describe_type(expected_type))

    def punct(self, value: str) -> Token:
        return self.consume(TokenType.PUNCTUATION, value)

    @staticmethod
    def _describe_type(token_type: TokenType) -> str:
        return {
            TokenType.IDENT: "identifier",
            TokenType.INTEGER: "integer literal",
            TokenType.STRING: "string literal",
            TokenType.EOF: "end of input",
        }.get(token_type, token_type.name.lower())

    def _error(self, message: str, token: Optional[Token] = None) -> None:
        raise ParseError(message, token or self.current)

    def _expected(self, what: str) -> None:
        self._error(f"Expected {what}, found {self.current.describe()}")

    # ---------- TOP LEVEL ----------

    def parse_program(self) -> Program:
        """Parse a whole sol program: zero or more function declarations."""
        functions: List[Function] = []
        try:
            while not self.check(TokenType.EOF):
                if not self.check(TokenType.KEYWORD, "fun"):
                    self._expected("'fun'")
                functions.append(self.parse_function())
        except RecursionError:
            raise ParseError("Nesting too deep", self.current) from None
        return Program(functions, line=1, col=1)

    def parse_function(self) -> Function:
        """Parse 'fun name(params) [type] { body }'."""
        start = self.consume(TokenType.KEYWORD, "fun")
        name = self.consume(TokenType.IDENT).value
        self.punct("(")
        params: List[Param] = []
        if not self.check(TokenType.PUNCTUATION, ")"):
            while True:
                tok = self.consume(TokenType.IDENT)
                params.append(Param(tok.value, line=tok.line, col=tok.col))
                if not self.check(TokenType.PUNCTUATION, ","):
                    break
                self.punct(",")
        self.punct(")")
        return_type = "none"
        if self.check(TokenType.KEYWORD) and self.current.value in self.RETURN_TYPES:
            return_type = self.current.value
            self._advance()
        elif not self.check(TokenType.PUNCTUATION, "{"):
            self._expected("return type or '{'")
        body = self.parse_block()
        return Function(name, params, return_type, body, line=start.line, col=start.col)

    def parse_block(self) -> Block:
        """Parse '{ statement* }'."""
        start = self.punct("{")
        statements: List[Node] = []
        while not self.check(TokenType.PUNCTUATION, "}"):
            if self.check(TokenType.EOF):
                self._expected("'}'")
            statements.append(self.parse_statement())
        self.punct("}")
        return Block(statements, line=start.line, col=start.col)

    # ---------- STATEMENTS ----------

    def parse_statement(self) -> Node:
        """Parse a single statement."""
        tok = self.current
        if tok.type == TokenType.KEYWORD:
            if tok.value == "decl":
                return self.parse_decl()
            if tok.value == "for":
                return self.parse_for()
            if tok.value == "while":
                return self.parse_while()
            if tok.value == "if":
                return self.parse_if()
            if tok.value == "return":
                return self.parse_return()
        if tok.is_(TokenType.PUNCTUATION, "{"):
            return self.parse_block()
        if (
            tok.type == TokenType.IDENT
            and tok.value in self.PRINT_BUILTINS
            and self.peek_token(1).is_(TokenType.PUNCTUATION, "(")
        ):
            stmt = self.parse_print()
            self.punct(";")
            return stmt

        expr = self.parse_expression()
        if self.check(TokenType.OPERATOR) and self.current.value in self.ASSIGN_OPS:
            stmt = self._finish_assign(expr)
        else:
            stmt = ExprStmt(expr, line=expr.line, col=expr.col)
        self.punct(";")
        return stmt

    def parse_decl(self) -> Decl:
        """Parse 'decl name [ "[" size "]" ] [ = init ] ;'."""
        start = self.consume(TokenType.KEYWORD, "decl")
        name = self.consume(TokenType.IDENT).value
        size: Optional[int] = None
        if self.check(TokenType.PUNCTUATION, "["):
            self.punct("[")
            size = int(self.consume(TokenType.INTEGER).value)
            self.punct("]")

        init: Optional[Node] = None
        if self.check(TokenType.OPERATOR, "="):
            self.consume(TokenType.OPERATOR, "=")
            if size is not None:
                if not self.check(TokenType.PUNCTUATION, "["):
                    self._expected("array literal initializer")
                init = self.parse_array_literal()
                count = len(init.elements)
                if count != 1 and count != size:
                    self._error(
                        f"Array literal has {count} elements, expected 1 or {size}",
                        start,
                    )
            else:
                init = self.parse_expression()
                if isinstance(init, ArrayLiteral):
                    self._error(f"Array literal requires a declared size for '{name}'", start)
        self.punct(";")
        return Decl(name, size, init, line=start.line, col=start.col)

    def parse_assign(self) -> Assign:
        """Parse 'target op expr' (no trailing semicolon)."""
        target = self.parse_expression()
        if not (self.check(TokenType.OPERATOR) and self.current.value in self.ASSIGN_OPS):
            self._expected("assignment operator")
        return self._finish_assign(target)

    def _finish_assign(self, target: Node) -> Assign:
        if not isinstance(target, (Name, Index)):
            self._error("Invalid assignment target")
        op = self.consume(TokenType.OPERATOR).value
        value = self.parse_expression()
        return Assign(target, op, value, line=target.line, col=target.col)

    def parse_for(self) -> For:
        """Parse 'for ( [init] ; cond ; step ) { body }'."""
        start = self.consume(TokenType.KEYWORD, "for")
        self.punct("(")
        init: Optional[Node] = None
        if self.check(TokenType.KEYWORD, "decl"):
            init = self.parse_decl()  # consumes its own ';'
        else:
            if not self.check(TokenType.PUNCTUATION, ";"):
                init = self.parse_assign()
            self.punct(";")
        cond = self.parse_expression()
        self.punct(";")
        step = self.parse_assign()
        self.punct(")")
        body = self.parse_block()
        return For(init, cond, step, body, line=start.line, col=start.col)

    def parse_while(self) -> While:
        start = self.consume(TokenType.KEYWORD, "while")
        self.punct("(")
        cond = self.parse_expression()
        self.punct(")")
        body = self.parse_block()
        return While(cond, body, line=start.line, col=start.col)

    def parse_if(self) -> If:
        start = self.consume(TokenType.KEYWORD, "if")
        self.punct("(")
        cond = self.parse_expression()
        self.punct(")")
        then_body = self.parse_block()
        else_body: Optional[Node] = None
        if self.check(TokenType.KEYWORD, "else"):
            self._advance()
            if self.check(TokenType.KEYWORD, "if"):
                else_body = self.parse_if()
            else:
                else_body = self.parse_block()
        return If(cond, then_body, else_body, line=start.line, col=start.col)

    def parse_return(self) -> Return:
        start = self.consume(TokenType.KEYWORD, "return")
        value = None
        if not self.check(TokenType.PUNCTUATION, ";"):
            value = self.parse_expression()
        self.punct(";")
        return Return(value, line=start.line, col=start.col)

    def parse_print(self) -> Print:
        """Parse 'print("template")' / 'println("template")' and compile the template."""
        name_tok = self.consume(TokenType.IDENT)
        self.punct("(")
        literal = self.consume(TokenType.STRING)
        self.punct(")")
        segments = compile_template(
            literal.value, literal.line, literal.col, self._parse_fragment
        )
        return Print(
            name_tok.value, literal.value, segments, line=name_tok.line, col=name_tok.col
        )

    def _parse_fragment(self, source: str, line: int, col: int) -> Node:
        """Parse an interpolated expression that starts at line:col of this file."""
        try:
            sub = Parser(Lexer(source, self.lexer.filename, line=line, col=col))
        except LexError as e:
            raise ParseError(e.message, Token(TokenType.STRING, source, e.line, e.col)) from e
        expr = sub.parse_expression()
        if not sub.check(TokenType.EOF):
            sub._expected("'}'")
        return expr

    # ---------- EXPRESSIONS ----------

    def parse_expression(self) -> Node:
        """Parse an expression with precedence."""
        return self.parse_binary(0)

    def parse_binary(self, min_prec: int) -> Node:
        """Parse binary expressions using precedence climbing."""
        lhs = self.parse_unary()
        while True:
            tok = self.current
            if tok.type != TokenType.OPERATOR:
                break
            op = tok.value
            if op not in self.PRECEDENCE:
                break
            prec = self.PRECEDENCE[op]
            if prec < min_prec:
                break
            self._advance()
            rhs = self.parse_binary(prec + 1)
            lhs = BinaryOp(op, lhs, rhs, line=lhs.line, col=lhs.col)
        return lhs

    def parse_unary(self) -> Node:
        tok = self.current
        if tok.type == TokenType.OPERATOR and tok.value in self.UNARY_OPS:
            self._advance()
            operand = self.parse_unary()
            return UnaryOp(tok.value, operand, line=tok.line, col=tok.col)
        return self.parse_postfix()

    def parse_postfix(self) -> Node:
        """Parse a primary expression followed by any number of [index] suffixes."""
        expr = self.parse_primary()
        while self.check(TokenType.PUNCTUATION, "["):
            self.punct("[")
            index = self.parse_expression()
            self.punct("]")
            expr = Index(expr, index, line=expr.line, col=expr.col)
        return expr

    def parse_primary(self) -> Node:
        """Parse a primary expression: literal, identifier, call, array literal, or parenthesized expression."""
        tok = self.current
        if tok.type == TokenType.INTEGER:
            self._advance()
            return IntLiteral(int(tok.value), line=tok.line, col=tok.col)
        if tok.type == TokenType.IDENT:
            if tok.value in self.PRINT_BUILTINS:
                self._error(f"'{tok.value}' is a statement, not an expression")
            self._advance()
            if self.check(TokenType.PUNCTUATION, "("):
                args = self.parse_call_args()
                return Call(tok.value, args, line=tok.line, col=tok.col)
            return Name(tok.value, line=tok.line, col=tok.col)
        if tok.is_(TokenType.PUNCTUATION, "["):
            return self.parse_array_literal()
        if tok.is_(TokenType.PUNCTUATION, "("):
            self._advance()
            expr = self.parse_expression()
            self.punct(")")
            return expr
        self._expected("expression")

    def parse_call_args(self) -> List[Node]:
        """Parse arguments inside parentheses."""
        self.punct("(")
        args = []
        if not self.check(TokenType.PUNCTUATION, ")"):
            args.append(self.parse_expression())
            while self.check(TokenType.PUNCTUATION, ","):
                self.punct(",")
                args.append(self.parse_expression())
        self.punct(")")
        return args

    def parse_array_literal(self) -> ArrayLiteral:
        start = self.punct("[")
        elements = []
        if not self.check(TokenType.PUNCTUATION, "]"):
            elements.append(self.parse_expression())
            while self.check(TokenType.PUNCTUATION, ","):
                self.punct(",")
                elements.append(self.parse_expression())
        self.punct("]")
        return ArrayLiteral(elements, line=start.line, col=start.col)


def parse(source: str, filename: str = "<input>") -> Program:
    """Lex and parse a complete source text."""
    with recursion_limit():
        return Parser(Lexer(source, filename=filename)).parse_program()
