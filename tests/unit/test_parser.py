#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

import unittest

from sol.lexer import Lexer
from sol.parser import ParseError, Parser, parse
from sol.sol_ast import (
    ArrayLiteral,
    Assign,
    BinaryOp,
    Block,
    Call,
    Decl,
    ExprStmt,
    For,
    If,
    Index,
    IntLiteral,
    Name,
    Print,
    Program,
    Return,
    UnaryOp,
    While,
)


class TestParser(unittest.TestCase):
    def parse(self, source: str) -> Program:
        """Parse source and return the AST program."""
        lexer = Lexer(source)
        parser = Parser(lexer)
        return parser.parse_program()

    def body(self, statements: str):
        """Parse statements wrapped in a main function and return its body."""
        program = self.parse(f"fun main() {{\n{statements}\n}}")
        return program.functions[0].body.statements

    def expr(self, source: str):
        (stmt,) = self.body(f"{source};")
        self.assertIsInstance(stmt, ExprStmt)
        return stmt.expr

    def test_empty_program(self):
        program = self.parse("")
        self.assertIsInstance(program, Program)
        self.assertEqual(program.functions, [])

    def test_empty_with_comments(self):
        program = self.parse("// just a comment\n/* block comment */")
        self.assertEqual(program.functions, [])

    def test_function_declaration(self):
        program = self.parse("fun sum(a, b) int { return a + b; }\nfun main() {}")
        sum_fn, main_fn = program.functions
        self.assertEqual(sum_fn.name, "sum")
        self.assertEqual([p.name for p in sum_fn.params], ["a", "b"])
        self.assertEqual(sum_fn.return_type, "int")
        self.assertEqual(sum_fn.body.statements, [Return(BinaryOp("+", Name("a"), Name("b")))])
        self.assertEqual(main_fn.return_type, "none")
        self.assertEqual(main_fn.params, [])

    def test_explicit_none_return_type(self):
        program = self.parse("fun f() none { return; }")
        self.assertEqual(program.functions[0].return_type, "none")
        self.assertEqual(program.functions[0].body.statements, [Return(None)])

    def test_stray_token_error(self):
        with self.assertRaises(ParseError) as cm:
            self.parse("decl x = 1;")
        self.assertIn("Expected 'fun', found 'decl'", str(cm.exception))

    def test_missing_semicolon_reports_expected_and_found(self):
        with self.assertRaises(ParseError) as cm:
            self.parse("fun main() {\n    decl x = 1\n}")
        self.assertIn("Expected ';', found '}'", cm.exception.message)
        self.assertEqual((cm.exception.line, cm.exception.col), (3, 1))

    def test_unclosed_block(self):
        with self.assertRaises(ParseError) as cm:
            self.parse("fun main() {")
        self.assertIn("end of input", cm.exception.message)

    def test_scalar_decl(self):
        (stmt,) = self.body("decl bar = 37;")
        self.assertEqual(stmt, Decl("bar", None, IntLiteral(37)))
        self.assertFalse(stmt.is_array)

    def test_decl_without_initializer(self):
        (scalar, array) = self.body("decl a; decl b[3];")
        self.assertEqual(scalar, Decl("a", None, None))
        self.assertEqual(array, Decl("b", 3, None))

    def test_array_decl_broadcast(self):
        (stmt,) = self.body("decl baz[64] = [ 1 ];")
        self.assertEqual(stmt, Decl("baz", 64, ArrayLiteral([IntLiteral(1)])))
        self.assertTrue(stmt.is_array)

    def test_array_decl_positional(self):
        (stmt,) = self.body("decl a[3] = [1, 2, 3];")
        self.assertEqual(len(stmt.init.elements), 3)

    def test_zero_size_array_with_broadcast(self):
        (stmt,) = self.body("decl arr[0] = [ 1 ];")
        self.assertEqual(stmt.size, 0)

    def test_array_decl_wrong_count(self):
        with self.assertRaises(ParseError) as cm:
            self.body("decl a[3] = [1, 2];")
        self.assertIn("2 elements, expected 1 or 3", str(cm.exception))

    def test_array_decl_requires_literal(self):
        with self.assertRaises(ParseError):
            self.body("decl a[3] = 1;")

    def test_array_size_must_be_literal(self):
        for src in ["decl a[n] = [1];", "decl a[-1] = [1];"]:
            with self.subTest(src=src):
                with self.assertRaises(ParseError):
                    self.body(src)

    def test_scalar_decl_rejects_array_literal(self):
        with self.assertRaises(ParseError):
            self.body("decl a = [1, 2];")

    def test_assignments(self):
        stmts = self.body("x = 1; x += 2; x -= 3; x *= 4; x /= 5; a[i] = 6;")
        self.assertEqual([s.op for s in stmts], ["=", "+=", "-=", "*=", "/=", "="])
        self.assertEqual(stmts[-1].target, Index(Name("a"), Name("i")))

    def test_invalid_assignment_target(self):
        with self.assertRaises(ParseError):
            self.body("f() = 1;")

    def test_precedence(self):
        expr = self.expr("1 + 2 * 3 < 4 - 5 / 6 == 7")
        expected = BinaryOp(
            "==",
            BinaryOp(
                "<",
                BinaryOp("+", IntLiteral(1), BinaryOp("*", IntLiteral(2), IntLiteral(3))),
                BinaryOp("-", IntLiteral(4), BinaryOp("/", IntLiteral(5), IntLiteral(6))),
            ),
            IntLiteral(7),
        )
        self.assertEqual(expr, expected)

    def test_left_associativity(self):
        expr = self.expr("10 - 3 - 2")
        self.assertEqual(
            expr, BinaryOp("-", BinaryOp("-", IntLiteral(10), IntLiteral(3)), IntLiteral(2))
        )

    def test_parentheses_and_unary(self):
        expr = self.expr("-(a + 1) * !b")
        self.assertEqual(
            expr,
            BinaryOp(
                "*",
                UnaryOp("-", BinaryOp("+", Name("a"), IntLiteral(1))),
                UnaryOp("!", Name("b")),
            ),
        )

    def test_call_and_index(self):
        expr = self.expr("sum(bar, baz[i + 1])")
        self.assertEqual(
            expr,
            Call("sum", [Name("bar"), Index(Name("baz"), BinaryOp("+", Name("i"), IntLiteral(1)))]),
        )

    def test_for_loop(self):
        (stmt,) = self.body("for (decl i = 0; i < length(baz); i += 1) { x = i; }")
        self.assertIsInstance(stmt, For)
        self.assertEqual(stmt.init, Decl("i", None, IntLiteral(0)))
        self.assertEqual(stmt.cond, BinaryOp("<", Name("i"), Call("length", [Name("baz")])))
        self.assertEqual(stmt.step, Assign(Name("i"), "+=", IntLiteral(1)))
        self.assertEqual(len(stmt.body.statements), 1)

    def test_for_loop_optional_init(self):
        stmts = self.body("for (; i < 3; i += 1) {} for (i = 0; i < 3; i += 1) {}")
        self.assertIsNone(stmts[0].init)
        self.assertEqual(stmts[1].init, Assign(Name("i"), "=", IntLiteral(0)))

    def test_for_loop_step_must_be_assignment(self):
        with self.assertRaises(ParseError) as cm:
            self.body("for (decl i = 0; i < 3; i) {}")
        self.assertIn("assignment operator", cm.exception.message)

    def test_while_and_if(self):
        stmts = self.body("while (n > 0) { n -= 1; } if (a) { } else if (b) { } else { }")
        self.assertIsInstance(stmts[0], While)
        self.assertIsInstance(stmts[1], If)
        self.assertIsInstance(stmts[1].else_body, If)
        self.assertIsInstance(stmts[1].else_body.else_body, Block)

    def test_nested_block(self):
        (stmt,) = self.body("{ decl x = 2; }")
        self.assertEqual(stmt, Block([Decl("x", None, IntLiteral(2))]))

    def test_print_statement(self):
        (stmt,) = self.body('print("values: {baz[i]}, {bar}; sum: ");')
        self.assertIsInstance(stmt, Print)
        self.assertEqual(stmt.builtin, "print")
        self.assertEqual(
            stmt.segments,
            ["values: ", Index(Name("baz"), Name("i")), ", ", Name("bar"), "; sum: "],
        )

    def test_print_requires_string_literal(self):
        with self.assertRaises(ParseError) as cm:
            self.body("println(1);")
        self.assertIn("Expected string literal", cm.exception.message)

    def test_print_is_not_an_expression(self):
        with self.assertRaises(ParseError):
            self.body('x = print("a");')

    def test_positions(self):
        program = self.parse("fun main() {\n    decl baz[2] = [1];\n    baz[0] = 3;\n}")
        decl, assign = program.functions[0].body.statements
        self.assertEqual((decl.line, decl.col), (2, 5))
        self.assertEqual((assign.line, assign.col), (3, 5))

    def test_deeply_nested_expression(self):
        depth = 400
        source = f"fun main() {{ decl x = {'(' * depth}1{')' * depth}; }}"
        (decl,) = parse(source).functions[0].body.statements
        self.assertEqual(decl.init, IntLiteral(1))

    def test_nesting_too_deep(self):
        depth = 5000
        with self.assertRaises(ParseError) as cm:
            self.parse(f"fun main() {{ decl x = {'-' * depth}1; }}")
        self.assertEqual(cm.exception.message, "Nesting too deep")

    def test_equality_ignores_positions(self):
        self.assertEqual(Name("x", line=1, col=1), Name("x", line=9, col=9))
        self.assertNotEqual(Name("x"), Name("y"))
        self.assertNotEqual(Name("x"), IntLiteral(1))


if __name__ == "__main__":
    unittest.main()
