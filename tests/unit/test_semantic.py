#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

import unittest

from sol.errors import RedeclarationError, TypeMismatchError, UndefinedNameError
from sol.parser import parse
from sol.semantic import SemanticAnalyzer


class TestSemantic(unittest.TestCase):
    def check(self, source: str):
        return SemanticAnalyzer().analyze(parse(source))

    def test_valid_program(self):
        program = self.check("fun sum(a, b) int { return a + b; }\nfun main() { return; }")
        self.assertEqual(len(program.functions), 2)

    def test_duplicate_function(self):
        with self.assertRaises(RedeclarationError) as cm:
            self.check("fun main() { }\nfun main() { }")
        self.assertEqual(cm.exception.line, 2)

    def test_builtin_names_are_reserved(self):
        for name in ["print", "println", "length"]:
            with self.subTest(name=name):
                with self.assertRaises(RedeclarationError):
                    self.check(f"fun {name}(a) {{ }}\nfun main() {{ }}")

    def test_duplicate_parameter(self):
        with self.assertRaises(RedeclarationError):
            self.check("fun f(a, a) { }\nfun main() { }")

    def test_missing_main(self):
        with self.assertRaises(UndefinedNameError):
            self.check("fun helper() { }")

    def test_main_shape(self):
        with self.assertRaises(TypeMismatchError):
            self.check("fun main(a) { }")
        with self.assertRaises(TypeMismatchError):
            self.check("fun main() int { return 0; }")

    def test_valued_return_in_none_function(self):
        with self.assertRaises(TypeMismatchError) as cm:
            self.check("fun f() {\n    for (;1;x = 1) { return 1; }\n}\nfun main() { }")
        self.assertEqual(cm.exception.line, 2)

    def test_bare_return_in_int_function(self):
        with self.assertRaises(TypeMismatchError):
            self.check("fun f() int { if (1) { } else { return; } }\nfun main() { }")

    def test_names_are_not_resolved_statically(self):
        # undefined names surface at run time, after earlier output
        self.check("fun main() { println(\"hi\"); missing(); }")


if __name__ == "__main__":
    unittest.main()
