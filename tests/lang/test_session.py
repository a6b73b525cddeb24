import contextlib
import io
import os
import tempfile
import unittest

from punky.lang.error import ErrorHandler, EvaluationError, GenericException, ParseError
from punky.lang.session import Session
from punky.pure.objects import Int


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True)

    def execute(self, line, line_num=1):
        self.sess.add(line, line_num)
        return list(self.sess.run())

    def test_outputs(self):
        cases = {
            "5": ["5"],
            "1 + 2 * 3": ["7"],
            "true != false": ["true"],
            "if (false) { 1 }": ["null"],
            "fn(x) { x }": ["fn(x) x"],
            "let a = 1;": [],
            "": [],
            "return 3;": ["3"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.execute(case), case)

    def test_cmd_line_is_not_fatal(self):
        self.assertFalse(self.sess.error_handler.fatal)

    def test_bindings_persist(self):
        self.assertEqual([], self.execute("let x = 5;", 1))
        self.assertEqual(["10"], self.execute("x * 2", 2))
        self.assertEqual([], self.execute("let double = fn(n) { n * 2 };", 3))
        self.assertEqual(["10"], self.execute("double(x)", 4))
        self.assertEqual(Int(5), self.sess.env.get("x"))

    def test_parse_error(self):
        with self.assertRaises(ParseError) as context:
            self.sess.add("let = 5;", 1)

        error = context.exception
        self.assertEqual("let = 5;", error.line)
        self.assertEqual("expected next token to be IDENTIFIER, got EQUAL instead", error.diagnostics[0].message)
        self.assertEqual({}, self.sess.to_exec)

    def test_evaluation_error(self):
        with self.assertRaises(EvaluationError) as context:
            self.execute("y + 1")
        self.assertEqual("identifier not found: y", context.exception.msg)
        self.assertEqual({}, self.sess.to_exec)

    def test_bindings_survive_errors(self):
        self.execute("let x = 5;", 1)
        with self.assertRaises(EvaluationError):
            self.execute("let x = x + true;", 2)
        with self.assertRaises(ParseError):
            self.execute("let x 6;", 3)
        self.assertEqual(["5"], self.execute("x", 4))

    def test_verbose_steps(self):
        self.sess.error_handler.verbose = True
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            self.assertEqual(["7"], self.execute("1 + 2 * 3"))
        self.assertIn("(1 + (2 * 3))", out.getvalue())

    def test_repr(self):
        self.execute("let b = 1; let a = 2;")
        self.assertEqual("Session(path='<in>', bindings=['a', 'b'])", repr(self.sess))


class PreprocessTestCase(unittest.TestCase):

    def test_is_open(self):
        cases = {
            "let f = fn(x) {": True,
            "add(1,": True,
            "let f = fn(x) { x };": False,
            "5 + 5": False,
            "}": False,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.is_open(case), case)

    def test_preprocess_line(self):
        self.assertEqual(("let f = fn(x) {", True), Session.preprocess_line("let f = fn(x) {  \n", 1, False))
        self.assertEqual(("x", False), Session.preprocess_line("x\n", 2, False))

    def test_continuation(self):
        exprs = []
        add_to_prev = False
        for line_num, line in enumerate(["let f = fn(x) {\n", "  x * 2\n", "};\n", "\n", "f(2)\n"], start=1):
            __, add_to_prev = Session.preprocess_line(line, line_num, add_to_prev, exprs)

        self.assertEqual([("let f = fn(x) { x * 2 };", 1), ("f(2)", 5)], exprs)


class FileSessionTestCase(unittest.TestCase):

    def write_source(self, source):
        handle, path = tempfile.mkstemp(suffix=".pk")
        with os.fdopen(handle, "w") as file:
            file.write(source)
        self.addCleanup(os.remove, path)
        return path

    def test_file_mode(self):
        path = self.write_source(
            "let add = fn(a, b) {\n"
            "  a + b\n"
            "};\n"
            "add(1, 2)\n"
            "\n"
            "let newAdder = fn(x) { fn(y) { x + y } };\n"
            "newAdder(10)(\n"
            "  10\n"
            ")\n"
        )
        sess = Session(ErrorHandler(), path, cmd_line=False)

        self.assertEqual([1, 4, 6, 7], list(sess.to_exec))
        self.assertEqual(["3", "20"], list(sess.run()))
        self.assertTrue(sess.error_handler.fatal)

    def test_file_parse_error(self):
        path = self.write_source("let x = 1;\nlet = 2;\n")
        with self.assertRaises(ParseError) as context:
            Session(ErrorHandler(), path, cmd_line=False)
        self.assertEqual("let = 2;", context.exception.line)

    def test_missing_file(self):
        with self.assertRaises(GenericException):
            Session(ErrorHandler(), os.path.join(tempfile.gettempdir(), "punky-no-such-file.pk"), cmd_line=False)

    def test_reserved_filename(self):
        with self.assertRaises(GenericException):
            Session(ErrorHandler(), Session.SH_FILE, cmd_line=False)


if __name__ == '__main__':
    unittest.main()
