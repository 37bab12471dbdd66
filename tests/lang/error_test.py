import io
import unittest
from contextlib import redirect_stdout

from basic.interpreter import run
from basic.lang.error import (
    BasicError, DivisionByZeroError, ErrorHandler, GenericException, IllegalCharError, InvalidSyntaxError, RTError,
    string_with_arrows,
)
from basic.lang.lexical import Position


def raised(text, source_name="<stdin>"):
    try:
        run(source_name, text)
    except BasicError as e:
        return e
    raise AssertionError(f"{text!r} did not raise")


class StringWithArrowsTestCase(unittest.TestCase):

    def test_single_row(self):
        text = "1 + abc"
        result = string_with_arrows(text, Position(4, 0, 4, "", text), Position(7, 0, 7, "", text))
        self.assertEqual("1 + abc\n    ^^^", result)

    def test_at_least_one_caret(self):
        text = "1 +"
        result = string_with_arrows(text, Position(3, 0, 3, "", text), Position(3, 0, 3, "", text))
        self.assertEqual("1 +\n   ^", result)

    def test_multiple_rows(self):
        text = "ab\ncd"
        result = string_with_arrows(text, Position(1, 0, 1, "", text), Position(4, 1, 1, "", text))
        self.assertEqual("ab\n ^\ncd\n^", result)


class ErrorFormatTestCase(unittest.TestCase):

    def test_names(self):
        cases = {
            "@": "Illegal Character",
            "&": "Expected Character",
            "1 +": "Invalid Syntax",
            "x": "Undefined Variable",
            "1/0": "Division By Zero",
            "null + 1": "Illegal Operation",
            "len()": "Arity Mismatch",
            "[] / 0": "Index Out Of Range",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, raised(case).error_name, case)

    def test_illegal_char(self):
        expected = (
            "Illegal Character: '@'\n"
            "\tFile: '<stdin>' row(0), col(4)\n"
            "\n"
            "1 + @\n"
            "    ^\n"
        )
        self.assertEqual(expected, raised("1 + @").as_string())

    def test_invalid_syntax(self):
        expected = (
            "Invalid Syntax: 'Expected '=''\n"
            "\tFile: 'prog.bas' row(0), col(6)\n"
            "\n"
            "var x 1\n"
            "      ^\n"
        )
        self.assertEqual(expected, raised("var x 1", "prog.bas").as_string())

    def test_runtime_error(self):
        expected = (
            "Traceback (most recent call first):\n"
            "\tFile: '<stdin>' row(0), col(2), in <program>\n"
            "Division By Zero: 'Division by zero'\n"
            "1/0\n"
            "  ^\n"
        )
        error = raised("1/0")
        self.assertIsInstance(error, RTError)
        self.assertEqual(expected, error.as_string())
        self.assertEqual(expected, str(error))

    def test_runtime_traceback_order(self):
        error = raised("(fun inner() -> 1/0)()")
        self.assertIsInstance(error, DivisionByZeroError)
        lines = error.generate_traceback().split("\n")
        self.assertIn("in inner", lines[1])
        self.assertIn("row(0), col(1), in <program>", lines[2])


class ErrorHandlerTestCase(unittest.TestCase):

    def capture(self, func, *args):
        out = io.StringIO()
        with redirect_stdout(out):
            func(*args)
        return out.getvalue()

    def test_format_without_color(self):
        handler = ErrorHandler(color=False)
        for case in ("1 + @", "var x 1", "1/0", "null + 1"):
            try:
                run("<stdin>", case)
            except BasicError as e:
                self.assertEqual(e.as_string(), handler.format(e), case)

    def test_warn(self):
        handler = ErrorHandler(color=False)
        self.assertEqual("warning: careful\n", self.capture(handler.warn, "careful"))

    def test_throw_fatal(self):
        handler = ErrorHandler(color=False)
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                handler.throw(GenericException("boom"))
        self.assertEqual(1, cm.exception.code)

    def test_throw_with_line(self):
        handler = ErrorHandler(fatal=False, color=False)
        handler.register_file("<stdin>")
        handler.register_line("<stdin>", "1/0", 3)

        output = self.capture(handler.throw, raised("1/0"))
        self.assertTrue(output.startswith("  File '<stdin>', line 3:\n    1/0\nTraceback"))
        self.assertEqual({"<stdin>": (None, None)}, handler.traceback)

    def test_throw_generic(self):
        handler = ErrorHandler(fatal=False, color=False)
        self.assertEqual("error: boom\n", self.capture(handler.throw, GenericException("boom")))
        self.assertEqual("[internal] error: boom\n",
                         self.capture(handler.throw, GenericException("boom", internal=True)))

    def test_context_manager_suppresses_basic_errors(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False, color=False):
                pos_start, pos_end = Position(0, 0, 0, "<stdin>", "x"), Position(1, 0, 1, "<stdin>", "x")
                raise InvalidSyntaxError(pos_start, pos_end, "oops")
        self.assertTrue(out.getvalue().startswith("Invalid Syntax: 'oops'\n"))

        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False, color=False):
                raise IllegalCharError(Position(0, 0, 0, "<stdin>", "@"), Position(1, 0, 1, "<stdin>", "@"), "@")
        self.assertIn("^", out.getvalue())

    def test_context_manager_interrupts(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False, color=False):
                raise KeyboardInterrupt()
            with ErrorHandler(fatal=False, color=False):
                raise RecursionError()
        self.assertEqual("error: keyboard interrupt\nerror: maximum recursion depth exceeded\n", out.getvalue())

    def test_context_manager_passes_system_exit(self):
        with self.assertRaises(SystemExit):
            with ErrorHandler(fatal=False, color=False):
                raise SystemExit(0)

    def test_context_manager_internal_error(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with self.assertRaises(ValueError):
                with ErrorHandler(fatal=False, color=False):
                    raise ValueError("bad")
        self.assertEqual("[internal] error: unknown error: 'ValueError: bad'\n", out.getvalue())

    def test_deep_recursion_is_reported(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False, color=False):
                run("<stdin>", "(fun f(n) -> f(n + 1))(0)")
        self.assertEqual("error: maximum recursion depth exceeded\n", out.getvalue())


if __name__ == '__main__':
    unittest.main()
