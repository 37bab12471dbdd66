"""Error handling for the basic language. Errors raised by the lexer, parser and evaluator all derive from BasicError
and know how to render themselves with a caret diagnosis. Only BasicErrors and GenericExceptions should be
encountered during running: if another type of error is raised and makes it all the way to ErrorHandler, it is
assumed to be an internal issue.
"""

import sys

from termcolor import colored


def string_with_arrows(text, pos_start, pos_end):
    """Returns the source lines spanned by pos_start..pos_end, each followed by a caret underline."""
    lines = text.split("\n")
    result = []

    for row in range(pos_start.row, pos_end.row + 1):
        line = lines[row] if row < len(lines) else ""
        col_start = pos_start.col if row == pos_start.row else 0
        col_end = pos_end.col if row == pos_end.row else len(line)

        result.append(line)
        result.append(" " * col_start + "^" * max(col_end - col_start, 1))

    return "\n".join(result)


class GenericException(Exception):
    """Driver-level failure that is not tied to a source span (unreadable file, reserved filename, ...)."""

    def __init__(self, msg, internal=False):
        super().__init__(msg)
        self.msg = msg
        self.internal = internal


class BasicError(Exception):
    """Superclass of every lexing, parsing and runtime error. Carries the source span it originated from."""

    def __init__(self, pos_start, pos_end, error_name, details):
        super().__init__(details)
        self.pos_start = pos_start
        self.pos_end = pos_end
        self.error_name = error_name
        self.details = details

    def header(self):
        return f"{self.error_name}: '{self.details}'"

    def location(self):
        return f"\tFile: '{self.pos_start.source_name}' row({self.pos_start.row}), col({self.pos_start.col})"

    def diagnose(self):
        return string_with_arrows(self.pos_start.source_text, self.pos_start, self.pos_end)

    def as_string(self):
        return f"{self.header()}\n{self.location()}\n\n{self.diagnose()}\n"

    def __str__(self):
        return self.as_string()


class IllegalCharError(BasicError):

    def __init__(self, pos_start, pos_end, details):
        super().__init__(pos_start, pos_end, "Illegal Character", details)


class ExpectedCharError(IllegalCharError):
    """A character that is only legal as part of a two-character operator (a lone '&' or '|')."""

    def __init__(self, pos_start, pos_end, details):
        super().__init__(pos_start, pos_end, details)
        self.error_name = "Expected Character"


class InvalidSyntaxError(BasicError):

    def __init__(self, pos_start, pos_end, details):
        super().__init__(pos_start, pos_end, "Invalid Syntax", details)


class RTError(BasicError):
    """Runtime error. Also carries the Context it was raised in, which is walked to build a traceback."""
    NAME = "Runtime Error"

    def __init__(self, pos_start, pos_end, details, context):
        super().__init__(pos_start, pos_end, self.NAME, details)
        self.context = context

    def frames(self):
        """Yields (position, context) pairs, innermost frame first."""
        pos = self.pos_start
        ctx = self.context
        while ctx is not None:
            yield pos, ctx
            pos = ctx.parent_entry_pos
            ctx = ctx.parent

    def generate_traceback(self):
        result = "Traceback (most recent call first):\n"
        for pos, ctx in self.frames():
            result += f"\tFile: '{pos.source_name}' row({pos.row}), col({pos.col}), in {ctx.name}\n"
        return result

    def as_string(self):
        return f"{self.generate_traceback()}{self.header()}\n{self.diagnose()}\n"


class UndefinedVariableError(RTError):
    NAME = "Undefined Variable"


class DivisionByZeroError(RTError):
    NAME = "Division By Zero"


class IllegalOperationError(RTError):
    NAME = "Illegal Operation"


class ArityMismatchError(RTError):
    NAME = "Arity Mismatch"


class IndexOutOfRangeError(RTError):
    NAME = "Index Out Of Range"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and print basic errors/warnings instead."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, color=True):
        self.fatal = fatal
        self.color = color
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session run_line."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after a successful Session run_line."""
        self.traceback[path] = (None, None)

    def paint(self, text, color=None, bold=True):
        if not self.color:
            return text
        return colored(text, color, attrs=["bold"] if bold else None)

    def format(self, error):
        """Returns the coloured rendering of a BasicError. Same layout as error.as_string()."""
        result = ""
        if isinstance(error, RTError):
            result += error.generate_traceback()

        result += self.paint(f"{error.error_name}: ", ErrorHandler.ERROR) + f"'{error.details}'\n"
        if not isinstance(error, RTError):
            result += error.location() + "\n\n"

        for idx, line in enumerate(error.diagnose().split("\n")):
            result += self.paint(line, ErrorHandler.ERROR) if idx % 2 else line
            result += "\n"

        return result

    def warn(self, msg):
        """Prints a warning message."""
        print(self.paint("warning: ", ErrorHandler.WARNING) + msg)

    def throw(self, error):
        """Prints error, preceded by the file/line that was being run when it was raised. error must be a BasicError
        or a GenericException.
        """
        error_msg = ""
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"

        if isinstance(error, BasicError):
            error_msg += self.format(error)
        else:
            if error.internal:
                error_msg += self.paint("[internal] ", ErrorHandler.ERROR)
            error_msg += self.paint("error: ", ErrorHandler.ERROR) + error.msg

        print(error_msg)

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}  # reset traceback (no need if fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, (BasicError, GenericException)):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
