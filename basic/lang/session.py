"""Session control for the basic language. A Session owns the global scope for its whole lifetime, so variables and
functions defined by one line stay visible to the next, either in command-line mode or file interpretation mode.
"""

from basic.interpreter import global_symbol_table, parse, run, tokenize
from basic.lang.error import GenericException, IllegalCharError
from basic.lang.lexical import Lexer, TT_LPAREN, TT_LSQUARE, TT_RPAREN, TT_RSQUARE
from basic.lang.syntax import Node
from basic.lang.values import Null


class Session:
    """Governs a basic session, with control over the global scope."""
    SH_FILE = "<stdin>"  # command-line interpreter filename
    MODES = ("run", "tokens", "ast")

    def __init__(self, error_handler, path=SH_FILE, cmd_line=True, mode="run"):
        if mode not in Session.MODES:
            raise GenericException(f"unknown mode '{mode}'", internal=True)

        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.mode = mode          # run, or only print tokens/AST

        self.symbol_table = global_symbol_table()
        self.to_exec = []  # list of (expr, line num) to execute

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            add_to_prev = False

            try:
                with open(path, "r", encoding="utf-8") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, self.to_exec)
            except OSError:
                raise GenericException(f"'{path}' could not be opened")

        elif not cmd_line:
            raise GenericException(f"'{Session.SH_FILE}' is a reserved filename")

    @staticmethod
    def is_blank(line):
        """Whether line holds nothing to run (whitespace or a comment only)."""
        stripped = line.strip()
        return not stripped or stripped.startswith("#")

    @staticmethod
    def needs_continuation(line):
        """Whether line has more '(' / '[' tokens than closing ones. Lines that do not lex are never continued, so
        that the error gets reported straight away.
        """
        try:
            tokens = Lexer(Session.SH_FILE, line).make_tokens()
        except IllegalCharError:
            return False

        depth = 0
        for tok in tokens:
            if tok.kind in (TT_LPAREN, TT_LSQUARE):
                depth += 1
            elif tok.kind in (TT_RPAREN, TT_RSQUARE):
                depth -= 1
        return depth > 0

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. In command-line mode, exprs can be ignored (used to keep
        track of file's exprs), but add_to_prev will indicate whether a line continuation is necessary. Returns
        updated value of line and add_to_prev.
        """
        line = line.rstrip()

        if exprs is not None:
            if add_to_prev and exprs:
                prev, prev_line_num = exprs.pop()
                line = prev + "\n" + line
                exprs.append((line, prev_line_num))
            elif not Session.is_blank(line):
                exprs.append((line, line_num))

        return line, not Session.is_blank(line) and Session.needs_continuation(line)

    def execute(self, expr):
        """Runs expr in this session's global scope, or only tokenizes/parses it depending on self.mode."""
        if self.mode == "tokens":
            return tokenize(self.path, expr)
        elif self.mode == "ast":
            return parse(self.path, expr)
        return run(self.path, expr, self.symbol_table)

    def run_line(self, expr, line_num):
        """Executes a single top-level expression, registered with the error handler in case an error is raised."""
        self.error_handler.register_line(self.path, expr, line_num)
        result = self.execute(expr)
        self.error_handler.remove_line(self.path)  # error was not raised
        return result

    def run(self):
        """Runs this session's queued expressions in order. Returns their results and will raise any errors that are
        encountered.
        """
        results = []
        while self.to_exec:
            expr, line_num = self.to_exec.pop(0)
            results.append(self.run_line(expr, line_num))
        return results

    @staticmethod
    def display(result):
        """Text to print for a result, or None if nothing should be printed."""
        if isinstance(result, Node):
            return result.display()
        elif isinstance(result, Null):
            return None
        return repr(result)
