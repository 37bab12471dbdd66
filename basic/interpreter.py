"""basic language interpreter.

Basic program flow, one top-level expression at a time:
    1. Lexer: turns the source text into a list of tokens (see basic/lang/lexical.py)
        - Will fail on the first character that cannot start a token
    2. Parser: builds an AST from the tokens by recursive descent (see basic/lang/syntax.py for the grammar)
        - Will fail if the tokens up to EOF do not form exactly one expression
    3. Evaluation: not a compiler, so the AST is walked directly (see basic/lang/evaluator.py)
        - Will fail on the first runtime error, with a traceback of the function calls it happened in

The global scope is not hidden state: whoever calls run decides which SymbolTable to evaluate in, and passes the
same one again to keep variables and functions alive between lines (see basic/lang/session.py).
"""

from basic.lang.builtins import builtin_functions
from basic.lang.evaluator import Interpreter
from basic.lang.lexical import Lexer
from basic.lang.scope import Context, SymbolTable
from basic.lang.syntax import Parser
from basic.lang.values import Boolean, Null


PROGRAM_CONTEXT = "<program>"


def global_symbol_table():
    """Returns a new global scope holding the constants and every builtin function."""
    symbol_table = SymbolTable()
    symbol_table.set("null", Null())
    symbol_table.set("true", Boolean(True))
    symbol_table.set("false", Boolean(False))

    for func in builtin_functions():
        symbol_table.set(func.name, func)

    return symbol_table


def tokenize(source_name, text):
    return Lexer(source_name, text).make_tokens()


def parse(source_name, text):
    return Parser(tokenize(source_name, text)).parse()


def run(source_name, text, symbol_table=None):
    """Runs text and returns the resulting Value. Raises the first BasicError encountered. source_name is only used
    in error messages.
    """
    if symbol_table is None:
        symbol_table = global_symbol_table()

    ast = parse(source_name, text)
    context = Context(PROGRAM_CONTEXT, symbol_table)
    return Interpreter().visit(ast, context)
