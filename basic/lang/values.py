"""Runtime values of the basic language.

Each value carries a (pos_start, pos_end, context) tag that is only used for error messages: it is set in place by
the evaluator and is not part of the value's identity. Operators are methods on the left operand, which receives the
right operand; any pairing a variant does not handle raises IllegalOperationError.
"""

from basic.lang.error import (
    ArityMismatchError, DivisionByZeroError, IllegalOperationError, IndexOutOfRangeError,
)
from basic.lang.scope import Context, SymbolTable


class Value:

    def __init__(self):
        self.set_pos()
        self.set_context()

    def set_pos(self, pos_start=None, pos_end=None):
        self.pos_start = pos_start
        self.pos_end = pos_end
        return self

    def set_context(self, context=None):
        self.context = context
        return self

    def illegal_operation(self, other=None, details="Illegal operation"):
        pos_end = other.pos_end if other is not None and other.pos_end is not None else self.pos_end
        raise IllegalOperationError(self.pos_start, pos_end, details, self.context)

    def added_to(self, other):
        return self.illegal_operation(other)

    def subbed_by(self, other):
        return self.illegal_operation(other)

    def multed_by(self, other):
        return self.illegal_operation(other)

    def dived_by(self, other):
        return self.illegal_operation(other)

    def powed_by(self, other):
        return self.illegal_operation(other)

    def get_comparison_eq(self, other):
        return self.illegal_operation(other)

    def get_comparison_ne(self, other):
        return self.illegal_operation(other)

    def get_comparison_lt(self, other):
        return self.illegal_operation(other)

    def get_comparison_gt(self, other):
        return self.illegal_operation(other)

    def get_comparison_lte(self, other):
        return self.illegal_operation(other)

    def get_comparison_gte(self, other):
        return self.illegal_operation(other)

    def anded_by(self, other):
        """self if self is falsy, else other. Each operand keeps its own type."""
        return other if self.is_true() else self

    def ored_by(self, other):
        """self if self is truthy, else other."""
        return self if self.is_true() else other

    def notted(self):
        return Boolean(not self.is_true()).set_context(self.context)

    def is_true(self):
        return True

    def copy(self):
        """New wrapper around the same payload, with the same tags."""
        raise NotImplementedError()

    def tagged(self, node, context):
        """Copies self and tags the copy with node's span and context."""
        return self.copy().set_pos(node.pos_start, node.pos_end).set_context(context)

    def __str__(self):
        return self.__repr__()


class Null(Value):

    def get_comparison_eq(self, other):
        return Boolean(isinstance(other, Null)).set_context(self.context)

    def get_comparison_ne(self, other):
        return Boolean(not isinstance(other, Null)).set_context(self.context)

    def is_true(self):
        return False

    def copy(self):
        return Null().set_pos(self.pos_start, self.pos_end).set_context(self.context)

    def __repr__(self):
        return "null"


class Number(Value):
    """Wraps a python int or float. Integer-ness is carried by the payload's type."""

    def __init__(self, value):
        super().__init__()
        self.value = value

    @property
    def is_int(self):
        return isinstance(self.value, int)

    def _new(self, value):
        return Number(value).set_context(self.context)

    def _arith(self, other, op):
        if not isinstance(other, Number):
            return self.illegal_operation(other)
        try:
            return self._new(op(self.value, other.value))
        except OverflowError:
            return self.illegal_operation(other, "Numeric overflow")

    def added_to(self, other):
        return self._arith(other, lambda a, b: a + b)

    def subbed_by(self, other):
        return self._arith(other, lambda a, b: a - b)

    def multed_by(self, other):
        return self._arith(other, lambda a, b: a * b)

    def dived_by(self, other):
        if not isinstance(other, Number):
            return self.illegal_operation(other)
        if other.value == 0:
            raise DivisionByZeroError(other.pos_start, other.pos_end, "Division by zero", self.context)

        if self.is_int and other.is_int and self.value % other.value == 0:
            return self._new(self.value // other.value)
        return self._arith(other, lambda a, b: a / b)

    def powed_by(self, other):
        if not isinstance(other, Number):
            return self.illegal_operation(other)

        try:
            result = self.value ** other.value
        except ZeroDivisionError:
            raise DivisionByZeroError(other.pos_start, other.pos_end, "Division by zero", self.context)
        except OverflowError:
            return self.illegal_operation(other, "Numeric overflow")

        if isinstance(result, complex):
            return self.illegal_operation(other, "Result is not a real number")
        return self._new(result)

    def _compare(self, other, op):
        if isinstance(other, Number):
            return Boolean(op(self.value, other.value)).set_context(self.context)
        return self.illegal_operation(other)

    def get_comparison_eq(self, other):
        if isinstance(other, Null):
            return Boolean(False).set_context(self.context)
        return self._compare(other, lambda a, b: a == b)

    def get_comparison_ne(self, other):
        if isinstance(other, Null):
            return Boolean(True).set_context(self.context)
        return self._compare(other, lambda a, b: a != b)

    def get_comparison_lt(self, other):
        return self._compare(other, lambda a, b: a < b)

    def get_comparison_gt(self, other):
        return self._compare(other, lambda a, b: a > b)

    def get_comparison_lte(self, other):
        return self._compare(other, lambda a, b: a <= b)

    def get_comparison_gte(self, other):
        return self._compare(other, lambda a, b: a >= b)

    def is_true(self):
        return self.value != 0

    def copy(self):
        return type(self)(self.value).set_pos(self.pos_start, self.pos_end).set_context(self.context)

    def __repr__(self):
        return str(self.value)


class Boolean(Number):
    """A Number whose payload is a python bool, so true and false still take part in arithmetic as 1 and 0."""

    def __init__(self, value):
        super().__init__(bool(value))

    def __repr__(self):
        return "true" if self.value else "false"


class String(Value):

    def __init__(self, value):
        super().__init__()
        self.value = value

    def _new(self, value):
        return String(value).set_context(self.context)

    def added_to(self, other):
        if isinstance(other, String):
            return self._new(self.value + other.value)
        elif isinstance(other, Number):
            return self._new(self.value + repr(other))
        return self.illegal_operation(other)

    def multed_by(self, other):
        if isinstance(other, Number) and other.is_int and other.value >= 0:
            return self._new(self.value * other.value)
        return self.illegal_operation(other)

    def _compare(self, other, op):
        """Strings compare lexicographically with strings, and with the display text of numbers."""
        if isinstance(other, String):
            return Boolean(op(self.value, other.value)).set_context(self.context)
        elif isinstance(other, Number):
            return Boolean(op(self.value, repr(other))).set_context(self.context)
        return self.illegal_operation(other)

    def get_comparison_eq(self, other):
        return self._compare(other, lambda a, b: a == b)

    def get_comparison_ne(self, other):
        return self._compare(other, lambda a, b: a != b)

    def get_comparison_lt(self, other):
        return self._compare(other, lambda a, b: a < b)

    def get_comparison_gt(self, other):
        return self._compare(other, lambda a, b: a > b)

    def get_comparison_lte(self, other):
        return self._compare(other, lambda a, b: a <= b)

    def get_comparison_gte(self, other):
        return self._compare(other, lambda a, b: a >= b)

    def is_true(self):
        return len(self.value) > 0

    def copy(self):
        return String(self.value).set_pos(self.pos_start, self.pos_end).set_context(self.context)

    def __str__(self):
        return self.value

    def __repr__(self):
        return f'"{self.value}"'


class List(Value):
    """Copies share the element list, so builtins that mutate a list are seen through every copy of it."""

    def __init__(self, elements):
        super().__init__()
        self.elements = elements

    def _index(self, other):
        if not (isinstance(other, Number) and other.is_int):
            return self.illegal_operation(other)
        return other.value

    def added_to(self, other):
        return List(self.elements + [other]).set_context(self.context)

    def subbed_by(self, other):
        index = self._index(other)
        elements = list(self.elements)
        try:
            elements.pop(index)
        except IndexError:
            raise IndexOutOfRangeError(
                other.pos_start, other.pos_end,
                "Element at this index could not be removed from list because index is out of bounds", self.context
            )
        return List(elements).set_context(self.context)

    def dived_by(self, other):
        index = self._index(other)
        try:
            return self.elements[index].copy()
        except IndexError:
            raise IndexOutOfRangeError(
                other.pos_start, other.pos_end,
                "Element at this index could not be retrieved from list because index is out of bounds", self.context
            )

    def get_comparison_gte(self, other):
        return Boolean(True).set_context(self.context)

    def copy(self):
        return List(self.elements).set_pos(self.pos_start, self.pos_end).set_context(self.context)

    def __repr__(self):
        return f"[{', '.join(repr(element) for element in self.elements)}]"


class BaseFunction(Value):
    """Shared call protocol of user-defined and builtin functions: strict arity check, then a fresh scope whose
    parent is the scope the function was defined in.
    """

    def __init__(self, name, arg_names, closure=None):
        super().__init__()
        self.name = name or "<anonymous>"
        self.arg_names = arg_names
        self.closure = closure

    def generate_new_context(self):
        return Context(self.name, SymbolTable(self.closure), self.context, self.pos_start)

    def check_args(self, args):
        if len(args) != len(self.arg_names):
            amount = "many" if len(args) > len(self.arg_names) else "few"
            raise ArityMismatchError(
                self.pos_start, self.pos_end,
                f"too {amount} args passed into '{self.name}': expected {len(self.arg_names)}, got {len(args)}",
                self.context
            )

    def populate_args(self, args, exec_ctx):
        for arg_name, arg_value in zip(self.arg_names, args):
            exec_ctx.symbol_table.set(arg_name, arg_value.copy().set_context(exec_ctx))

    def check_and_populate_args(self, args, exec_ctx):
        self.check_args(args)
        self.populate_args(args, exec_ctx)

    def execute(self, args, interpreter):
        raise NotImplementedError()

    def get_comparison_gte(self, other):
        raise IllegalOperationError(
            other.pos_start, other.pos_end, "Uncaught SyntaxError: Unexpected token '>='", self.context
        )


class Function(BaseFunction):
    """User-defined function. body_node is shared with the AST, never copied."""

    def __init__(self, name, body_node, arg_names, closure):
        super().__init__(name, arg_names, closure)
        self.body_node = body_node

    def execute(self, args, interpreter):
        exec_ctx = self.generate_new_context()
        self.check_and_populate_args(args, exec_ctx)
        return interpreter.visit(self.body_node, exec_ctx)

    def copy(self):
        copy = Function(self.name, self.body_node, self.arg_names, self.closure)
        return copy.set_pos(self.pos_start, self.pos_end).set_context(self.context)

    def __repr__(self):
        return f"<function {self.name}>"


class BuiltinFunction(BaseFunction):
    """Function implemented in python. func receives the call's Context, whose symbol table holds the arguments by
    their parameter names, and returns a Value.
    """

    def __init__(self, name, arg_names, func):
        super().__init__(name, arg_names)
        self.func = func

    def execute(self, args, interpreter):
        exec_ctx = self.generate_new_context()
        self.check_and_populate_args(args, exec_ctx)
        return self.func(exec_ctx)

    def copy(self):
        copy = BuiltinFunction(self.name, self.arg_names, self.func)
        return copy.set_pos(self.pos_start, self.pos_end).set_context(self.context)

    def __repr__(self):
        return f"<built-in function {self.name}>"
