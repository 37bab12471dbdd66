"""Builtin functions of the basic language. None of them perform I/O.

Each builtin reads its arguments by parameter name from the call context's symbol table and returns a Value.
"""

from basic.lang.error import IllegalOperationError, IndexOutOfRangeError
from basic.lang.values import BaseFunction, Boolean, BuiltinFunction, List, Null, Number, String


BUILTINS = {}  # name: (arg_names, func)


def builtin(*arg_names):
    """Registers the decorated function as a builtin named after it, taking arg_names."""

    def decorator(func):
        name = func.__name__.lstrip("_")
        BUILTINS[name] = (list(arg_names), func)
        return func

    return decorator


def expect(exec_ctx, name, cls):
    """Returns argument name, raising IllegalOperationError if it is not an instance of cls."""
    value = exec_ctx.symbol_table.get(name)
    if not isinstance(value, cls):
        raise IllegalOperationError(
            value.pos_start, value.pos_end, f"'{name}' must be a {cls.__name__.lower()}", exec_ctx
        )
    return value


@builtin("value")
def isNumber(exec_ctx):
    return Boolean(isinstance(exec_ctx.symbol_table.get("value"), Number))


@builtin("value")
def isString(exec_ctx):
    return Boolean(isinstance(exec_ctx.symbol_table.get("value"), String))


@builtin("value")
def isList(exec_ctx):
    return Boolean(isinstance(exec_ctx.symbol_table.get("value"), List))


@builtin("value")
def isFunction(exec_ctx):
    return Boolean(isinstance(exec_ctx.symbol_table.get("value"), BaseFunction))


@builtin("value")
def isNull(exec_ctx):
    return Boolean(isinstance(exec_ctx.symbol_table.get("value"), Null))


@builtin("list", "value")
def append(exec_ctx):
    """Appends in place. Returns the same list."""
    list_ = expect(exec_ctx, "list", List)
    list_.elements.append(exec_ctx.symbol_table.get("value"))
    return list_


@builtin("list", "index")
def pop(exec_ctx):
    list_ = expect(exec_ctx, "list", List)
    index = expect(exec_ctx, "index", Number)
    if not index.is_int:
        raise IllegalOperationError(index.pos_start, index.pos_end, "'index' must be an integer", exec_ctx)

    try:
        return list_.elements.pop(index.value)
    except IndexError:
        raise IndexOutOfRangeError(
            index.pos_start, index.pos_end,
            "Element at this index could not be removed from list because index is out of bounds", exec_ctx
        )


@builtin("listA", "listB")
def extend(exec_ctx):
    list_a = expect(exec_ctx, "listA", List)
    list_b = expect(exec_ctx, "listB", List)
    list_a.elements.extend(list_b.elements)
    return list_a


@builtin("value")
def _len(exec_ctx):
    value = exec_ctx.symbol_table.get("value")
    if isinstance(value, List):
        return Number(len(value.elements))
    elif isinstance(value, String):
        return Number(len(value.value))
    raise IllegalOperationError(value.pos_start, value.pos_end, "'value' must be a list or a string", exec_ctx)


@builtin("value")
def _str(exec_ctx):
    return String(str(exec_ctx.symbol_table.get("value")))


def builtin_functions():
    """Returns a fresh BuiltinFunction value for every registered builtin."""
    return [BuiltinFunction(name, arg_names, func) for name, (arg_names, func) in BUILTINS.items()]
