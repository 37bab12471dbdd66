"""Variable scoping for the basic language.

A SymbolTable is one lexical scope: it owns its bindings and holds a lookup-only reference to the enclosing scope.
A Context is one frame of the call stack and exists only to build runtime error tracebacks.
"""


class SymbolTable:

    def __init__(self, parent=None):
        self.symbols = {}
        self.parent = parent

    def get(self, name):
        """Returns the value bound to name in this scope or the nearest enclosing one, or None if it is unbound."""
        value = self.symbols.get(name)
        if value is None and self.parent is not None:
            return self.parent.get(name)
        return value

    def set(self, name, value):
        """Binds name in this scope. Enclosing scopes are never written to."""
        self.symbols[name] = value

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        return f"SymbolTable({', '.join(self.symbols)})"


class Context:
    """parent_entry_pos is the position in the parent frame where this frame was entered (the call site)."""

    def __init__(self, name, symbol_table, parent=None, parent_entry_pos=None):
        self.name = name
        self.symbol_table = symbol_table
        self.parent = parent
        self.parent_entry_pos = parent_entry_pos

    def __repr__(self):
        return f"Context({self.name})"
