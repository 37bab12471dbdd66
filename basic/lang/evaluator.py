"""Tree-walking evaluator for the basic language. Interpreter.visit evaluates a node in a Context and returns a
Value, raising an RTError subclass on the first runtime error.
"""

from basic.lang.error import IllegalOperationError, UndefinedVariableError
from basic.lang.lexical import (
    TT_DIV, TT_EE, TT_GT, TT_GTE, TT_INT, TT_KEYWORD, TT_LT, TT_LTE, TT_MINUS, TT_MUL, TT_NE, TT_PLUS, TT_POW,
)
from basic.lang.syntax import (
    BinOpNode, CallNode, ForNode, FuncDefNode, IfNode, ListNode, NumberNode, StringNode, UnaryOpNode, VarAccessNode,
    VarAssignNode, WhileNode,
)
from basic.lang.values import BaseFunction, Function, List, Null, Number, String


# operator token: name of the method on the left operand
BINARY_OPERATORS = {
    TT_PLUS: "added_to",
    TT_MINUS: "subbed_by",
    TT_MUL: "multed_by",
    TT_DIV: "dived_by",
    TT_POW: "powed_by",
    TT_EE: "get_comparison_eq",
    TT_NE: "get_comparison_ne",
    TT_LT: "get_comparison_lt",
    TT_GT: "get_comparison_gt",
    TT_LTE: "get_comparison_lte",
    TT_GTE: "get_comparison_gte",
    (TT_KEYWORD, "&&"): "anded_by",
    (TT_KEYWORD, "||"): "ored_by",
}


class Interpreter:

    def __init__(self):
        # closed set of node kinds: a new node class needs an entry here
        self.visitors = {
            NumberNode: self.visit_NumberNode,
            StringNode: self.visit_StringNode,
            ListNode: self.visit_ListNode,
            VarAccessNode: self.visit_VarAccessNode,
            VarAssignNode: self.visit_VarAssignNode,
            UnaryOpNode: self.visit_UnaryOpNode,
            BinOpNode: self.visit_BinOpNode,
            IfNode: self.visit_IfNode,
            ForNode: self.visit_ForNode,
            WhileNode: self.visit_WhileNode,
            FuncDefNode: self.visit_FuncDefNode,
            CallNode: self.visit_CallNode,
        }

    def visit(self, node, context):
        try:
            visitor = self.visitors[type(node)]
        except KeyError:
            raise TypeError(f"no visitor defined for {type(node).__name__}")
        return visitor(node, context)

    ###################################################################################################################

    def visit_NumberNode(self, node, context):
        value = int(node.tok.value) if node.tok.kind == TT_INT else float(node.tok.value)
        return Number(value).set_context(context).set_pos(node.pos_start, node.pos_end)

    def visit_StringNode(self, node, context):
        return String(node.tok.value).set_context(context).set_pos(node.pos_start, node.pos_end)

    def visit_ListNode(self, node, context):
        elements = [self.visit(element_node, context) for element_node in node.element_nodes]
        return List(elements).set_context(context).set_pos(node.pos_start, node.pos_end)

    def visit_VarAccessNode(self, node, context):
        var_name = node.var_name_tok.value
        value = context.symbol_table.get(var_name)

        if value is None:
            raise UndefinedVariableError(node.pos_start, node.pos_end, f"'{var_name}' is not defined", context)
        return value.tagged(node, context)

    def visit_VarAssignNode(self, node, context):
        value = self.visit(node.value_node, context)
        context.symbol_table.set(node.var_name_tok.value, value)
        return value

    def visit_UnaryOpNode(self, node, context):
        value = self.visit(node.node, context)

        if node.op_tok.kind == TT_MINUS:
            value = value.multed_by(Number(-1).set_context(context).set_pos(node.pos_start, node.pos_end))
        elif node.op_tok.matches(TT_KEYWORD, "!"):
            value = value.notted()
        else:
            value = value.copy()

        return value.set_context(context).set_pos(node.pos_start, node.pos_end)

    def visit_BinOpNode(self, node, context):
        left = self.visit(node.left_node, context)
        right = self.visit(node.right_node, context)

        op = node.op_tok
        method = BINARY_OPERATORS.get(op.kind) or BINARY_OPERATORS[(op.kind, op.value)]
        result = getattr(left, method)(right)

        if result is left or result is right:
            result = result.copy()
        return result.set_context(context).set_pos(node.pos_start, node.pos_end)

    def visit_IfNode(self, node, context):
        for condition, expr in node.cases:
            if self.visit(condition, context).is_true():
                return self.visit(expr, context)

        if node.else_case is not None:
            return self.visit(node.else_case, context)

        return Null().set_context(context).set_pos(node.pos_start, node.pos_end)

    def _number(self, node, context):
        """Evaluates a for-loop bound, which must be a Number."""
        value = self.visit(node, context)
        if not isinstance(value, Number):
            raise IllegalOperationError(value.pos_start, value.pos_end, "for-loop bounds must be numbers", context)
        return value

    def visit_ForNode(self, node, context):
        """The loop variable lives in the enclosing scope: it is rebound before every condition check, so after the
        loop it holds the first value that failed the check.
        """
        elements = []
        var_name = node.var_name_tok.value

        start_value = self._number(node.start_node, context)
        end_value = self._number(node.end_node, context)
        step_value = self._number(node.step_node, context) if node.step_node else Number(1)

        i = start_value.value
        end = end_value.value
        step = step_value.value
        ascending = step >= 0

        while True:
            context.symbol_table.set(var_name, Number(i).set_context(context).set_pos(node.pos_start, node.pos_end))
            if (i >= end) if ascending else (i <= end):
                break
            elements.append(self.visit(node.body_node, context))
            i += step

        return List(elements).set_context(context).set_pos(node.pos_start, node.pos_end)

    def visit_WhileNode(self, node, context):
        elements = []

        while self.visit(node.condition_node, context).is_true():
            elements.append(self.visit(node.body_node, context))

        return List(elements).set_context(context).set_pos(node.pos_start, node.pos_end)

    def visit_FuncDefNode(self, node, context):
        func_name = node.var_name_tok.value if node.var_name_tok else None
        arg_names = [arg_name.value for arg_name in node.arg_name_toks]

        func_value = Function(func_name, node.body_node, arg_names, context.symbol_table)
        func_value.set_context(context).set_pos(node.pos_start, node.pos_end)

        if func_name:
            context.symbol_table.set(func_name, func_value)

        return func_value

    def visit_CallNode(self, node, context):
        value_to_call = self.visit(node.node_to_call, context)
        if not isinstance(value_to_call, BaseFunction):
            raise IllegalOperationError(
                value_to_call.pos_start, value_to_call.pos_end, f"{value_to_call!r} is not callable", context
            )
        value_to_call = value_to_call.tagged(node, context)

        args = [self.visit(arg_node, context) for arg_node in node.arg_nodes]

        return_value = value_to_call.execute(args, self)
        return return_value.tagged(node, context)
