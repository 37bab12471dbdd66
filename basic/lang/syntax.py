"""Abstract syntax tree and recursive-descent parser for the basic language.

Every program is a single expression. Formally, from lowest to highest precedence:

```
<expr>       ::= "var" <identifier> "=" <expr>
               | <comp_expr> (("&&" | "||") <comp_expr>)*
<comp_expr>  ::= "!" <comp_expr>
               | <arith_expr> (("==" | "!=" | "<" | ">" | "<=" | ">=") <arith_expr>)*
<arith_expr> ::= <term> (("+" | "-") <term>)*
<term>       ::= <factor> (("*" | "/") <factor>)*
<factor>     ::= ("+" | "-") <factor> | <power>
<power>      ::= <call> ("**" <factor>)*
<call>       ::= <atom> ("(" (<expr> ("," <expr>)*)? ")")?
<atom>       ::= <int> | <float> | <string> | <identifier> | "(" <expr> ")"
               | <list_expr> | <if_expr> | <for_expr> | <while_expr> | <func_def>
<list_expr>  ::= "[" (<expr> ("," <expr>)*)? "]"
<if_expr>    ::= "if" <expr> "then" <expr> ("elif" <expr> "then" <expr>)* ("else" <expr>)?
<for_expr>   ::= "for" <identifier> "=" <expr> "to" <expr> ("step" <expr>)? "then" <expr>
<while_expr> ::= "while" <expr> "then" <expr>
<func_def>   ::= "fun" <identifier>? "(" (<identifier> ("," <identifier>)*)? ")" "->" <expr>
```

Every binary tier is parsed by the same left-associative helper, Parser.bin_op.
"""

from basic.lang.error import InvalidSyntaxError
from basic.lang.lexical import (
    TT_ARROW, TT_COMMA, TT_DIV, TT_EE, TT_EOF, TT_EQ, TT_FLOAT, TT_GT, TT_GTE, TT_IDENTIFIER, TT_INT, TT_KEYWORD,
    TT_LPAREN, TT_LSQUARE, TT_LT, TT_LTE, TT_MINUS, TT_MUL, TT_NE, TT_PLUS, TT_POW, TT_RPAREN, TT_RSQUARE, TT_STRING,
)


EXPECTED_ATOM = "int, float, string, identifier, '+', '-', '(', '[', 'if', 'for', 'while', 'fun'"
EXPECTED_EXPR = "'var', 'if', 'for', 'while', 'fun', int, float, string, identifier, '+', '-', '(', '[' or '!'"
EXPECTED_OPERATOR = "'+', '-', '*', '/', '**', '==', '!=', '<', '>', '<=', '>=', '&&' or '||'"


class Node:
    """Superclass of every AST node. Nodes are built once by the Parser and never mutated afterwards."""

    def __init__(self, pos_start, pos_end):
        self.pos_start = pos_start
        self.pos_end = pos_end

    def label(self):
        """Short description of this node, excluding its children."""
        return ""

    @property
    def nodes(self):
        """Child nodes, in evaluation order."""
        return []

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(<label>, nodes=[
            <Node>(<label>, nodes=[
                ...
                <Node>(<label>)  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}({self.label()}"
        nodes = self.nodes
        if nodes:
            result += ", nodes=[" if self.label() else "nodes=["
            for node in nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def __repr__(self):
        return f"{type(self).__name__}({self.label()})"


class NumberNode(Node):

    def __init__(self, tok):
        super().__init__(tok.pos_start, tok.pos_end)
        self.tok = tok

    def label(self):
        return repr(self.tok)


class StringNode(Node):

    def __init__(self, tok):
        super().__init__(tok.pos_start, tok.pos_end)
        self.tok = tok

    def label(self):
        return f"STRING:{self.tok.value!r}"


class ListNode(Node):

    def __init__(self, element_nodes, pos_start, pos_end):
        super().__init__(pos_start, pos_end)
        self.element_nodes = element_nodes

    @property
    def nodes(self):
        return list(self.element_nodes)


class VarAccessNode(Node):

    def __init__(self, var_name_tok):
        super().__init__(var_name_tok.pos_start, var_name_tok.pos_end)
        self.var_name_tok = var_name_tok

    def label(self):
        return self.var_name_tok.value


class VarAssignNode(Node):

    def __init__(self, var_name_tok, value_node, pos_start):
        super().__init__(pos_start, value_node.pos_end)
        self.var_name_tok = var_name_tok
        self.value_node = value_node

    def label(self):
        return self.var_name_tok.value

    @property
    def nodes(self):
        return [self.value_node]


class UnaryOpNode(Node):

    def __init__(self, op_tok, node):
        super().__init__(op_tok.pos_start, node.pos_end)
        self.op_tok = op_tok
        self.node = node

    def label(self):
        return repr(self.op_tok)

    @property
    def nodes(self):
        return [self.node]


class BinOpNode(Node):

    def __init__(self, left_node, op_tok, right_node):
        super().__init__(left_node.pos_start, right_node.pos_end)
        self.left_node = left_node
        self.op_tok = op_tok
        self.right_node = right_node

    def label(self):
        return repr(self.op_tok)

    @property
    def nodes(self):
        return [self.left_node, self.right_node]


class IfNode(Node):
    """cases is a list of (condition, expr) pairs, tried in order. else_case may be None."""

    def __init__(self, cases, else_case, pos_start):
        super().__init__(pos_start, (else_case or cases[-1][1]).pos_end)
        self.cases = cases
        self.else_case = else_case

    @property
    def nodes(self):
        nodes = [node for case in self.cases for node in case]
        if self.else_case is not None:
            nodes.append(self.else_case)
        return nodes


class ForNode(Node):

    def __init__(self, var_name_tok, start_node, end_node, step_node, body_node, pos_start):
        super().__init__(pos_start, body_node.pos_end)
        self.var_name_tok = var_name_tok
        self.start_node = start_node
        self.end_node = end_node
        self.step_node = step_node
        self.body_node = body_node

    def label(self):
        return self.var_name_tok.value

    @property
    def nodes(self):
        return [node for node in (self.start_node, self.end_node, self.step_node, self.body_node) if node is not None]


class WhileNode(Node):

    def __init__(self, condition_node, body_node, pos_start):
        super().__init__(pos_start, body_node.pos_end)
        self.condition_node = condition_node
        self.body_node = body_node

    @property
    def nodes(self):
        return [self.condition_node, self.body_node]


class FuncDefNode(Node):
    """var_name_tok is None for anonymous functions."""

    def __init__(self, var_name_tok, arg_name_toks, body_node, pos_start):
        super().__init__(pos_start, body_node.pos_end)
        self.var_name_tok = var_name_tok
        self.arg_name_toks = arg_name_toks
        self.body_node = body_node

    def label(self):
        name = self.var_name_tok.value if self.var_name_tok else "<anonymous>"
        return f"{name}({', '.join(tok.value for tok in self.arg_name_toks)})"

    @property
    def nodes(self):
        return [self.body_node]


class CallNode(Node):

    def __init__(self, node_to_call, arg_nodes, pos_end):
        super().__init__(node_to_call.pos_start, pos_end)
        self.node_to_call = node_to_call
        self.arg_nodes = arg_nodes

    @property
    def nodes(self):
        return [self.node_to_call] + list(self.arg_nodes)


class ParseResult:
    """Outcome of one grammar rule. advance_count is the number of tokens consumed by the rule (children included):
    a failure only replaces an already-recorded error when nothing has been consumed, so the error from the deepest
    partial parse is the one reported.
    """

    def __init__(self):
        self.error = None
        self.node = None
        self.advance_count = 0

    def register_advancement(self):
        self.advance_count += 1

    def register(self, res):
        self.advance_count += res.advance_count
        if res.error:
            self.error = res.error
        return res.node

    def success(self, node):
        self.node = node
        return self

    def failure(self, error):
        if not self.error or self.advance_count == 0:
            self.error = error
        return self


class Parser:
    """Recursive-descent parser with one token of lookahead."""

    def __init__(self, tokens):
        self.tokens = tokens
        self.tok_idx = -1
        self.current_tok = None
        self.advance()

    def advance(self):
        self.tok_idx += 1
        if self.tok_idx < len(self.tokens):
            self.current_tok = self.tokens[self.tok_idx]
        return self.current_tok

    def parse(self):
        """Returns the root node of the AST. Raises InvalidSyntaxError if the whole token stream up to EOF is not
        a single valid expression.
        """
        res = self.expr()
        if not res.error and self.current_tok.kind != TT_EOF:
            res.failure(self.syntax_error(f"Expected {EXPECTED_OPERATOR}"))
        if res.error:
            raise res.error
        return res.node

    def syntax_error(self, details):
        return InvalidSyntaxError(self.current_tok.pos_start, self.current_tok.pos_end, details)

    def consume(self, res):
        """Advances past the current token, recording the advancement on res."""
        res.register_advancement()
        self.advance()

    ###################################################################################################################

    def expr(self):
        res = ParseResult()

        if self.current_tok.matches(TT_KEYWORD, "var"):
            pos_start = self.current_tok.pos_start
            self.consume(res)

            if self.current_tok.kind != TT_IDENTIFIER:
                return res.failure(self.syntax_error("Expected identifier"))
            var_name = self.current_tok
            self.consume(res)

            if self.current_tok.kind != TT_EQ:
                return res.failure(self.syntax_error("Expected '='"))
            self.consume(res)

            value_node = res.register(self.expr())
            if res.error:
                return res
            return res.success(VarAssignNode(var_name, value_node, pos_start))

        node = res.register(self.bin_op(self.comp_expr, ((TT_KEYWORD, "&&"), (TT_KEYWORD, "||"))))
        if res.error:
            return res.failure(self.syntax_error(f"Expected {EXPECTED_EXPR}"))
        return res.success(node)

    def comp_expr(self):
        res = ParseResult()

        if self.current_tok.matches(TT_KEYWORD, "!"):
            op_tok = self.current_tok
            self.consume(res)

            node = res.register(self.comp_expr())
            if res.error:
                return res
            return res.success(UnaryOpNode(op_tok, node))

        node = res.register(self.bin_op(self.arith_expr, (TT_EE, TT_NE, TT_LT, TT_GT, TT_LTE, TT_GTE)))
        if res.error:
            return res.failure(self.syntax_error(f"Expected {EXPECTED_ATOM} or '!'"))
        return res.success(node)

    def arith_expr(self):
        return self.bin_op(self.term, (TT_PLUS, TT_MINUS))

    def term(self):
        return self.bin_op(self.factor, (TT_MUL, TT_DIV))

    def factor(self):
        res = ParseResult()
        tok = self.current_tok

        if tok.kind in (TT_PLUS, TT_MINUS):
            self.consume(res)
            node = res.register(self.factor())
            if res.error:
                return res
            return res.success(UnaryOpNode(tok, node))

        return self.power()

    def power(self):
        return self.bin_op(self.call, (TT_POW,), self.factor)

    def call(self):
        res = ParseResult()
        atom = res.register(self.atom())
        if res.error:
            return res

        if self.current_tok.kind != TT_LPAREN:
            return res.success(atom)
        self.consume(res)

        arg_nodes = []
        if self.current_tok.kind != TT_RPAREN:
            arg_nodes.append(res.register(self.expr()))
            if res.error:
                return res.failure(self.syntax_error(f"Expected ')', {EXPECTED_EXPR}"))

            while self.current_tok.kind == TT_COMMA:
                self.consume(res)
                arg_nodes.append(res.register(self.expr()))
                if res.error:
                    return res

            if self.current_tok.kind != TT_RPAREN:
                return res.failure(self.syntax_error("Expected ',' or ')'"))

        pos_end = self.current_tok.pos_end
        self.consume(res)
        return res.success(CallNode(atom, arg_nodes, pos_end))

    def atom(self):
        res = ParseResult()
        tok = self.current_tok

        if tok.kind in (TT_INT, TT_FLOAT):
            self.consume(res)
            return res.success(NumberNode(tok))

        elif tok.kind == TT_STRING:
            self.consume(res)
            return res.success(StringNode(tok))

        elif tok.kind == TT_IDENTIFIER:
            self.consume(res)
            return res.success(VarAccessNode(tok))

        elif tok.kind == TT_LPAREN:
            self.consume(res)
            node = res.register(self.expr())
            if res.error:
                return res
            if self.current_tok.kind != TT_RPAREN:
                return res.failure(self.syntax_error("Expected ')'"))
            self.consume(res)
            return res.success(node)

        rules = {
            (TT_LSQUARE, None): self.list_expr,
            (TT_KEYWORD, "if"): self.if_expr,
            (TT_KEYWORD, "for"): self.for_expr,
            (TT_KEYWORD, "while"): self.while_expr,
            (TT_KEYWORD, "fun"): self.func_def,
        }
        rule = rules.get((tok.kind, tok.value))
        if rule is None:
            return res.failure(InvalidSyntaxError(tok.pos_start, tok.pos_end, f"Expected {EXPECTED_ATOM}"))

        node = res.register(rule())
        if res.error:
            return res
        return res.success(node)

    def list_expr(self):
        res = ParseResult()
        element_nodes = []
        pos_start = self.current_tok.pos_start
        self.consume(res)

        if self.current_tok.kind != TT_RSQUARE:
            element_nodes.append(res.register(self.expr()))
            if res.error:
                return res.failure(self.syntax_error(f"Expected ']', {EXPECTED_EXPR}"))

            while self.current_tok.kind == TT_COMMA:
                self.consume(res)
                element_nodes.append(res.register(self.expr()))
                if res.error:
                    return res

            if self.current_tok.kind != TT_RSQUARE:
                return res.failure(self.syntax_error("Expected ',' or ']'"))

        pos_end = self.current_tok.pos_end
        self.consume(res)
        return res.success(ListNode(element_nodes, pos_start, pos_end))

    def expect_keyword(self, res, keyword):
        """Consumes keyword, or records an "Expected '<keyword>'" failure on res and returns False."""
        if not self.current_tok.matches(TT_KEYWORD, keyword):
            res.failure(self.syntax_error(f"Expected '{keyword}'"))
            return False
        self.consume(res)
        return True

    def if_expr(self):
        res = ParseResult()
        cases = []
        else_case = None
        pos_start = self.current_tok.pos_start

        keyword = "if"
        while self.current_tok.matches(TT_KEYWORD, keyword):
            self.consume(res)

            condition = res.register(self.expr())
            if res.error:
                return res
            if not self.expect_keyword(res, "then"):
                return res

            node = res.register(self.expr())
            if res.error:
                return res
            cases.append((condition, node))
            keyword = "elif"

        if self.current_tok.matches(TT_KEYWORD, "else"):
            self.consume(res)
            else_case = res.register(self.expr())
            if res.error:
                return res

        return res.success(IfNode(cases, else_case, pos_start))

    def for_expr(self):
        res = ParseResult()
        pos_start = self.current_tok.pos_start
        self.consume(res)

        if self.current_tok.kind != TT_IDENTIFIER:
            return res.failure(self.syntax_error("Expected identifier"))
        var_name = self.current_tok
        self.consume(res)

        if self.current_tok.kind != TT_EQ:
            return res.failure(self.syntax_error("Expected '='"))
        self.consume(res)

        start_node = res.register(self.expr())
        if res.error:
            return res
        if not self.expect_keyword(res, "to"):
            return res

        end_node = res.register(self.expr())
        if res.error:
            return res

        step_node = None
        if self.current_tok.matches(TT_KEYWORD, "step"):
            self.consume(res)
            step_node = res.register(self.expr())
            if res.error:
                return res

        if not self.expect_keyword(res, "then"):
            return res

        body_node = res.register(self.expr())
        if res.error:
            return res
        return res.success(ForNode(var_name, start_node, end_node, step_node, body_node, pos_start))

    def while_expr(self):
        res = ParseResult()
        pos_start = self.current_tok.pos_start
        self.consume(res)

        condition_node = res.register(self.expr())
        if res.error:
            return res
        if not self.expect_keyword(res, "then"):
            return res

        body_node = res.register(self.expr())
        if res.error:
            return res
        return res.success(WhileNode(condition_node, body_node, pos_start))

    def func_def(self):
        res = ParseResult()
        pos_start = self.current_tok.pos_start
        self.consume(res)

        var_name = None
        if self.current_tok.kind == TT_IDENTIFIER:
            var_name = self.current_tok
            self.consume(res)
            if self.current_tok.kind != TT_LPAREN:
                return res.failure(self.syntax_error("Expected '('"))
        elif self.current_tok.kind != TT_LPAREN:
            return res.failure(self.syntax_error("Expected identifier or '('"))
        self.consume(res)

        arg_names = []
        if self.current_tok.kind == TT_IDENTIFIER:
            arg_names.append(self.current_tok)
            self.consume(res)

            while self.current_tok.kind == TT_COMMA:
                self.consume(res)
                if self.current_tok.kind != TT_IDENTIFIER:
                    return res.failure(self.syntax_error("Expected identifier"))
                arg_names.append(self.current_tok)
                self.consume(res)

            if self.current_tok.kind != TT_RPAREN:
                return res.failure(self.syntax_error("Expected ',' or ')'"))
        elif self.current_tok.kind != TT_RPAREN:
            return res.failure(self.syntax_error("Expected identifier or ')'"))
        self.consume(res)

        if self.current_tok.kind != TT_ARROW:
            return res.failure(self.syntax_error("Expected '->'"))
        self.consume(res)

        body_node = res.register(self.expr())
        if res.error:
            return res
        return res.success(FuncDefNode(var_name, arg_names, body_node, pos_start))

    ###################################################################################################################

    def bin_op(self, func_a, ops, func_b=None):
        """Parses func_a ((op) func_b)* left-associatively, where op is any token whose kind, or (kind, value) pair,
        is in ops. func_b defaults to func_a.
        """
        if func_b is None:
            func_b = func_a

        res = ParseResult()
        left = res.register(func_a())
        if res.error:
            return res

        while self.current_tok.kind in ops or (self.current_tok.kind, self.current_tok.value) in ops:
            op_tok = self.current_tok
            self.consume(res)
            right = res.register(func_b())
            if res.error:
                return res
            left = BinOpNode(left, op_tok, right)

        return res.success(left)