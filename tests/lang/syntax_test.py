import unittest

from basic.lang.error import InvalidSyntaxError
from basic.lang.lexical import Lexer, TT_KEYWORD, TT_MINUS, TT_MUL, TT_PLUS, TT_POW
from basic.lang.syntax import (
    BinOpNode, CallNode, EXPECTED_ATOM, EXPECTED_EXPR, EXPECTED_OPERATOR, ForNode, FuncDefNode, IfNode, ListNode,
    NumberNode, ParseResult, Parser, StringNode, UnaryOpNode, VarAccessNode, VarAssignNode, WhileNode,
)


def parse(text):
    return Parser(Lexer("<test>", text).make_tokens()).parse()


def walk(node):
    yield node
    for child in node.nodes:
        yield from walk(child)


class ParseResultTestCase(unittest.TestCase):

    def test_deepest_failure_wins(self):
        res = ParseResult()
        res.register_advancement()
        res.failure("deep")
        res.failure("shallow")
        self.assertEqual("deep", res.error)

    def test_failure_without_advancement_replaces(self):
        res = ParseResult()
        res.failure("first")
        res.failure("second")
        self.assertEqual("second", res.error)

    def test_register_adds_advancements(self):
        child = ParseResult()
        child.register_advancement()
        child.register_advancement()

        res = ParseResult()
        self.assertEqual("node", res.register(child.success("node")))
        self.assertEqual(2, res.advance_count)


class ParserTestCase(unittest.TestCase):

    def test_atoms(self):
        cases = {
            "1": NumberNode,
            "2.5": NumberNode,
            '"s"': StringNode,
            "x": VarAccessNode,
            "(x)": VarAccessNode,
            "[]": ListNode,
            "[1, 2]": ListNode,
        }
        for case, expected in cases.items():
            self.assertIsInstance(parse(case), expected, case)

    def test_precedence(self):
        node = parse("1 + 2 * 3")
        self.assertIsInstance(node, BinOpNode)
        self.assertEqual(TT_PLUS, node.op_tok.kind)
        self.assertEqual(TT_MUL, node.right_node.op_tok.kind)

        node = parse("(1 + 2) * 3")
        self.assertEqual(TT_MUL, node.op_tok.kind)
        self.assertEqual(TT_PLUS, node.left_node.op_tok.kind)

    def test_left_associative(self):
        node = parse("1 - 2 - 3")
        self.assertEqual(TT_MINUS, node.op_tok.kind)
        self.assertIsInstance(node.left_node, BinOpNode)
        self.assertIsInstance(node.right_node, NumberNode)

    def test_power_binds_factor_on_the_right(self):
        node = parse("2 ** -3 ** 2")
        self.assertEqual(TT_POW, node.op_tok.kind)
        self.assertIsInstance(node.left_node, NumberNode)
        self.assertIsInstance(node.right_node, UnaryOpNode)

    def test_logical_and_comparison(self):
        node = parse("a < b && !c || d == e")
        self.assertTrue(node.op_tok.matches(TT_KEYWORD, "||"))
        self.assertTrue(node.left_node.op_tok.matches(TT_KEYWORD, "&&"))
        self.assertIsInstance(node.left_node.right_node, UnaryOpNode)

    def test_unary(self):
        node = parse("--1")
        self.assertIsInstance(node, UnaryOpNode)
        self.assertIsInstance(node.node, UnaryOpNode)

        node = parse("!x == 1")
        self.assertTrue(node.op_tok.matches(TT_KEYWORD, "!"))
        self.assertIsInstance(node.node, BinOpNode)

    def test_var_assign(self):
        node = parse("var x = var y = 1")
        self.assertIsInstance(node, VarAssignNode)
        self.assertEqual("x", node.var_name_tok.value)
        self.assertIsInstance(node.value_node, VarAssignNode)

    def test_if(self):
        node = parse("if a then 1 elif b then 2 elif c then 3 else 4")
        self.assertIsInstance(node, IfNode)
        self.assertEqual(3, len(node.cases))
        self.assertIsNotNone(node.else_case)

        node = parse("if a then 1")
        self.assertEqual(1, len(node.cases))
        self.assertIsNone(node.else_case)

    def test_for(self):
        node = parse("for i = 0 to 10 step 2 then i")
        self.assertIsInstance(node, ForNode)
        self.assertEqual("i", node.var_name_tok.value)
        self.assertIsNotNone(node.step_node)

        self.assertIsNone(parse("for i = 0 to 10 then i").step_node)

    def test_while(self):
        node = parse("while x < 3 then var x = x + 1")
        self.assertIsInstance(node, WhileNode)
        self.assertIsInstance(node.body_node, VarAssignNode)

    def test_func_def(self):
        node = parse("fun add(a, b) -> a + b")
        self.assertIsInstance(node, FuncDefNode)
        self.assertEqual("add", node.var_name_tok.value)
        self.assertEqual(["a", "b"], [tok.value for tok in node.arg_name_toks])

        node = parse("fun () -> 1")
        self.assertIsNone(node.var_name_tok)
        self.assertEqual([], node.arg_name_toks)

    def test_call(self):
        node = parse("f(1, g(2), [3])")
        self.assertIsInstance(node, CallNode)
        self.assertEqual(3, len(node.arg_nodes))
        self.assertIsInstance(node.arg_nodes[1], CallNode)

        self.assertEqual([], parse("f()").arg_nodes)

    def test_spans_cover_children(self):
        should_pass = [
            "var x = 1 + 2 * 3",
            "if a then [1, 2] elif b then f(x, y) else -z",
            "for i = 0 to 10 step 2 then i ** 2",
            "fun add(a, b) -> a + b",
            "while !done then var done = check(x)",
        ]
        for case in should_pass:
            for node in walk(parse(case)):
                for child in node.nodes:
                    self.assertLessEqual(node.pos_start.index, child.pos_start.index, case)
                    self.assertGreaterEqual(node.pos_end.index, child.pos_end.index, case)

    def test_call_and_list_span_closing_bracket(self):
        self.assertEqual(7, parse("f(1, 2) ").pos_end.index)
        self.assertEqual(6, parse("[1, 2] ").pos_end.index)

    def test_invalid_syntax(self):
        should_fail = [
            "", "1 +", "(1", "1 2", "var = 1", "var x 1", "if 1 then", "if 1 2", "for i 0 to 1 then 1",
            "for i = 0 then 1", "while 1 2", "fun (a b) -> a", "fun f(a) a", "fun f a", "[1, 2", "f(1,", ")",
            "f(1 2)", "fun f(1) -> 1",
        ]
        for case in should_fail:
            self.assertRaises(InvalidSyntaxError, parse, case)

    def test_error_messages(self):
        cases = {
            "1 2": f"Expected {EXPECTED_OPERATOR}",
            "var x 1": "Expected '='",
            "var 1": "Expected identifier",
            "if 1 2": "Expected 'then'",
            "for i = 0 then 1": "Expected 'to'",
            "fun f(a) a": "Expected '->'",
            "fun f a": "Expected '('",
            "[1, 2": "Expected ',' or ']'",
            "1 +": f"Expected {EXPECTED_ATOM}",
            "if 1 then": f"Expected {EXPECTED_EXPR}",
        }
        for case, expected in cases.items():
            with self.assertRaises(InvalidSyntaxError) as cm:
                parse(case)
            self.assertEqual(expected, cm.exception.details, case)

    def test_error_position(self):
        with self.assertRaises(InvalidSyntaxError) as cm:
            parse("var x 1")
        self.assertEqual(6, cm.exception.pos_start.col)
        self.assertEqual(7, cm.exception.pos_end.col)

    def test_display(self):
        expected = (
            "BinOpNode(PLUS, nodes=[\n"
            "    NumberNode(INT:1),\n"
            "    CallNode(nodes=[\n"
            "        VarAccessNode(f),\n"
            "        StringNode(STRING:'a')\n"
            "    ])\n"
            "])"
        )
        self.assertEqual(expected, parse('1 + f("a")').display())


if __name__ == '__main__':
    unittest.main()
