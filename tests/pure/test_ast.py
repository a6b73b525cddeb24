import unittest

from punky.pure import ast
from punky.pure.tokens import Token, TokenType


def ident(name):
    return ast.Identifier(Token(TokenType.IDENTIFIER, name), name)


def block(*statements):
    return ast.BlockStatement(Token(TokenType.LEFT_BRACE), tuple(statements))


def expr_stmt(expression):
    return ast.ExpressionStatement(expression.token, expression)


class RenderTestCase(unittest.TestCase):

    def test_program(self):
        program = ast.Program((
            ast.LetStatement(Token(TokenType.LET), ident("myVar"), ident("anotherVar")),
            ast.ReturnStatement(Token(TokenType.RETURN), ident("myVar")),
        ))
        self.assertEqual("let myVar = anotherVar;return myVar;", str(program))

    def test_nodes(self):
        one = ast.IntLiteral(Token(TokenType.INT, "1"), 1)
        cases = {
            ast.PrefixExpression(Token(TokenType.MINUS), "-", ident("a")): "(-a)",
            ast.InfixExpression(Token(TokenType.PLUS), ident("a"), "+", one): "(a + 1)",
            ast.ReturnStatement(Token(TokenType.RETURN)): "return;",
            ast.IfExpression(Token(TokenType.IF), ident("c"), block(expr_stmt(one))): "ifc 1",
            ast.FunctionLiteral(Token(TokenType.FN), (ident("x"), ident("y")), block(expr_stmt(ident("x")))):
                "fn(x, y) x",
            ast.CallExpression(Token(TokenType.LEFT_PAREN), ident("f"), (one, ident("b"))): "f(1, b)",
            ast.Boolean(Token(TokenType.FALSE), False): "false",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(case), repr(case))

    def test_missing_children_render_empty(self):
        cases = {
            ast.LetStatement(Token(TokenType.LET), ident("x"), None): "let x = ;",
            ast.ExpressionStatement(Token(TokenType.PLUS), None): "",
            ast.PrefixExpression(Token(TokenType.BANG), "!", None): "(!)",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(case), repr(case))

    def test_token_literal(self):
        cases = {
            ident("foo"): "foo",
            ast.LetStatement(Token(TokenType.LET), ident("x"), ident("y")): "let",
            ast.FunctionLiteral(Token(TokenType.FN), (), block()): "fn",
            ast.Program(()): "",
            ast.Program((ast.ReturnStatement(Token(TokenType.RETURN)),)): "return",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, case.token_literal(), repr(case))

    def test_immutable(self):
        node = ident("x")
        with self.assertRaises(AttributeError):
            node.value = "y"


if __name__ == '__main__':
    unittest.main()
