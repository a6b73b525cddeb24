"""Precedence-climbing (Pratt) parser for the punky language.

Grammar, loosely:

```
<program>    ::= <statement>*
<statement>  ::= "let" <identifier> "=" <expression> [";"]
               | "return" [<expression>] [";"]
               | <expression> [";"]
<expression> ::= <int> | "true" | "false" | <identifier>
               | ("!" | "-") <expression>
               | <expression> <infix_op> <expression>   ; infix_op: + - * / < > == !=
               | "(" <expression> ")"
               | "if" "(" <expression> ")" <block> ["else" <block>]
               | "fn" "(" [<identifier> ("," <identifier>)*] ")" <block>
               | <expression> "(" [<expression> ("," <expression>)*] ")"
<block>      ::= "{" <statement>* "}"
```

Operator precedence is table data rather than grammar rules: PRECEDENCES maps token types to binding power, and
PREFIX_BUILDERS / INFIX_BUILDERS map token types to the functions that build the node starting at that token. Builders
are plain functions that receive the parser state explicitly.

Syntax errors never raise. They are recorded as diagnostics and parsing carries on with a best-effort (possibly None)
subtree, so callers must check Parser.errors before trusting the returned Program.
"""

import enum
from dataclasses import dataclass

from punky.pure import ast
from punky.pure.lexical import Lexer
from punky.pure.objects import INT_MAX
from punky.pure.tokens import TokenType


class Precedence(enum.IntEnum):
    """Binding power of operators, weakest first."""
    LOWEST = 1
    EQUALS = 2        # ==
    LESSGREATER = 3   # > or <
    SUM = 4           # +
    PRODUCT = 5       # *
    PREFIX = 6        # -x or !x
    CALL = 7          # f(x)
    INDEX = 8         # a[x]


PRECEDENCES = {
    TokenType.EQUAL_EQUAL:  Precedence.EQUALS,
    TokenType.BANG_EQUAL:   Precedence.EQUALS,
    TokenType.LESS:         Precedence.LESSGREATER,
    TokenType.GREATER:      Precedence.LESSGREATER,
    TokenType.PLUS:         Precedence.SUM,
    TokenType.MINUS:        Precedence.SUM,
    TokenType.STAR:         Precedence.PRODUCT,
    TokenType.SLASH:        Precedence.PRODUCT,
    TokenType.LEFT_PAREN:   Precedence.CALL,
    TokenType.LEFT_BRACKET: Precedence.INDEX,
}


@dataclass(frozen=True)
class Diagnostic:
    """Parse error message, plus the column of the token it is about (-1 if unknown)."""
    message: str
    column: int = -1

    def __str__(self):
        return self.message


class Parser:
    """Two-token lookahead parser over a Lexer. current is the token being parsed, peek the one after it."""

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.diagnostics = []

        self.prefix_builders = dict(PREFIX_BUILDERS)
        self.infix_builders = dict(INFIX_BUILDERS)

        self.current = None
        self.peek = None
        self.consume()
        self.consume()

    @property
    def errors(self):
        """Diagnostic messages recorded so far, in order."""
        return [str(diagnostic) for diagnostic in self.diagnostics]

    def register_prefix(self, token_type, builder):
        self.prefix_builders[token_type] = builder

    def register_infix(self, token_type, builder):
        self.infix_builders[token_type] = builder

    # ==================== TOKEN HANDLING ====================

    def consume(self):
        """Shifts peek into current and pulls a new peek from the lexer."""
        self.current = self.peek
        self.peek = self.lexer.next_token()

    def current_is(self, token_type):
        return self.current.type is token_type

    def peek_is(self, token_type):
        return self.peek.type is token_type

    def expect_peek(self, token_type):
        """Consumes peek if it has type token_type, otherwise records a diagnostic. Returns whether it matched."""
        if self.peek_is(token_type):
            self.consume()
            return True
        self.error(f"expected next token to be {token_type.name}, got {self.peek.type.name} instead", self.peek)
        return False

    def error(self, message, token=None):
        self.diagnostics.append(Diagnostic(message, token.column if token is not None else -1))

    def peek_precedence(self):
        return PRECEDENCES.get(self.peek.type, Precedence.LOWEST)

    def current_precedence(self):
        return PRECEDENCES.get(self.current.type, Precedence.LOWEST)

    # ==================== STATEMENTS ====================

    def parse_program(self):
        """Parses statements until end of source."""
        statements = []
        while not self.current_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.consume()
        return ast.Program(tuple(statements))

    def parse_statement(self):
        if self.current_is(TokenType.LET):
            return self.parse_let_statement()
        elif self.current_is(TokenType.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self):
        token = self.current

        if not self.expect_peek(TokenType.IDENTIFIER):
            return None
        name = ast.Identifier(self.current, self.current.literal)

        if not self.expect_peek(TokenType.EQUAL):
            return None
        self.consume()

        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TokenType.SEMICOLON):
            self.consume()
        return ast.LetStatement(token, name, value)

    def parse_return_statement(self):
        token = self.current

        value = None
        if not any(self.peek_is(end) for end in (TokenType.SEMICOLON, TokenType.RIGHT_BRACE, TokenType.EOF)):
            self.consume()
            value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TokenType.SEMICOLON):
            self.consume()
        return ast.ReturnStatement(token, value)

    def parse_expression_statement(self):
        token = self.current
        expression = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TokenType.SEMICOLON):
            self.consume()
        return ast.ExpressionStatement(token, expression)

    def parse_block_statement(self):
        """Parses statements from the current '{' up to its matching '}', which becomes the current token."""
        token = self.current
        statements = []
        self.consume()

        while not self.current_is(TokenType.RIGHT_BRACE):
            if self.current_is(TokenType.EOF):
                self.error("unterminated block: expected RIGHT_BRACE, got EOF instead", self.current)
                break

            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.consume()

        return ast.BlockStatement(token, tuple(statements))

    # ==================== EXPRESSIONS ====================

    def parse_expression(self, precedence):
        """Builds the prefix expression at the current token, then folds in infix operators for as long as they bind
        tighter than precedence.
        """
        prefix = self.prefix_builders.get(self.current.type)
        if prefix is None:
            self.error(f"no prefix parse function for {self.current.type.name} found", self.current)
            return None
        left = prefix(self)

        while not self.peek_is(TokenType.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_builders.get(self.peek.type)
            if infix is None:
                self.error(f"no infix parse function for {self.peek.type.name} found", self.peek)
                return left

            self.consume()
            left = infix(self, left)

        return left

    def parse_delimited(self, closing, parse_item):
        """Parses a comma-separated list ending at closing. The current token must be the opening delimiter. Returns
        None (after recording a diagnostic) if the list is malformed.
        """
        items = []
        if self.peek_is(closing):
            self.consume()
            return items

        self.consume()
        item = parse_item()
        if item is None:
            return None
        items.append(item)

        while self.peek_is(TokenType.COMMA):
            self.consume()
            self.consume()
            item = parse_item()
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(closing):
            return None
        return items

    def __repr__(self):
        return f"{type(self).__name__}(current={self.current}, peek={self.peek})"


# ==================== PREFIX BUILDERS ====================

def parse_identifier(parser):
    return ast.Identifier(parser.current, parser.current.literal)


def parse_int_literal(parser):
    token = parser.current
    try:
        value = int(token.literal)
    except (TypeError, ValueError):
        value = None

    if value is None or value > INT_MAX:  # digits only, so never below zero
        parser.error(f"could not parse {token.literal} as integer", token)
        return None
    return ast.IntLiteral(token, value)


def parse_boolean(parser):
    return ast.Boolean(parser.current, parser.current_is(TokenType.TRUE))


def parse_prefix_expression(parser):
    token = parser.current
    parser.consume()
    right = parser.parse_expression(Precedence.PREFIX)
    return ast.PrefixExpression(token, token.text, right)


def parse_grouped_expression(parser):
    parser.consume()
    expression = parser.parse_expression(Precedence.LOWEST)
    if not parser.expect_peek(TokenType.RIGHT_PAREN):
        return None
    return expression


def parse_if_expression(parser):
    token = parser.current
    if not parser.expect_peek(TokenType.LEFT_PAREN):
        return None

    parser.consume()
    condition = parser.parse_expression(Precedence.LOWEST)

    if not parser.expect_peek(TokenType.RIGHT_PAREN):
        return None
    if not parser.expect_peek(TokenType.LEFT_BRACE):
        return None
    consequence = parser.parse_block_statement()

    alternative = None
    if parser.peek_is(TokenType.ELSE):
        parser.consume()
        if not parser.expect_peek(TokenType.LEFT_BRACE):
            return None
        alternative = parser.parse_block_statement()

    return ast.IfExpression(token, condition, consequence, alternative)


def parse_function_literal(parser):
    token = parser.current
    if not parser.expect_peek(TokenType.LEFT_PAREN):
        return None

    def parse_parameter():
        if not parser.current_is(TokenType.IDENTIFIER):
            parser.error(f"expected parameter to be IDENTIFIER, got {parser.current.type.name} instead",
                         parser.current)
            return None
        return parse_identifier(parser)

    parameters = parser.parse_delimited(TokenType.RIGHT_PAREN, parse_parameter)
    if parameters is None:
        return None

    if not parser.expect_peek(TokenType.LEFT_BRACE):
        return None
    body = parser.parse_block_statement()

    return ast.FunctionLiteral(token, tuple(parameters), body)


# ==================== INFIX BUILDERS ====================

def parse_infix_expression(parser, left):
    token = parser.current
    precedence = parser.current_precedence()
    parser.consume()
    right = parser.parse_expression(precedence)
    return ast.InfixExpression(token, left, token.text, right)


def parse_call_expression(parser, function):
    token = parser.current
    arguments = parser.parse_delimited(TokenType.RIGHT_PAREN, lambda: parser.parse_expression(Precedence.LOWEST))
    if arguments is None:
        return None
    return ast.CallExpression(token, function, tuple(arguments))


PREFIX_BUILDERS = {
    TokenType.IDENTIFIER: parse_identifier,
    TokenType.INT:        parse_int_literal,
    TokenType.TRUE:       parse_boolean,
    TokenType.FALSE:      parse_boolean,
    TokenType.BANG:       parse_prefix_expression,
    TokenType.MINUS:      parse_prefix_expression,
    TokenType.LEFT_PAREN: parse_grouped_expression,
    TokenType.IF:         parse_if_expression,
    TokenType.FN:         parse_function_literal,
}

INFIX_BUILDERS = {
    TokenType.PLUS:        parse_infix_expression,
    TokenType.MINUS:       parse_infix_expression,
    TokenType.STAR:        parse_infix_expression,
    TokenType.SLASH:       parse_infix_expression,
    TokenType.EQUAL_EQUAL: parse_infix_expression,
    TokenType.BANG_EQUAL:  parse_infix_expression,
    TokenType.LESS:        parse_infix_expression,
    TokenType.GREATER:     parse_infix_expression,
    TokenType.LEFT_PAREN:  parse_call_expression,
}


def parse(source):
    """Parses source and returns (Program, list of diagnostic messages)."""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors
