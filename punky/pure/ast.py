"""Abstract syntax tree for the punky language.

Every node is an immutable dataclass that owns its children (child sequences are tuples), so a tree is built once by
the parser and never changed afterwards. Two capabilities are shared by every node:
- token_literal(): the literal text of the token the node was built from
- str(node): canonical rendering, e.g. infix expressions are fully parenthesized: `(1 + (2 * 3))`

The canonical rendering is what diagnostics and tests use to check structure and precedence. Children that the parser
could not build are None and render as empty text.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from punky.pure.tokens import Token


def _render(node):
    return "" if node is None else str(node)


class Node:
    """Superclass of every AST node."""
    token: Token

    def token_literal(self) -> str:
        return self.token.text


class Expression(Node):
    """Marker superclass for nodes that produce a value."""


class Statement(Node):
    """Marker superclass for nodes that make up programs and blocks."""


# ==================== EXPRESSIONS ====================

@dataclass(frozen=True)
class Identifier(Expression):
    token: Token
    value: str

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class IntLiteral(Expression):
    token: Token
    value: int

    def __str__(self):
        return self.token.text


@dataclass(frozen=True)
class Boolean(Expression):
    token: Token
    value: bool

    def __str__(self):
        return self.token.text


@dataclass(frozen=True)
class PrefixExpression(Expression):
    """<operator><right>, with operator one of '!' or '-'."""
    token: Token
    operator: str
    right: Optional[Expression]

    def __str__(self):
        return f"({self.operator}{_render(self.right)})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    """<left> <operator> <right>"""
    token: Token
    left: Optional[Expression]
    operator: str
    right: Optional[Expression]

    def __str__(self):
        return f"({_render(self.left)} {self.operator} {_render(self.right)})"


@dataclass(frozen=True)
class IfExpression(Expression):
    """if (<condition>) <consequence> [else <alternative>]"""
    token: Token
    condition: Optional[Expression]
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None

    def __str__(self):
        result = f"if{_render(self.condition)} {self.consequence}"
        if self.alternative is not None:
            result += f"else {self.alternative}"
        return result


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    """fn(<parameters>) <body>"""
    token: Token
    parameters: Tuple[Identifier, ...]
    body: "BlockStatement"

    def __str__(self):
        params = ", ".join(str(param) for param in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    """<function>(<arguments>). token is the opening parenthesis."""
    token: Token
    function: Optional[Expression]
    arguments: Tuple[Expression, ...]

    def __str__(self):
        args = ", ".join(_render(arg) for arg in self.arguments)
        return f"{_render(self.function)}({args})"


# ==================== STATEMENTS ====================

@dataclass(frozen=True)
class LetStatement(Statement):
    token: Token
    name: Identifier
    value: Optional[Expression]

    def __str__(self):
        return f"{self.token_literal()} {self.name} = {_render(self.value)};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    token: Token
    value: Optional[Expression] = None

    def __str__(self):
        if self.value is None:
            return f"{self.token_literal()};"
        return f"{self.token_literal()} {self.value};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """Expression used as a statement. token is the first token of the expression."""
    token: Token
    expression: Optional[Expression]

    def __str__(self):
        return _render(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    """Brace-delimited statements: the body of an if/else branch or of a function."""
    token: Token
    statements: Tuple[Statement, ...]

    def __str__(self):
        return "".join(str(stmt) for stmt in self.statements)


@dataclass(frozen=True)
class Program(Node):
    """Root of every tree: the statements of one parsed source line."""
    statements: Tuple[Statement, ...]

    def token_literal(self):
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self):
        return "".join(str(stmt) for stmt in self.statements)
