"""Token model for the punky language.

A token is a lexical category plus an optional literal payload. Only identifiers, integers and illegal characters
carry a literal: every other token is fully described by its type, whose value is its canonical lexeme.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional


class TokenType(enum.Enum):
    """Token types"""
    # Single-character tokens.
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    LEFT_BRACKET = "["
    RIGHT_BRACKET = "]"

    COMMA = ","
    SEMICOLON = ";"
    MINUS = "-"
    PLUS = "+"
    SLASH = "/"
    STAR = "*"
    LESS = "<"
    GREATER = ">"

    # One or two character tokens.
    BANG = "!"
    BANG_EQUAL = "!="
    EQUAL = "="
    EQUAL_EQUAL = "=="

    # Literals.
    IDENTIFIER = "IDENTIFIER"
    INT = "INT"

    # Keywords.
    FN = "fn"
    LET = "let"
    TRUE = "true"
    FALSE = "false"
    IF = "if"
    ELSE = "else"
    RETURN = "return"

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"


KEYWORDS = {
    "fn":     TokenType.FN,
    "let":    TokenType.LET,
    "true":   TokenType.TRUE,
    "false":  TokenType.FALSE,
    "if":     TokenType.IF,
    "else":   TokenType.ELSE,
    "return": TokenType.RETURN,
}


def lookup_identifier(word):
    """Returns the keyword type of word, or IDENTIFIER if word is not a keyword."""
    return KEYWORDS.get(word, TokenType.IDENTIFIER)


@dataclass(frozen=True)
class Token:
    """Immutable token. column is where the token starts in its source line and is ignored by equality."""
    type: TokenType
    literal: Optional[str] = None
    column: int = field(default=-1, compare=False)

    @property
    def text(self) -> str:
        """Literal payload if present, else the canonical lexeme of the token type."""
        return self.literal if self.literal is not None else self.type.value

    def __str__(self) -> str:
        if self.literal is None:
            return f"{{ type: {self.type.name} }}"
        return f"{{ type: {self.type.name}, literal: {self.literal} }}"
