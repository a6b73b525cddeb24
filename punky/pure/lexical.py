"""Lexical analysis for the punky language. The lexer turns a line of source into tokens on demand, one character of
lookahead at a time and without backtracking.

Lexical grammar, loosely:

```
<identifier> ::= (<letter> | "_")+        ; classified against KEYWORDS, digits end an identifier
<int>        ::= <digit>+                 ; not range-checked here: the parser converts and validates it
<operator>   ::= "=" | "==" | "!" | "!=" | "+" | "-" | "*" | "/" | "<" | ">"
<delimiter>  ::= "," | ";" | "(" | ")" | "{" | "}" | "[" | "]"
```

Nothing is raised from here: anything unrecognized becomes an ILLEGAL token and is judged by the parser.
"""

from punky.pure.tokens import Token, TokenType, lookup_identifier


class Lexer:
    """Produces tokens from source on demand. Once source is exhausted, every call returns an EOF token."""
    SINGLE = {
        "+": TokenType.PLUS,
        "-": TokenType.MINUS,
        "*": TokenType.STAR,
        "/": TokenType.SLASH,
        "<": TokenType.LESS,
        ">": TokenType.GREATER,
        ",": TokenType.COMMA,
        ";": TokenType.SEMICOLON,
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        "[": TokenType.LEFT_BRACKET,
        "]": TokenType.RIGHT_BRACKET,
    }

    # first char: (type if alone, type if followed by "=")
    DOUBLE = {
        "=": (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
        "!": (TokenType.BANG, TokenType.BANG_EQUAL),
    }

    def __init__(self, source):
        self.source = source
        self.position = 0

    ch = property(lambda self: self.source[self.position] if self.position < len(self.source) else "")

    @staticmethod
    def is_letter(ch):
        return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")

    @staticmethod
    def is_digit(ch):
        return "0" <= ch <= "9"

    def next_token(self):
        """Returns the next token and advances past it."""
        self.skip_whitespace()

        start = self.position
        ch = self.ch

        if not ch:
            return Token(TokenType.EOF, column=start)

        if Lexer.is_letter(ch):
            word = self.read_while(Lexer.is_letter)
            token_type = lookup_identifier(word)
            literal = word if token_type is TokenType.IDENTIFIER else None
            return Token(token_type, literal, start)

        if Lexer.is_digit(ch):
            return Token(TokenType.INT, self.read_while(Lexer.is_digit), start)

        self.position += 1
        if ch in Lexer.DOUBLE:
            alone, with_equal = Lexer.DOUBLE[ch]
            if self.ch == "=":
                self.position += 1
                return Token(with_equal, column=start)
            return Token(alone, column=start)

        if ch in Lexer.SINGLE:
            return Token(Lexer.SINGLE[ch], column=start)

        return Token(TokenType.ILLEGAL, ch, start)

    def skip_whitespace(self):
        while self.ch and self.ch.isspace():
            self.position += 1

    def read_while(self, predicate):
        """Consumes the maximal run of characters satisfying predicate and returns it."""
        start = self.position
        while self.ch and predicate(self.ch):
            self.position += 1
        return self.source[start:self.position]

    def __iter__(self):
        """Yields the remaining tokens, up to and including the first EOF token."""
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.EOF:
                return

    def __repr__(self):
        return f"{type(self).__name__}({self.source!r})"
