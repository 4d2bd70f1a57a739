"""Token kinds and the Token dataclass for the adasyn lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """Every distinct token the lexer can produce.

    The value of each member is its display name, used verbatim in
    diagnostics such as ``expected 'then' but found 'loop'``.
    """

    # Literals & names
    IDENTIFIER = "identifier"
    NUMBER_CONSTANT = "number"
    STRING_CONSTANT = "string"

    # Keywords
    BEGIN = "begin"
    END = "end"
    IF = "if"
    THEN = "then"
    ELSE = "else"
    WHILE = "while"
    LOOP = "loop"
    CALL = "call"
    DO = "do"
    UNTIL = "until"
    FOR = "for"
    MOD = "mod"

    # Punctuation
    BECOMES = ":="
    SEMICOLON = ";"
    COMMA = ","
    LEFT_PARENTHESIS = "("
    RIGHT_PARENTHESIS = ")"

    # Arithmetic
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIVIDE = "/"

    # Comparison
    LESS_THAN = "<"
    GREATER_THAN = ">"
    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="
    EQUAL = "="
    NOT_EQUAL = "/="

    EOF = "end of file"

    @property
    def display_name(self) -> str:
        return self.value


# Map keyword strings to token kinds
KEYWORDS: dict[str, TokenKind] = {
    "begin": TokenKind.BEGIN,
    "end": TokenKind.END,
    "if": TokenKind.IF,
    "then": TokenKind.THEN,
    "else": TokenKind.ELSE,
    "while": TokenKind.WHILE,
    "loop": TokenKind.LOOP,
    "call": TokenKind.CALL,
    "do": TokenKind.DO,
    "until": TokenKind.UNTIL,
    "for": TokenKind.FOR,
    "mod": TokenKind.MOD,
}

# Operators spelled with two characters; these win over one-character prefixes
TWO_CHAR_OPERATORS: dict[str, TokenKind] = {
    ":=": TokenKind.BECOMES,
    "<=": TokenKind.LESS_EQUAL,
    ">=": TokenKind.GREATER_EQUAL,
    "/=": TokenKind.NOT_EQUAL,
}

SINGLE_CHAR_OPERATORS: dict[str, TokenKind] = {
    ";": TokenKind.SEMICOLON,
    ",": TokenKind.COMMA,
    "(": TokenKind.LEFT_PARENTHESIS,
    ")": TokenKind.RIGHT_PARENTHESIS,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.TIMES,
    "/": TokenKind.DIVIDE,
    "<": TokenKind.LESS_THAN,
    ">": TokenKind.GREATER_THAN,
    "=": TokenKind.EQUAL,
}

# Relational operators accepted by the ConditionalOperator production
CONDITIONAL_OPERATORS: frozenset[TokenKind] = frozenset({
    TokenKind.LESS_THAN,
    TokenKind.GREATER_THAN,
    TokenKind.GREATER_EQUAL,
    TokenKind.EQUAL,
    TokenKind.NOT_EQUAL,
    TokenKind.LESS_EQUAL,
})


@dataclass(frozen=True, slots=True)
class Token:
    """A single token produced by the lexer.

    Tokens are immutable; the parser holds exactly one of them as its
    lookahead and discards it once accepted.
    """

    kind: TokenKind
    text: str
    line: int
    column: int = 1

    def __repr__(self) -> str:
        if self.kind == TokenKind.EOF:
            return f"Token({self.kind.name}, {self.line}:{self.column})"
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"
