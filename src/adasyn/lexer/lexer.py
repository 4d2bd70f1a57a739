"""adasyn lexer: hand-written, on-demand tokenizer.

Design decisions:
- Tokens are produced one at a time by `Lexer.next_token`, so the parser
  never holds more than its single lookahead.
- Whitespace and newlines are insignificant; only line numbers are kept.
- Comments (-- ...) are discarded, not tokenized.
- After the source is exhausted every call returns an EOF token.
"""

from __future__ import annotations

import logging

from adasyn.lexer.tokens import (
    KEYWORDS,
    SINGLE_CHAR_OPERATORS,
    TWO_CHAR_OPERATORS,
    Token,
    TokenKind,
)

log = logging.getLogger(__name__)


def _is_digit(ch: str) -> bool:
    """ASCII 0-9 only; str.isdigit() also accepts superscripts."""
    return ch.isascii() and ch.isdigit()


def _is_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


class LexerError(Exception):
    """Raised on lexical errors with source location."""

    def __init__(self, message: str, line: int, column: int, file: str = "<unknown>"):
        self.line = line
        self.column = column
        self.file = file
        super().__init__(f"{file}:{line}:{column}: {message}")


class Lexer:
    """Tokenizes source text into `Token` objects on demand.

    Usage::

        lexer = Lexer(source_text, filename="example.ada")
        token = lexer.next_token()
        ...
        tokens = Lexer(source_text).tokenize()
    """

    def __init__(self, source: str, filename: str = "<unknown>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def next_token(self) -> Token:
        """Scan and return the next token, or EOF once the source is exhausted."""
        self._skip_whitespace_and_comments()
        if self._at_end():
            return Token(TokenKind.EOF, "", self.line, self.column)

        token = self._scan_token()
        if log.isEnabledFor(logging.DEBUG):
            log.debug("scanned %r", token)
        return token

    def tokenize(self) -> list[Token]:
        """Tokenize the rest of the source and return the token list, EOF included."""
        tokens: list[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.kind == TokenKind.EOF:
                return tokens

    # ------------------------------------------------------------------
    # Token scanning
    # ------------------------------------------------------------------

    def _scan_token(self) -> Token:
        """Scan a single token at the current position."""
        ch = self._peek()

        if ch == '"':
            return self._scan_string()

        if _is_digit(ch):
            return self._scan_number()

        if _is_letter(ch):
            return self._scan_identifier()

        pair = ch + (self._peek_ahead(1) or "")
        if pair in TWO_CHAR_OPERATORS:
            token = self._make_token(TWO_CHAR_OPERATORS[pair], pair)
            self._advance()
            self._advance()
            return token

        if ch in SINGLE_CHAR_OPERATORS:
            token = self._make_token(SINGLE_CHAR_OPERATORS[ch], ch)
            self._advance()
            return token

        if ch == ":":
            raise LexerError(
                "Expected '=' after ':'",
                self.line, self.column, self.filename,
            )

        raise LexerError(
            f"Unexpected character: {ch!r}",
            self.line, self.column, self.filename,
        )

    def _scan_string(self) -> Token:
        """Scan a double-quoted string constant; the quotes are not kept."""
        start_line = self.line
        start_col = self.column
        self._advance()  # consume opening quote
        chars: list[str] = []

        while not self._at_end() and self._peek() != '"':
            if self._peek() == "\n":
                raise LexerError(
                    "Unterminated string constant",
                    start_line, start_col, self.filename,
                )
            chars.append(self._advance())

        if self._at_end():
            raise LexerError(
                "Unterminated string constant",
                start_line, start_col, self.filename,
            )

        self._advance()  # consume closing quote
        return Token(TokenKind.STRING_CONSTANT, "".join(chars), start_line, start_col)

    def _scan_number(self) -> Token:
        """Scan an integer or decimal number constant."""
        start_col = self.column
        num_chars: list[str] = []

        while not self._at_end() and _is_digit(self._peek()):
            num_chars.append(self._advance())

        # A fraction needs at least one digit after the point
        next_ch = self._peek_ahead(1)
        if not self._at_end() and self._peek() == "." and next_ch is not None and _is_digit(next_ch):
            num_chars.append(self._advance())
            while not self._at_end() and _is_digit(self._peek()):
                num_chars.append(self._advance())

        return Token(TokenKind.NUMBER_CONSTANT, "".join(num_chars), self.line, start_col)

    def _scan_identifier(self) -> Token:
        """Scan an identifier or keyword."""
        start_col = self.column
        chars: list[str] = []

        while not self._at_end() and (
            _is_letter(self._peek()) or _is_digit(self._peek()) or self._peek() == "_"
        ):
            chars.append(self._advance())

        word = "".join(chars)
        kind = KEYWORDS.get(word, TokenKind.IDENTIFIER)
        return Token(kind, word, self.line, start_col)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _peek(self) -> str:
        """Return the current character without consuming it."""
        return self.source[self.pos]

    def _peek_ahead(self, offset: int) -> str | None:
        """Return a character at an offset ahead, or None if past end."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return None
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return the current character."""
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_whitespace_and_comments(self) -> None:
        """Skip whitespace, newlines and -- comments."""
        while not self._at_end():
            ch = self._peek()
            if ch.isspace():
                self._advance()
            elif ch == "-" and self._peek_ahead(1) == "-":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
            else:
                return

    def _make_token(self, kind: TokenKind, text: str) -> Token:
        return Token(kind, text, self.line, self.column)
