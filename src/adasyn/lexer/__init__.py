"""adasyn lexer: on-demand tokenizer for the statement language."""

from adasyn.lexer.tokens import Token, TokenKind
from adasyn.lexer.lexer import Lexer, LexerError

__all__ = ["Token", "TokenKind", "Lexer", "LexerError"]
