"""Syntax diagnostics: the single failure kind raised by the parser.

A failed parse produces one `Diagnostic` chain. The leaf is built by
`report` at the offending token; each enclosing production then calls
`wrap`, adding an ``in <Name> on line: <n>`` link in front of it. The
Python exception chain (``raise ... from``) follows the same links.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass

from adasyn.lexer.tokens import Token


@dataclass(frozen=True)
class Diagnostic:
    """One link of a diagnostic chain, outermost first."""

    message: str
    line: int
    cause: Diagnostic | None = None
    token: Token | None = None

    def chain(self) -> typing.Iterator[Diagnostic]:
        """Yield this diagnostic and every cause below it."""
        node: Diagnostic | None = self
        while node is not None:
            yield node
            node = node.cause

    @property
    def leaf(self) -> Diagnostic:
        """The innermost diagnostic: the exact failure site."""
        *_, last = self.chain()
        return last

    @property
    def context(self) -> list[str]:
        """Messages of the enclosing productions, outermost first."""
        return [d.message for d in self.chain() if d.cause is not None]

    def format(self) -> str:
        """Render the chain as an indented block ending at the failure site."""
        lines = []
        for depth, node in enumerate(self.chain()):
            if node.cause is None:
                text = f"Error at line {node.line}: {node.message}"
            else:
                text = node.message
            lines.append(("  " * depth) + text)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format()


class CompilationError(Exception):
    """Raised on the first syntax error, carrying the diagnostic chain."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def line(self) -> int:
        """Line of the offending token."""
        return self.diagnostic.leaf.line

    def __str__(self) -> str:
        return self.diagnostic.format()


def report(token: Token, explanation: str) -> typing.NoReturn:
    """Fail at *token* with a leaf diagnostic built from *explanation*."""
    raise CompilationError(
        Diagnostic(
            message=f"{explanation} (found '{token.text}')",
            line=token.line,
            token=token,
        )
    )


def wrap(error: CompilationError, name: str, line: int) -> CompilationError:
    """Return a new error placing *error* inside production *name*."""
    return CompilationError(
        Diagnostic(
            message=f"in {name} on line: {line}",
            line=line,
            cause=error.diagnostic,
        )
    )
