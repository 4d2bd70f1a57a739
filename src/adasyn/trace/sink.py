"""Trace sinks: receivers of the production trace emitted while parsing."""

from __future__ import annotations

import sys
import typing
from dataclasses import dataclass
from enum import Enum

from adasyn.lexer.tokens import Token


class TraceSink(typing.Protocol):
    """Anything the parser can report its derivation to.

    Calls arrive in strict nesting order: every ``enter`` is matched by an
    ``exit`` of the same name unless the parse fails in between.
    """

    def enter(self, name: str) -> None:
        """A nonterminal production has been entered."""
        ...

    def leaf(self, token: Token) -> None:
        """A terminal token has been accepted."""
        ...

    def exit(self, name: str) -> None:
        """A nonterminal production has been completed."""
        ...


class EventKind(Enum):
    ENTER = "enter"
    LEAF = "leaf"
    EXIT = "exit"


@dataclass(frozen=True)
class TraceEvent:
    kind: EventKind
    name: str
    token: Token | None = None

    def __str__(self) -> str:
        if self.token is not None:
            return f"{self.kind.value} {self.name} {self.token.text!r}"
        return f"{self.kind.value} {self.name}"


class PrintTrace:
    """Writes the trace to a text stream, indented by production depth.

    Output looks like::

        BEGIN StatementPart
          TOKEN begin 'begin'
          BEGIN StatementList
          ...
    """

    INDENT_WIDTH = 2

    def __init__(self, stream: typing.TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.depth = 0

    def enter(self, name: str) -> None:
        self._write(f"BEGIN {name}")
        self.depth += 1

    def leaf(self, token: Token) -> None:
        self._write(f"TOKEN {token.kind.display_name} '{token.text}'")

    def exit(self, name: str) -> None:
        self.depth -= 1
        self._write(f"END {name}")

    def _write(self, text: str) -> None:
        print((" " * (self.depth * self.INDENT_WIDTH)) + text, file=self.stream)


class NullTrace:
    """Discards every event; for parses where only the outcome matters."""

    def enter(self, name: str) -> None:
        pass

    def leaf(self, token: Token) -> None:
        pass

    def exit(self, name: str) -> None:
        pass


class RecordingTrace:
    """Captures every event in order, for tests and tooling."""

    def __init__(self) -> None:
        self.events: list[TraceEvent] = []

    def enter(self, name: str) -> None:
        self.events.append(TraceEvent(EventKind.ENTER, name))

    def leaf(self, token: Token) -> None:
        self.events.append(TraceEvent(EventKind.LEAF, token.kind.name, token))

    def exit(self, name: str) -> None:
        self.events.append(TraceEvent(EventKind.EXIT, name))

    def names(self) -> list[str]:
        """Names of the productions entered, in order."""
        return [e.name for e in self.events if e.kind == EventKind.ENTER]

    def leaves(self) -> list[Token]:
        """Tokens accepted, in order."""
        return [e.token for e in self.events if e.kind == EventKind.LEAF]

    def is_balanced(self) -> bool:
        """True if every enter is closed by a matching exit, innermost first."""
        open_names: list[str] = []
        for event in self.events:
            if event.kind == EventKind.ENTER:
                open_names.append(event.name)
            elif event.kind == EventKind.EXIT:
                if not open_names or open_names.pop() != event.name:
                    return False
        return not open_names
