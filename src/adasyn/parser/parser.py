"""adasyn recursive descent syntax analyser.

Validates a token stream against the statement grammar, reporting every
production entered, every terminal accepted and every production completed
to a trace sink. The first mismatch stops the parse with a chained
`CompilationError` naming the offending token and each enclosing
production.

Grammar reference (EBNF):

    StatementPart       ::= 'begin' StatementList 'end'
    StatementList       ::= Statement (';' StatementList)?
    Statement           ::= AssignmentStatement | ProcedureStatement
                          | IfStatement | WhileStatement | UntilStatement
                          | ForStatement
    AssignmentStatement ::= IDENTIFIER ':=' (STRING | Expression)
    IfStatement         ::= 'if' Condition 'then' StatementList
                            ('else' StatementList)? 'end' 'if'
    WhileStatement      ::= 'while' Condition 'loop' StatementList 'end' 'loop'
    ProcedureStatement  ::= 'call' IDENTIFIER '(' ArgumentList ')'
    UntilStatement      ::= 'do' StatementList 'until' Condition
    ForStatement        ::= 'for' '(' AssignmentStatement ';' Condition ';'
                            AssignmentStatement ')' 'do' StatementList
                            'end' 'loop'
    ArgumentList        ::= IDENTIFIER (',' ArgumentList)?
    Condition           ::= IDENTIFIER ConditionalOperator
                            (IDENTIFIER | NUMBER | STRING)
    ConditionalOperator ::= '<' | '>' | '>=' | '=' | '/=' | '<='
    Expression          ::= Term (('+' | '-') Term)*
    Term                ::= Factor (('*' | '/' | 'mod') Factor)*
    Factor              ::= IDENTIFIER | NUMBER | '(' Expression ')'

Expression and Term iterate over their operator chains, so ``a + b + c``
traces as one Expression holding three Terms. StatementList and
ArgumentList keep their right-nested trace shape but are parsed by a loop,
so a long flat list does not deepen the Python stack.
"""

from __future__ import annotations

import logging
import typing
from contextlib import contextmanager

from adasyn.lexer.tokens import CONDITIONAL_OPERATORS, Token, TokenKind
from adasyn.parser.errors import CompilationError, Diagnostic, report, wrap
from adasyn.trace.sink import TraceSink

log = logging.getLogger(__name__)


class TokenSource(typing.Protocol):
    def next_token(self) -> Token:
        """Return the next token; EOF once the input is exhausted."""
        ...


_ADDING_OPERATORS: frozenset[TokenKind] = frozenset({TokenKind.PLUS, TokenKind.MINUS})

_MULTIPLYING_OPERATORS: frozenset[TokenKind] = frozenset({
    TokenKind.TIMES, TokenKind.DIVIDE, TokenKind.MOD,
})

_CONDITION_OPERANDS: frozenset[TokenKind] = frozenset({
    TokenKind.IDENTIFIER, TokenKind.NUMBER_CONSTANT, TokenKind.STRING_CONSTANT,
})


class SyntaxAnalyser:
    """Recursive descent parser with one method per grammar nonterminal.

    Usage::

        from adasyn.lexer import Lexer
        from adasyn.trace import PrintTrace

        SyntaxAnalyser(Lexer(source, "prog.ada"), PrintTrace()).parse()

    An analyser is single use: it owns the token source's cursor and
    consumes it.
    """

    def __init__(self, source: TokenSource, trace: TraceSink) -> None:
        self.source = source
        self.trace = trace
        self.next_token: Token | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self) -> None:
        """Parse a whole program: a StatementPart followed by end of file.

        Raises `CompilationError` at the first syntax error.
        """
        self.next_token = self.source.next_token()
        try:
            self._statement_part()
            # EOF is checked, not accepted: it is not part of the trace
            if not self._check(TokenKind.EOF):
                self._mismatch(TokenKind.EOF)
        except CompilationError as e:
            if log.isEnabledFor(logging.INFO):
                log.info("parse failed:\n%s", e.diagnostic.format())
            raise

    def check(self) -> Diagnostic | None:
        """Parse, returning the diagnostic chain instead of raising."""
        try:
            self.parse()
        except CompilationError as e:
            return e.diagnostic
        return None

    def accept_terminal(self, kind: TokenKind) -> None:
        """Consume the lookahead if it is *kind*, otherwise fail without consuming it."""
        token = self._current()
        if token.kind != kind:
            self._mismatch(kind)

        if log.isEnabledFor(logging.DEBUG):
            log.debug("accept %r", token)
        self.trace.leaf(token)
        self.next_token = self.source.next_token()

    # ------------------------------------------------------------------
    # Program structure
    # ------------------------------------------------------------------

    def _statement_part(self) -> None:
        with self._production("StatementPart"):
            self.accept_terminal(TokenKind.BEGIN)
            self._statement_list()
            self.accept_terminal(TokenKind.END)

    def _statement_list(self) -> None:
        self._separated_list("StatementList", self._statement, TokenKind.SEMICOLON)

    def _statement(self) -> None:
        with self._production("Statement"):
            kind = self._current().kind
            if kind == TokenKind.IDENTIFIER:
                self._assignment_statement()
            elif kind == TokenKind.CALL:
                self._procedure_statement()
            elif kind == TokenKind.IF:
                self._if_statement()
            elif kind == TokenKind.WHILE:
                self._while_statement()
            elif kind == TokenKind.DO:
                self._until_statement()
            elif kind == TokenKind.FOR:
                self._for_statement()
            else:
                report(self._current(), "expected a statement")

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _assignment_statement(self) -> None:
        with self._production("AssignmentStatement"):
            self.accept_terminal(TokenKind.IDENTIFIER)
            self.accept_terminal(TokenKind.BECOMES)
            if self._check(TokenKind.STRING_CONSTANT):
                self.accept_terminal(TokenKind.STRING_CONSTANT)
            else:
                self._expression()

    def _if_statement(self) -> None:
        with self._production("IfStatement"):
            self.accept_terminal(TokenKind.IF)
            self._condition()
            self.accept_terminal(TokenKind.THEN)
            self._statement_list()
            if self._check(TokenKind.ELSE):
                self.accept_terminal(TokenKind.ELSE)
                self._statement_list()
            self.accept_terminal(TokenKind.END)
            self.accept_terminal(TokenKind.IF)

    def _while_statement(self) -> None:
        with self._production("WhileStatement"):
            self.accept_terminal(TokenKind.WHILE)
            self._condition()
            self.accept_terminal(TokenKind.LOOP)
            self._statement_list()
            self.accept_terminal(TokenKind.END)
            self.accept_terminal(TokenKind.LOOP)

    def _procedure_statement(self) -> None:
        with self._production("ProcedureStatement"):
            self.accept_terminal(TokenKind.CALL)
            self.accept_terminal(TokenKind.IDENTIFIER)
            self.accept_terminal(TokenKind.LEFT_PARENTHESIS)
            self._argument_list()
            self.accept_terminal(TokenKind.RIGHT_PARENTHESIS)

    def _until_statement(self) -> None:
        """Post-test loop: the body runs before the condition is checked."""
        with self._production("UntilStatement"):
            self.accept_terminal(TokenKind.DO)
            self._statement_list()
            self.accept_terminal(TokenKind.UNTIL)
            self._condition()

    def _for_statement(self) -> None:
        with self._production("ForStatement"):
            self.accept_terminal(TokenKind.FOR)
            self.accept_terminal(TokenKind.LEFT_PARENTHESIS)
            self._assignment_statement()
            self.accept_terminal(TokenKind.SEMICOLON)
            self._condition()
            self.accept_terminal(TokenKind.SEMICOLON)
            self._assignment_statement()
            self.accept_terminal(TokenKind.RIGHT_PARENTHESIS)
            self.accept_terminal(TokenKind.DO)
            self._statement_list()
            self.accept_terminal(TokenKind.END)
            self.accept_terminal(TokenKind.LOOP)

    def _argument_list(self) -> None:
        self._separated_list("ArgumentList", self._argument, TokenKind.COMMA)

    def _argument(self) -> None:
        self.accept_terminal(TokenKind.IDENTIFIER)

    # ------------------------------------------------------------------
    # Conditions
    # ------------------------------------------------------------------

    def _condition(self) -> None:
        with self._production("Condition"):
            self.accept_terminal(TokenKind.IDENTIFIER)
            self._conditional_operator()
            kind = self._current().kind
            if kind in _CONDITION_OPERANDS:
                self.accept_terminal(kind)
            else:
                report(
                    self._current(),
                    "expected identifier, number, or string after conditional operator",
                )

    def _conditional_operator(self) -> None:
        with self._production("ConditionalOperator"):
            kind = self._current().kind
            if kind in CONDITIONAL_OPERATORS:
                self.accept_terminal(kind)
            else:
                report(self._current(), "expected a conditional operator")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _expression(self) -> None:
        with self._production("Expression"):
            self._term()
            while self._current().kind in _ADDING_OPERATORS:
                self.accept_terminal(self._current().kind)
                self._term()

    def _term(self) -> None:
        with self._production("Term"):
            self._factor()
            while self._current().kind in _MULTIPLYING_OPERATORS:
                self.accept_terminal(self._current().kind)
                self._factor()

    def _factor(self) -> None:
        with self._production("Factor"):
            kind = self._current().kind
            if kind == TokenKind.IDENTIFIER:
                self.accept_terminal(TokenKind.IDENTIFIER)
            elif kind == TokenKind.NUMBER_CONSTANT:
                self.accept_terminal(TokenKind.NUMBER_CONSTANT)
            elif kind == TokenKind.LEFT_PARENTHESIS:
                self.accept_terminal(TokenKind.LEFT_PARENTHESIS)
                self._expression()
                self.accept_terminal(TokenKind.RIGHT_PARENTHESIS)
            else:
                report(self._current(), "expected identifier, number, or (")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _production(self, name: str) -> typing.Iterator[None]:
        """Trace one nonterminal and wrap any failure inside it.

        The line is taken from the lookahead before the body runs, so the
        context names where the production started.
        """
        line = self._current().line
        self._enter(name, line)
        try:
            yield
        except CompilationError as e:
            raise wrap(e, name, line) from e
        self.trace.exit(name)

    def _separated_list(
        self, name: str, item: typing.Callable[[], None], separator: TokenKind
    ) -> None:
        """Parse ``name ::= item (separator name)?`` without recursing.

        Each separator opens one more nested *name*, exactly as the
        right-recursive rule would, but the open instances are kept in a
        list so stack depth does not grow with the length of the list.
        """
        open_lines: list[int] = []
        try:
            while True:
                line = self._current().line
                self._enter(name, line)
                open_lines.append(line)
                item()
                if not self._check(separator):
                    break
                self.accept_terminal(separator)
        except CompilationError as e:
            error = e
            for line in reversed(open_lines):
                wrapped = wrap(error, name, line)
                wrapped.__cause__ = error
                error = wrapped
            raise error from error.__cause__
        for _ in open_lines:
            self.trace.exit(name)

    def _enter(self, name: str, line: int) -> None:
        if log.isEnabledFor(logging.DEBUG):
            log.debug("enter %s on line %d", name, line)
        self.trace.enter(name)

    def _mismatch(self, expected: TokenKind) -> typing.NoReturn:
        token = self._current()
        report(
            token,
            f"expected '{expected.display_name}' but found '{token.kind.display_name}'",
        )

    def _current(self) -> Token:
        """Return the lookahead token."""
        if self.next_token is None:
            raise RuntimeError("parse() has not fetched the first token")
        return self.next_token

    def _check(self, kind: TokenKind) -> bool:
        """Check if the lookahead matches without consuming."""
        return self._current().kind == kind
