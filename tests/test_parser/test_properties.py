"""Property tests for the syntax analyser over generated programs."""

import dataclasses

from hypothesis import given, settings
from hypothesis import strategies as st

from adasyn.lexer.lexer import Lexer
from adasyn.lexer.tokens import Token, TokenKind
from adasyn.parser.errors import Diagnostic
from adasyn.parser.parser import SyntaxAnalyser
from adasyn.trace.sink import RecordingTrace


class ListSource:
    """Token source over a prepared token list; EOF repeats at the end."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def next_token(self) -> Token:
        token = self.tokens[min(self.pos, len(self.tokens) - 1)]
        self.pos += 1
        return token


def run(source: str) -> tuple[Diagnostic | None, RecordingTrace]:
    trace = RecordingTrace()
    diagnostic = SyntaxAnalyser(Lexer(source), trace).check()
    return diagnostic, trace


def run_tokens(tokens: list[Token]) -> tuple[Diagnostic | None, RecordingTrace]:
    trace = RecordingTrace()
    diagnostic = SyntaxAnalyser(ListSource(tokens), trace).check()
    return diagnostic, trace


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

names = st.sampled_from(["a", "b", "x", "total", "y1"])
numbers = st.integers(min_value=0, max_value=999).map(str)
strings = st.sampled_from(['"hi"', '""', '"a b"'])

expressions = st.recursive(
    st.one_of(names, numbers),
    lambda inner: st.one_of(
        st.builds("( {} )".format, inner),
        st.builds(
            "{} {} {}".format,
            inner,
            st.sampled_from(["+", "-", "*", "/", "mod"]),
            inner,
        ),
    ),
    max_leaves=8,
)

conditions = st.builds(
    "{} {} {}".format,
    names,
    st.sampled_from(["<", ">", ">=", "=", "/=", "<="]),
    st.one_of(names, numbers, strings),
)

assignments = st.builds("{} := {}".format, names, st.one_of(strings, expressions))

calls = st.builds(
    lambda proc, args: f"call {proc} ( {' , '.join(args)} )",
    names,
    st.lists(names, min_size=1, max_size=4),
)


def _compound(inner):
    body = st.lists(inner, min_size=1, max_size=3).map(" ; ".join)
    return st.one_of(
        st.builds(
            lambda c, t, e: f"if {c} then {t} " + (f"else {e} " if e else "") + "end if",
            conditions,
            body,
            st.none() | body,
        ),
        st.builds("while {} loop {} end loop".format, conditions, body),
        st.builds("do {} until {}".format, body, conditions),
        st.builds(
            "for ( {} ; {} ; {} ) do {} end loop".format,
            assignments,
            conditions,
            assignments,
            body,
        ),
    )


statements = st.recursive(st.one_of(assignments, calls), _compound, max_leaves=6)

programs = st.lists(statements, min_size=1, max_size=4).map(
    lambda stmts: "begin\n  " + " ;\n  ".join(stmts) + "\nend\n"
)


# ---------------------------------------------------------------------------
# Valid programs
# ---------------------------------------------------------------------------

@settings(deadline=None)
@given(programs)
def test_valid_programs_parse(source):
    """Every generated program parses with a balanced trace, one leaf per token."""
    diagnostic, trace = run(source)
    assert diagnostic is None
    assert trace.is_balanced()
    assert trace.leaves() == Lexer(source).tokenize()[:-1]


@settings(deadline=None)
@given(programs)
def test_reparse_is_identical(source):
    _, first = run(source)
    _, second = run(source)
    assert first.events == second.events


# ---------------------------------------------------------------------------
# Invalid programs
# ---------------------------------------------------------------------------

@settings(deadline=None)
@given(programs, st.data())
def test_truncated_program_fails_at_end_of_input(source, data):
    """Cutting a program short fails at the EOF lookahead, after every kept token."""
    tokens = Lexer(source).tokenize()
    eof = tokens[-1]
    cut = data.draw(st.integers(min_value=0, max_value=len(tokens) - 2))
    kept = tokens[:cut]

    diagnostic, trace = run_tokens(kept + [eof])
    assert diagnostic is not None
    assert diagnostic.leaf.token == eof
    assert diagnostic.leaf.line == eof.line
    assert trace.leaves() == kept


@settings(deadline=None)
@given(programs, st.data())
def test_stray_token_is_reported_where_it_appears(source, data):
    """A stray 'begin' inside a program is the failure site, and nothing after it is traced."""
    tokens = Lexer(source).tokenize()
    at = data.draw(st.integers(min_value=1, max_value=len(tokens) - 1))
    stray = Token(TokenKind.BEGIN, "begin", line=99)
    mutated = tokens[:at] + [stray] + tokens[at:]

    diagnostic, trace = run_tokens(mutated)
    assert diagnostic is not None
    assert diagnostic.leaf.token is stray
    assert diagnostic.leaf.line == 99
    assert "'begin'" in diagnostic.leaf.message
    assert trace.leaves() == tokens[:at]


# ---------------------------------------------------------------------------
# Operator chains and parentheses
# ---------------------------------------------------------------------------

@given(
    st.lists(
        st.tuples(st.sampled_from(["+", "-"]), st.one_of(names, numbers)),
        max_size=20,
    ),
    st.one_of(names, numbers),
)
def test_additive_chains(chain, first):
    expr = first + "".join(f" {op} {operand}" for op, operand in chain)
    diagnostic, trace = run(f"begin x := {expr} end")
    assert diagnostic is None
    assert trace.names().count("Expression") == 1
    assert trace.names().count("Term") == len(chain) + 1


@given(
    st.lists(
        st.tuples(st.sampled_from(["+", "-", "*", "/", "mod"]), names),
        max_size=20,
    ),
    st.sampled_from(["+", "-", "*", "/", "mod"]),
)
def test_trailing_operator_rejected(chain, trailing):
    expr = "a" + "".join(f" {op} {operand}" for op, operand in chain) + f" {trailing}"
    diagnostic, _ = run(f"begin x := {expr} end")
    assert diagnostic is not None
    assert diagnostic.leaf.message == "expected identifier, number, or ( (found 'end')"


@given(st.integers(min_value=0, max_value=40))
def test_balanced_parentheses(k):
    diagnostic, trace = run(f"begin x := {'(' * k}a{')' * k} end")
    assert diagnostic is None
    assert trace.names().count("Factor") == k + 1


@given(st.integers(min_value=0, max_value=40))
def test_unmatched_parenthesis(k):
    diagnostic, _ = run(f"begin x := {'(' * (k + 1)}a{')' * k} end")
    assert diagnostic is not None
    assert diagnostic.leaf.message == "expected ')' but found 'end' (found 'end')"


def test_stray_token_line_is_kept_by_wrapping():
    tokens = Lexer("begin\nx := 1 ;\ny := 2\nend").tokenize()
    moved = [dataclasses.replace(t, line=t.line + 10) for t in tokens]
    diagnostic, _ = run_tokens(moved[:6] + [Token(TokenKind.THEN, "then", line=7)] + moved[6:])
    assert diagnostic.leaf.line == 7
    assert diagnostic.message == "in StatementPart on line: 11"
