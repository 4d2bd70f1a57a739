"""adasyn command line entry point.

Usage:
    adasyn parse <file>        Parse and print the production trace
    adasyn check <file>        Parse silently and report OK or the first error
    adasyn tokenize <file>     Display the token stream (debug)

Options:
    --debug                    Log parser activity to stderr
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from adasyn.lexer.lexer import Lexer, LexerError
from adasyn.parser.errors import CompilationError
from adasyn.parser.parser import SyntaxAnalyser
from adasyn.trace.sink import NullTrace, PrintTrace


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]

    if "--debug" in args:
        args = [a for a in args if a != "--debug"]
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(message)s",
            stream=sys.stderr,
        )

    if len(args) < 1:
        print(__doc__.strip())
        return 1

    command = args[0]

    if command in ("--help", "-h"):
        print(__doc__.strip())
        return 0

    if command == "--version":
        from adasyn import __version__
        print(f"adasyn {__version__}")
        return 0

    if len(args) < 2:
        print(f"Error: command '{command}' requires a file argument")
        return 1

    filepath = Path(args[1])
    if not filepath.exists():
        print(f"Error: file not found: {filepath}")
        return 1

    source = filepath.read_text(encoding="utf-8")
    filename = str(filepath)

    if command == "tokenize":
        return _cmd_tokenize(source, filename)
    elif command == "parse":
        return _cmd_parse(source, filename)
    elif command == "check":
        return _cmd_check(source, filename)
    else:
        print(f"Error: unknown command '{command}'")
        print(__doc__.strip())
        return 1


def _cmd_tokenize(source: str, filename: str) -> int:
    """Display the token stream."""
    try:
        tokens = Lexer(source, filename).tokenize()
    except LexerError as e:
        print(f"Lexer error: {e}")
        return 1

    for tok in tokens:
        print(tok)
    return 0


def _cmd_parse(source: str, filename: str) -> int:
    """Parse the file, printing the trace as it goes."""
    analyser = SyntaxAnalyser(Lexer(source, filename), PrintTrace())
    try:
        analyser.parse()
    except LexerError as e:
        print(f"Lexer error: {e}")
        return 1
    except CompilationError as e:
        print("ERROR")
        print(e.diagnostic.format())
        return 1

    print("SUCCESS")
    return 0


def _cmd_check(source: str, filename: str) -> int:
    """Parse without printing the trace."""
    try:
        diagnostic = SyntaxAnalyser(Lexer(source, filename), NullTrace()).check()
    except LexerError as e:
        print(f"{filename}: FAIL")
        print(f"Lexer error: {e}")
        return 1

    if diagnostic is not None:
        print(f"{filename}: FAIL")
        print(diagnostic.format())
        return 1

    print(f"{filename}: OK")
    return 0


if __name__ == "__main__":
    sys.exit(main())
