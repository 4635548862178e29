"""
StoryScript CLI Entrypoint.

This module provides the command-line interface for checking StoryScript sources.

Features:
    - Read source from a `.story` file or an inline string.
    - Dump the token stream.
    - Parse the program and report every syntax error with its position.
    - Optionally print the parsed AST as an outline or as JSON.

Example usage:
    storyscript adventure.story
    storyscript -s 'say "hello";' --no-tokens --ast
    storyscript adventure.story --no-tokens --json

Exit status is 0 when the program parses cleanly, 1 when any parse error was
recorded or the file could not be read, and 2 for invalid arguments.

Functions:
    run_story(source: str, is_string: bool = False, show_tokens: bool = True, show_ast: bool = False,
              as_json: bool = False, filename: str | None = None) -> int:
        Executes the StoryScript pipeline (lex → dump tokens → parse → report).

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and invokes `run_story`.
"""

import argparse
import json
import sys

from storyscript.storyscript_errors import Diagnostic
from storyscript.storyscript_lexer import Lexer
from storyscript.storyscript_parser import Parser
from storyscript.storyscript_printer import AstPrinter


def report_lexical(diagnostic: Diagnostic) -> None:
    print(diagnostic.format_with_file(), file=sys.stderr)


def report_syntax(diagnostic: Diagnostic) -> None:
    print(str(diagnostic), file=sys.stderr)


def run_story(
    source: str,
    is_string: bool = False,
    show_tokens: bool = True,
    show_ast: bool = False,
    as_json: bool = False,
    filename: str | None = None,
) -> int:
    """
    Run the StoryScript front-end: lex, dump tokens, parse, and report.

    Args:
        source (str): The StoryScript source code or path to a source file.
        is_string (bool): If True, treats `source` as raw code instead of a file path. Defaults to False.
        show_tokens (bool): Print the token listing before parsing. Defaults to True.
        show_ast (bool): Print the parsed program as an outline on success. Defaults to False.
        as_json (bool): Print the parsed program as JSON on success. Defaults to False.
        filename (str | None): Name used in diagnostics; defaults to the path, or "<string>" with `is_string`.

    Returns:
        int: Process exit status (0 on success, 1 on any error).

    Side Effects:
        - Prints tokens, progress banners and results to stdout.
        - Prints diagnostics to stderr.
    """
    # 1. Read source
    if is_string:
        text = source
        name = filename or "<string>"
    else:
        name = filename or source
        try:
            with open(source, encoding="utf-8") as f:
                text = f.read()
        except OSError:
            print(f"Could not open file: {source}", file=sys.stderr)
            return 1

    # 2. Token listing
    if show_tokens:
        print("===== Tokens =====")
        for tok in Lexer(text, name, report=report_lexical).tokenize():
            print(tok.describe())

    # 3. Parsing, over a fresh lexer
    if show_tokens:
        print("\n===== Parsing =====")
    lexer = Lexer(text, name, report=None if show_tokens else report_lexical)
    parser = Parser(lexer, report=report_syntax)
    program = parser.parse()

    if parser.had_error():
        print("Parsing failed with errors.")
        return 1
    print("Parsing completed successfully!")

    # 4. Optional AST output
    if show_ast:
        print(AstPrinter().print_program(program))
    if as_json:
        print(json.dumps(program.to_dict(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the StoryScript CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--no-tokens`: Skip the token listing.
        - `-a`, `--ast`: Print the parsed AST as an outline.
        - `-j`, `--json`: Print the parsed AST as JSON.
        - `--filename`: Name to report in diagnostics.
    """
    parser = argparse.ArgumentParser(
        prog="storyscript", description="Check a StoryScript program for syntax errors."
    )
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--no-tokens",
        dest="show_tokens",
        action="store_false",
        help="Do not print the token listing",
    )
    parser.add_argument(
        "-a", "--ast", dest="show_ast", action="store_true", help="Print the AST outline"
    )
    parser.add_argument(
        "-j", "--json", dest="as_json", action="store_true", help="Print the AST as JSON"
    )
    parser.add_argument(
        "--filename", metavar="NAME", help="Source name to use in error messages"
    )

    args = parser.parse_args(argv)

    return run_story(
        source=args.source,
        is_string=args.string,
        show_tokens=args.show_tokens,
        show_ast=args.show_ast,
        as_json=args.as_json,
        filename=args.filename,
    )


if __name__ == "__main__":
    sys.exit(main())
