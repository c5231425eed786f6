"""
toyparse - toylang Parser Command-Line Interface
================================================

Runs the toylang front end over a source file or standard input and
reports each top-level construct it parses.

Usage Examples
--------------
Parse a file:
    $ toyparse program.toy

Interactive session (prompts when stdin is a terminal):
    $ toyparse

Show the parsed trees:
    $ toyparse --ast program.toy

Show the token stream only:
    $ toyparse --tokens program.toy

Fail the run when anything failed to parse:
    $ toyparse --strict program.toy
"""

import dataclasses
import logging
import sys
from typing import Optional, TextIO

import click

from toylang import __version__
from toylang.ast import ASTNode, ASTPrinter
from toylang.cli.errors import ExitCode, handle_cli_exception
from toylang.config import get_default_config
from toylang.driver import Driver
from toylang.lexer import Lexer


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s",
    )


def _print_tokens(lexer: Lexer) -> None:
    for token in lexer.tokenize():
        click.echo(repr(token))


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.File("r"),
    default="-",
    required=False,
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit",
)
@click.option(
    "--ast", "show_ast",
    is_flag=True,
    help="Print the tree of every parsed construct",
)
@click.option(
    "--prompt/--no-prompt",
    default=None,
    help="Print the prompt before each construct "
         "(default: only when reading from a terminal)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 1 if any construct failed to parse",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="toyparse")
def main(
    input_file: TextIO,
    tokens: bool,
    show_ast: bool,
    prompt: Optional[bool],
    strict: bool,
    verbose: bool,
) -> None:
    """
    Parse toy language source.

    INPUT_FILE is the source to read; standard input when omitted or '-'.

    \b
    Every top-level construct produces one status line:
        Parsed a function definition
        Parsed an extern
        Parsed a top level expression
    or "Error failed to parse ..." after an "Error <reason>" diagnostic
    on stderr.

    \b
    Examples:
        toyparse program.toy          # Parse a file
        toyparse --ast program.toy    # Also print the trees
        echo "1+2*3" | toyparse       # Parse standard input
    """
    setup_logging(verbose)

    try:
        config = dataclasses.replace(get_default_config())
        filename = getattr(input_file, "name", config.filename)

        if tokens:
            _print_tokens(Lexer(input_file, filename))
            return

        if prompt is not None:
            config.show_prompt = prompt
        elif config.show_prompt:
            config.show_prompt = input_file.isatty()

        printer = ASTPrinter()

        def on_parsed(node: ASTNode) -> None:
            if show_ast:
                click.echo(printer.print(node))

        parser = config.create_parser(input_file, filename)
        stats = Driver(parser, config, on_parsed=on_parsed).run()

        if verbose:
            click.echo(
                f"{stats.definitions} definitions, {stats.externs} externs, "
                f"{stats.expressions} expressions, {stats.failures} failed",
                err=True,
            )
            if parser.errors.has_errors():
                click.echo(parser.errors.report(), err=True)

        if strict and stats.failures:
            sys.exit(ExitCode.PARSE_ERROR)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
