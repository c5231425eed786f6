"""
toylang Top-Level Driver
========================

The driver is the read-dispatch loop that sits on top of the parser.
It looks at the current token, calls the matching parser entry point,
and writes one status line for every top-level construct:

| Current token | Action                         | Status on success               |
|---------------|--------------------------------|---------------------------------|
| EOF           | stop                           |                                 |
| ';'           | discard, read next token       |                                 |
| def           | Parser.parse_definition()      | Parsed a function definition    |
| extern        | Parser.parse_extern()          | Parsed an extern                |
| anything else | Parser.parse_top_level_expr()  | Parsed a top level expression   |

On failure the status line is "Error failed to parse <kind>" and the
driver skips exactly one token before dispatching again. This does not
always get back in step with the input, so one mistake can be followed
by several more errors.

Example Usage
-------------
>>> from toylang.driver import parse_source
>>> nodes = parse_source("extern sin(x); def f(x) x*2; f(3)")
>>> len(nodes)
3
"""

from dataclasses import dataclass
from typing import Callable, Optional, TextIO, Union
import io
import logging
import sys

from toylang.ast import ASTNode
from toylang.config import FrontendConfig, get_default_config
from toylang.lexer import TokenType
from toylang.parser import ParseResult, Parser
from toylang.precedence import PrecedenceTable

logger = logging.getLogger(__name__)


@dataclass
class DriverStats:
    """
    Counts of what a driver run produced.

    Attributes:
        definitions: Function definitions parsed
        externs: Extern declarations parsed
        expressions: Top-level expressions parsed
        failures: Constructs that failed to parse
    """
    definitions: int = 0
    externs: int = 0
    expressions: int = 0
    failures: int = 0

    @property
    def parsed(self) -> int:
        """Number of constructs parsed successfully."""
        return self.definitions + self.externs + self.expressions


class Driver:
    """
    Read-dispatch loop over one parser session.

    Usage:
        parser = FrontendConfig().create_parser(sys.stdin)
        stats = Driver(parser).run()

    Attributes:
        parser: The parser session being driven
        config: Prompt settings
        output: Status stream (None means sys.stdout)
        on_parsed: Called with every successfully parsed root node
        stats: Counts for the current run
    """

    def __init__(
        self,
        parser: Parser,
        config: Optional[FrontendConfig] = None,
        output: Optional[TextIO] = None,
        on_parsed: Optional[Callable[[ASTNode], None]] = None,
    ):
        self.parser = parser
        self.config = config or get_default_config()
        self.output = output
        self.on_parsed = on_parsed
        self.stats = DriverStats()

    def run(self) -> DriverStats:
        """
        Parse top-level constructs until end of input.

        Returns:
            DriverStats for this run
        """
        self.stats = DriverStats()

        self._prompt()
        self.parser.next_token()

        while True:
            self._prompt()
            token = self.parser.current

            if token.type == TokenType.EOF:
                break

            if token.is_symbol(";"):
                # Ignore top-level semicolons
                self.parser.next_token()
            elif token.type == TokenType.DEF:
                self._handle_definition()
            elif token.type == TokenType.EXTERN:
                self._handle_extern()
            else:
                self._handle_top_level_expression()

        logger.info(
            f"Parsed {self.stats.parsed} constructs, {self.stats.failures} failed"
        )
        return self.stats

    # =========================================================================
    # Handlers
    # =========================================================================

    def _handle_definition(self) -> None:
        result = self.parser.parse_definition()
        if self._finish(result, "Parsed a function definition", "definition"):
            self.stats.definitions += 1

    def _handle_extern(self) -> None:
        result = self.parser.parse_extern()
        if self._finish(result, "Parsed an extern", "extern"):
            self.stats.externs += 1

    def _handle_top_level_expression(self) -> None:
        result = self.parser.parse_top_level_expr()
        if self._finish(result, "Parsed a top level expression", "top level expression"):
            self.stats.expressions += 1

    def _finish(self, result: ParseResult, success_line: str, kind: str) -> bool:
        """Report a result; on failure skip one token to resynchronise."""
        if result.ok:
            self._status(success_line)
            if self.on_parsed is not None:
                self.on_parsed(result.node)
            return True

        self.stats.failures += 1
        self._status(f"Error failed to parse {kind}")
        skipped = self.parser.current
        self.parser.next_token()
        logger.debug(f"Recovering: skipped {skipped!r}")
        return False

    # =========================================================================
    # Output
    # =========================================================================

    def _status(self, line: str) -> None:
        stream = self.output if self.output is not None else sys.stdout
        stream.write(line + "\n")
        stream.flush()

    def _prompt(self) -> None:
        if not self.config.show_prompt:
            return
        stream = self.parser.diagnostics if self.parser.diagnostics is not None else sys.stderr
        stream.write(self.config.prompt)
        stream.flush()


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: Union[str, TextIO],
    filename: str = "<input>",
    precedence: Optional[PrecedenceTable] = None,
    diagnostics: Optional[TextIO] = None,
) -> list[ASTNode]:
    """
    Parse every top-level construct in source.

    This is a convenience function that runs a Driver with no prompt and
    discards the status lines. Syntax errors are still written to the
    diagnostic stream and skipped the way the driver always does.

    Args:
        source: Source text or text stream
        filename: Name used in error locations
        precedence: Operator table (default operators if None)
        diagnostics: Stream for "Error ..." lines (default: stderr)

    Returns:
        The successfully parsed root nodes, in source order
    """
    config = FrontendConfig(show_prompt=False, filename=filename)
    if precedence is not None:
        config.precedence = dict(precedence.entries)

    parser = config.create_parser(source, diagnostics=diagnostics)
    nodes: list[ASTNode] = []
    Driver(parser, config, output=io.StringIO(), on_parsed=nodes.append).run()
    return nodes
