"""
toylang Front-End Configuration
===============================

Settings shared by the driver and the toyparse command. Configuration
can come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied by the CLI on top of these)

Environment variables (all optional):
    TOYLANG_PROMPT: Prompt printed before each top-level construct
    TOYLANG_SHOW_PROMPT: "1"/"true"/"yes" or "0"/"false"/"no"
    TOYLANG_MAX_ERRORS: Errors kept for the end-of-run report (integer)
"""

from dataclasses import dataclass, field
from typing import Optional, TextIO, Union
import os

from toylang.lexer import Lexer
from toylang.parser import Parser
from toylang.precedence import DEFAULT_PRECEDENCE, PrecedenceTable


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class FrontendConfig:
    """
    Configuration for a lexing/parsing run.

    Attributes:
        prompt: Text written to the diagnostic stream before each construct
        show_prompt: Whether the prompt is written at all
        filename: Name reported in error locations when none is given
        max_errors: Errors kept by a parser session for its report
        precedence: Binary operator table used by new parsers
    """

    prompt: str = "ready> "
    show_prompt: bool = True
    filename: str = "<stdin>"
    max_errors: int = 100
    precedence: dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_PRECEDENCE)
    )

    @classmethod
    def from_env(cls) -> "FrontendConfig":
        """
        Create a FrontendConfig from environment variables.

        Raises:
            ValueError: If a variable holds a value of the wrong kind
        """
        config = cls()

        if (prompt := os.environ.get("TOYLANG_PROMPT")) is not None:
            config.prompt = prompt

        if show := os.environ.get("TOYLANG_SHOW_PROMPT"):
            value = show.strip().lower()
            if value in _TRUE_VALUES:
                config.show_prompt = True
            elif value in _FALSE_VALUES:
                config.show_prompt = False
            else:
                raise ValueError(f"TOYLANG_SHOW_PROMPT must be a boolean, got {show!r}")

        if max_errors := os.environ.get("TOYLANG_MAX_ERRORS"):
            config.max_errors = int(max_errors)

        return config

    def create_parser(
        self,
        source: Union[str, TextIO],
        filename: Optional[str] = None,
        diagnostics: Optional[TextIO] = None,
    ) -> Parser:
        """
        Build a fresh parser session over source.

        Args:
            source: Source text or text stream
            filename: Name for error locations (default: self.filename)
            diagnostics: Stream for diagnostic lines (default: stderr)
        """
        lexer = Lexer(source, filename or self.filename)
        return Parser(
            lexer,
            precedence=PrecedenceTable(self.precedence),
            diagnostics=diagnostics,
            max_errors=self.max_errors,
        )


# =============================================================================
# Default Configuration Instance
# =============================================================================

_default_config: Optional[FrontendConfig] = None


def get_default_config() -> FrontendConfig:
    """
    Get the default configuration.

    Created from environment variables on first access. Can be replaced
    with set_default_config().
    """
    global _default_config
    if _default_config is None:
        _default_config = FrontendConfig.from_env()
    return _default_config


def set_default_config(config: Optional[FrontendConfig]) -> None:
    """
    Set the default configuration.

    Passing None makes the next get_default_config() re-read the environment.
    """
    global _default_config
    _default_config = config
