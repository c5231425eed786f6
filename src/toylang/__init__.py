"""
toylang - Front End for a Toy Expression Language
=================================================

This package turns toy language source text into abstract syntax trees.
It is the first stage of a compiler pipeline: there is no code
generation, optimization or type checking here.

The language has function definitions, extern declarations and bare
top-level expressions over floating-point numbers:

    # compute x squared plus one
    def f(x) x*x + 1
    extern sin(a)
    f(sin(2))

Main Components
---------------
- **lexer**: character stream -> tokens (Lexer, Token, TokenType)
- **parser**: tokens -> AST, one session per Parser (Parser, ParseResult)
- **precedence**: binary operator precedence (PrecedenceTable)
- **ast**: node types, visitor and pretty printer
- **driver**: top-level read-dispatch loop (Driver, parse_source)
- **config**: shared settings (FrontendConfig)

Quick Start
-----------
    >>> from toylang import Lexer, Parser
    >>> parser = Parser(Lexer("def add(a b) a+b"))
    >>> result = parser.parse_definition()
    >>> result.node.prototype.parameters
    ('a', 'b')

Or use the command-line tool:
    $ toyparse program.toy
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from toylang.errors import (
    ToyError,
    ToySyntaxError,
    UnexpectedTokenError,
    MissingTokenError,
    PrecedenceError,
    SourceLocation,
    ErrorCollector,
)
from toylang.lexer import Lexer, Token, TokenType
from toylang.precedence import PrecedenceTable, DEFAULT_PRECEDENCE
from toylang.ast import (
    ASTNode,
    Expression,
    NumberLiteral,
    VariableReference,
    BinaryExpression,
    CallExpression,
    Prototype,
    FunctionDefinition,
    ASTVisitor,
    ASTPrinter,
)
from toylang.parser import Parser, ParseResult
from toylang.config import FrontendConfig, get_default_config, set_default_config
from toylang.driver import Driver, DriverStats, parse_source

__all__ = [
    # Version
    "__version__",
    # Errors
    "ToyError",
    "ToySyntaxError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "PrecedenceError",
    "SourceLocation",
    "ErrorCollector",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    # Precedence
    "PrecedenceTable",
    "DEFAULT_PRECEDENCE",
    # AST
    "ASTNode",
    "Expression",
    "NumberLiteral",
    "VariableReference",
    "BinaryExpression",
    "CallExpression",
    "Prototype",
    "FunctionDefinition",
    "ASTVisitor",
    "ASTPrinter",
    # Parser
    "Parser",
    "ParseResult",
    # Configuration
    "FrontendConfig",
    "get_default_config",
    "set_default_config",
    # Driver
    "Driver",
    "DriverStats",
    "parse_source",
]
