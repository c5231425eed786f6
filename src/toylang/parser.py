"""
toylang Recursive Descent Parser
================================

This module implements the parser for the toy expression language. It
pulls tokens from a Lexer one at a time and builds AST nodes, using
recursive descent for declarations and precedence climbing for binary
operator chains.

Grammar (Simplified EBNF)
-------------------------
toplevel        ::= definition | external | expression | ';'
definition      ::= 'def' prototype expression
external        ::= 'extern' prototype
prototype       ::= IDENTIFIER '(' IDENTIFIER* ')'

expression      ::= primary binoprhs
binoprhs        ::= (BINOP primary)*
primary         ::= identifierexpr | numberexpr | parenexpr
identifierexpr  ::= IDENTIFIER
                  | IDENTIFIER '(' (expression (',' expression)*)? ')'
numberexpr      ::= NUMBER
parenexpr       ::= '(' expression ')'

Binary operators and their precedences come from a PrecedenceTable.
Operators of equal precedence associate to the left.

Session State
-------------
A Parser is one parse session. It owns its Lexer, the single current
token and the precedence table, so separate sessions are independent.
Exactly one token is current at a time; next_token() replaces it.

Failure Handling
----------------
Every public parse_* method returns a ParseResult. On malformed input
the result carries a ToySyntaxError instead of a node, and one line
"Error <message>" is written to the diagnostic stream. No partial tree
is ever returned. Recovery (skipping a token and carrying on) is left
to the caller; see toylang.driver.

Example Usage
-------------
>>> from toylang.lexer import Lexer
>>> from toylang.parser import Parser
>>> from toylang.ast import ASTPrinter
>>> parser = Parser(Lexer("1+2*3"))
>>> result = parser.parse_expression()
>>> result.ok
True
>>> ASTPrinter().expr_str(result.node)
'(1 + (2 * 3))'
"""

from dataclasses import dataclass
from typing import Callable, Optional, TextIO
import logging
import sys

from toylang.errors import (
    ErrorCollector,
    MissingTokenError,
    ToySyntaxError,
    UnexpectedTokenError,
)
from toylang.lexer import Lexer, Token, TokenType
from toylang.precedence import PrecedenceTable
from toylang.ast import (
    ANONYMOUS_NAME,
    ASTNode,
    BinaryExpression,
    CallExpression,
    Expression,
    FunctionDefinition,
    NumberLiteral,
    Prototype,
    VariableReference,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Parse Result
# =============================================================================

@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of a parser entry point: either a node or an error.

    A result is truthy when parsing succeeded, so callers can write
    `if result:` the way they would test for a node.

    Attributes:
        node: The parsed AST node (None on failure)
        error: The syntax error (None on success)
    """
    node: Optional[ASTNode] = None
    error: Optional[ToySyntaxError] = None

    @classmethod
    def success(cls, node: ASTNode) -> "ParseResult":
        return cls(node=node)

    @classmethod
    def failure(cls, error: ToySyntaxError) -> "ParseResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        """True if a node was produced."""
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> ASTNode:
        """
        Return the node, raising the stored error on failure.

        Raises:
            ToySyntaxError: If parsing failed
        """
        if self.error is not None:
            raise self.error
        return self.node


# =============================================================================
# Parser
# =============================================================================

class Parser:
    """
    Recursive descent parser for the toy language.

    Attributes:
        lexer: Token source for this session
        precedence: Binary operator precedence table
        diagnostics: Stream for "Error ..." lines (None means sys.stderr)
        errors: Every syntax error reported in this session
    """

    def __init__(
        self,
        lexer: Lexer,
        precedence: Optional[PrecedenceTable] = None,
        diagnostics: Optional[TextIO] = None,
        max_errors: int = 100,
    ):
        """
        Initialize the parser.

        Args:
            lexer: The lexer to pull tokens from
            precedence: Operator table (default operators if None)
            diagnostics: Where diagnostic lines are written
            max_errors: How many errors the session keeps for its report
        """
        self.lexer = lexer
        self.precedence = precedence if precedence is not None else PrecedenceTable()
        self.diagnostics = diagnostics
        self.errors = ErrorCollector(max_errors)

        # Nothing is read until the first token is requested
        self._current: Optional[Token] = None

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    @property
    def current(self) -> Token:
        """The current token, reading the first one on demand."""
        if self._current is None:
            self.next_token()
        return self._current

    def next_token(self) -> Token:
        """Replace the current token with the next one from the lexer."""
        self._current = self.lexer.next_token()
        return self._current

    def _missing(self, message: str, expected: str) -> MissingTokenError:
        token = self.current
        return MissingTokenError(message, expected, token.describe(), token.location)

    # =========================================================================
    # Public Entry Points
    # =========================================================================

    def parse_primary(self) -> ParseResult:
        """primary ::= identifierexpr | numberexpr | parenexpr"""
        return self._attempt(self._parse_primary)

    def parse_identifier_expr(self) -> ParseResult:
        """Parse a variable reference or a call; current token is the identifier."""
        return self._attempt(self._parse_identifier_expr)

    def parse_number_expr(self) -> ParseResult:
        """Parse a number literal; current token is the number."""
        return self._attempt(self._parse_number_expr)

    def parse_paren_expr(self) -> ParseResult:
        """Parse a parenthesised expression; current token is '('."""
        return self._attempt(self._parse_paren_expr)

    def parse_expression(self) -> ParseResult:
        """expression ::= primary binoprhs"""
        return self._attempt(self._parse_expression)

    def parse_bin_op_rhs(self, min_precedence: int, lhs: Expression) -> ParseResult:
        """
        Resolve the operator chain following lhs.

        Args:
            min_precedence: Operators binding looser than this end the chain
            lhs: The expression already parsed to the left
        """
        return self._attempt(self._parse_bin_op_rhs, min_precedence, lhs)

    def parse_prototype(self) -> ParseResult:
        """prototype ::= IDENTIFIER '(' IDENTIFIER* ')'"""
        return self._attempt(self._parse_prototype)

    def parse_definition(self) -> ParseResult:
        """definition ::= 'def' prototype expression"""
        return self._attempt(self._parse_definition)

    def parse_extern(self) -> ParseResult:
        """external ::= 'extern' prototype"""
        return self._attempt(self._parse_extern)

    def parse_top_level_expr(self) -> ParseResult:
        """Parse a bare expression as an anonymous zero-argument function."""
        return self._attempt(self._parse_top_level_expr)

    def _attempt(self, production: Callable[..., ASTNode], *args) -> ParseResult:
        """
        Run a production, turning a syntax error into a failed result.

        This is the only place syntax errors are caught, so each failure
        produces exactly one diagnostic however deep it was raised.
        Input nested deeper than the interpreter stack allows fails the
        same way, with "expression nested too deeply".
        """
        try:
            node = production(*args)
        except ToySyntaxError as e:
            self._report(e)
            return ParseResult.failure(e)
        except RecursionError:
            token = self.current
            error = ToySyntaxError("expression nested too deeply", token.location)
            self._report(error)
            return ParseResult.failure(error)
        return ParseResult.success(node)

    def _report(self, error: ToySyntaxError) -> None:
        logger.debug(f"Syntax error at {error.location}: {error.message}")
        self.errors.add(error)
        stream = self.diagnostics if self.diagnostics is not None else sys.stderr
        stream.write(error.diagnostic + "\n")
        stream.flush()

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_primary(self) -> Expression:
        token = self.current

        if token.type == TokenType.IDENTIFIER:
            return self._parse_identifier_expr()

        if token.type == TokenType.NUMBER:
            return self._parse_number_expr()

        if token.is_symbol("("):
            return self._parse_paren_expr()

        raise UnexpectedTokenError(token.describe(), token.location)

    def _parse_number_expr(self) -> NumberLiteral:
        token = self.current
        if token.type != TokenType.NUMBER:
            raise UnexpectedTokenError(token.describe(), token.location)
        node = NumberLiteral(token.value, location=token.location)
        self.next_token()  # consume the number
        return node

    def _parse_paren_expr(self) -> Expression:
        token = self.current
        if not token.is_symbol("("):
            raise UnexpectedTokenError(token.describe(), token.location)
        self.next_token()  # consume '('
        expr = self._parse_expression()

        if not self.current.is_symbol(")"):
            raise self._missing("expected ')'", "')'")
        self.next_token()  # consume ')'

        # Parentheses only group; they leave no node behind
        return expr

    def _parse_identifier_expr(self) -> Expression:
        name_token = self.current
        if name_token.type != TokenType.IDENTIFIER:
            raise UnexpectedTokenError(name_token.describe(), name_token.location)
        self.next_token()  # consume identifier

        if not self.current.is_symbol("("):
            return VariableReference(name_token.value, location=name_token.location)

        self.next_token()  # consume '('
        arguments = []
        if not self.current.is_symbol(")"):
            while True:
                arguments.append(self._parse_expression())

                if self.current.is_symbol(")"):
                    break
                if not self.current.is_symbol(","):
                    raise self._missing(
                        "expected ')' or ',' in argument list", "')' or ','"
                    )
                self.next_token()  # consume ','

        self.next_token()  # consume ')'

        return CallExpression(
            name_token.value,
            tuple(arguments),
            location=name_token.location,
        )

    def _parse_expression(self) -> Expression:
        lhs = self._parse_primary()
        return self._parse_bin_op_rhs(0, lhs)

    def _parse_bin_op_rhs(self, min_precedence: int, lhs: Expression) -> Expression:
        """
        Precedence climbing over the operators following lhs.

        An operator is folded into lhs when it binds at least as tightly
        as min_precedence. If the operator after the right operand binds
        strictly tighter, that operand first absorbs the tighter chain.
        Equal precedence does not recurse, which makes it left-associative.
        """
        while True:
            op_precedence = self.precedence.precedence_of(self.current)
            if op_precedence < min_precedence:
                return lhs

            op_token = self.current
            self.next_token()  # consume operator

            rhs = self._parse_primary()

            next_precedence = self.precedence.precedence_of(self.current)
            if op_precedence < next_precedence:
                rhs = self._parse_bin_op_rhs(op_precedence + 1, rhs)

            lhs = BinaryExpression(op_token.value, lhs, rhs, location=lhs.location)

    # =========================================================================
    # Declaration Parsing
    # =========================================================================

    def _parse_prototype(self) -> Prototype:
        name_token = self.current
        if name_token.type != TokenType.IDENTIFIER:
            raise self._missing("expected function name in prototype", "function name")
        self.next_token()  # consume name

        if not self.current.is_symbol("("):
            raise self._missing("expected '(' in prototype", "'('")

        parameters = []
        while self.next_token().type == TokenType.IDENTIFIER:
            parameters.append(self.current.value)

        if not self.current.is_symbol(")"):
            raise self._missing("expected ')' in prototype", "')'")
        self.next_token()  # consume ')'

        return Prototype(name_token.value, tuple(parameters), location=name_token.location)

    def _parse_definition(self) -> FunctionDefinition:
        def_token = self.current
        self.next_token()  # consume 'def'

        prototype = self._parse_prototype()
        body = self._parse_expression()
        logger.debug(f"Parsed definition of '{prototype.name}'")
        return FunctionDefinition(prototype, body, location=def_token.location)

    def _parse_extern(self) -> Prototype:
        self.next_token()  # consume 'extern'
        prototype = self._parse_prototype()
        logger.debug(f"Parsed extern '{prototype.name}'")
        return prototype

    def _parse_top_level_expr(self) -> FunctionDefinition:
        body = self._parse_expression()
        prototype = Prototype(ANONYMOUS_NAME, (), location=body.location)
        return FunctionDefinition(prototype, body, location=body.location)
