"""
toylang Lexer (Tokenizer)
=========================

This module implements the lexer for the toy expression language.
It converts a character stream into a lazy stream of tokens for the
parser, reading one character at a time and never re-reading.

Token Categories
----------------
- Keywords: def, extern
- Identifiers: [A-Za-z][A-Za-z0-9]* (no underscore)
- Numbers: runs of digits and '.' converted to float
- Symbols: any other single character (operators, punctuation, junk)
- End of input

Comments
--------
- Line comment: # comment (up to the end of the line)

Number Literals
---------------
A number is any run of digits and dots, so "12.3.234" is a single
literal. Its value is the longest leading "digits[.digits]" prefix, the
same way C strtod reads it; the rest is discarded:

| Text       | Value |
|------------|-------|
| 42         | 42.0  |
| 3.14       | 3.14  |
| .5         | 0.5   |
| 12.3.234   | 12.3  |
| .          | 0.0   |

Example Usage
-------------
>>> from toylang.lexer import Lexer
>>> lexer = Lexer("def f(x) x+1", "test.toy")
>>> for token in lexer.tokenize():
...     print(token)
Token(DEF, 'def', 1:1)
Token(IDENTIFIER, 'f', 1:5)
Token(SYMBOL, '(', 1:6)
Token(IDENTIFIER, 'x', 1:7)
Token(SYMBOL, ')', 1:8)
Token(IDENTIFIER, 'x', 1:10)
Token(SYMBOL, '+', 1:11)
Token(NUMBER, 1.0, 1:12)
Token(EOF, 1:13)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, TextIO, Union
import io
import logging
import re
import string

from toylang.errors import SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the toy language.

    Operators and punctuation are not given their own types: every
    character the lexer does not recognise comes back as a SYMBOL token
    carrying that character, and the parser decides what it means.
    """

    EOF = auto()            # End of input
    DEF = auto()            # def
    EXTERN = auto()         # extern
    IDENTIFIER = auto()     # Variable/function names
    NUMBER = auto()         # Numeric literal (float value)
    SYMBOL = auto()         # Any other single character


# Map keyword strings to their token types
KEYWORDS: dict[str, TokenType] = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token read from the source.

    Attributes:
        type: The TokenType classification
        value: Identifier/keyword text, float for numbers, the character
               for symbols, None for EOF
        line: Line number of the first character (1-indexed)
        column: Column number of the first character (1-indexed)
        filename: Name of the source
    """
    type: TokenType
    value: Union[str, float, None]
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            if isinstance(self.value, float):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_symbol(self, char: str) -> bool:
        """Return True if this is the SYMBOL token for char."""
        return self.type == TokenType.SYMBOL and self.value == char

    def describe(self) -> str:
        """Short printable form used in error details."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.NUMBER:
            return f"number {self.value:g}"
        return repr(self.value)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes toy language source text.

    The lexer owns a single character of lookahead (last_char) which
    persists between calls to next_token(). All state lives on the
    instance, so independent lexers never interfere with each other.

    Usage:
        lexer = Lexer(source_text, filename)
        token = lexer.next_token()

    Attributes:
        filename: Name of the source (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits

    # Characters that make up a numeric literal
    NUMBER_CHARS = string.digits + "."

    # C isspace(): space, \t, \n, \v, \f, \r
    WHITESPACE = string.whitespace

    # Leading part of a numeric literal that converts to a float
    _NUMBER_PREFIX = re.compile(r"[0-9]*(?:\.[0-9]*)?")

    def __init__(
        self,
        source: Union[str, TextIO],
        filename: str = "<input>",
    ):
        """
        Initialize the lexer.

        Args:
            source: Source text, or a text stream read one character at a time
            filename: Name of the source (for error messages)
        """
        self.filename = filename
        self._stream: TextIO = io.StringIO(source) if isinstance(source, str) else source

        # Lookahead starts as a space so the first call reads input
        self._last_char = " "
        self._line = 1
        self._column = 0

    @property
    def last_char(self) -> str:
        """The current lookahead character ("" once input is exhausted)."""
        return self._last_char

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including the first EOF token.

        Yields:
            Token objects in source order
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    # =========================================================================
    # Character Access
    # =========================================================================

    def _read_char(self) -> str:
        """
        Replace the lookahead with the next character of input.

        Line and column always describe the position of the lookahead.
        """
        if self._last_char == "":
            return ""

        if self._last_char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        self._last_char = self._stream.read(1)
        return self._last_char

    def _make_token(
        self,
        token_type: TokenType,
        value: Union[str, float, None],
        start_line: Optional[int] = None,
        start_column: Optional[int] = None,
    ) -> Token:
        token = Token(
            type=token_type,
            value=value,
            line=start_line or self._line,
            column=start_column or self._column,
            filename=self.filename,
        )
        logger.debug(f"Lexed {token!r}")
        return token

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def next_token(self) -> Token:
        """
        Read and return exactly one token.

        Whitespace and comments are consumed silently. At end of input
        an EOF token is returned, and keeps being returned on later calls.
        """
        while True:
            while self._last_char != "" and self._last_char in self.WHITESPACE:
                self._read_char()

            char = self._last_char

            if char == "":
                return self._make_token(TokenType.EOF, None)

            if char in self.IDENT_START:
                return self._scan_identifier()

            if char in self.NUMBER_CHARS:
                return self._scan_number()

            if char == "#":
                self._skip_comment()
                continue

            return self._scan_symbol()

    def _scan_identifier(self) -> Token:
        """
        Scan an identifier or keyword.

        Keywords are recognised by exact match against the keyword table,
        so "define" is an identifier.
        """
        start_line, start_column = self._line, self._column
        chars = [self._last_char]
        while self._read_char() != "" and self._last_char in self.IDENT_CHARS:
            chars.append(self._last_char)

        name = "".join(chars)
        token_type = KEYWORDS.get(name, TokenType.IDENTIFIER)
        return self._make_token(token_type, name, start_line, start_column)

    def _scan_number(self) -> Token:
        """Scan a run of digits and dots as one numeric literal."""
        start_line, start_column = self._line, self._column
        chars = [self._last_char]
        while self._read_char() != "" and self._last_char in self.NUMBER_CHARS:
            chars.append(self._last_char)

        text = "".join(chars)
        value = self.convert_number(text)
        if text.count(".") > 1:
            logger.debug(f"Numeric literal {text!r} truncated to {value}")
        return self._make_token(TokenType.NUMBER, value, start_line, start_column)

    def _skip_comment(self) -> None:
        """Skip a # comment, leaving the line terminator as lookahead."""
        while self._last_char not in ("", "\n", "\r"):
            self._read_char()

    def _scan_symbol(self) -> Token:
        """Return the lookahead as a SYMBOL token and move past it."""
        start_line, start_column = self._line, self._column
        char = self._last_char
        self._read_char()
        return self._make_token(TokenType.SYMBOL, char, start_line, start_column)

    # =========================================================================
    # Utility Methods
    # =========================================================================

    @classmethod
    def convert_number(cls, text: str) -> float:
        """
        Convert numeric literal text using a tolerant prefix parse.

        Only the longest leading "digits[.digits]" part is converted;
        anything after it (such as a second '.') is ignored. A prefix
        without any digit converts to 0.0.
        """
        prefix = cls._NUMBER_PREFIX.match(text).group()
        if not any(c in string.digits for c in prefix):
            return 0.0
        return float(prefix)
