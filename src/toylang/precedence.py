"""
Binary Operator Precedence Table
================================

Maps each binary operator character to its precedence. Higher numbers
bind tighter. The parser treats any token whose precedence is negative
as "not a binary operator here", which ends an operator chain.

Default Table
-------------
| Operator | Precedence |
|----------|------------|
| <        | 10         |
| + -      | 20         |
| *        | 40         |

The table is fixed once constructed; the parser only reads it.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from toylang.errors import PrecedenceError
from toylang.lexer import Token, TokenType


# Returned for anything that is not a known binary operator
NOT_AN_OPERATOR = -1

DEFAULT_PRECEDENCE: Mapping[str, int] = MappingProxyType({
    "<": 10,
    "+": 20,
    "-": 20,
    "*": 40,
})


def _is_operator_char(char: str) -> bool:
    """True for a single printable, non-space ASCII character."""
    return len(char) == 1 and char.isascii() and char.isprintable() and not char.isspace()


class PrecedenceTable:
    """
    Read-only operator precedence lookup.

    Example:
        >>> table = PrecedenceTable()
        >>> table["*"]
        40
        >>> table.get("?")
        -1
    """

    def __init__(self, entries: Optional[Mapping[str, int]] = None):
        """
        Build the table.

        Args:
            entries: Operator character -> precedence (default: DEFAULT_PRECEDENCE)

        Raises:
            PrecedenceError: If an operator is not a single printable ASCII
                character or a precedence is negative
        """
        table: dict[str, int] = {}
        for op, prec in (DEFAULT_PRECEDENCE if entries is None else entries).items():
            if not isinstance(op, str) or not _is_operator_char(op):
                raise PrecedenceError(f"invalid binary operator {op!r}")
            if not isinstance(prec, int) or prec < 0:
                raise PrecedenceError(f"invalid precedence {prec!r} for operator '{op}'")
            table[op] = prec
        self._table = MappingProxyType(table)

    def __getitem__(self, op: str) -> int:
        return self._table[op]

    def __contains__(self, op: object) -> bool:
        return op in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"PrecedenceTable({dict(self._table)!r})"

    @property
    def entries(self) -> Mapping[str, int]:
        """Read-only view of the operator table."""
        return self._table

    def get(self, op: str) -> int:
        """Precedence of op, or NOT_AN_OPERATOR if op is not in the table."""
        if not _is_operator_char(op):
            return NOT_AN_OPERATOR
        return self._table.get(op, NOT_AN_OPERATOR)

    def precedence_of(self, token: Token) -> int:
        """
        Precedence of token as a binary operator.

        Keywords, identifiers, numbers and end of input are never
        operators. Symbols are looked up in the table.
        """
        if token.type != TokenType.SYMBOL:
            return NOT_AN_OPERATOR
        return self.get(token.value)
